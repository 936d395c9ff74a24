import asyncio
from typing import Any, Dict, Optional

from bgv.core.verifier import resolve_method, run_verification
from bgv.observability.logging import log
from bgv.queue.rq_conn import get_queue
from bgv.settings import settings
from bgv.utils.lock import ensure_not_in_flight


def run_verification_job(candidate_id: str, org_id: str, method: str, inputs: Optional[Dict[str, Any]] = None):
    """
    Worker entrypoint. A response arriving after the user navigated away is
    still recorded; the next badge read reflects it.
    """
    try:
        log(event="verification_job_start", candidateId=candidate_id, method=method)
        run = asyncio.run(run_verification(candidate_id, org_id, method, inputs or {}))
        return run.to_dict()
    except Exception as e:
        log(event="verification_job_exception", candidateId=candidate_id, method=method,
            errorType=type(e).__name__, error=str(e)[:500])
        raise


def enqueue_verification(candidate_id: str, org_id: str, method: str, inputs: Optional[Dict[str, Any]] = None) -> str:
    # Validate up front so a bad request fails in the caller, not in the worker
    provider, config = resolve_method(org_id, method)
    if settings.INFLIGHT_GUARD_ENABLED:
        ensure_not_in_flight(candidate_id, config.key.value)
    job = get_queue().enqueue(run_verification_job, candidate_id, org_id, config.key.value, inputs or {})
    log(event="verification_enqueued", candidateId=candidate_id, provider=provider,
        method=config.key.value, jobId=job.id)
    return job.id
