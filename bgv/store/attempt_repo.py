"""
Append-only attempt history per candidate.

Records are LPUSHed as JSON, so LRANGE returns them most-recent-first. Only the
raw provider payload is stored; classification happens on every read so a
registry update re-labels old attempts too.
"""
import json
from typing import Any, List, Optional

from bgv.core.status_codes import method_value
from bgv.observability.logging import log
from bgv.settings import settings
from bgv.store.models import VerificationAttempt
from bgv.store.redis_conn import get_redis
from bgv.utils.time import now_ms


def _key(candidate_id: str) -> str:
    return f"{settings.ATTEMPTS_KEY_PREFIX}{candidate_id}:attempts"


def record_attempt(
    candidate_id: str,
    method: str,
    raw_response: Any,
    input_value: Optional[str] = None,
    provider: Optional[str] = None,
) -> VerificationAttempt:
    record = {
        "method": method_value(method),
        "rawResponse": raw_response if isinstance(raw_response, dict) else {},
        "timestamp": now_ms(),
        "inputValue": input_value or "",
        "provider": provider or "",
    }
    r = get_redis()
    r.lpush(_key(candidate_id), json.dumps(record))

    attempt = VerificationAttempt.from_raw(
        record["method"],
        record["rawResponse"],
        timestamp=record["timestamp"],
        input_value=record["inputValue"],
        provider=record["provider"],
    )
    log(
        event="attempt_recorded",
        candidateId=candidate_id,
        method=attempt.method,
        provider=attempt.provider,
        statusCode=attempt.statusCode,
        outcome=attempt.outcome.value,
    )
    return attempt


def _parse(raw: str) -> Optional[VerificationAttempt]:
    data = json.loads(raw)
    if not isinstance(data, dict) or not data.get("method"):
        return None
    return VerificationAttempt.from_raw(
        data.get("method"),
        data.get("rawResponse"),
        timestamp=data.get("timestamp"),
        input_value=data.get("inputValue"),
        provider=data.get("provider"),
    )


def get_attempts(candidate_id: str) -> List[VerificationAttempt]:
    """
    Classified attempt history, most recent first. Always the full list: a
    core success at any depth keeps the candidate verified.
    """
    r = get_redis()
    rows = r.lrange(_key(candidate_id), 0, -1) or []
    out: List[VerificationAttempt] = []
    skipped = 0
    for raw in rows:
        try:
            attempt = _parse(raw)
        except (TypeError, ValueError):
            attempt = None
        if attempt is None:
            skipped += 1
            continue
        out.append(attempt)
    if skipped:
        log(event="attempt_records_skipped", candidateId=candidate_id, skipped=skipped)
    return out
