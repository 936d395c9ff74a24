"""
Verification run: provider call -> append attempt -> refetch history -> badge.

The classification, badge and navigation logic stay synchronous and pure; this
module is the only place that touches the provider and the store in sequence.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from redis.exceptions import RedisError
from starlette.concurrency import run_in_threadpool

import bgv.observability.metrics as metrics
from bgv.core.badge import Badge, compute_badge
from bgv.core.menu import MethodConfig, build_menu, find_method
from bgv.core.status_codes import to_method
from bgv.observability.logging import log
from bgv.providers.client import STATUS_PENDING, ProviderError, build_payload, invoke
from bgv.settings import settings
from bgv.store.attempt_repo import get_attempts, record_attempt
from bgv.store.models import VerificationAttempt
from bgv.store.org_config import get_active_provider
from bgv.utils.lock import acquire_inflight, release_inflight


class InvalidVerificationRequest(ValueError):
    """Unknown method, method not offered by the provider, or missing input."""


@dataclass
class VerificationRun:
    status: str
    provider: str
    method: str
    badge: Badge
    message: str = ""
    attempt: Optional[VerificationAttempt] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "provider": self.provider,
            "method": self.method,
            "message": self.message,
            "attempt": self.attempt.to_dict() if self.attempt else None,
            "badge": self.badge.to_dict(),
        }


def _metric(fn, *args) -> None:
    # Counters are best-effort; a metrics write must not fail a recorded attempt
    if not settings.METRICS_ENABLED:
        return
    try:
        fn(*args)
    except RedisError as e:
        log(event="metrics_write_failed", metric=fn.__name__, error=str(e)[:200])


def resolve_method(org_id: str, method: str) -> tuple:
    """(provider, MethodConfig) for a method the organization's menu offers."""
    m = to_method(method)
    if m is None:
        raise InvalidVerificationRequest(f"Unknown verification method: {method!r}")
    provider = get_active_provider(org_id)
    config = find_method(build_menu(provider), m.value)
    if config is None:
        raise InvalidVerificationRequest(f"{m.value} is not offered for provider {provider}")
    return provider, config


def _check_inputs(config: MethodConfig, payload: Dict[str, Any]) -> str:
    missing = [f.name for f in config.inputs if f.required and not payload.get(f.name)]
    if missing:
        raise InvalidVerificationRequest(f"Missing input(s) for {config.key.value}: {', '.join(missing)}")
    # First input field is what the lookup ran against
    return str(payload.get(config.inputs[0].name) or "") if config.inputs else ""


async def run_verification(
    candidate_id: str,
    org_id: str,
    method: str,
    inputs: Optional[Dict[str, Any]] = None,
) -> VerificationRun:
    # Redis calls are blocking; keep them off the event loop
    provider, config = await run_in_threadpool(resolve_method, org_id, method)
    method_key = config.key.value
    payload = build_payload(candidate_id, org_id, inputs or {})
    input_value = _check_inputs(config, payload)

    token = None
    if settings.INFLIGHT_GUARD_ENABLED:
        token = await run_in_threadpool(
            acquire_inflight, candidate_id, method_key, settings.INFLIGHT_GUARD_TTL_MS
        )

    attempt = None
    try:
        start = time.time()
        try:
            result = await invoke(provider, method_key, payload)
        except ProviderError:
            await run_in_threadpool(_metric, metrics.increment_provider_failure)
            raise
        await run_in_threadpool(_metric, metrics.record_provider_latency, int((time.time() - start) * 1000))

        if result.completed:
            if not result.data:
                await run_in_threadpool(_metric, metrics.increment_provider_failure)
                raise ProviderError("Provider completed without a result payload")
            attempt = await run_in_threadpool(
                record_attempt, candidate_id, method_key, result.data, input_value, provider
            )
            await run_in_threadpool(_metric, metrics.record_outcome, method_key, attempt.outcome)
    finally:
        if token is not None:
            await run_in_threadpool(release_inflight, candidate_id, method_key, token)

    # Refetch on write; the store is the only source of truth for the badge
    badge = compute_badge(await run_in_threadpool(get_attempts, candidate_id))

    status = "completed" if attempt is not None else (result.status or STATUS_PENDING)
    log(
        event="verification_run_done",
        candidateId=candidate_id,
        provider=provider,
        method=method_key,
        status=status,
        outcome=attempt.outcome.value if attempt else None,
        badge=badge.color,
    )
    return VerificationRun(
        status=status,
        provider=provider,
        method=method_key,
        badge=badge,
        message=attempt.reason if attempt else result.message,
        attempt=attempt,
    )
