from contextlib import contextmanager
import time
import uuid
from redis.exceptions import RedisError
from bgv.observability.logging import log
from bgv.store.redis_conn import get_redis


class VerificationInFlight(RuntimeError):
    """Same (candidate, method) verification is already running."""


_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


def _key(candidate_id: str, method: str) -> str:
    return f"lock:verify:{candidate_id}:{method}"


def _in_flight(candidate_id: str, method: str) -> VerificationInFlight:
    return VerificationInFlight(f"{method} already in progress for candidate {candidate_id}")


def ensure_not_in_flight(candidate_id: str, method: str) -> None:
    """Reject a submission while a run for (candidate, method) holds the guard."""
    if get_redis().get(_key(candidate_id, method)):
        raise _in_flight(candidate_id, method)


def acquire_inflight(candidate_id: str, method: str, ttl_ms: int = 60000) -> str:
    """Claim the guard; returns the owner token. Fails fast if already held."""
    token = f"{time.time()}:{uuid.uuid4().hex}"
    if not get_redis().set(_key(candidate_id, method), token, px=ttl_ms, nx=True):
        raise _in_flight(candidate_id, method)
    return token


def release_inflight(candidate_id: str, method: str, token: str) -> None:
    # Release only if we still own it; the TTL reclaims it otherwise
    try:
        get_redis().eval(_RELEASE_SCRIPT, 1, _key(candidate_id, method), token)
    except RedisError as e:
        log(event="inflight_release_failed", candidateId=candidate_id, method=method, error=str(e)[:200])


@contextmanager
def inflight_guard(candidate_id: str, method: str, ttl_ms: int = 60000):
    """
    Single in-flight verification per (candidate, method). Fails fast: a
    duplicate submission is rejected, not queued behind the first one.
    """
    token = acquire_inflight(candidate_id, method, ttl_ms)
    try:
        yield
    finally:
        release_inflight(candidate_id, method, token)
