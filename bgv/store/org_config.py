from redis.exceptions import RedisError

from bgv.core.menu import HISTORY_METHOD_BY_PROVIDER
from bgv.observability.logging import log
from bgv.settings import settings
from bgv.store.redis_conn import get_redis


def _key(org_id: str) -> str:
    return f"{settings.ORG_CONFIG_KEY_PREFIX}{org_id}:verification_check"


def get_active_provider(org_id: str) -> str:
    """
    Provider configured for the organization. Unset, unknown or unreadable
    config falls back to DEFAULT_PROVIDER so the menu can always be built.
    """
    default = settings.DEFAULT_PROVIDER
    if not org_id:
        return default
    try:
        raw = get_redis().get(_key(org_id))
    except RedisError as e:
        log(event="org_config_read_failed", orgId=org_id, error=str(e)[:200], fallback=default)
        return default

    provider = (raw or "").strip().lower()
    if provider not in HISTORY_METHOD_BY_PROVIDER:
        if provider:
            log(event="org_config_unknown_provider", orgId=org_id, provider=provider, fallback=default)
        return default
    return provider


def set_active_provider(org_id: str, provider: str) -> None:
    provider = (provider or "").strip().lower()
    if provider not in HISTORY_METHOD_BY_PROVIDER:
        raise ValueError(f"Unknown verification provider: {provider!r}")
    get_redis().set(_key(org_id), provider)
