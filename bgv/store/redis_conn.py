from redis import Redis
from bgv.settings import settings


def get_redis() -> Redis:
    """Text-mode connection for attempt history, org config, locks and counters."""
    return Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SEC,
    )
