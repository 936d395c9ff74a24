from redis import Redis
from rq import Queue
from bgv.settings import settings


def get_queue() -> Queue:
    # RQ stores pickled jobs, so this connection stays in bytes mode
    conn = Redis.from_url(settings.REDIS_URL)
    # A job is one provider round trip plus the history refetch
    return Queue(
        settings.RQ_QUEUE_NAME,
        connection=conn,
        default_timeout=int(settings.PROVIDER_TIMEOUT_SEC) + settings.RQ_JOB_TIMEOUT_SLACK_SEC,
    )
