import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_SOCKET_TIMEOUT_SEC: float = float(os.getenv("REDIS_SOCKET_TIMEOUT_SEC", "5"))
    RQ_QUEUE_NAME: str = os.getenv("RQ_QUEUE_NAME", "verifications")
    RQ_JOB_TIMEOUT_SLACK_SEC: int = int(os.getenv("RQ_JOB_TIMEOUT_SLACK_SEC", "30"))

    # Provider routing (organization config overrides the default per org)
    DEFAULT_PROVIDER: str = os.getenv("DEFAULT_PROVIDER", "truthscreen").lower()
    PROVIDER_BASE_URL: str = os.getenv("PROVIDER_BASE_URL", "")
    PROVIDER_API_KEY: str = os.getenv("PROVIDER_API_KEY", "")
    PROVIDER_TIMEOUT_SEC: float = float(os.getenv("PROVIDER_TIMEOUT_SEC", "30"))
    ORG_CONFIG_KEY_PREFIX: str = os.getenv("ORG_CONFIG_KEY_PREFIX", "org:")

    # Verification execution
    # - "sync": call the provider inline and return the refreshed badge
    # - "rq": enqueue the call; the attempt shows up on the next history read
    VERIFY_MODE: str = os.getenv("VERIFY_MODE", "sync").lower()

    # Duplicate-submission guard keyed by (candidate, method). Off until the
    # intended behaviour for simultaneous submissions is agreed.
    INFLIGHT_GUARD_ENABLED: bool = os.getenv("INFLIGHT_GUARD_ENABLED", "false").lower() == "true"
    INFLIGHT_GUARD_TTL_MS: int = int(os.getenv("INFLIGHT_GUARD_TTL_MS", "60000"))

    # Attempt history
    ATTEMPTS_KEY_PREFIX: str = os.getenv("ATTEMPTS_KEY_PREFIX", "candidate:")

    # Observability
    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"
    METRICS_ENABLED: bool = os.getenv("METRICS_ENABLED", "true").lower() == "true"

    # Admin surface
    ADMIN_RBAC_ENABLED: bool = os.getenv("ADMIN_RBAC_ENABLED", "true").lower() == "true"
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

settings = Settings()
