from fastapi import Header, HTTPException
from bgv.settings import settings


def require_api_key(x_api_key: str = Header(default="", alias="x-api-key")):
    """
    Guards the candidate-facing routes (classify, badge, menu, navigation,
    verifications). Open when API_KEY is unset, for local runs.
    """
    if not settings.API_KEY:
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")


def require_admin(x_admin_key: str = Header(default="", alias="x-admin-key")):
    """Registry, metrics and candidate timelines."""
    if not settings.ADMIN_RBAC_ENABLED:
        return
    # Enabled without a key configured: nobody gets in
    if not settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Admin access disabled (no key configured)")
    if x_admin_key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid admin key")
