from fastapi import APIRouter, Depends
from bgv.api.auth import require_admin
from bgv.core.status_codes import REGISTRY_VERSION, STATUS_TABLE
from bgv.store.attempt_repo import get_attempts
from bgv.store.org_config import get_active_provider
import bgv.observability.metrics as metrics

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/metrics")
def get_metrics(_=Depends(require_admin)):
    """Per-method usage and success rate, backed by Redis counters."""
    return metrics.get_metrics_snapshot()


@router.get("/registry")
def get_registry(_=Depends(require_admin)):
    """Status code table currently used for classification."""
    return {
        "version": REGISTRY_VERSION,
        "methods": {
            m.value: {
                "label": e.label,
                "successCodes": sorted(e.success_codes),
                "notFoundCodes": sorted(e.not_found_codes),
            }
            for m, e in STATUS_TABLE.items()
        },
    }


@router.get("/candidates/{candidate_id}/timeline")
def get_candidate_timeline(candidate_id: str, orgId: str = "", _=Depends(require_admin)):
    """Attempt stream oldest-first, with the provider the org is on today."""
    attempts = get_attempts(candidate_id)
    return {
        "candidateId": candidate_id,
        "activeProvider": get_active_provider(orgId),
        "events": [a.to_dict() for a in reversed(attempts)],
    }
