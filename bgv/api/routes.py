from typing import List, Mapping

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from bgv.api.auth import require_api_key
from bgv.api.schemas import (
    BadgeResponse,
    ClassifyRequest,
    ClassifyResponse,
    NavigationRequest,
    NavigationResponse,
    NavigationStateModel,
    VerifyRequest,
)
from bgv.core.badge import compute_badge, latest_by_method, summarize
from bgv.core.classifier import classify
from bgv.core.legacy import find_successful_attempt
from bgv.core.menu import CategoryConfig, build_menu, menu_items, submenu_items
from bgv.core.navigation import NavigationState, NavigationStateMachine, Panel
from bgv.core.verifier import run_verification
from bgv.queue.jobs import enqueue_verification
from bgv.settings import settings
from bgv.store.attempt_repo import get_attempts
from bgv.store.models import VerificationAttempt
from bgv.store.org_config import get_active_provider

router = APIRouter(dependencies=[Depends(require_api_key)])


def _to_model(state: NavigationState) -> NavigationStateModel:
    return NavigationStateModel(
        panel=state.panel.value,
        activeCategory=state.active_category,
        activeMethod=state.active_method,
    )


def _from_model(model: NavigationStateModel) -> NavigationState:
    return NavigationState(
        panel=Panel(model.panel),
        active_category=model.activeCategory,
        active_method=model.activeMethod,
    )


def _panel_view(
    state: NavigationState,
    menu: Mapping[str, CategoryConfig],
    history: List[VerificationAttempt],
) -> NavigationResponse:
    out = NavigationResponse(state=_to_model(state))
    if state.panel == Panel.MAIN:
        out.items = menu_items(menu, history)
    elif state.panel == Panel.SUBMENU:
        out.items = submenu_items(menu[state.active_category], history)
    elif state.panel == Panel.FORM:
        method = menu[state.active_category].get_method(state.active_method)
        out.method = method.to_dict()
        hit = find_successful_attempt(history, method.key, method.legacy_key)
        if hit is None:
            hit = latest_by_method(history).get(method.key.value)
        out.result = hit.to_dict() if hit else None
    else:
        out.results = {k: a.to_dict() for k, a in latest_by_method(history).items()}
    return out


@router.post("/classify", response_model=ClassifyResponse)
def classify_response(req: ClassifyRequest):
    c = classify(req.method, req.rawResponse)
    return ClassifyResponse(method=req.method, outcome=c.outcome.value, statusCode=c.status_code, reason=c.reason)


@router.get("/candidates/{candidate_id}/attempts")
def list_attempts(candidate_id: str):
    return {"candidateId": candidate_id, "attempts": [a.to_dict() for a in get_attempts(candidate_id)]}


@router.get("/candidates/{candidate_id}/badge", response_model=BadgeResponse)
def candidate_badge(candidate_id: str):
    return BadgeResponse(**compute_badge(get_attempts(candidate_id)).to_dict())


@router.get("/candidates/{candidate_id}/summary")
def candidate_summary(candidate_id: str):
    history = get_attempts(candidate_id)
    return {
        "candidateId": candidate_id,
        "badge": compute_badge(history).to_dict(),
        **summarize(history).to_dict(),
    }


@router.get("/candidates/{candidate_id}/results")
def candidate_results(candidate_id: str):
    history = get_attempts(candidate_id)
    return {"candidateId": candidate_id, "results": {k: a.to_dict() for k, a in latest_by_method(history).items()}}


@router.get("/candidates/{candidate_id}/menu")
def candidate_menu(candidate_id: str, org_id: str = Query("", alias="orgId")):
    provider = get_active_provider(org_id)
    menu = build_menu(provider)
    history = get_attempts(candidate_id)
    return {
        "provider": provider,
        "categories": [c.to_dict() for c in menu.values()],
        "items": menu_items(menu, history),
    }


@router.post("/candidates/{candidate_id}/navigation", response_model=NavigationResponse)
def navigate(candidate_id: str, req: NavigationRequest):
    menu = build_menu(get_active_provider(req.orgId))
    history = get_attempts(candidate_id)
    machine = NavigationStateMachine(menu, _from_model(req.state))
    state = machine.dispatch(req.action, req.key, history)
    return _panel_view(state, menu, history)


@router.post("/candidates/{candidate_id}/verifications")
async def verify(candidate_id: str, req: VerifyRequest):
    if settings.VERIFY_MODE == "rq":
        job_id = await run_in_threadpool(enqueue_verification, candidate_id, req.orgId, req.method, req.inputs)
        return JSONResponse(status_code=202, content={"status": "queued", "jobId": job_id})

    run = await run_verification(candidate_id, req.orgId, req.method, req.inputs)
    return run.to_dict()
