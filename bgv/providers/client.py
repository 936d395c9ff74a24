"""
Provider invocation.

Each provider exposes one remote function that performs every lookup type;
the function is chosen from the organization's provider. The function answers
with an envelope:

    {"status": "completed" | "pending", "data": <provider payload>, "message": "..."}

Only "completed" envelopes carry a payload worth recording.
"""
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from bgv.core.menu import PROVIDER_FUNCTIONS
from bgv.observability.logging import log
from bgv.settings import settings

STATUS_COMPLETED = "completed"
STATUS_PENDING = "pending"

_DEFAULT_FAILURE = "Unable to fetch data at the moment. Please retry after some time."


class ProviderError(RuntimeError):
    """Transport failure or non-2xx answer from the provider function."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class ProviderResult:
    status: str
    data: Dict[str, Any] = field(default_factory=dict)
    message: str = ""

    @property
    def completed(self) -> bool:
        return self.status == STATUS_COMPLETED


def sanitize_mobile(phone: Optional[str]) -> str:
    """Digits only, last ten (drops +91 / leading zero)."""
    return re.sub(r"\D", "", phone or "")[-10:]


def normalize_pan(pan: Optional[str]) -> str:
    return re.sub(r"\s+", "", pan or "").upper()


def normalize_uan(uan: Optional[str]) -> str:
    return re.sub(r"\D", "", uan or "")


def build_payload(candidate_id: str, org_id: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
    inputs = inputs or {}
    return {
        "candidateId": candidate_id,
        "organizationId": org_id,
        "mobile": sanitize_mobile(inputs.get("mobile")),
        "pan": normalize_pan(inputs.get("pan")),
        "uan": normalize_uan(inputs.get("uan")),
    }


def function_url(provider: str) -> str:
    fn = PROVIDER_FUNCTIONS.get(provider)
    if not fn:
        raise ValueError(f"No remote function configured for provider {provider!r}")
    if not settings.PROVIDER_BASE_URL:
        raise RuntimeError("PROVIDER_BASE_URL is not set")
    return f"{settings.PROVIDER_BASE_URL.rstrip('/')}/functions/v1/{fn}"


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "")[:500] or _DEFAULT_FAILURE
    if isinstance(body, dict):
        if body.get("message"):
            return str(body["message"])
        err = body.get("error")
        if isinstance(err, str) and err:
            return err
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return _DEFAULT_FAILURE


async def invoke(provider: str, method: str, payload: Dict[str, Any]) -> ProviderResult:
    url = function_url(provider)
    headers = {}
    if settings.PROVIDER_API_KEY:
        headers["Authorization"] = f"Bearer {settings.PROVIDER_API_KEY}"

    start = time.time()
    log(event="provider_call_attempt", provider=provider, method=method, url=url)
    try:
        async with httpx.AsyncClient(timeout=settings.PROVIDER_TIMEOUT_SEC) as client:
            resp = await client.post(url, json={"verificationType": method, "payload": payload}, headers=headers)
    except httpx.HTTPError as e:
        log(
            event="provider_call_exception",
            provider=provider,
            method=method,
            elapsedMs=int((time.time() - start) * 1000),
            errorType=type(e).__name__,
            error=str(e)[:500],
        )
        raise ProviderError(_DEFAULT_FAILURE) from e

    elapsed_ms = int((time.time() - start) * 1000)
    if not (200 <= resp.status_code < 300):
        message = _error_message(resp)
        log(event="provider_call_failed", provider=provider, method=method,
            statusCode=int(resp.status_code), elapsedMs=elapsed_ms, error=message[:500])
        raise ProviderError(message, status_code=resp.status_code)

    try:
        body = resp.json()
    except ValueError as e:
        raise ProviderError("Provider returned a non-JSON response", status_code=resp.status_code) from e
    if not isinstance(body, dict):
        raise ProviderError("Provider returned an unexpected response shape", status_code=resp.status_code)

    result = ProviderResult(
        status=str(body.get("status") or ""),
        data=body.get("data") if isinstance(body.get("data"), dict) else {},
        message=str(body.get("message") or ""),
    )
    log(event="provider_call_done", provider=provider, method=method,
        envelopeStatus=result.status, elapsedMs=elapsed_ms)
    return result
