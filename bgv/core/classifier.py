from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from bgv.core.status_codes import VerificationMethod, describe, get_entry


class Outcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class Classification:
    outcome: Outcome
    status_code: Optional[int]
    reason: str


# Envelope status meaning "transport ok, result code is nested under data.code"
_TRANSPORT_OK = 200


def _as_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if v.is_integer() else None
    if isinstance(v, str):
        s = v.strip()
        if s.lstrip("-").isdigit():
            return int(s)
    return None


def extract_status_code(raw_response: Any) -> Optional[int]:
    """
    Pull the numeric status out of a provider payload.

    Two shapes are in circulation:
    - {"status": 200, "data": {"code": "1016", "message": ...}}  (nested result code)
    - {"status": 1, "msg": ...}                                  (status is the code)
    """
    if not isinstance(raw_response, dict):
        return None
    status = _as_int(raw_response.get("status"))
    if status == _TRANSPORT_OK:
        data = raw_response.get("data")
        if isinstance(data, dict):
            return _as_int(data.get("code"))
        return None
    return status


def classify(method: Union[str, VerificationMethod, None], raw_response: Any) -> Classification:
    """Map a raw provider response to Success / NotFound / Error. Never raises."""
    entry = get_entry(method)
    code = extract_status_code(raw_response)

    if code is not None and code in entry.success_codes:
        outcome = Outcome.SUCCESS
    elif code is not None and code in entry.not_found_codes:
        outcome = Outcome.NOT_FOUND
    else:
        outcome = Outcome.ERROR

    return Classification(outcome=outcome, status_code=code, reason=describe(code))
