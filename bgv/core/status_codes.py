"""
Status Code Registry
--------------------
One entry per provider method: which numeric status codes mean "verified",
which mean "valid request, no record", and a display label. Every code not
listed for a method is an error for that method.

Adding a provider method means adding a VerificationMethod member and one
entry in STATUS_TABLE. Nothing else needs to change.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union

REGISTRY_VERSION = "2024.2"


class VerificationMethod(str, Enum):
    MOBILE_TO_UAN = "mobile_to_uan"
    PAN_TO_UAN = "pan_to_uan"
    UAN_FULL_HISTORY = "uan_full_history"
    UAN_FULL_HISTORY_GL = "uan_full_history_gl"
    LATEST_EMPLOYMENT_UAN = "latest_employment_uan"
    LATEST_EMPLOYMENT_MOBILE = "latest_employment_mobile"
    LATEST_PASSBOOK_MOBILE = "latest_passbook_mobile"


@dataclass(frozen=True)
class StatusCodeEntry:
    method: str
    success_codes: FrozenSet[int]
    not_found_codes: FrozenSet[int]
    label: str = ""


def _entry(method: VerificationMethod, success, not_found, label: str) -> StatusCodeEntry:
    return StatusCodeEntry(
        method=method.value,
        success_codes=frozenset(success),
        not_found_codes=frozenset(not_found),
        label=label,
    )


# Truthscreen answers with status 1 / 9; Gridlines with 4-digit result codes.
STATUS_TABLE: Dict[VerificationMethod, StatusCodeEntry] = {
    VerificationMethod.MOBILE_TO_UAN: _entry(
        VerificationMethod.MOBILE_TO_UAN, {1, 1016}, {9, 1007}, "Mobile to UAN"),
    VerificationMethod.PAN_TO_UAN: _entry(
        VerificationMethod.PAN_TO_UAN, {1, 1029}, {9, 1030}, "PAN to UAN"),
    VerificationMethod.UAN_FULL_HISTORY: _entry(
        VerificationMethod.UAN_FULL_HISTORY, {1, 1013}, {9, 1011, 1015}, "Employment History"),
    VerificationMethod.UAN_FULL_HISTORY_GL: _entry(
        VerificationMethod.UAN_FULL_HISTORY_GL, {1, 1013}, {9, 1011, 1015}, "Employment History"),
    VerificationMethod.LATEST_EMPLOYMENT_UAN: _entry(
        VerificationMethod.LATEST_EMPLOYMENT_UAN, {1, 1014}, {9, 1015}, "Latest Emp (UAN)"),
    VerificationMethod.LATEST_EMPLOYMENT_MOBILE: _entry(
        VerificationMethod.LATEST_EMPLOYMENT_MOBILE, {1, 1014}, {9, 1015}, "Latest Emp (Mobile)"),
    VerificationMethod.LATEST_PASSBOOK_MOBILE: _entry(
        VerificationMethod.LATEST_PASSBOOK_MOBILE, {1, 1022}, {9, 1015, 1023}, "EPFO Passbook"),
}

# Shared across methods wherever the codes coincide
STATUS_DESCRIPTIONS: Dict[int, str] = {
    1: "Verified successfully.",
    9: "No record found for the provided details.",
    1007: "Provided mobile number doesn't have any UAN.",
    1011: "Provided UAN is invalid.",
    1013: "Employment history fetched successfully.",
    1014: "Latest employment record fetched successfully.",
    1015: "No employment records found for the provided details.",
    1016: "UAN fetched successfully.",
    1022: "EPFO passbook fetched successfully.",
    1023: "No passbook found for the provided details.",
    1029: "UAN fetched successfully.",
    1030: "Provided PAN is invalid or doesn't have any UAN.",
}

# Types every candidate is expected to clear; drives the "missing" list of an
# unverified badge and the per-type summary.
REQUIRED_METHODS: List[VerificationMethod] = [
    VerificationMethod.MOBILE_TO_UAN,
    VerificationMethod.PAN_TO_UAN,
    VerificationMethod.UAN_FULL_HISTORY_GL,
    VerificationMethod.LATEST_EMPLOYMENT_UAN,
    VerificationMethod.LATEST_PASSBOOK_MOBILE,
]

# Identity / history resolution. One success here is enough for "Verified".
CORE_METHODS: FrozenSet[VerificationMethod] = frozenset({
    VerificationMethod.MOBILE_TO_UAN,
    VerificationMethod.PAN_TO_UAN,
    VerificationMethod.UAN_FULL_HISTORY,
    VerificationMethod.UAN_FULL_HISTORY_GL,
})

# successor -> predecessor after a provider migration
LEGACY_KEYS: Dict[VerificationMethod, VerificationMethod] = {
    VerificationMethod.UAN_FULL_HISTORY_GL: VerificationMethod.UAN_FULL_HISTORY,
}

_EMPTY_ENTRY = StatusCodeEntry(method="", success_codes=frozenset(), not_found_codes=frozenset())


def method_value(method: Union[str, VerificationMethod, None]) -> str:
    """Storage key for a method; enum members map to their value."""
    if isinstance(method, VerificationMethod):
        return method.value
    return str(method or "")


def to_method(method: Union[str, VerificationMethod, None]) -> Optional[VerificationMethod]:
    """Coerce a raw identifier to the enum; unknown identifiers return None."""
    if isinstance(method, VerificationMethod):
        return method
    try:
        return VerificationMethod(str(method or "").strip().lower())
    except ValueError:
        return None


def get_entry(method: Union[str, VerificationMethod, None]) -> StatusCodeEntry:
    """Registry entry for method; unknown methods get empty code sets."""
    m = to_method(method)
    if m is None:
        return StatusCodeEntry(
            method=method_value(method),
            success_codes=_EMPTY_ENTRY.success_codes,
            not_found_codes=_EMPTY_ENTRY.not_found_codes,
        )
    return STATUS_TABLE[m]


def describe(code: Optional[int]) -> str:
    if code is None:
        return "Status code: unavailable"
    return STATUS_DESCRIPTIONS.get(code) or f"Status code: {code}"


def method_label(method: Union[str, VerificationMethod]) -> str:
    entry = get_entry(method)
    return entry.label or entry.method


def validate_registry() -> None:
    """
    Build-time consistency check. Raises on a missing enum member or on a code
    that is both success and not-found for the same method.
    """
    missing = [m.value for m in VerificationMethod if m not in STATUS_TABLE]
    if missing:
        raise RuntimeError(f"Status table missing methods: {missing}")
    for m, entry in STATUS_TABLE.items():
        if entry.method != m.value:
            raise RuntimeError(f"Status table entry for {m.value} is keyed as {entry.method}")
        overlap = entry.success_codes & entry.not_found_codes
        if overlap:
            raise RuntimeError(f"{m.value}: codes {sorted(overlap)} are both success and not-found")


validate_registry()
