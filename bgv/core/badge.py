"""
Badge Aggregation
-----------------
Reduces a candidate's attempt history (most-recent-first) to a single trust
badge. Rules, first match wins:

1. no attempts                          -> red "Yet to Verify", every required type missing
2. any core-method success, anywhere    -> green "Verified"
3. the most recent attempt decides:
   success (supplementary)              -> yellow, core types still missing
   not found                            -> yellow, [its reason]
   error                                -> red, [its reason]

Rule 2 dominates rule 3: a later unrelated failure never downgrades a
candidate that has cleared identity resolution once.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from bgv.core.classifier import Outcome
from bgv.core.legacy import find_successful_attempt
from bgv.core.status_codes import (
    CORE_METHODS,
    LEGACY_KEYS,
    REQUIRED_METHODS,
    VerificationMethod,
    method_label,
    to_method,
)
from bgv.store.models import VerificationAttempt

GREEN = "green"
YELLOW = "yellow"
RED = "red"

LABEL_VERIFIED = "Verified"
LABEL_PARTIAL = "Partially Verified"
LABEL_UNVERIFIED = "Unverified"
LABEL_NOT_STARTED = "Yet to Verify"


@dataclass(frozen=True)
class Badge:
    color: str
    label: str
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"color": self.color, "label": self.label, "missing": list(self.missing)}


def _dedupe_preserve(seq: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for s in seq:
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


def _labels(methods: Iterable[VerificationMethod]) -> List[str]:
    return _dedupe_preserve(method_label(m) for m in methods)


def _is_core(attempt: VerificationAttempt, core_methods) -> bool:
    m = to_method(attempt.method)
    return m is not None and m in core_methods


def compute_badge(history: Iterable[VerificationAttempt], core_methods=CORE_METHODS) -> Badge:
    history = list(history or [])

    if not history:
        return Badge(color=RED, label=LABEL_NOT_STARTED, missing=_labels(REQUIRED_METHODS))

    if any(a.succeeded and _is_core(a, core_methods) for a in history):
        return Badge(color=GREEN, label=LABEL_VERIFIED, missing=[])

    latest = history[0]
    if latest.outcome == Outcome.SUCCESS:
        # Enum order keeps the list stable across calls
        outstanding = [
            m for m in VerificationMethod
            if m in core_methods and find_successful_attempt(history, m) is None
        ]
        return Badge(color=YELLOW, label=LABEL_PARTIAL, missing=_labels(outstanding))
    if latest.outcome == Outcome.NOT_FOUND:
        return Badge(color=YELLOW, label=LABEL_PARTIAL, missing=[latest.reason])
    return Badge(color=RED, label=LABEL_UNVERIFIED, missing=[latest.reason])


# ---------------------------------------------------------------------------
# Per-type summary and grouped results (hover card / All Results panel)
# ---------------------------------------------------------------------------
@dataclass
class VerificationSummary:
    verified: List[str] = field(default_factory=list)
    notFound: List[str] = field(default_factory=list)
    unverified: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {"verified": self.verified, "notFound": self.notFound, "unverified": self.unverified}


def _latest_under(history: List[VerificationAttempt], keys: List[str]) -> Optional[VerificationAttempt]:
    for a in history:
        if a.method in keys:
            return a
    return None


def summarize(history: Iterable[VerificationAttempt]) -> VerificationSummary:
    """
    One line per required type. A success under the type (or its legacy key)
    wins; otherwise the most recent attempt is reported.
    """
    history = list(history or [])
    out = VerificationSummary()
    for m in REQUIRED_METHODS:
        name = method_label(m)
        legacy = LEGACY_KEYS.get(m)
        keys = [m.value] + ([legacy.value] if legacy else [])

        hit = find_successful_attempt(history, m, legacy)
        info = hit or _latest_under(history, keys)
        if info is None:
            out.unverified.append(name)
            continue

        value_str = f" ({info.inputValue})" if info.inputValue else ""
        if info.outcome == Outcome.SUCCESS:
            out.verified.append(f"{name}{value_str}")
        elif info.outcome == Outcome.NOT_FOUND:
            out.notFound.append(f"{name}: {info.reason}{value_str}")
        else:
            out.notFound.append(f"{name} (Error){value_str}")
    return out


def latest_by_method(history: Iterable[VerificationAttempt]) -> Dict[str, VerificationAttempt]:
    """Most recent attempt per method key; relies on most-recent-first input."""
    out: Dict[str, VerificationAttempt] = {}
    for a in history or []:
        if a.method not in out:
            out[a.method] = a
    return out
