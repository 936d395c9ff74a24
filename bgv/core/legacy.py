"""
Legacy-key resolution.

When an organization switches provider, the method key used going forward
changes (e.g. uan_full_history -> uan_full_history_gl) but results earned under
the old key must still count as verified. Both the menu verified-check and the
navigation skip-ahead go through here so they cannot disagree.
"""
from typing import Iterable, Optional, Union

from bgv.core.status_codes import VerificationMethod, method_value
from bgv.store.models import VerificationAttempt

MethodKey = Union[str, VerificationMethod]


def _first_success(history: Iterable[VerificationAttempt], key: str) -> Optional[VerificationAttempt]:
    for attempt in history:
        if attempt.method == key and attempt.succeeded:
            return attempt
    return None


def find_successful_attempt(
    history: Iterable[VerificationAttempt],
    method: MethodKey,
    legacy_key: Optional[MethodKey] = None,
) -> Optional[VerificationAttempt]:
    """
    Most recent successful attempt under method, else under legacy_key.
    history is expected most-recent-first.
    """
    history = list(history or [])
    found = _first_success(history, method_value(method))
    if found is None and legacy_key:
        found = _first_success(history, method_value(legacy_key))
    return found


def has_successful_attempt(
    history: Iterable[VerificationAttempt],
    method: MethodKey,
    legacy_key: Optional[MethodKey] = None,
) -> bool:
    return find_successful_attempt(history, method, legacy_key) is not None
