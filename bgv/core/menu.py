"""
Verification menu tree.

Categories are either direct (one method, no submenu) or hold sub-methods.
The "history fetch" slot depends on the organization's active provider; the
tree is built once per configuration load and not mutated afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from bgv.core.legacy import has_successful_attempt
from bgv.core.status_codes import LEGACY_KEYS, VerificationMethod
from bgv.store.models import VerificationAttempt

PROVIDER_TRUTHSCREEN = "truthscreen"
PROVIDER_GRIDLINES = "gridlines"

# Provider -> remote function that performs the lookup
PROVIDER_FUNCTIONS: Dict[str, str] = {
    PROVIDER_TRUTHSCREEN: "run-bgv-check",
    PROVIDER_GRIDLINES: "run-gridlines-check",
}

# Provider -> method serving the employment history slot
HISTORY_METHOD_BY_PROVIDER: Dict[str, VerificationMethod] = {
    PROVIDER_TRUTHSCREEN: VerificationMethod.UAN_FULL_HISTORY,
    PROVIDER_GRIDLINES: VerificationMethod.UAN_FULL_HISTORY_GL,
}

VIEW_ALL = "viewAll"


@dataclass(frozen=True)
class InputField:
    name: str
    label: str
    placeholder: str = ""
    required: bool = True


@dataclass(frozen=True)
class MethodConfig:
    key: VerificationMethod
    label: str
    inputs: Tuple[InputField, ...] = ()
    legacy_key: Optional[VerificationMethod] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key.value,
            "label": self.label,
            "legacyKey": self.legacy_key.value if self.legacy_key else None,
            "inputs": [
                {"name": f.name, "label": f.label, "placeholder": f.placeholder, "required": f.required}
                for f in self.inputs
            ],
        }


@dataclass(frozen=True)
class CategoryConfig:
    key: str
    label: str
    # Direct categories carry exactly one method
    method: Optional[MethodConfig] = None
    methods: Mapping[str, MethodConfig] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_direct(self) -> bool:
        return self.method is not None

    def get_method(self, key: str) -> Optional[MethodConfig]:
        if self.is_direct:
            return self.method if self.method.key.value == key else None
        return self.methods.get(key)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"key": self.key, "label": self.label, "isDirect": self.is_direct}
        if self.is_direct:
            out["method"] = self.method.to_dict()
        else:
            out["methods"] = {k: m.to_dict() for k, m in self.methods.items()}
        return out


_MOBILE = InputField("mobile", "Mobile Number", "Enter 10-digit mobile")
_PAN = InputField("pan", "PAN Number", "Enter PAN")
_PAN_OPTIONAL = InputField("pan", "PAN Number", "Enter PAN (Optional)", required=False)
_UAN = InputField("uan", "UAN Number", "Enter 12-digit UAN")


def _direct(key: str, label: str, method: MethodConfig) -> CategoryConfig:
    return CategoryConfig(key=key, label=label, method=method)


def _grouped(key: str, label: str, methods: Iterable[MethodConfig]) -> CategoryConfig:
    return CategoryConfig(
        key=key,
        label=label,
        methods=MappingProxyType({m.key.value: m for m in methods}),
    )


def build_menu(provider: Optional[str]) -> Mapping[str, CategoryConfig]:
    """Category tree for an organization's active provider (ordered)."""
    provider = (provider or "").strip().lower()
    if provider not in HISTORY_METHOD_BY_PROVIDER:
        raise ValueError(f"Unknown verification provider: {provider!r}")

    history_method = HISTORY_METHOD_BY_PROVIDER[provider]
    categories = [
        _grouped("fetchUan", "Fetch UAN", [
            MethodConfig(VerificationMethod.MOBILE_TO_UAN, "Fetch by Mobile", (_MOBILE,)),
            MethodConfig(VerificationMethod.PAN_TO_UAN, "Fetch by PAN", (_PAN,)),
        ]),
        _direct("fetchLatestUan", "Fetch Latest Employment (UAN)", MethodConfig(
            VerificationMethod.LATEST_EMPLOYMENT_UAN, "Fetch Latest Employment (UAN)", (_UAN,))),
        _direct("fetchHistory", "Fetch Employment History", MethodConfig(
            history_method, "Fetch Employment History", (_UAN,),
            legacy_key=LEGACY_KEYS.get(history_method))),
        _direct("fetchLatestMobile", "Fetch Latest Employment (Mobile)", MethodConfig(
            VerificationMethod.LATEST_EMPLOYMENT_MOBILE, "Fetch Latest Employment (Mobile)", (_MOBILE, _PAN))),
        _direct("fetchLatestPassbook", "Fetch EPFO Passbook (Without OTP)", MethodConfig(
            VerificationMethod.LATEST_PASSBOOK_MOBILE, "Fetch EPFO Passbook (Without OTP)", (_MOBILE, _PAN_OPTIONAL))),
    ]
    return MappingProxyType({c.key: c for c in categories})


def find_method(menu: Mapping[str, CategoryConfig], method: str) -> Optional[MethodConfig]:
    """Locate a method anywhere in the tree by its key."""
    for category in menu.values():
        found = category.get_method(method)
        if found is not None:
            return found
    return None


# ---------------------------------------------------------------------------
# Verified flags for list rendering
# ---------------------------------------------------------------------------
def is_method_verified(history: Iterable[VerificationAttempt], method: MethodConfig) -> bool:
    return has_successful_attempt(history, method.key, method.legacy_key)


def is_category_verified(history: Iterable[VerificationAttempt], category: CategoryConfig) -> bool:
    history = list(history or [])
    if category.is_direct:
        return is_method_verified(history, category.method)
    return any(is_method_verified(history, m) for m in category.methods.values())


def menu_items(menu: Mapping[str, CategoryConfig], history: Iterable[VerificationAttempt]) -> List[Dict[str, Any]]:
    """Main panel list: one row per category with its verified flag."""
    history = list(history or [])
    return [
        {"key": c.key, "label": c.label, "isDirect": c.is_direct, "verified": is_category_verified(history, c)}
        for c in menu.values()
    ]


def submenu_items(category: CategoryConfig, history: Iterable[VerificationAttempt]) -> List[Dict[str, Any]]:
    history = list(history or [])
    return [
        {"key": k, "label": m.label, "verified": is_method_verified(history, m)}
        for k, m in category.methods.items()
    ]
