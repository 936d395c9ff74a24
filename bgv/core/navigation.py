"""
Guided verification flow: Main -> Submenu -> Form, plus an AllResults panel
reachable only from Main.

State is a single immutable value; every transition is a pure function of
(state, menu, history). Keys missing from the menu are programming errors
because the menu is rendered from the same tree, so they raise.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Mapping, Optional

from bgv.core.menu import VIEW_ALL, CategoryConfig, MethodConfig, is_method_verified
from bgv.store.models import VerificationAttempt


class Panel(str, Enum):
    MAIN = "main"
    SUBMENU = "submenu"
    FORM = "form"
    ALL_RESULTS = "allResults"


class NavigationError(Exception):
    """Unknown menu key or a transition the flow does not allow."""


@dataclass(frozen=True)
class NavigationState:
    panel: Panel = Panel.MAIN
    active_category: Optional[str] = None
    active_method: Optional[str] = None


INITIAL_STATE = NavigationState()


def _category(menu: Mapping[str, CategoryConfig], key: Optional[str]) -> CategoryConfig:
    category = menu.get(key) if key else None
    if category is None:
        raise NavigationError(f"Unknown verification category: {key!r}")
    return category


def _method(category: CategoryConfig, key: Optional[str]) -> MethodConfig:
    method = category.get_method(key) if key else None
    if method is None:
        raise NavigationError(f"Unknown method {key!r} in category {category.key!r}")
    return method


def select_category(
    state: NavigationState,
    key: str,
    menu: Mapping[str, CategoryConfig],
    history: Iterable[VerificationAttempt],
) -> NavigationState:
    if state.panel != Panel.MAIN:
        raise NavigationError(f"select_category is only valid from {Panel.MAIN.value}, not {state.panel.value}")

    if key == VIEW_ALL:
        return NavigationState(panel=Panel.ALL_RESULTS)

    category = _category(menu, key)
    if category.is_direct:
        return NavigationState(panel=Panel.FORM, active_category=key, active_method=category.method.key.value)

    # Once any sub-method is verified the user lands straight on its result
    history = list(history or [])
    for method_key, method in category.methods.items():
        if is_method_verified(history, method):
            return NavigationState(panel=Panel.FORM, active_category=key, active_method=method_key)

    return NavigationState(panel=Panel.SUBMENU, active_category=key)


def select_method(
    state: NavigationState,
    key: str,
    menu: Mapping[str, CategoryConfig],
) -> NavigationState:
    if state.panel != Panel.SUBMENU:
        raise NavigationError(f"select_method is only valid from {Panel.SUBMENU.value}, not {state.panel.value}")
    category = _category(menu, state.active_category)
    if category.is_direct:
        raise NavigationError(f"Category {category.key!r} has no submenu")
    _method(category, key)
    return replace(state, panel=Panel.FORM, active_method=key)


def back(
    state: NavigationState,
    menu: Mapping[str, CategoryConfig],
    history: Iterable[VerificationAttempt],
) -> NavigationState:
    if state.panel == Panel.FORM:
        category = _category(menu, state.active_category)
        method = _method(category, state.active_method)
        if category.is_direct or is_method_verified(history, method):
            return INITIAL_STATE
        return NavigationState(panel=Panel.SUBMENU, active_category=category.key)

    # Submenu, AllResults and Main all fall back to Main
    return INITIAL_STATE


class NavigationStateMachine:
    """Holds the current state for one view; transitions stay pure."""

    ACTIONS = ("select_category", "select_method", "back")

    def __init__(self, menu: Mapping[str, CategoryConfig], state: NavigationState = INITIAL_STATE):
        self.menu = menu
        self.state = state

    def select_category(self, key: str, history: Iterable[VerificationAttempt]) -> NavigationState:
        self.state = select_category(self.state, key, self.menu, history)
        return self.state

    def select_method(self, key: str) -> NavigationState:
        self.state = select_method(self.state, key, self.menu)
        return self.state

    def back(self, history: Iterable[VerificationAttempt]) -> NavigationState:
        self.state = back(self.state, self.menu, history)
        return self.state

    def dispatch(self, action: str, key: Optional[str], history: Iterable[VerificationAttempt]) -> NavigationState:
        if action == "select_category":
            return self.select_category(key or "", history)
        if action == "select_method":
            return self.select_method(key or "")
        if action == "back":
            return self.back(history)
        raise NavigationError(f"Unknown navigation action: {action!r}")
