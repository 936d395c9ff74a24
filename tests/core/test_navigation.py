import pytest
from bgv.core.menu import build_menu
from bgv.core.navigation import (
    INITIAL_STATE,
    NavigationError,
    NavigationState,
    NavigationStateMachine,
    Panel,
    back,
    select_category,
    select_method,
)
from bgv.store.models import VerificationAttempt


@pytest.fixture
def menu():
    return build_menu("truthscreen")


def _attempt(method, code):
    return VerificationAttempt.from_raw(method, {"status": 200, "data": {"code": str(code)}})


def test_view_all_goes_to_all_results_and_back(menu):
    state = select_category(INITIAL_STATE, "viewAll", menu, [])
    assert state == NavigationState(panel=Panel.ALL_RESULTS)
    assert back(state, menu, []) == INITIAL_STATE


def test_direct_category_goes_straight_to_form(menu):
    state = select_category(INITIAL_STATE, "fetchLatestUan", menu, [])
    assert state.panel == Panel.FORM
    assert state.active_category == "fetchLatestUan"
    assert state.active_method == "latest_employment_uan"


def test_grouped_category_without_results_opens_submenu(menu):
    history = [_attempt("mobile_to_uan", 1007)]
    state = select_category(INITIAL_STATE, "fetchUan", menu, history)
    assert state == NavigationState(panel=Panel.SUBMENU, active_category="fetchUan")


def test_grouped_category_skips_submenu_when_a_method_is_verified(menu):
    history = [_attempt("pan_to_uan", 1029)]
    state = select_category(INITIAL_STATE, "fetchUan", menu, history)
    assert state.panel == Panel.FORM
    assert state.active_method == "pan_to_uan"


def test_skip_picks_first_verified_in_declaration_order(menu):
    history = [_attempt("pan_to_uan", 1029), _attempt("mobile_to_uan", 1016)]
    state = select_category(INITIAL_STATE, "fetchUan", menu, history)
    assert state.active_method == "mobile_to_uan"


def test_select_method_from_submenu(menu):
    state = select_category(INITIAL_STATE, "fetchUan", menu, [])
    state = select_method(state, "pan_to_uan", menu)
    assert state == NavigationState(panel=Panel.FORM, active_category="fetchUan", active_method="pan_to_uan")


def test_back_from_direct_form_returns_to_main_without_results(menu):
    state = select_category(INITIAL_STATE, "fetchHistory", menu, [])
    assert back(state, menu, []) == INITIAL_STATE


def test_back_from_unverified_submethod_returns_to_submenu(menu):
    state = select_method(select_category(INITIAL_STATE, "fetchUan", menu, []), "mobile_to_uan", menu)
    history = [_attempt("mobile_to_uan", 1007)]
    assert back(state, menu, history) == NavigationState(panel=Panel.SUBMENU, active_category="fetchUan")


def test_back_from_verified_submethod_returns_to_main(menu):
    state = select_method(select_category(INITIAL_STATE, "fetchUan", menu, []), "mobile_to_uan", menu)
    # Result arrived while the form was open
    history = [_attempt("mobile_to_uan", 1016)]
    assert back(state, menu, history) == INITIAL_STATE


def test_back_from_submenu_and_main(menu):
    state = select_category(INITIAL_STATE, "fetchUan", menu, [])
    assert back(state, menu, []) == INITIAL_STATE
    assert back(INITIAL_STATE, menu, []) == INITIAL_STATE


def test_unknown_keys_fail_fast(menu):
    with pytest.raises(NavigationError):
        select_category(INITIAL_STATE, "fetchAadhaar", menu, [])
    submenu = select_category(INITIAL_STATE, "fetchUan", menu, [])
    with pytest.raises(NavigationError):
        select_method(submenu, "latest_passbook_mobile", menu)


def test_transitions_outside_the_flow_fail(menu):
    form = select_category(INITIAL_STATE, "fetchLatestUan", menu, [])
    with pytest.raises(NavigationError):
        select_category(form, "fetchUan", menu, [])
    with pytest.raises(NavigationError):
        select_method(INITIAL_STATE, "pan_to_uan", menu)
    all_results = select_category(INITIAL_STATE, "viewAll", menu, [])
    with pytest.raises(NavigationError):
        select_category(all_results, "fetchUan", menu, [])


def test_transitions_do_not_mutate_state(menu):
    submenu = select_category(INITIAL_STATE, "fetchUan", menu, [])
    select_method(submenu, "pan_to_uan", menu)
    assert submenu.panel == Panel.SUBMENU
    assert INITIAL_STATE == NavigationState()


def test_machine_dispatch_round_trip(menu):
    machine = NavigationStateMachine(menu)
    machine.dispatch("select_category", "fetchUan", [])
    machine.dispatch("select_method", "mobile_to_uan", [])
    assert machine.state.panel == Panel.FORM
    machine.dispatch("back", None, [])
    assert machine.state.panel == Panel.SUBMENU
    machine.dispatch("back", None, [])
    assert machine.state == INITIAL_STATE
    with pytest.raises(NavigationError):
        machine.dispatch("jump", None, [])
