import pytest
from bgv.core.classifier import Outcome, classify, extract_status_code
from bgv.core.status_codes import STATUS_TABLE


def _truthscreen(code):
    return {"status": code, "msg": "..."}


def _gridlines(code):
    return {"status": 200, "data": {"code": str(code), "message": "..."}}


SUCCESS_CASES = [(m.value, c) for m, e in STATUS_TABLE.items() for c in sorted(e.success_codes)]
NOT_FOUND_CASES = [(m.value, c) for m, e in STATUS_TABLE.items() for c in sorted(e.not_found_codes)]


@pytest.mark.parametrize("method,code", SUCCESS_CASES)
def test_success_codes_classify_success(method, code):
    assert classify(method, _gridlines(code)).outcome == Outcome.SUCCESS
    assert classify(method, _truthscreen(code)).outcome == Outcome.SUCCESS


@pytest.mark.parametrize("method,code", NOT_FOUND_CASES)
def test_not_found_codes_classify_not_found(method, code):
    c = classify(method, _gridlines(code))
    assert c.outcome == Outcome.NOT_FOUND
    assert c.status_code == code
    assert c.reason


@pytest.mark.parametrize("method", [m.value for m in STATUS_TABLE])
@pytest.mark.parametrize("code", [0, 2, 400, 500, 1001, 9999])
def test_unlisted_codes_classify_error_with_reason(method, code):
    c = classify(method, _gridlines(code))
    assert c.outcome == Outcome.ERROR
    assert c.reason


def test_unmapped_code_uses_generic_reason():
    c = classify("mobile_to_uan", _gridlines(1099))
    assert c.outcome == Outcome.ERROR
    assert c.reason == "Status code: 1099"


def test_codes_are_method_specific():
    # 1029 is PAN success, but means nothing for mobile lookups
    assert classify("pan_to_uan", _gridlines(1029)).outcome == Outcome.SUCCESS
    assert classify("mobile_to_uan", _gridlines(1029)).outcome == Outcome.ERROR


def test_unknown_method_is_error():
    c = classify("aadhaar_offline", _truthscreen(1))
    assert c.outcome == Outcome.ERROR
    assert c.status_code == 1


def test_transport_failure_status_is_the_code():
    # Non-200 envelopes carry the code at the top level
    c = classify("uan_full_history_gl", {"status": 1011, "data": {"code": "1013"}})
    assert c.outcome == Outcome.NOT_FOUND
    assert c.status_code == 1011


@pytest.mark.parametrize("raw", [
    None,
    {},
    [],
    "oops",
    {"status": "abc"},
    {"status": 200},
    {"status": 200, "data": None},
    {"status": 200, "data": {"code": "x12"}},
    {"status": True},
    {"status": 1.5},
])
def test_malformed_responses_never_raise(raw):
    c = classify("mobile_to_uan", raw)
    assert c.outcome == Outcome.ERROR
    assert c.status_code is None
    assert c.reason


def test_extract_status_code_shapes():
    assert extract_status_code({"status": 200, "data": {"code": "1016"}}) == 1016
    assert extract_status_code({"status": "200", "data": {"code": 1016}}) == 1016
    assert extract_status_code({"status": "9"}) == 9
    assert extract_status_code({"status": 1.0}) == 1


def test_classify_is_deterministic():
    raw = _gridlines(1007)
    assert classify("mobile_to_uan", raw) == classify("mobile_to_uan", raw)


def test_mobile_not_found_reason():
    c = classify("mobile_to_uan", _gridlines(1007))
    assert c.outcome == Outcome.NOT_FOUND
    assert c.reason == "Provided mobile number doesn't have any UAN."
