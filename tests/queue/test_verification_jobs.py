import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from bgv.core.verifier import InvalidVerificationRequest
from bgv.providers.client import ProviderError, ProviderResult
from bgv.queue.jobs import enqueue_verification, run_verification_job
from bgv.settings import settings
from bgv.store.attempt_repo import get_attempts
from bgv.utils.lock import VerificationInFlight


@patch("bgv.queue.jobs.get_queue")
def test_enqueue_validates_and_uses_canonical_key(mock_get_queue, fake_redis):
    q = MagicMock()
    q.enqueue.return_value = MagicMock(id="job-1")
    mock_get_queue.return_value = q

    assert enqueue_verification("c-1", "org-1", " PAN_TO_UAN ", {"pan": "ABCDE1234F"}) == "job-1"
    args = q.enqueue.call_args.args
    assert args[0] is run_verification_job
    assert args[1:] == ("c-1", "org-1", "pan_to_uan", {"pan": "ABCDE1234F"})


@patch("bgv.queue.jobs.get_queue")
def test_enqueue_rejects_unknown_method(mock_get_queue, fake_redis):
    with pytest.raises(InvalidVerificationRequest):
        enqueue_verification("c-1", "org-1", "aadhaar_offline", {})
    mock_get_queue.assert_not_called()


@patch("bgv.core.verifier.invoke", new_callable=AsyncMock)
def test_job_records_attempt(mock_invoke, fake_redis):
    mock_invoke.return_value = ProviderResult(status="completed", data={"status": 200, "data": {"code": "1014"}})

    out = run_verification_job("c-2", "org-1", "latest_employment_uan", {"uan": "100123456789"})

    assert out["status"] == "completed"
    assert out["attempt"]["outcome"] == "success"
    assert out["badge"]["color"] == "yellow"
    assert get_attempts("c-2")[0].method == "latest_employment_uan"


@patch("bgv.core.verifier.invoke", new_callable=AsyncMock)
def test_job_reraises_so_rq_marks_it_failed(mock_invoke, fake_redis):
    mock_invoke.side_effect = ProviderError("boom")
    with pytest.raises(ProviderError):
        run_verification_job("c-3", "org-1", "pan_to_uan", {"pan": "ABCDE1234F"})


@patch("bgv.queue.jobs.get_queue")
def test_enqueue_rejects_duplicate_while_guard_is_held(mock_get_queue, fake_redis, monkeypatch):
    monkeypatch.setattr(settings, "INFLIGHT_GUARD_ENABLED", True)
    fake_redis.set("lock:verify:c-4:mobile_to_uan", "held")

    with pytest.raises(VerificationInFlight):
        enqueue_verification("c-4", "org-1", "mobile_to_uan", {"mobile": "9876543210"})
    mock_get_queue.assert_not_called()


@patch("bgv.queue.jobs.get_queue")
def test_enqueue_ignores_lock_when_guard_is_off(mock_get_queue, fake_redis, monkeypatch):
    monkeypatch.setattr(settings, "INFLIGHT_GUARD_ENABLED", False)
    fake_redis.set("lock:verify:c-5:mobile_to_uan", "held")
    mock_get_queue.return_value.enqueue.return_value = MagicMock(id="job-5")

    assert enqueue_verification("c-5", "org-1", "mobile_to_uan", {"mobile": "9876543210"}) == "job-5"
