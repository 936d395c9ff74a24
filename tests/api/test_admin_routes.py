import pytest
from fastapi.testclient import TestClient

from bgv.api.auth import require_admin
from bgv.main import app
from bgv.settings import settings
from bgv.store.attempt_repo import record_attempt

client = TestClient(app)


@pytest.fixture
def skip_admin():
    app.dependency_overrides[require_admin] = lambda: None
    yield
    app.dependency_overrides = {}


def test_admin_requires_key(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_RBAC_ENABLED", True)
    monkeypatch.setattr(settings, "ADMIN_API_KEY", "")
    assert client.get("/admin/registry").status_code == 403

    monkeypatch.setattr(settings, "ADMIN_API_KEY", "adm")
    assert client.get("/admin/registry", headers={"x-admin-key": "nope"}).status_code == 403
    assert client.get("/admin/registry", headers={"x-admin-key": "adm"}).status_code == 200


def test_registry_lists_every_method(skip_admin):
    data = client.get("/admin/registry").json()
    assert data["methods"]["mobile_to_uan"] == {
        "label": "Mobile to UAN",
        "successCodes": [1, 1016],
        "notFoundCodes": [9, 1007],
    }
    assert len(data["methods"]) == 7


def test_metrics_snapshot(skip_admin, fake_redis):
    fake_redis.set("metrics:verify:pan_to_uan:attempts", "4")
    fake_redis.set("metrics:verify:pan_to_uan:success", "3")
    fake_redis.set("metrics:verify:pan_to_uan:error", "1")

    data = client.get("/admin/metrics").json()
    pan = next(m for m in data["methods"] if m["method"] == "pan_to_uan")
    assert pan["usage"] == 4
    assert pan["successRate"] == 75.0
    assert data["totalVerifications"] == 4


def test_candidate_timeline_oldest_first(skip_admin, fake_redis):
    record_attempt("c-1", "mobile_to_uan", {"status": 9})
    record_attempt("c-1", "pan_to_uan", {"status": 1})

    data = client.get("/admin/candidates/c-1/timeline", params={"orgId": "org-1"}).json()
    assert [e["method"] for e in data["events"]] == ["mobile_to_uan", "pan_to_uan"]
    assert data["activeProvider"] == settings.DEFAULT_PROVIDER
