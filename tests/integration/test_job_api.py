"""
Tests for the import job and account HTTP routes.
"""

import time

import pytest
from fastapi.testclient import TestClient

from identity_console.core.config import settings
from identity_console.main import app
from identity_console.routers.deps import get_account_store, get_identity_client, get_job_service
from identity_console.services.account_store import AccountStore
from identity_console.services.job_service import JobService
from identity_console.services.job_store import JobStore


@pytest.fixture
def account_store(tmp_path):
    return AccountStore(str(tmp_path / "accounts.json"))


@pytest.fixture
def api(account_store, make_client):
    fake_client = make_client(failing={"taken@x.com"})
    service = JobService(JobStore(), fake_client, account_store, tick_seconds=0.01)

    app.dependency_overrides[get_account_store] = lambda: account_store
    app.dependency_overrides[get_identity_client] = lambda: fake_client
    app.dependency_overrides[get_job_service] = lambda: service

    with TestClient(app) as client:
        client.fake_identity = fake_client
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def account_id(api):
    response = api.post("/api/accounts", json={"name": "Prod", "api_key": "pk_test", "secret_key": "sk_test"})
    assert response.status_code == 201
    return response.json()["id"]


def wait_for_status(api, account_id, *statuses, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        job = api.get(f"/api/jobs/{account_id}").json()
        if job["status"] in statuses:
            return job
        time.sleep(0.01)
    raise AssertionError(f"job never reached {statuses}")


def test_health_and_root(api):
    assert api.get("/health").json()["status"] == "healthy"
    assert "import_job" in api.get("/").json()["endpoints"]


def test_accounts_crud(api, account_id):
    second = api.post("/api/accounts", json={"name": "Staging", "api_key": "pk_2", "secret_key": "sk_2"}).json()

    listed = api.get("/api/accounts").json()
    assert [a["name"] for a in listed] == ["Prod", "Staging"]
    assert all("secret_key" not in a for a in listed)

    assert api.post("/api/accounts/set-active", json={"id": second["id"]}).status_code == 200
    assert [a["is_active"] for a in api.get("/api/accounts").json()] == [False, True]

    assert api.delete(f"/api/accounts/{account_id}").status_code == 200
    assert api.delete(f"/api/accounts/{account_id}").status_code == 404


def test_new_job_snapshot_is_idle(api, account_id):
    job = api.get(f"/api/jobs/{account_id}").json()

    assert job["status"] == "idle"
    assert job["results"] == []
    assert job["progress_line"] == "0%"
    assert job["account_id"] == account_id


def test_import_job_runs_to_completion(api, account_id):
    response = api.patch(
        f"/api/jobs/{account_id}/settings",
        json={"user_data": "a@x.com,A,One\nnot-an-email\ntaken@x.com,T,Aken", "delay_in_seconds": 0}
    )
    assert response.json()["total_count"] == 3

    response = api.post(f"/api/jobs/{account_id}/start", json={})
    assert response.status_code == 200
    assert response.json()["status"] == "running"

    job = wait_for_status(api, account_id, "completed")
    assert [r["email"] for r in job["results"]] == ["a@x.com", "taken@x.com"]
    assert job["success_count"] == 1
    assert job["fail_count"] == 1
    assert job["progress"] == 100
    assert job["progress_line"] == "100%"

    failed = api.get(f"/api/jobs/{account_id}/results", params={"filter": "error"}).json()
    assert [r["email"] for r in failed] == ["taken@x.com"]

    export = api.get(f"/api/jobs/{account_id}/export", params={"filter": "success"})
    assert export.headers["content-type"].startswith("text/csv")
    assert export.text.splitlines()[0] == "email,status,message,external_id"
    assert export.text.splitlines()[1].startswith("a@x.com,success,Invitation sent")


def test_start_without_valid_users_is_400(api, account_id):
    response = api.post(f"/api/jobs/{account_id}/start", json={"user_data": "nobody"})

    assert response.status_code == 400
    assert response.json()["message"] == "No valid user data found"
    assert api.get(f"/api/jobs/{account_id}").json()["status"] == "idle"


def test_start_with_parsed_users_reports_their_count(api, account_id):
    users = [{"email": "a@x.com", "firstName": "A"}, {"email": "b@x.com"}, {"email": "broken"}]
    response = api.post(f"/api/jobs/{account_id}/start", json={"users": users, "delay_in_seconds": 0})

    assert response.status_code == 200
    assert response.json()["total_count"] == 2
    assert response.json()["pending_input"]["user_data"] == "a@x.com,A,,\nb@x.com,,,"

    job = wait_for_status(api, account_id, "completed")
    assert [r["email"] for r in job["results"]] == ["a@x.com", "b@x.com"]


@pytest.mark.parametrize("users", [
    [{"email": 5}],
    [{"email": "a@x.com", "first_name": 7}],
    ["a@x.com"],
])
def test_start_with_mistyped_users_is_422(api, account_id, users):
    response = api.post(f"/api/jobs/{account_id}/start", json={"users": users})

    assert response.status_code == 422
    assert api.get(f"/api/jobs/{account_id}").json()["status"] == "idle"
    assert api.fake_identity.calls == []


def test_routes_are_served_under_api_prefix(api, account_id):
    paths = {route.path for route in app.routes}

    assert f"{settings.api_prefix}/jobs/{{account_id}}/start" in paths
    assert f"{settings.api_prefix}/accounts" in paths
    assert f"{settings.api_prefix}/templates/{{account_id}}/{{template_type}}" in paths
    assert api.get(f"{settings.api_prefix}/jobs/{account_id}").status_code == 200


def test_start_for_unknown_account_is_404(api):
    response = api.post("/api/jobs/ghost/start", json={"user_data": "a@x.com"})

    assert response.status_code == 404


def test_invalid_transitions_are_409(api, account_id):
    assert api.post(f"/api/jobs/{account_id}/pause").status_code == 409
    assert api.post(f"/api/jobs/{account_id}/resume").status_code == 409
    assert api.post(f"/api/jobs/{account_id}/stop").status_code == 409


def test_pause_resume_and_stop_over_http(api, account_id):
    users = "\n".join(f"user{i}@x.com" for i in range(5))
    api.post(f"/api/jobs/{account_id}/start", json={"user_data": users, "delay_in_seconds": 50})

    paused = api.post(f"/api/jobs/{account_id}/pause")
    assert paused.status_code == 200
    assert paused.json()["status"] == "paused"
    assert api.post(f"/api/jobs/{account_id}/start", json={"user_data": users}).status_code == 409
    assert api.delete(f"/api/jobs/{account_id}").status_code == 409

    assert api.post(f"/api/jobs/{account_id}/resume").json()["status"] == "running"
    stopping = api.post(f"/api/jobs/{account_id}/stop")
    assert stopping.status_code == 200
    assert stopping.json()["stop_requested"] is True
    assert stopping.json()["status"] == "running"

    job = wait_for_status(api, account_id, "stopped")
    assert job["stop_requested"] is False
    assert len(job["results"]) <= 5
    assert job["success_count"] + job["fail_count"] == len(job["results"])

    cleared = api.delete(f"/api/jobs/{account_id}").json()
    assert cleared["status"] == "idle"
    assert cleared["results"] == []


def test_generate_passwords_endpoint(api, account_id):
    api.patch(f"/api/jobs/{account_id}/settings", json={"user_data": "a@x.com,A,One", "send_invites": False})

    job = api.post(f"/api/jobs/{account_id}/generate-passwords").json()

    assert job["pending_input"]["user_data"].startswith("a@x.com,A,One,!A1")


def test_import_single_user(api, account_id):
    ok = api.post("/api/import-user", json={
        "account_id": account_id,
        "user": {"email": "solo@x.com", "first_name": "So", "last_name": "Lo"},
        "send_invites": True
    })
    assert ok.status_code == 200
    assert ok.json()["status"] == "success"

    rejected = api.post("/api/import-user", json={
        "account_id": account_id,
        "user": {"email": "taken@x.com"},
        "send_invites": True
    })
    assert rejected.status_code == 400
    assert rejected.json()["message"] == "Email taken"

    no_password = api.post("/api/import-user", json={
        "account_id": account_id,
        "user": {"email": "pw@x.com"},
        "send_invites": False
    })
    assert no_password.status_code == 400

    assert api.fake_identity.calls[0] == ("solo@x.com", "sk_test", True)
