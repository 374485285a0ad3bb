# tests/test_validation_api.py
from fastapi.testclient import TestClient
from main import create_app
from util.errors import ProviderRejected

START = "/api/start-validation"
STATUS = "/api/get-validation-status"


def test_start_validation_accepts_and_completes(client, wait_for_terminal):
    res = client.post(START, json={"apiKey": "sk-1", "provider": "OpenAI"})
    assert res.status_code == 202
    job_id = res.json()["jobId"]

    body = wait_for_terminal(job_id)
    assert body == {"id": job_id, "status": "success", "models": ["gpt-4o", "gpt-4"]}


def test_status_of_finished_job_is_idempotent(client, wait_for_terminal):
    job_id = client.post(START, json={"apiKey": "k", "provider": "google"}).json()["jobId"]
    first = wait_for_terminal(job_id)
    again = client.get(STATUS, params={"jobId": job_id})
    assert again.status_code == 200
    assert again.json() == first


def test_unsupported_provider_becomes_job_error(client, wait_for_terminal):
    res = client.post(START, json={"apiKey": "k", "provider": "banana"})
    assert res.status_code == 202
    body = wait_for_terminal(res.json()["jobId"])
    assert body["status"] == "error"
    assert body["message"] == "Unsupported provider: banana"
    assert "models" not in body


def test_provider_failure_is_reported_through_status(client, openai_fake, wait_for_terminal):
    openai_fake.error = ProviderRejected("Incorrect API key provided", 401)
    job_id = client.post(START, json={"apiKey": "bad", "provider": "openai"}).json()["jobId"]
    body = wait_for_terminal(job_id)
    assert body["status"] == "error"
    assert body["message"] == "Incorrect API key provided"


def test_missing_provider_is_rejected_before_any_job(client, jobs):
    res = client.post(START, json={"apiKey": "k"})
    assert res.status_code == 400
    assert res.json()["error"] == "Missing or invalid request fields."
    assert "provider" in res.json()["details"]
    assert len(jobs) == 0


def test_empty_api_key_is_rejected(client, jobs):
    res = client.post(START, json={"apiKey": "", "provider": "OpenAI"})
    assert res.status_code == 400
    assert len(jobs) == 0


def test_invalid_json_body(client):
    res = client.post(START, content=b"{not json", headers={"content-type": "application/json"})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid JSON in request body."}


def test_unknown_job_is_404(client):
    res = client.get(STATUS, params={"jobId": "does-not-exist"})
    assert res.status_code == 404
    assert res.json()["error"] == "Job not found."


def test_status_without_job_id_is_400(client):
    res = client.get(STATUS)
    assert res.status_code == 400
    assert res.json() == {"error": "Missing jobId parameter."}


def test_wrong_method_is_405(client):
    res = client.get(START)
    assert res.status_code == 405
    assert res.json() == {"error": "Method Not Allowed"}
    assert "POST" in res.headers.get("allow", "")


def test_validate_key_returns_models(client):
    res = client.post("/api/validate-key", json={"apiKey": "k", "provider": "Google"})
    assert res.status_code == 200
    assert res.json() == {"models": ["gemini-1.5-pro"]}


def test_validate_key_unsupported_provider_is_400(client):
    res = client.post("/api/validate-key", json={"apiKey": "k", "provider": "banana"})
    assert res.status_code == 400
    assert res.json() == {"error": "Unsupported provider: banana"}


def test_validate_key_upstream_error_is_500_with_details(client, google_fake):
    google_fake.error = ProviderRejected("API key not valid. Please pass a valid API key.", 400)
    res = client.post("/api/validate-key", json={"apiKey": "k", "provider": "google"})
    assert res.status_code == 500
    assert res.json() == {
        "error": "Provider rejected the request.",
        "details": "API key not valid. Please pass a valid API key.",
    }


def test_check_key(client, openai_fake):
    res = client.post("/api/check-key", json={"apiKey": "k", "provider": "openai"})
    assert res.json() == {"valid": True}
    openai_fake.valid = False
    res = client.post("/api/check-key", json={"apiKey": "k", "provider": "openai"})
    assert res.status_code == 200
    assert res.json() == {"valid": False}


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


def test_unexpected_error_returns_500_envelope(lenient_client, openai_fake):
    openai_fake.error = RuntimeError("boom")
    res = lenient_client.post("/api/validate-key", json={"apiKey": "k", "provider": "openai"})
    assert res.status_code == 500
    assert res.json() == {"error": "Internal Server Error", "details": "boom"}


def test_sync_timeout_returns_500_with_details(registry, jobs, openai_fake):
    openai_fake.delay = 5
    app = create_app(providers=registry, jobs=jobs, validation_timeout=0.05)
    with TestClient(app) as c:
        res = c.post("/api/validate-key", json={"apiKey": "k", "provider": "openai"})
    assert res.status_code == 500
    assert res.json() == {
        "error": "Provider request timed out.",
        "details": "OpenAI did not answer within 0.05s",
    }
