import pytest
from fastapi.testclient import TestClient
from fakes import FakeMailer, FakeRepository, make_record

from med_reminder.api.routers import checks, email
from med_reminder.app import app
from med_reminder.exceptions import DataFetchError
from med_reminder.orch.check_runner import MedicationCheckOrchestrator
from med_reminder.orch.dispatcher import NotificationDispatcher
from med_reminder.orch.models import CheckPolicy
from med_reminder.utils import settings

SECRET = "s3cret"
AUTH = {"x-cron-token": SECRET}

# Windows wide enough to match at any wall-clock time
ALWAYS_MATCH = CheckPolicy(grace_minutes=0, tolerance_minutes=24 * 60)


def _record(**overrides):
    overrides.setdefault("scheduled_time", "00:00")
    return make_record(**overrides)


class Harness:
    def __init__(self):
        self.repository = FakeRepository()
        self.mailer = FakeMailer()
        self.relay_mailer = FakeMailer()
        self.orchestrator_builds = 0

    def get_orchestrator(self):
        self.orchestrator_builds += 1
        return MedicationCheckOrchestrator(
            self.repository, NotificationDispatcher(self.mailer), policy=ALWAYS_MATCH
        )


@pytest.fixture
def harness(monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", SECRET)
    h = Harness()
    app.dependency_overrides[checks.get_orchestrator] = h.get_orchestrator
    app.dependency_overrides[email.get_relay_mailer] = lambda: h.relay_mailer
    yield h
    app.dependency_overrides.clear()


@pytest.fixture
def client(harness):
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize("path", ["/api/check-medications", "/api/send-reminders"])
@pytest.mark.parametrize("headers", [{}, {"x-cron-token": "wrong"}])
def test_bad_token_is_rejected_without_side_effects(client, harness, path, headers):
    harness.repository.records = [_record()]

    response = client.post(path, headers=headers)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Unauthorized"}
    assert harness.orchestrator_builds == 0
    assert harness.repository.calls == []


def test_unset_secret_rejects_everything(client, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", None)

    response = client.post("/api/check-medications", headers={"x-cron-token": ""})

    assert response.status_code == 401


@pytest.mark.parametrize("path", ["/api/check-medications", "/api/send-reminders"])
def test_non_post_is_method_not_allowed(client, path):
    assert client.get(path, headers=AUTH).status_code == 405


def test_missed_check_returns_summary(client, harness):
    harness.repository.records = [
        _record(medication_id="m1"),
        _record(medication_id="m2", medication_name="Metformin"),
    ]

    response = client.post("/api/check-medications", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Checked medications and sent 1 email alerts",
        "emailsSent": 1,
        "missedMedications": 2,
    }
    assert len(harness.mailer.sent) == 1


def test_immediate_check_reports_medications_checked(client, harness):
    harness.repository.records = [_record()]

    response = client.post("/api/send-reminders", headers=AUTH)

    body = response.json()
    assert response.status_code == 200
    assert body["emailsSent"] == 1
    assert body["medicationsChecked"] == 1
    assert harness.mailer.sent[0].subject == "Medication Reminder - Ada Lovelace"


def test_empty_day_is_success(client):
    response = client.post("/api/check-medications", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "No missed medications found",
        "emailsSent": 0,
        "missedMedications": 0,
    }


def test_partial_failure_is_still_200(client, harness):
    harness.repository.records = [
        _record(user_id="u1", caretaker_email="ok@example.com"),
        _record(user_id="u2", caretaker_email="bad@example.com"),
    ]
    harness.mailer.fail_for = {"bad@example.com"}

    response = client.post("/api/check-medications", headers=AUTH)

    assert response.status_code == 200
    assert response.json()["emailsSent"] == 1


def test_fetch_failure_is_500_with_detail(client, harness):
    harness.repository.error = DataFetchError("permission denied for function")

    response = client.post("/api/check-medications", headers=AUTH)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Database error"
    assert "permission denied" in body["error"]
    assert harness.mailer.attempts == []


# --- /api/send-email relay ---


def test_send_email_relays_message(client, harness):
    payload = {"to": "carer@example.com", "subject": "Hi", "html": "<p>x</p>"}

    response = client.post("/api/send-email", json=payload, headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {"message": "Email sent successfully"}
    sent = harness.relay_mailer.sent[0]
    assert sent.to == "carer@example.com"
    assert sent.sender == settings.MAIL_FROM


def test_send_email_keeps_explicit_sender(client, harness):
    payload = {"to": "c@example.com", "from": "alerts@example.com", "subject": "Hi", "html": "x"}

    client.post("/api/send-email", json=payload, headers=AUTH)

    assert harness.relay_mailer.sent[0].sender == "alerts@example.com"


def test_send_email_missing_fields_is_400(client, harness):
    response = client.post("/api/send-email", json={"to": "c@example.com"}, headers=AUTH)

    assert response.status_code == 400
    assert response.json() == {"message": "Missing required fields"}
    assert harness.relay_mailer.attempts == []


def test_send_email_provider_failure_is_500(client, harness):
    harness.relay_mailer.fail_for = {"c@example.com"}
    payload = {"to": "c@example.com", "subject": "Hi", "html": "x"}

    response = client.post("/api/send-email", json=payload, headers=AUTH)

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to send email"


def test_send_email_requires_token(client, harness):
    payload = {"to": "c@example.com", "subject": "Hi", "html": "x"}

    response = client.post("/api/send-email", json=payload)

    assert response.status_code == 401
    assert harness.relay_mailer.attempts == []


def test_orchestrator_is_closed_after_request(client, harness, monkeypatch):
    orchestrator = harness.get_orchestrator()
    monkeypatch.setattr(checks, "build_orchestrator", lambda: orchestrator)
    del app.dependency_overrides[checks.get_orchestrator]

    response = client.post("/api/check-medications", headers=AUTH)

    assert response.status_code == 200
    assert harness.repository.closed is True
    assert harness.mailer.closed is True


# --- /api/debug-env ---


def test_debug_env_reports_presence_without_values(client, monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    monkeypatch.setattr(settings, "SENDGRID_API_KEY", "SG.secret")

    response = client.post("/api/debug-env", headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "All configured"
    assert body["missing"] == []
    assert set(body["config"]) == {
        "supabase_url",
        "supabase_service_role_key",
        "sendgrid_api_key",
        "cron_secret",
    }
    for secret in ("service-role-key", "SG.secret", SECRET, "supabase.co"):
        assert secret not in response.text


def test_debug_env_lists_missing_settings(client, monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    monkeypatch.setattr(settings, "SENDGRID_API_KEY", None)

    body = client.post("/api/debug-env", headers=AUTH).json()

    assert body["status"] == "Missing configuration"
    assert body["missing"] == ["SENDGRID_API_KEY"]
    assert body["config"]["sendgrid_api_key"] == "❌ Missing"
    assert body["config"]["cron_secret"] == "✅ Set"


def test_debug_env_requires_token(client):
    assert client.post("/api/debug-env").status_code == 401
    assert client.get("/api/debug-env", headers=AUTH).status_code == 405
