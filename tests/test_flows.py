import asyncio
import datetime

import pytest
from prefect.testing.utilities import prefect_test_harness
from fakes import FakeMailer, FakeRepository, make_record

from med_reminder.exceptions import DataFetchError
from med_reminder.orch.check_runner import MedicationCheckOrchestrator
from med_reminder.orch.dispatcher import NotificationDispatcher
from med_reminder.orch.flows import medication_check_flows
from med_reminder.orch.flows import (
    immediate_reminder_check_flow,
    missed_medication_check_flow,
)

AS_OF = datetime.datetime(2026, 10, 19, 8, 30)


@pytest.fixture(autouse=True, scope="module")
def prefect_backend():
    with prefect_test_harness():
        yield


@pytest.fixture
def wire(monkeypatch):
    def _wire(repository, mailer):
        orchestrator = MedicationCheckOrchestrator(repository, NotificationDispatcher(mailer))
        monkeypatch.setattr(medication_check_flows, "build_orchestrator", lambda: orchestrator)

    return _wire


def test_missed_flow_runs_check(wire):
    mailer = FakeMailer()
    wire(FakeRepository([make_record()]), mailer)

    body = asyncio.run(missed_medication_check_flow(as_of=AS_OF))

    assert body["success"] is True
    assert body["emailsSent"] == 1
    assert body["missedMedications"] == 1
    assert mailer.sent[0].subject.startswith("Missed Medication Alert")


def test_immediate_flow_runs_check(wire):
    mailer = FakeMailer()
    wire(FakeRepository([make_record(scheduled_time="08:29")]), mailer)

    body = asyncio.run(immediate_reminder_check_flow(as_of=AS_OF))

    assert body["emailsSent"] == 1
    assert body["medicationsChecked"] == 1


def test_flow_reports_fetch_failure(wire):
    wire(FakeRepository(error=DataFetchError("store down")), FakeMailer())

    body = asyncio.run(missed_medication_check_flow(as_of=AS_OF))

    assert body["success"] is False
    assert body["message"] == "Database error"
