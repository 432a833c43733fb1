from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from med_reminder.orch.check_runner import MedicationCheckOrchestrator
from med_reminder.orch.factory import build_orchestrator
from med_reminder.orch.models import CheckMode, CheckResult
from med_reminder.security import verify_cron_token

router = APIRouter(prefix="/api", dependencies=[Depends(verify_cron_token)])


def get_orchestrator() -> Iterator[MedicationCheckOrchestrator]:
    orchestrator = build_orchestrator()
    try:
        yield orchestrator
    finally:
        orchestrator.close()


def _to_json(result: CheckResult) -> JSONResponse:
    # Partial dispatch failures still count as a completed run
    status_code = 200 if result.success else 500
    return JSONResponse(status_code=status_code, content=result.to_response())


@router.post("/check-medications")
async def check_medications_handler(
    orchestrator: MedicationCheckOrchestrator = Depends(get_orchestrator),
):
    """
    Missed-alert check: emails caretakers about doses 30+ minutes overdue.
    Called by an external scheduler with the x-cron-token header.
    """
    result = await orchestrator.run_check(CheckMode.MISSED)
    return _to_json(result)


@router.post("/send-reminders")
async def send_reminders_handler(
    orchestrator: MedicationCheckOrchestrator = Depends(get_orchestrator),
):
    """Immediate-reminder check: emails caretakers about doses due this minute."""
    result = await orchestrator.run_check(CheckMode.IMMEDIATE)
    return _to_json(result)
