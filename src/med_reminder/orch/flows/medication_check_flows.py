# src/med_reminder/orch/flows/medication_check_flows.py

import asyncio
from datetime import datetime
from typing import Any, Dict, Optional

from prefect import flow, get_run_logger

from med_reminder.orch.factory import build_orchestrator
from med_reminder.orch.models import CheckMode


async def _run_check_flow(mode: CheckMode, as_of: Optional[datetime]) -> Dict[str, Any]:
    run_logger = get_run_logger()
    log_prefix = f"[{mode.name} CHECK FLOW]"

    orchestrator = build_orchestrator()
    try:
        result = await orchestrator.run_check(mode, as_of=as_of)
    finally:
        orchestrator.close()

    if result.success:
        run_logger.info(
            f"{log_prefix} {result.message} (matched={result.candidates_matched}, sent={result.emails_sent})"
        )
    else:
        run_logger.error(f"{log_prefix} {result.message}: {result.error}")
    return result.to_response()


@flow(name="Scheduled - Missed Medication Check", retries=0)
async def missed_medication_check_flow(as_of: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Alerts caretakers about doses still untaken 30+ minutes after schedule.
    Meant to run every minute; see serve.py.
    """
    return await _run_check_flow(CheckMode.MISSED, as_of)


@flow(name="Scheduled - Immediate Medication Reminder", retries=0)
async def immediate_reminder_check_flow(as_of: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Reminds caretakers about doses scheduled within the current minute (+/- 1).
    """
    return await _run_check_flow(CheckMode.IMMEDIATE, as_of)


if __name__ == "__main__":
    asyncio.run(missed_medication_check_flow())
