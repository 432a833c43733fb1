# src/med_reminder/serve.py

"""
Registers both check flows as cron deployments and serves them.

    python -m med_reminder.serve
"""

from prefect import serve

from med_reminder.utils.logger import logger
from med_reminder.orch.factory import get_check_policy
from med_reminder.orch.flows import (
    immediate_reminder_check_flow,
    missed_medication_check_flow,
)


def main():
    policy = get_check_policy()
    logger.info(
        f"⏳ Serving medication checks (missed: '{policy.missed_check_cron}', immediate: '{policy.immediate_check_cron}')."
    )
    serve(
        missed_medication_check_flow.to_deployment(
            name="missed-medication-check", cron=policy.missed_check_cron
        ),
        immediate_reminder_check_flow.to_deployment(
            name="immediate-medication-reminder", cron=policy.immediate_check_cron
        ),
    )


if __name__ == "__main__":
    main()
