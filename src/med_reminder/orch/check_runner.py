# src/med_reminder/orch/check_runner.py
# -*- coding: utf-8 -*-

"""
One medication check run: fetch -> classify -> group -> dispatch -> summarise.

The orchestrator holds no state between runs. Without a NotificationTracker a
repeated run in the same window sends the same emails again; callers get
at-least-once delivery, not exactly-once.
"""

import asyncio
import datetime
import logging
from typing import Dict, List, Optional, Union

from med_reminder.clients.base import ScheduleRepository
from med_reminder.exceptions import DataFetchError, MalformedScheduleError
from med_reminder.orch.dispatcher import NotificationDispatcher
from med_reminder.orch.models import (
    CheckMode,
    CheckPolicy,
    CheckResult,
    MedicationSchedule,
    NotificationBatch,
)
from med_reminder.orch.utils.grouping import group_by_user
from med_reminder.orch.utils.notification_tracker import NotificationTracker
from med_reminder.orch.utils.time_window import classify, matches_mode

logger = logging.getLogger(__name__)

RUN_MESSAGES: Dict[CheckMode, Dict[str, str]] = {
    CheckMode.MISSED: {
        "empty": "No missed medications found",
        "no_match": "No medications past grace period",
        "done": "Checked medications and sent {sent} email alerts",
    },
    CheckMode.IMMEDIATE: {
        "empty": "No medications found for reminder check",
        "no_match": "No medications due for reminder right now",
        "done": "Sent {sent} immediate reminder emails",
    },
}


class MedicationCheckOrchestrator:
    def __init__(
        self,
        repository: ScheduleRepository,
        dispatcher: NotificationDispatcher,
        policy: Optional[CheckPolicy] = None,
        tracker: Optional[NotificationTracker] = None,
    ):
        self.repository = repository
        self.dispatcher = dispatcher
        self.policy = policy or CheckPolicy()
        self.tracker = tracker

    async def run_check(
        self,
        mode: Union[CheckMode, str],
        as_of: Optional[datetime.datetime] = None,
    ) -> CheckResult:
        """
        Runs one check and always returns a CheckResult.

        success=False only for run-level failures (store errors, unexpected
        exceptions). Individual send failures just lower ``emails_sent``.
        """
        mode = CheckMode(mode)
        now = self.policy.localize(as_of) if as_of else self.policy.now()
        log_prefix = f"[{mode.name} CHECK] ({now:%Y-%m-%d %H:%M})"

        try:
            return await self._run(mode, now, log_prefix)
        except DataFetchError as e:
            logger.error(f"{log_prefix} Error fetching medications: {e}")
            return CheckResult(
                success=False, message="Database error", error=str(e), mode=mode
            )
        except Exception as e:
            logger.exception(f"{log_prefix} Unexpected error during check: {e}")
            return CheckResult(
                success=False, message="Internal server error", error=str(e), mode=mode
            )

    async def _run(
        self, mode: CheckMode, now: datetime.datetime, log_prefix: str
    ) -> CheckResult:
        messages = RUN_MESSAGES[mode]
        target_date = now.date()

        logger.info(f"{log_prefix} Checking medications for {target_date}.")
        candidates = await asyncio.to_thread(
            self.repository.fetch_due_candidates, target_date
        )

        if not candidates:
            logger.info(f"{log_prefix} {messages['empty']}.")
            return CheckResult(success=True, message=messages["empty"], mode=mode)

        matches = self.select_matches(candidates, mode, now)
        if self.tracker is not None:
            matches = await asyncio.to_thread(
                self._drop_already_notified, matches, mode, target_date, log_prefix
            )

        logger.info(
            f"{log_prefix} {len(matches)} of {len(candidates)} candidate(s) matched."
        )
        if not matches:
            return CheckResult(success=True, message=messages["no_match"], mode=mode)

        batches = group_by_user(matches)
        skipped = sum(1 for batch in batches.values() if not batch.has_recipient)
        if skipped:
            logger.info(f"{log_prefix} {skipped} user(s) have no caretaker email.")

        outcomes = await self._fan_out(list(batches.values()), mode, log_prefix)
        sent = sum(1 for ok in outcomes if ok)

        if self.tracker is not None:
            delivered = [
                batch for batch, ok in zip(batches.values(), outcomes) if ok
            ]
            await asyncio.to_thread(self._record_sent, delivered, mode, target_date)

        message = messages["done"].format(sent=sent)
        logger.info(f"{log_prefix} {message} ({len(batches)} batch(es)).")
        return CheckResult(
            success=True,
            message=message,
            emails_sent=sent,
            candidates_matched=len(matches),
            mode=mode,
        )

    def select_matches(
        self,
        candidates: List[MedicationSchedule],
        mode: CheckMode,
        now: datetime.datetime,
    ) -> List[MedicationSchedule]:
        """Classifies every candidate, skipping malformed ones with a warning."""
        matches: List[MedicationSchedule] = []
        for record in candidates:
            try:
                outcome = classify(
                    record.scheduled_time,
                    now,
                    mode,
                    grace_minutes=self.policy.grace_minutes,
                    tolerance_minutes=self.policy.tolerance_minutes,
                )
            except MalformedScheduleError as e:
                logger.warning(
                    f"Skipping medication {record.medication_id} (user {record.user_id}): {e}"
                )
                continue

            logger.debug(
                f"Medication {record.medication_name} at {record.scheduled_time}: {outcome.value}"
            )
            if matches_mode(outcome, mode):
                matches.append(record)
        return matches

    def _drop_already_notified(
        self,
        matches: List[MedicationSchedule],
        mode: CheckMode,
        target_date: datetime.date,
        log_prefix: str,
    ) -> List[MedicationSchedule]:
        fresh = [
            record
            for record in matches
            if not self.tracker.is_notified(record.medication_id, target_date, mode)
        ]
        if len(fresh) != len(matches):
            logger.info(
                f"{log_prefix} {len(matches) - len(fresh)} medication(s) already notified today."
            )
        return fresh

    def _record_sent(
        self,
        batches: List[NotificationBatch],
        mode: CheckMode,
        target_date: datetime.date,
    ) -> None:
        for batch in batches:
            for med in batch.medications:
                self.tracker.mark_notified(med.id, target_date, mode)

    async def _fan_out(
        self, batches: List[NotificationBatch], mode: CheckMode, log_prefix: str
    ) -> List[bool]:
        """Sends every batch concurrently; one failure never cancels the others."""
        limit = self.policy.max_concurrent_dispatches
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def _send(batch: NotificationBatch) -> bool:
            if semaphore is None:
                return await self.dispatcher.dispatch(batch, mode)
            async with semaphore:
                return await self.dispatcher.dispatch(batch, mode)

        results = await asyncio.gather(
            *(_send(batch) for batch in batches), return_exceptions=True
        )

        outcomes: List[bool] = []
        for batch, result in zip(batches, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"{log_prefix} Dispatch for user {batch.user_id} raised {result!r}."
                )
                outcomes.append(False)
            else:
                outcomes.append(bool(result))
        return outcomes

    def close(self) -> None:
        self.repository.close()
        self.dispatcher.close()
