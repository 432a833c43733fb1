# src/med_reminder/orch/dispatcher.py
# -*- coding: utf-8 -*-

"""
Renders one caretaker email per NotificationBatch and hands it to the Mailer.

dispatch() never raises: a missing address, a timeout, a DispatchError or any
other failure is logged and reported as False, so one bad recipient cannot
abort the rest of the run. Exactly one send attempt is made per call; retries
belong to the mailer or the caller's schedule.

Sends run on the dispatcher's own worker pool. The per-send timeout starts when
a worker picks the send up, so a batch waiting behind a busy pool is never
charged for the wait.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Type

from med_reminder.clients.base import Mailer
from med_reminder.exceptions import DispatchError
from med_reminder.orch.models import CheckMode, EmailMessage, NotificationBatch
from med_reminder.orch.models.policy import DEFAULT_DISPATCH_TIMEOUT_SECONDS
from med_reminder.orch.templates.email import EMAIL_TEMPLATE_MAP
from med_reminder.utils.settings import MAIL_FROM

logger = logging.getLogger(__name__)

DEFAULT_DISPATCH_WORKERS = 8


class NotificationDispatcher:
    def __init__(
        self,
        mailer: Mailer,
        sender: str = MAIL_FROM,
        timeout_seconds: float = DEFAULT_DISPATCH_TIMEOUT_SECONDS,
        template_map: Optional[Dict[CheckMode, Type]] = None,
        max_workers: int = DEFAULT_DISPATCH_WORKERS,
    ):
        self.mailer = mailer
        self.sender = sender
        self.timeout_seconds = timeout_seconds
        self.template_map = template_map or EMAIL_TEMPLATE_MAP
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="email-dispatch"
        )

    def render(self, batch: NotificationBatch, mode: CheckMode) -> EmailMessage:
        TemplateClass = self.template_map.get(mode)
        if TemplateClass is None:
            raise ValueError(f"No email template registered for mode '{mode}'.")
        template = TemplateClass(
            display_name=batch.display_name,
            recipient=batch.caretaker_email or "",
            medications=batch.medications,
            sender=self.sender,
        )
        return template.build_payload()

    async def _send(self, message: EmailMessage) -> None:
        loop = asyncio.get_running_loop()
        started = asyncio.Event()

        def _run():
            loop.call_soon_threadsafe(started.set)
            self.mailer.send_email(message)

        future = loop.run_in_executor(self._executor, _run)
        await started.wait()
        await asyncio.wait_for(future, timeout=self.timeout_seconds)

    async def dispatch(self, batch: NotificationBatch, mode: CheckMode) -> bool:
        log_prefix = f"[DISPATCH] (User: {batch.user_id}, Mode: {mode.value})"

        if not batch.has_recipient:
            logger.warning(f"{log_prefix} No caretaker email on file. Skipping.")
            return False

        try:
            message = self.render(batch, mode)
            await self._send(message)
        except asyncio.TimeoutError:
            logger.error(
                f"{log_prefix} Send to {batch.caretaker_email} timed out after {self.timeout_seconds}s."
            )
            return False
        except DispatchError as e:
            logger.error(f"{log_prefix} Failed to send email to {batch.caretaker_email}: {e}")
            return False
        except Exception as e:
            logger.exception(
                f"{log_prefix} Unexpected error sending email to {batch.caretaker_email}: {e}"
            )
            return False

        logger.info(
            f"{log_prefix} Email sent to {batch.caretaker_email} ({len(batch.medications)} medication(s))."
        )
        return True

    def close(self) -> None:
        """Releases the worker pool and the mailer's HTTP session."""
        self._executor.shutdown(wait=False)
        self.mailer.close()
