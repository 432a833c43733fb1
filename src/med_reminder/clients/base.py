# src/med_reminder/clients/base.py
# -*- coding: utf-8 -*-

"""
Capability interfaces injected into the check orchestrator. Concrete clients
talk to the schedule store and the email provider; tests substitute fakes.
"""

import abc
import datetime
from typing import List

from med_reminder.orch.models import EmailMessage, MedicationSchedule


class ScheduleRepository(abc.ABC):
    """Source of candidate (medication, schedule, user, caretaker) rows."""

    @abc.abstractmethod
    def fetch_due_candidates(self, target_date: datetime.date) -> List[MedicationSchedule]:
        """
        Returns every schedule row for ``target_date``.
        Must raise DataFetchError when the store errors.
        """
        raise NotImplementedError

    def close(self) -> None:
        pass


class Mailer(abc.ABC):
    """Opaque, possibly failing email delivery."""

    @abc.abstractmethod
    def send_email(self, message: EmailMessage) -> None:
        """Delivers one message or raises DispatchError."""
        raise NotImplementedError

    def close(self) -> None:
        pass
