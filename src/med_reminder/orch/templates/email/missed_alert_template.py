# src/med_reminder/orch/templates/email/missed_alert_template.py
# -*- coding: utf-8 -*-

"""Template for the caretaker email sent when doses are past the grace period."""

import html
import logging
from typing import List

from med_reminder.orch.models import EmailMessage, MedicationItem

logger = logging.getLogger(__name__)


class MissedAlertEmailTemplate:
    """
    Builds the "Missed Medication Alert" email for one user's batch.
    Used by the NotificationDispatcher in missed-alert mode.
    """

    SUBJECT_PREFIX = "Missed Medication Alert"

    def __init__(
        self,
        display_name: str,
        recipient: str,
        medications: List[MedicationItem],
        sender: str,
    ):
        self.display_name = display_name
        self.recipient = recipient
        self.medications = medications
        self.sender = sender
        if not self.medications:
            logger.warning("MissedAlertEmailTemplate initialized with no medications.")

    def _render_items(self) -> str:
        return "".join(
            f"<li><strong>{html.escape(med.name)}</strong> ({html.escape(med.dosage)})"
            f" - was scheduled for {html.escape(med.time)}</li>"
            for med in self.medications
        )

    def build_payload(self) -> EmailMessage:
        name = html.escape(self.display_name)
        body = (
            f"<h2>{self.SUBJECT_PREFIX}</h2>"
            "<p>Dear Caretaker,</p>"
            "<p>This is an urgent alert from the Medication Reminder App.</p>"
            f"<p>The following medications were <strong>MISSED</strong> today by <strong>{name}</strong>:</p>"
            f"<ul>{self._render_items()}</ul>"
            "<p><strong>Please check in with them immediately to ensure they take their missed medications.</strong></p>"
            "<p>Best regards,<br>Medication Reminder App</p>"
        )
        return EmailMessage(
            to=self.recipient,
            sender=self.sender,
            subject=f"{self.SUBJECT_PREFIX} - {self.display_name}",
            html=body,
        )
