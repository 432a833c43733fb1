# src/med_reminder/orch/templates/email/immediate_reminder_template.py
# -*- coding: utf-8 -*-

"""Template for the caretaker email sent when doses are due right now."""

import html
import logging
from typing import List

from med_reminder.orch.models import EmailMessage, MedicationItem

logger = logging.getLogger(__name__)


class ImmediateReminderEmailTemplate:
    """Builds the "Medication Reminder" email for one user's batch."""

    SUBJECT_PREFIX = "Medication Reminder"

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
            logger.warning(
                "ImmediateReminderEmailTemplate initialized with no medications."
            )

    def build_payload(self) -> EmailMessage:
        name = html.escape(self.display_name)
        items = "".join(
            f"<li><strong>{html.escape(med.name)}</strong> ({html.escape(med.dosage)})"
            f" - scheduled for {html.escape(med.time)}</li>"
            for med in self.medications
        )
        body = (
            f"<h2>{self.SUBJECT_PREFIX}</h2>"
            "<p>Dear Caretaker,</p>"
            "<p>This is a friendly reminder from the Medication Reminder App.</p>"
            f"<p>It's time for <strong>{name}</strong> to take the following medication(s):</p>"
            f"<ul>{items}</ul>"
            "<p>Please remind them to take their medication now.</p>"
            "<p>Best regards,<br>Medication Reminder App</p>"
        )
        return EmailMessage(
            to=self.recipient,
            sender=self.sender,
            subject=f"{self.SUBJECT_PREFIX} - {self.display_name}",
            html=body,
        )
