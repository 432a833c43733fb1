# src/med_reminder/orch/templates/email/__init__.py
# -*- coding: utf-8 -*-

"""
Caretaker email templates, one per check mode.
"""

from typing import Dict, Type

from med_reminder.orch.models import CheckMode

from .immediate_reminder_template import ImmediateReminderEmailTemplate
from .missed_alert_template import MissedAlertEmailTemplate

EMAIL_TEMPLATE_MAP: Dict[CheckMode, Type] = {
    CheckMode.IMMEDIATE: ImmediateReminderEmailTemplate,
    CheckMode.MISSED: MissedAlertEmailTemplate,
}

__all__ = [
    "EMAIL_TEMPLATE_MAP",
    "ImmediateReminderEmailTemplate",
    "MissedAlertEmailTemplate",
]
