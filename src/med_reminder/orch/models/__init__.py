# src/med_reminder/orch/models/__init__.py
# -*- coding: utf-8 -*-

"""
Pydantic models shared by the check pipeline (classifier, grouper,
dispatcher, orchestrator) and the HTTP layer.
"""

from .medications import (
    CheckMode,
    CheckResult,
    Classification,
    EmailMessage,
    MedicationItem,
    MedicationSchedule,
    NotificationBatch,
)
from .policy import CheckPolicy, load_check_policy

__all__ = [
    "CheckMode",
    "CheckPolicy",
    "CheckResult",
    "Classification",
    "EmailMessage",
    "MedicationItem",
    "MedicationSchedule",
    "NotificationBatch",
    "load_check_policy",
]
