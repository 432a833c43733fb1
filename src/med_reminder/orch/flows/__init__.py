# src/med_reminder/orch/flows/__init__.py
# -*- coding: utf-8 -*-

"""
Prefect flows that run the medication checks on a schedule.
"""

from .medication_check_flows import (
    immediate_reminder_check_flow,
    missed_medication_check_flow,
)

__all__ = [
    "immediate_reminder_check_flow",
    "missed_medication_check_flow",
]
