# src/med_reminder/orch/models/medications.py
# -*- coding: utf-8 -*-

"""
Pydantic models for the records flowing through one medication check run:
fetched schedule rows, per-user notification batches, rendered emails and
the run summary.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class CheckMode(str, Enum):
    IMMEDIATE = "immediate-reminder"
    MISSED = "missed-alert"


class Classification(str, Enum):
    DUE_NOW = "due-now"
    MISSED = "missed"
    NOT_YET = "not-yet"


class MedicationSchedule(BaseModel):
    """
    One (medication, schedule, user, caretaker) row for the target date, as
    returned by the candidate query. Read-only within a run.

    The store names dosage and time ``medication_dosage`` / ``medication_time``;
    both spellings are accepted.
    """

    medication_id: str = Field(..., min_length=1)
    medication_name: str
    dosage: str = Field(default="", validation_alias="medication_dosage")
    scheduled_time: str = Field(..., validation_alias="medication_time")
    user_id: str = Field(..., min_length=1)
    user_email: str
    user_full_name: Optional[str] = None
    caretaker_email: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @field_validator("medication_id", "user_id", mode="before")
    @classmethod
    def coerce_identifier(cls, value: Any) -> Any:
        """Store ids may be UUID strings or integers."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("user_full_name", "caretaker_email", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MedicationItem(BaseModel):
    id: str
    name: str
    dosage: str
    time: str


class NotificationBatch(BaseModel):
    """All matched medications for one user, sent to their caretaker as one email."""

    user_id: str
    user_email: str
    user_full_name: Optional[str] = None
    caretaker_email: Optional[str] = None
    medications: List[MedicationItem] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.user_full_name or self.user_email

    @property
    def has_recipient(self) -> bool:
        return bool(self.caretaker_email)


class EmailMessage(BaseModel):
    to: str
    sender: str = Field(..., alias="from")
    subject: str
    html: str

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, str]:
        """JSON body used by the relay endpoint: {to, from, subject, html}."""
        return self.model_dump(by_alias=True)


# Response key carrying the matched count, per mode
MODE_COUNT_KEYS: Dict[CheckMode, str] = {
    CheckMode.MISSED: "missedMedications",
    CheckMode.IMMEDIATE: "medicationsChecked",
}


class CheckResult(BaseModel):
    """The only externally observable output of one orchestration run."""

    success: bool
    message: str
    emails_sent: int = Field(default=0, ge=0, serialization_alias="emailsSent")
    candidates_matched: int = Field(
        default=0, ge=0, serialization_alias="candidatesMatched"
    )
    error: Optional[str] = None
    mode: Optional[CheckMode] = None

    def to_response(self) -> Dict[str, Any]:
        """Shape returned by the HTTP trigger endpoints."""
        body: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "emailsSent": self.emails_sent,
        }
        if self.mode is not None:
            body[MODE_COUNT_KEYS[self.mode]] = self.candidates_matched
        if self.error is not None:
            body["error"] = self.error
        return body
