# src/med_reminder/orch/models/policy.py
# -*- coding: utf-8 -*-

"""
Tunable rules for a check run, loaded from config/check_config.yaml.
"""

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from med_reminder.exceptions import ConfigurationError
from med_reminder.utils.config_loader import ConfigLoader

logger = logging.getLogger(__name__)

DEFAULT_GRACE_MINUTES = 30
DEFAULT_TOLERANCE_MINUTES = 1
DEFAULT_DISPATCH_TIMEOUT_SECONDS = 10.0
DEFAULT_DEDUPE_TTL_SECONDS = 2 * 24 * 60 * 60


class CheckPolicy(BaseModel):
    grace_minutes: int = Field(default=DEFAULT_GRACE_MINUTES, ge=0)
    tolerance_minutes: int = Field(default=DEFAULT_TOLERANCE_MINUTES, ge=0)
    # IANA zone name; None means the host's local clock
    timezone: Optional[str] = None
    dispatch_timeout_seconds: float = Field(
        default=DEFAULT_DISPATCH_TIMEOUT_SECONDS, gt=0
    )
    # None or 0 means no limit on simultaneous sends
    max_concurrent_dispatches: Optional[int] = Field(default=None, ge=0)
    dedupe_enabled: bool = False
    dedupe_ttl_seconds: int = Field(default=DEFAULT_DEDUPE_TTL_SECONDS, gt=0)
    missed_check_cron: str = "* * * * *"
    immediate_check_cron: str = "* * * * *"

    model_config = {"extra": "ignore"}

    @field_validator("timezone", mode="before")
    @classmethod
    def validate_timezone(cls, value):
        if value is None or value == "":
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    def now(self) -> datetime:
        """Current wall-clock time under the configured timezone policy."""
        if self.timezone:
            return datetime.now(ZoneInfo(self.timezone))
        return datetime.now()

    def localize(self, moment: datetime) -> datetime:
        """Moves an aware datetime into the configured zone; naive values pass through."""
        if self.timezone and moment.tzinfo is not None:
            return moment.astimezone(ZoneInfo(self.timezone))
        return moment


def load_check_policy(config_path: str) -> CheckPolicy:
    """
    Builds a CheckPolicy from the YAML file at ``config_path``.
    A missing file yields the defaults; an unreadable or invalid one raises
    ConfigurationError.
    """
    try:
        loader = ConfigLoader(config_path)
    except FileNotFoundError:
        logger.warning(f"Check config not found at {config_path}. Using defaults.")
        return CheckPolicy()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    values = {
        "grace_minutes": loader.get("check.grace_minutes"),
        "tolerance_minutes": loader.get("check.tolerance_minutes"),
        "timezone": loader.get("check.timezone"),
        "dispatch_timeout_seconds": loader.get("dispatch.timeout_seconds"),
        "max_concurrent_dispatches": loader.get("dispatch.max_concurrent"),
        "dedupe_enabled": loader.get("dedupe.enabled"),
        "dedupe_ttl_seconds": loader.get("dedupe.ttl_seconds"),
        "missed_check_cron": loader.get("schedules.missed_check"),
        "immediate_check_cron": loader.get("schedules.immediate_check"),
    }
    try:
        policy = CheckPolicy(**{k: v for k, v in values.items() if v is not None})
    except ValueError as e:
        raise ConfigurationError(f"Invalid check config in {config_path}: {e}") from e

    logger.info(f"Loaded check policy from {config_path}.")
    return policy
