# src/med_reminder/orch/utils/notification_tracker.py
# -*- coding: utf-8 -*-

"""
Optional "already notified" log kept in Redis, keyed by
(medication_id, date, mode). When enabled, a medication that already produced
a confirmed send for that date and mode is filtered out of later runs.

Redis failures never block a run: lookups fail open (treated as not
notified) and writes are logged and reported as False.
"""

import datetime
import logging

from redis import Redis
from redis.exceptions import RedisError

from med_reminder.orch.models import CheckMode
from med_reminder.orch.models.policy import DEFAULT_DEDUPE_TTL_SECONDS

logger = logging.getLogger(__name__)

NOTIFICATION_KEY_PREFIX = "medication:notified:"


class NotificationTracker:
    def __init__(self, redis: Redis, ttl_seconds: int = DEFAULT_DEDUPE_TTL_SECONDS):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key_for(medication_id: str, date: datetime.date, mode: CheckMode) -> str:
        return f"{NOTIFICATION_KEY_PREFIX}{mode.value}:{date.isoformat()}:{medication_id}"

    def is_notified(
        self, medication_id: str, date: datetime.date, mode: CheckMode
    ) -> bool:
        key = self.key_for(medication_id, date, mode)
        try:
            return bool(self.redis.exists(key))
        except RedisError as e:
            logger.error(f"Failed to check notification log for {key}: {e}")
            return False

    def mark_notified(
        self, medication_id: str, date: datetime.date, mode: CheckMode
    ) -> bool:
        key = self.key_for(medication_id, date, mode)
        try:
            self.redis.set(key, "sent", ex=self.ttl_seconds)
            logger.debug(f"Recorded notification {key}.")
            return True
        except RedisError as e:
            logger.error(f"Failed to record notification {key}: {e}")
            return False
