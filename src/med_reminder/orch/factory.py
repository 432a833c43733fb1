# src/med_reminder/orch/factory.py
# -*- coding: utf-8 -*-

"""
Builds a MedicationCheckOrchestrator wired to the real collaborators
described by utils.settings and config/check_config.yaml.
"""

import logging
from functools import lru_cache
from typing import Optional

from med_reminder.broker.redis_manager import get_redis_manager
from med_reminder.clients import (
    HttpMailer,
    Mailer,
    SendGridMailer,
    SupabaseScheduleRepository,
)
from med_reminder.exceptions import ConfigurationError
from med_reminder.orch.check_runner import MedicationCheckOrchestrator
from med_reminder.orch.dispatcher import DEFAULT_DISPATCH_WORKERS, NotificationDispatcher
from med_reminder.orch.models import CheckPolicy, load_check_policy
from med_reminder.orch.utils.notification_tracker import NotificationTracker
from med_reminder.utils import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_check_policy() -> CheckPolicy:
    return load_check_policy(settings.CHECK_CONFIG_PATH)


def build_mailer(backend: Optional[str] = None) -> Mailer:
    backend = (backend or settings.MAILER_BACKEND).lower()
    if backend == "relay":
        return HttpMailer(settings.EMAIL_RELAY_URL, token=settings.CRON_SECRET)
    if backend == "sendgrid":
        return SendGridMailer(settings.SENDGRID_API_KEY)
    raise ConfigurationError(
        f"Unknown MAILER_BACKEND '{backend}'. Expected 'relay' or 'sendgrid'."
    )


def build_orchestrator(policy: Optional[CheckPolicy] = None) -> MedicationCheckOrchestrator:
    policy = policy or get_check_policy()

    repository = SupabaseScheduleRepository(
        settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY
    )
    dispatcher = NotificationDispatcher(
        build_mailer(),
        sender=settings.MAIL_FROM,
        timeout_seconds=policy.dispatch_timeout_seconds,
        max_workers=policy.max_concurrent_dispatches or DEFAULT_DISPATCH_WORKERS,
    )

    tracker = None
    if policy.dedupe_enabled:
        tracker = NotificationTracker(
            get_redis_manager().redis, ttl_seconds=policy.dedupe_ttl_seconds
        )
        logger.info("Notification log enabled; repeat alerts will be suppressed.")

    return MedicationCheckOrchestrator(repository, dispatcher, policy, tracker)
