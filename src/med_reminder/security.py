import hmac
from typing import Optional

from fastapi import Header

from med_reminder.exceptions import AuthError
from med_reminder.utils import settings
from med_reminder.utils.logger import logger

CRON_TOKEN_HEADER = "x-cron-token"


def verify_cron_token(x_cron_token: Optional[str] = Header(None)) -> None:
    """
    Shared-secret check for the trigger endpoints. An unset CRON_SECRET
    rejects every request.
    """
    expected = settings.CRON_SECRET
    if not expected:
        logger.warning("⚠️ CRON_SECRET is not set; rejecting trigger request")
        raise AuthError("Trigger secret is not configured")

    if not x_cron_token or not hmac.compare_digest(
        x_cron_token.encode("utf-8"), expected.encode("utf-8")
    ):
        raise AuthError("Invalid or missing cron token")
