# src/med_reminder/clients/mailers.py
# -*- coding: utf-8 -*-

"""
Email delivery clients.

- HttpMailer posts {to, from, subject, html} to a relay endpoint (by default
  this service's own /api/send-email).
- SendGridMailer calls the SendGrid v3 mail/send API directly; the relay
  endpoint itself uses it.
"""

import logging
from typing import Optional

import requests

from med_reminder.clients.base import Mailer
from med_reminder.exceptions import ConfigurationError, DispatchError
from med_reminder.orch.models import EmailMessage

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class HttpMailer(Mailer):
    DEFAULT_TIMEOUT_SECONDS = 10.0

    def __init__(
        self,
        relay_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if not relay_url:
            raise ConfigurationError("EMAIL_RELAY_URL is not set.")
        self.relay_url = relay_url
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def send_email(self, message: EmailMessage) -> None:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["x-cron-token"] = self.token
        try:
            response = self.session.post(
                self.relay_url,
                json=message.to_payload(),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DispatchError(f"Email relay unreachable: {e}") from e

        if not response.ok:
            raise DispatchError(
                f"Email sending failed: {response.status_code} {response.reason} - {response.text[:200]}"
            )
        logger.debug(f"Relay accepted email to {message.to}.")

    def close(self) -> None:
        self.session.close()


class SendGridMailer(Mailer):
    DEFAULT_TIMEOUT_SECONDS = 10.0

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        send_url: str = SENDGRID_SEND_URL,
    ):
        if not api_key:
            raise ConfigurationError("SENDGRID_API_KEY is not set.")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.send_url = send_url

    @staticmethod
    def build_body(message: EmailMessage) -> dict:
        return {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": message.sender},
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html}],
        }

    def send_email(self, message: EmailMessage) -> None:
        try:
            response = self.session.post(
                self.send_url,
                json=self.build_body(message),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DispatchError(f"SendGrid unreachable: {e}") from e

        # SendGrid answers 202 Accepted on success
        if not response.ok:
            raise DispatchError(
                f"SendGrid rejected email ({response.status_code}): {response.text[:200]}"
            )
        logger.info(f"SendGrid accepted email to {message.to}.")

    def close(self) -> None:
        self.session.close()
