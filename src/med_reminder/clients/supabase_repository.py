# src/med_reminder/clients/supabase_repository.py
# -*- coding: utf-8 -*-

"""
Fetches candidate schedule rows through the store's PostgREST RPC
``get_missed_medications(target_date)``.
"""

import datetime
import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from med_reminder.clients.base import ScheduleRepository
from med_reminder.exceptions import ConfigurationError, DataFetchError
from med_reminder.orch.models import MedicationSchedule

logger = logging.getLogger(__name__)

CANDIDATES_RPC = "get_missed_medications"


class SupabaseScheduleRepository(ScheduleRepository):
    DEFAULT_TIMEOUT_SECONDS = 10.0

    def __init__(
        self,
        base_url: str,
        service_key: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if not base_url:
            raise ConfigurationError("SUPABASE_URL is not set.")
        if not service_key:
            raise ConfigurationError("SUPABASE_SERVICE_ROLE_KEY is not set.")
        self.rpc_url = f"{base_url.rstrip('/')}/rest/v1/rpc/{CANDIDATES_RPC}"
        self.service_key = service_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self):
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json",
        }

    def fetch_due_candidates(self, target_date: datetime.date) -> List[MedicationSchedule]:
        payload = {"target_date": target_date.isoformat()}
        try:
            response = self.session.post(
                self.rpc_url, json=payload, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            raise DataFetchError(f"Schedule store unreachable: {e}") from e

        if not response.ok:
            raise DataFetchError(
                f"Candidate query failed ({response.status_code}): {response.text[:200]}"
            )

        try:
            rows = response.json()
        except ValueError as e:
            raise DataFetchError(f"Candidate query returned invalid JSON: {e}") from e

        if rows is None:
            return []
        if not isinstance(rows, list):
            raise DataFetchError(
                f"Candidate query returned {type(rows).__name__}, expected a list."
            )

        records: List[MedicationSchedule] = []
        for index, row in enumerate(rows):
            try:
                records.append(MedicationSchedule.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping candidate row {index}: {e.error_count()} validation error(s): {e}"
                )
        logger.debug(f"Fetched {len(records)}/{len(rows)} candidate rows for {target_date}.")
        return records

    def close(self) -> None:
        self.session.close()
