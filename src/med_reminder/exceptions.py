# src/med_reminder/exceptions.py
# -*- coding: utf-8 -*-

"""
Custom exceptions for the medication alert service.
"""


class MedicationAlertError(Exception):
    """Base exception for all errors raised by this package."""

    pass


class AuthError(MedicationAlertError):
    """
    The trigger request carried a missing or wrong shared-secret token.
    Rejected immediately, before any data is fetched or any email is sent.
    """

    pass


class DataFetchError(MedicationAlertError):
    """
    The schedule store was unreachable or the candidate query failed.
    Aborts the whole check run; no dispatch is attempted.
    """

    pass


class MalformedScheduleError(MedicationAlertError):
    """
    A record's scheduled time could not be parsed as H:MM / HH:MM.
    Only that record is skipped; the rest of the batch continues.
    """

    def __init__(self, value, message=None):
        self.value = value
        super().__init__(message or f"Malformed scheduled time: {value!r}")


class DispatchError(MedicationAlertError):
    """
    A single notification could not be delivered (network error, non-2xx reply).
    Recorded as a failed send for that batch only, never escalated to the run.
    """

    pass


class ConfigurationError(MedicationAlertError):
    """
    Setup problem that needs manual intervention: missing credentials,
    invalid YAML values, unreachable Redis at startup.
    """

    pass
