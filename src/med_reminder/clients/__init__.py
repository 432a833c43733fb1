# src/med_reminder/clients/__init__.py
# -*- coding: utf-8 -*-

"""
Clients for the external collaborators: the schedule store and email delivery.
"""

from .base import Mailer, ScheduleRepository
from .mailers import HttpMailer, SendGridMailer
from .supabase_repository import SupabaseScheduleRepository

__all__ = [
    "HttpMailer",
    "Mailer",
    "ScheduleRepository",
    "SendGridMailer",
    "SupabaseScheduleRepository",
]
