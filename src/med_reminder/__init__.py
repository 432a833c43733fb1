# src/med_reminder/__init__.py
# -*- coding: utf-8 -*-

"""
Medication adherence alerts: classifies today's scheduled doses as due or
missed and emails each user's caretaker one combined notification.
"""

__version__ = "0.1.0"
