# src/med_reminder/orch/__init__.py
# -*- coding: utf-8 -*-

"""
Check pipeline: time-window classification, grouping by user, email
dispatch and the orchestrator that ties them together.
"""
