# app/core/care_events/__init__.py
"""Automated care-event generation: recurrence math, stores and the generation service."""
