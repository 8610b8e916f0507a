# app/__init__.py
"""PetCare scheduler: automated care-event generation service."""
