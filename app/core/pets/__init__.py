# app/core/pets/__init__.py
"""Pet facts consumed by the care-event engine (read-only)."""
