# app/core/auth/schemas.py

from __future__ import annotations

from pydantic import BaseModel, Field


class TokenData(BaseModel):
    """
    Data carried inside a JWT.
    ``sub`` holds the owner id that pets are registered under.
    """
    user_id: str | None = Field(None, description="Owner id within the application")
