# app/core/care_events/models.py

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class CareEvent(Base):
    """
    ORM model for pet care events.

    Events generated from a schedule rule carry the rule id in ``source``;
    manually created events leave it NULL. The unique constraint on
    ``(pet_id, source, due_date)`` rejects a second insert of the same
    generated occurrence by a concurrent run.
    """
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    pet_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="pending", nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("pet_id", "source", "due_date", name="uq_events_pet_source_due_date"),
        Index("ix_events_pet_id_source", "pet_id", "source"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CareEvent id={self.id} pet={self.pet_id!r} source={self.source!r} due={self.due_date}>"
