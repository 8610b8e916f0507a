# app/core/care_events/store.py
"""
Event store boundary.

``insert_events`` is all-or-nothing for the batch: it either stores every
event or raises ``PersistenceError`` and stores none.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import date
from typing import DefaultDict, List, Sequence, Set, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import PersistenceError
from .models import CareEvent
from .schemas import ExistingEvent, GeneratedCareEvent

log = logging.getLogger(__name__)


class BaseEventStore(ABC):
    """Abstract async interface to persisted care events."""

    @abstractmethod
    async def get_events_with_source(self, pet_id: str) -> List[ExistingEvent]:
        """Events of ``pet_id`` that were produced by a rule (non-null source)."""
        ...

    @abstractmethod
    async def insert_events(
        self, pet_id: str, owner_id: str, events: Sequence[GeneratedCareEvent]
    ) -> None:
        """
        Persist ``events`` as a single batch tagged with ``owner_id``.

        Raises:
            PersistenceError: If the batch could not be stored.
        """
        ...


class SqlEventStore(BaseEventStore):
    def __init__(self, db_session: AsyncSession) -> None:
        self.db: AsyncSession = db_session

    async def get_events_with_source(self, pet_id: str) -> List[ExistingEvent]:
        stmt = (
            select(CareEvent.source, CareEvent.due_date)
            .where(CareEvent.pet_id == pet_id)
            .where(CareEvent.source.is_not(None))
        )
        rows = (await self.db.execute(stmt)).all()
        log.debug("Found %d rule-generated events for pet %s", len(rows), pet_id)
        return [ExistingEvent(source=source, due_date=due_date) for source, due_date in rows]

    async def insert_events(
        self, pet_id: str, owner_id: str, events: Sequence[GeneratedCareEvent]
    ) -> None:
        rows = [
            CareEvent(
                owner_id=owner_id,
                pet_id=event.pet_id,
                title=event.title,
                description=event.description,
                due_date=event.due_date,
                event_type=event.event_type.value,
                source=event.schedule_rule_id,
                priority=event.priority.value,
                status=event.status.value,
            )
            for event in events
        ]
        self.db.add_all(rows)
        try:
            await self.db.flush()
        except SQLAlchemyError as exc:
            log.exception("Bulk insert of %d events failed for pet %s, rolling back", len(rows), pet_id)
            await self.db.rollback()
            detail = getattr(exc, "orig", None) or exc
            raise PersistenceError(pet_id, str(detail)) from exc
        log.info("Inserted %d events for pet %s", len(rows), pet_id)


class InMemoryEventStore(BaseEventStore):
    """
    List-backed store mirroring the SQL unique constraint.

    ``fail_with`` makes every insert fail, for exercising error paths.
    """

    def __init__(self, fail_with: str | None = None) -> None:
        self.events: DefaultDict[str, List[Tuple[str, GeneratedCareEvent]]] = defaultdict(list)
        self.existing: DefaultDict[str, List[ExistingEvent]] = defaultdict(list)
        self.insert_calls: int = 0
        self.fail_with = fail_with

    def seed(self, pet_id: str, source: str, due_date: date) -> None:
        self.existing[pet_id].append(ExistingEvent(source=source, due_date=due_date))

    async def get_events_with_source(self, pet_id: str) -> List[ExistingEvent]:
        return list(self.existing[pet_id])

    async def insert_events(
        self, pet_id: str, owner_id: str, events: Sequence[GeneratedCareEvent]
    ) -> None:
        self.insert_calls += 1
        if self.fail_with is not None:
            raise PersistenceError(pet_id, self.fail_with)
        keys: Set[Tuple[str, date]] = {(e.source, e.due_date) for e in self.existing[pet_id]}
        for event in events:
            key = (event.schedule_rule_id, event.due_date)
            if key in keys:
                raise PersistenceError(pet_id, f"duplicate event {key[0]} on {key[1].isoformat()}")
            keys.add(key)
        for event in events:
            self.events[pet_id].append((owner_id, event))
            self.existing[pet_id].append(ExistingEvent(source=event.schedule_rule_id, due_date=event.due_date))


__all__ = ["BaseEventStore", "SqlEventStore", "InMemoryEventStore"]
