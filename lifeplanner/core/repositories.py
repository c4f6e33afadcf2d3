"""
Repositories: typed CRUD and queries over the storage engine.

One repository per record type. Every public method is a coroutine so
callers can treat storage as asynchronous I/O, but each method does its
read-modify-write without awaiting anything in between. Under asyncio's
cooperative scheduling that makes every single call atomic from the
caller's point of view; no locks are involved.

Update semantics: update(key, **changes) overlays only the keywords that
are passed. A keyword passed as None clears that optional field; a
keyword that is left out keeps its stored value.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from .database import Database
from .dates import DayLike, to_day_key, utc_now
from .errors import NotFoundError
from .models import DaySummary, Goal, JournalEntry, LifeArea, Project, Record, Task

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Record)

# Marks "argument not given" where None already means "clear the field"
_UNSET: Any = object()


def _reject(keys: Iterable[str], protected: Iterable[str], action: str) -> None:
    blocked = sorted(set(keys) & set(protected))
    if blocked:
        raise ValueError(f"Cannot {action} {', '.join(blocked)}")


def _advance(previous: Optional[datetime]) -> datetime:
    """Now, but never earlier than the previous stamp"""
    now = utc_now()
    if previous is not None and previous > now:
        return previous
    return now


class Repository(Generic[M]):
    """Base repository keyed by a generated uuid"""

    model: Type[M]

    def __init__(self, db: Database):
        self.db = db
        self.table = self.model.TABLE
        self.entity_name = self.model.__name__

    def _wrap(self, rows: List[Dict[str, Any]]) -> List[M]:
        return [self.model.from_record(row) for row in rows]

    def _get(self, key: str) -> Optional[M]:
        row = self.db.get(self.table, key)
        return self.model.from_record(row) if row is not None else None

    def _find_by(self, column: str, value: Any) -> List[M]:
        return self._wrap(self.db.where_equals(self.table, column, value))

    def _protected_on_update(self) -> tuple:
        # updated_at may be passed but is always restamped
        return (self.model.KEY, "created_at")

    async def get_all(self) -> List[M]:
        return self._wrap(self.db.all(self.table))

    async def get_by_id(self, key: str) -> Optional[M]:
        return self._get(key)

    async def count(self) -> int:
        return self.db.count(self.table)

    async def create(self, **fields) -> M:
        """
        Create and persist a new record.

        Args:
            **fields: Record fields, excluding id and timestamps

        Returns:
            The stored record with its generated id and timestamps
        """
        _reject(fields, ("id", "created_at", "updated_at"), "set on create:")
        now = utc_now()
        entity = self.model(id=str(uuid.uuid4()), created_at=now, updated_at=now, **fields)
        self.db.add(self.table, entity.to_record())
        logger.debug("Created %s %s", self.entity_name, entity.key)
        return entity

    async def update(self, key: str, **changes) -> M:
        """
        Overlay changes on an existing record.

        Raises:
            NotFoundError: if no record has this key
        """
        _reject(changes, self._protected_on_update(), "update")
        existing = self._get(key)
        if existing is None:
            raise NotFoundError(self.entity_name, key)

        updated = replace(existing, **changes)
        updated.updated_at = _advance(existing.updated_at)
        self.db.put(self.table, updated.to_record())
        logger.debug("Updated %s %s: %s", self.entity_name, key, sorted(changes))
        return updated

    async def delete(self, key: str) -> None:
        """Delete by key; deleting a missing record is a no-op"""
        removed = self.db.delete(self.table, key)
        if removed:
            logger.debug("Deleted %s %s", self.entity_name, key)


class LifeAreaRepository(Repository[LifeArea]):
    model = LifeArea

    async def get_all(self) -> List[LifeArea]:
        """All life areas, ascending by order"""
        return self._wrap(self.db.order_by(self.table, "order"))

    async def swap_order(self, first_id: str, second_id: str) -> List[LifeArea]:
        """
        Exchange the order values of two life areas in one transaction.

        Raises:
            NotFoundError: if either area is missing
        """
        first = self._get(first_id)
        if first is None:
            raise NotFoundError(self.entity_name, first_id)
        second = self._get(second_id)
        if second is None:
            raise NotFoundError(self.entity_name, second_id)

        swapped_first = replace(first, order=second.order, updated_at=_advance(first.updated_at))
        swapped_second = replace(second, order=first.order, updated_at=_advance(second.updated_at))
        self.db.put_many(self.table, [swapped_first.to_record(), swapped_second.to_record()])
        logger.debug("Swapped order of %s and %s", first_id, second_id)
        return [swapped_first, swapped_second]


class GoalRepository(Repository[Goal]):
    model = Goal

    async def get_by_life_area(self, life_area_id: str) -> List[Goal]:
        return self._find_by("life_area_id", life_area_id)


class ProjectRepository(Repository[Project]):
    model = Project

    async def get_by_goal(self, goal_id: str) -> List[Project]:
        return self._find_by("goal_id", goal_id)


class TaskRepository(Repository[Task]):
    model = Task

    async def get_by_life_area(self, life_area_id: str) -> List[Task]:
        return self._find_by("life_area_id", life_area_id)

    async def get_by_goal(self, goal_id: str) -> List[Task]:
        return self._find_by("goal_id", goal_id)

    async def get_by_project(self, project_id: str) -> List[Task]:
        return self._find_by("project_id", project_id)

    async def get_by_date(self, day: DayLike) -> List[Task]:
        """Tasks scheduled on a calendar day; any time of day is ignored"""
        return self._find_by("scheduled_date", to_day_key(day))

    async def get_completed(self) -> List[Task]:
        return self._wrap(self.db.where_above(self.table, "completed_at", ""))

    async def complete(self, task_id: str) -> Task:
        return await self.update(task_id, completed_at=utc_now())

    async def uncomplete(self, task_id: str) -> Task:
        return await self.update(task_id, completed_at=None)


class JournalEntryRepository(Repository[JournalEntry]):
    model = JournalEntry

    def _first_by_date(self, day_key: str) -> Optional[JournalEntry]:
        entries = self._find_by("date", day_key)
        return entries[0] if entries else None

    async def get_by_date(self, day: DayLike) -> Optional[JournalEntry]:
        return self._first_by_date(to_day_key(day))

    async def upsert_by_date(self, day: DayLike, content: str, mood: Optional[str] = _UNSET) -> JournalEntry:
        """
        Create or update the entry for a day.

        This is the write path the journal editor uses, and it keeps one
        entry per date. Leaving mood out keeps the stored mood; passing
        None clears it.
        """
        day_key = to_day_key(day)
        changes: Dict[str, Any] = {"content": content}
        if mood is not _UNSET:
            changes["mood"] = mood

        existing = self._first_by_date(day_key)
        if existing is not None:
            return await self.update(existing.id, **changes)
        return await self.create(date=day_key, **changes)


class DaySummaryRepository(Repository[DaySummary]):
    """Day summaries have no generated id; the date is the key"""
    model = DaySummary

    async def get_by_date(self, day: DayLike) -> Optional[DaySummary]:
        return self._get(to_day_key(day))

    async def create(self, date: DayLike, **fields) -> DaySummary:
        _reject(fields, ("created_at", "updated_at"), "set on create:")
        now = utc_now()
        summary = DaySummary(date=to_day_key(date), created_at=now, updated_at=now, **fields)
        self.db.add(self.table, summary.to_record())
        logger.debug("Created DaySummary %s", summary.date)
        return summary

    async def update(self, date: DayLike, **changes) -> DaySummary:
        return await super().update(to_day_key(date), **changes)

    async def delete(self, date: DayLike) -> None:
        await super().delete(to_day_key(date))

    async def upsert_by_date(self, day: DayLike, **fields) -> DaySummary:
        """Create or update the summary for a day"""
        day_key = to_day_key(day)
        if self._get(day_key) is not None:
            return await self.update(day_key, **fields)
        return await self.create(day_key, **fields)
