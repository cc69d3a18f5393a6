"""
services/daily_log.py
────────────────────────────────────────────────────────────────────────
Today's running consumption per (user_id, local_day).

Two interchangeable repositories:

  InMemoryDailyConsumedRepository  instance-scoped dict, one asyncio.Lock
  SqlDailyConsumedRepository       `daily_consumed` table, row lock on add

`add_to_today` is the additive merge; concurrent additions never lose a
meal.  `save_today` is last-write-wins and meant for corrections.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.behavior import merge_into_daily_consumed
from core.models.nutrition import MACRO_FIELDS, DailyConsumed
from services.db import DailyConsumedRow

_LOG = logging.getLogger(__name__)


class DailyConsumedRepository(Protocol):
    async def load_today(self, user_id: str, day: str) -> DailyConsumed: ...

    async def save_today(self, user_id: str, day: str, consumed: DailyConsumed) -> None: ...

    async def add_to_today(
        self, user_id: str, day: str, addition: DailyConsumed | Mapping[str, Any]
    ) -> DailyConsumed: ...


class InMemoryDailyConsumedRepository:
    def __init__(self) -> None:
        self._totals: dict[tuple[str, str], DailyConsumed] = {}
        self._lock = asyncio.Lock()

    async def load_today(self, user_id: str, day: str) -> DailyConsumed:
        return self._totals.get((user_id, day)) or DailyConsumed()

    async def save_today(self, user_id: str, day: str, consumed: DailyConsumed) -> None:
        async with self._lock:
            self._totals[(user_id, day)] = consumed

    async def add_to_today(
        self, user_id: str, day: str, addition: DailyConsumed | Mapping[str, Any]
    ) -> DailyConsumed:
        async with self._lock:
            merged = merge_into_daily_consumed(self._totals.get((user_id, day)), addition)
            self._totals[(user_id, day)] = merged
        return merged


class SqlDailyConsumedRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _row(self, user_id: str, day: str, lock: bool = False) -> DailyConsumedRow | None:
        stmt = select(DailyConsumedRow).where(
            DailyConsumedRow.user_id == user_id, DailyConsumedRow.day == day
        )
        if lock:
            stmt = stmt.with_for_update()
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def load_today(self, user_id: str, day: str) -> DailyConsumed:
        row = await self._row(user_id, day)
        if row is None:
            return DailyConsumed()
        return DailyConsumed(**{k: getattr(row, k) or 0 for k in MACRO_FIELDS})

    async def save_today(self, user_id: str, day: str, consumed: DailyConsumed) -> None:
        row = await self._row(user_id, day, lock=True)
        self._write(row, user_id, day, consumed)
        await self._session.commit()

    async def add_to_today(
        self, user_id: str, day: str, addition: DailyConsumed | Mapping[str, Any]
    ) -> DailyConsumed:
        row = await self._row(user_id, day, lock=True)
        current = (
            DailyConsumed(**{k: getattr(row, k) or 0 for k in MACRO_FIELDS}) if row else None
        )
        merged = merge_into_daily_consumed(current, addition)
        self._write(row, user_id, day, merged)
        await self._session.commit()
        _LOG.info("daily totals updated for %s on %s", user_id, day)
        return merged

    def _write(
        self, row: DailyConsumedRow | None, user_id: str, day: str, consumed: DailyConsumed
    ) -> None:
        if row is None:
            row = DailyConsumedRow(user_id=user_id, day=day)
            self._session.add(row)
        for k in MACRO_FIELDS:
            setattr(row, k, getattr(consumed, k))
