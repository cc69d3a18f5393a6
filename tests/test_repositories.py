# tests/test_repositories.py
"""
Repositories driven with asyncio.run (in-memory, plus one SQLite race case).
"""
from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from core.daily_contract import compute_daily_contract
from core.models.nutrition import DailyConsumed
from services.contracts import (
    ContractTransitionError,
    InMemoryDailyContractRepository,
    SqlDailyContractRepository,
    apply_transition,
)
from services.daily_log import InMemoryDailyConsumedRepository
from services.db import Base

DAY = "2026-10-17"


# ── daily totals ────────────────────────────────────────────────────
def test_unknown_day_loads_zeros():
    repo = InMemoryDailyConsumedRepository()
    assert asyncio.run(repo.load_today("u1", DAY)) == DailyConsumed()


def test_add_is_additive_and_keyed_by_user_and_day():
    repo = InMemoryDailyConsumedRepository()

    async def scenario():
        await repo.add_to_today("u1", DAY, {"calories": 300})
        await repo.add_to_today("u1", DAY, {"calories": 200, "protein_g": 25})
        await repo.add_to_today("u1", "2026-10-18", {"calories": 999})
        await repo.add_to_today("u2", DAY, {"calories": 50})
        return await repo.load_today("u1", DAY)

    today = asyncio.run(scenario())
    assert today.calories == 500
    assert today.protein_g == 25


def test_concurrent_adds_do_not_lose_meals():
    repo = InMemoryDailyConsumedRepository()

    async def scenario():
        await asyncio.gather(*(repo.add_to_today("u1", DAY, {"calories": 100}) for _ in range(20)))
        return await repo.load_today("u1", DAY)

    assert asyncio.run(scenario()).calories == 2000


def test_save_overwrites():
    repo = InMemoryDailyConsumedRepository()

    async def scenario():
        await repo.add_to_today("u1", DAY, {"calories": 300})
        await repo.save_today("u1", DAY, DailyConsumed(calories=120))
        return await repo.load_today("u1", DAY)

    assert asyncio.run(scenario()).calories == 120


# ── contracts ───────────────────────────────────────────────────────
def test_create_if_absent_keeps_first_contract():
    repo = InMemoryDailyContractRepository()
    first = compute_daily_contract("u1", DAY, {"protein_g": 40})
    second = compute_daily_contract("u1", DAY, {"fiber_g": 15})

    async def scenario():
        await repo.create_if_absent("u1", first)
        return await repo.create_if_absent("u1", second)

    assert asyncio.run(scenario()).title == "Protein Close"


def test_apply_transition():
    draft = compute_daily_contract("u1", DAY, {})
    active = apply_transition(draft, "active")
    assert active.status == "active"
    assert draft.status == "draft"
    done = apply_transition(active, "completed")
    with pytest.raises(ContractTransitionError):
        apply_transition(done, "active")


class _StaleReadRepository(SqlDailyContractRepository):
    """Misses the row on its first lookups, like a request that read
    before a concurrent one committed."""

    def __init__(self, session, misses: int) -> None:
        super().__init__(session)
        self._misses = misses

    async def _row(self, user_id, day_key):
        if self._misses:
            self._misses -= 1
            return None
        return await super()._row(user_id, day_key)


def test_sql_create_if_absent_survives_concurrent_first_create(tmp_path):
    first = compute_daily_contract("u1", DAY, {"protein_g": 40})
    second = compute_daily_contract("u1", DAY, {"fiber_g": 15})

    async def scenario():
        eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'contracts.db'}")
        async with eng.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        sessions = async_sessionmaker(eng, expire_on_commit=False)
        try:
            async with sessions() as s:
                await SqlDailyContractRepository(s).create_if_absent("u1", first)
            async with sessions() as s:
                # both the existence check and the upsert lookup miss
                return await _StaleReadRepository(s, misses=2).create_if_absent("u1", second)
        finally:
            await eng.dispose()

    assert asyncio.run(scenario()).title == "Protein Close"
