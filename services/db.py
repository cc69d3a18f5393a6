"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Rows for the two pieces of per-user-day state: today's running
  totals and the daily contract
* Session dependency used by the repositories / routers
"""
from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import JSON, DateTime, Float, String, UniqueConstraint, func
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None
_SESSIONS: async_sessionmaker[AsyncSession] | None = None


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = create_async_engine(settings.database_url, pool_pre_ping=True)
    return _ENGINE


async def sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _SESSIONS
    if _SESSIONS is None:
        _SESSIONS = async_sessionmaker(await engine(), expire_on_commit=False)
    return _SESSIONS


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class DailyConsumedRow(Base):
    __tablename__ = "daily_consumed"
    __table_args__ = (UniqueConstraint("user_id", "day", name="uq_daily_consumed_user_day"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    day: Mapped[str] = mapped_column(String(10))          # YYYY-MM-DD, user-local
    calories: Mapped[float] = mapped_column(Float, default=0)
    protein_g: Mapped[float] = mapped_column(Float, default=0)
    sugar_g: Mapped[float] = mapped_column(Float, default=0)
    sodium_mg: Mapped[float] = mapped_column(Float, default=0)
    fiber_g: Mapped[float] = mapped_column(Float, default=0)
    carbs_g: Mapped[float] = mapped_column(Float, default=0)
    fat_g: Mapped[float] = mapped_column(Float, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


class DailyContractRow(Base):
    __tablename__ = "daily_contracts"
    __table_args__ = (UniqueConstraint("user_id", "day_key", name="uq_daily_contracts_user_day"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)   # dc_{day}_{user}
    user_id: Mapped[str] = mapped_column(String, index=True)
    day_key: Mapped[str] = mapped_column(String(10))
    status: Mapped[str] = mapped_column(String(16), default="draft")
    contract: Mapped[dict] = mapped_column(JSON)                # full DailyContract dump
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


async def create_all() -> None:
    eng = await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose() -> None:
    global _ENGINE, _SESSIONS
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE, _SESSIONS = None, None


# ───────── session helper ────────────────────────────────────────────

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async_session = await sessionmaker()
    async with async_session() as session:
        yield session
