"""
services/contracts.py
────────────────────────────────────────────────────────────────────────
Persistence + lifecycle for daily contracts (one per user-day).

The contract itself is computed by `core.daily_contract`; this module only
stores it and applies status transitions (draft → active → completed /
failed / expired).
"""
from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.daily_contract import can_transition
from core.models.contract import ContractStatus, DailyContract
from services.db import DailyContractRow

_LOG = logging.getLogger(__name__)


class ContractTransitionError(ValueError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"cannot move contract from {current!r} to {target!r}")
        self.current = current
        self.target = target


def apply_transition(contract: DailyContract, target: ContractStatus) -> DailyContract:
    if not can_transition(contract.status, target):
        _LOG.warning("rejected transition %s → %s for %s", contract.status, target, contract.id)
        raise ContractTransitionError(contract.status, target)
    return contract.model_copy(update={"status": target})


class DailyContractRepository(Protocol):
    async def get(self, user_id: str, day_key: str) -> DailyContract | None: ...

    async def put(self, user_id: str, contract: DailyContract) -> None: ...

    async def create_if_absent(self, user_id: str, contract: DailyContract) -> DailyContract: ...


class InMemoryDailyContractRepository:
    def __init__(self) -> None:
        self._contracts: dict[tuple[str, str], DailyContract] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: str, day_key: str) -> DailyContract | None:
        return self._contracts.get((user_id, day_key))

    async def put(self, user_id: str, contract: DailyContract) -> None:
        async with self._lock:
            self._contracts[(user_id, contract.day_key)] = contract

    async def create_if_absent(self, user_id: str, contract: DailyContract) -> DailyContract:
        async with self._lock:
            return self._contracts.setdefault((user_id, contract.day_key), contract)


class SqlDailyContractRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _row(self, user_id: str, day_key: str) -> DailyContractRow | None:
        stmt = select(DailyContractRow).where(
            DailyContractRow.user_id == user_id, DailyContractRow.day_key == day_key
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get(self, user_id: str, day_key: str) -> DailyContract | None:
        row = await self._row(user_id, day_key)
        return DailyContract.model_validate(row.contract) if row else None

    async def put(self, user_id: str, contract: DailyContract) -> None:
        row = await self._row(user_id, contract.day_key)
        if row is None:
            row = DailyContractRow(id=contract.id, user_id=user_id, day_key=contract.day_key)
            self._session.add(row)
        row.status = contract.status
        row.contract = contract.model_dump(mode="json")
        await self._session.commit()
        _LOG.info("contract %s stored (%s)", contract.id, contract.status)

    async def create_if_absent(self, user_id: str, contract: DailyContract) -> DailyContract:
        existing = await self.get(user_id, contract.day_key)
        if existing is not None:
            return existing
        try:
            await self.put(user_id, contract)
        except IntegrityError:
            # a concurrent request stored the user-day first
            await self._session.rollback()
            _LOG.info("contract %s already created, returning stored one", contract.id)
            stored = await self.get(user_id, contract.day_key)
            if stored is None:
                raise
            return stored
        return contract
