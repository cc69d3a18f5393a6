# api/v1/deps.py
"""Request-scoped collaborators injected into the v1 routers."""
from __future__ import annotations

import re
from datetime import datetime
from functools import lru_cache
from typing import Any

from fastapi import Depends, Header, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.intelligence_config import IntelligenceConfig, config_from_settings
from core.intent import local_day
from services.contracts import DailyContractRepository, SqlDailyContractRepository
from services.daily_log import DailyConsumedRepository, SqlDailyConsumedRepository
from services.db import get_session

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@lru_cache
def base_intelligence_config() -> IntelligenceConfig:
    return config_from_settings(settings)


def intelligence_config(
    overrides: dict[str, Any] | None,
    base: IntelligenceConfig,
) -> IntelligenceConfig:
    try:
        return base.with_overrides(overrides)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )


def member_id(x_member_id: str | None = Header(None)) -> str | None:
    return (x_member_id or "").strip() or None


def today_key(day: str | None = Query(None, description="YYYY-MM-DD; defaults to today")) -> str:
    if day is None:
        return local_day(datetime.now().astimezone())
    if not _DAY_RE.match(day):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="day must be YYYY-MM-DD")
    return day


def daily_log_repo(db: AsyncSession = Depends(get_session)) -> DailyConsumedRepository:
    return SqlDailyConsumedRepository(db)


def contract_repo(db: AsyncSession = Depends(get_session)) -> DailyContractRepository:
    return SqlDailyContractRepository(db)
