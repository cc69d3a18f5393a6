# api/v1/logs.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from api.v1.deps import daily_log_repo, today_key
from api.v1.schemas import MealAddition, TodayTotals
from services.auth import current_user_id
from services.daily_log import DailyConsumedRepository

router = APIRouter()


@router.get("/today", response_model=TodayTotals)
async def get_today(
    user_id: str = Depends(current_user_id),
    day: str = Depends(today_key),
    repo: DailyConsumedRepository = Depends(daily_log_repo),
) -> TodayTotals:
    return TodayTotals(day=day, consumed=await repo.load_today(user_id, day))


@router.post(
    "/today",
    response_model=TodayTotals,
    status_code=status.HTTP_201_CREATED,
    summary="Add one logged meal to today's running totals",
)
async def add_to_today(
    body: MealAddition,
    user_id: str = Depends(current_user_id),
    day: str = Depends(today_key),
    repo: DailyConsumedRepository = Depends(daily_log_repo),
) -> TodayTotals:
    merged = await repo.add_to_today(user_id, day, body)
    return TodayTotals(day=day, consumed=merged)
