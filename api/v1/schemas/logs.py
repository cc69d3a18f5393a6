# api/v1/schemas/logs.py
from __future__ import annotations

from pydantic import BaseModel

from core.models.nutrition import DailyConsumed


class MealAddition(DailyConsumed):
    """Macros of one logged meal; missing fields count as 0."""
    pass


class TodayTotals(BaseModel):
    day:      str
    consumed: DailyConsumed
