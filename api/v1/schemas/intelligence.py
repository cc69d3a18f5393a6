# api/v1/schemas/intelligence.py
from __future__ import annotations
from typing import Any, Literal

from pydantic import BaseModel, Field

from core.models.decision import BestNextMealIntent, BestNextMealV2, DishOption, ExecutionPlan
from core.models.nutrition import (
    Behavior14Day,
    DailyConsumed,
    DailyVector2,
    MealLogEntry,
    TargetsOverride,
    TimeWindow,
)
from core.models.profile import AppMode, Preferences, ProfileIntel


class ProfileInput(BaseModel):
    mode: AppMode = "privacy"
    preferences: Preferences | None = None
    intel: ProfileIntel | None = None


class IntelligenceRequest(BaseModel):
    profile: ProfileInput = ProfileInput()
    # omitted → today's stored running total
    consumed: DailyConsumed | None = None
    targets_override: TargetsOverride | None = None
    # omitted → computed from `recent_logs` when enough rows are given
    behavior14d: Behavior14Day | None = None
    recent_logs: list[MealLogEntry] = Field(default_factory=list, max_length=800)
    time_window: TimeWindow | None = None
    max_options: Literal[2, 3] | None = None
    ttl_minutes: int | None = Field(None, gt=0, le=24 * 60)
    config_overrides: dict[str, Any] | None = None


class NextMealResponse(BaseModel):
    vector:     DailyVector2
    intent:     BestNextMealIntent
    options:    list[DishOption]
    plan:       ExecutionPlan
    suggestion: BestNextMealV2
