from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from core.coerce import clamp01, non_negative

TimeWindow = Literal["breakfast", "lunch", "snack", "dinner"]

MACRO_FIELDS = (
    "calories", "protein_g", "sugar_g", "sodium_mg", "fiber_g", "carbs_g", "fat_g",
)


class DailyConsumed(BaseModel):
    calories: float = Field(0.0, ge=0)
    protein_g: float = Field(0.0, ge=0)
    sugar_g: float = Field(0.0, ge=0)
    sodium_mg: float = Field(0.0, ge=0)
    fiber_g: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)


class DailyRemaining(DailyConsumed):
    pass


class DailyTargets(BaseModel):
    calories: float = Field(..., ge=0)
    protein_g: float = Field(..., ge=0)
    sugar_g_max: float = Field(..., ge=0)
    sodium_mg_max: float = Field(..., ge=0)
    fiber_g_min: float = Field(..., ge=0)
    carbs_g_min: float = Field(..., ge=0)
    fat_g_min: float = Field(..., ge=0)


class TargetsOverride(BaseModel):
    calories: float | None = None
    protein_g: float | None = None
    sugar_g_max: float | None = None
    sodium_mg_max: float | None = None
    fiber_g_min: float | None = None
    carbs_g_min: float | None = None
    fat_g_min: float | None = None


class Behavior14Day(BaseModel):
    """Rolling summary built from log history (see `core.behavior`)."""
    avg_calories: float = 0
    avg_protein_g: float = 0
    avg_sodium_mg: float = 0
    avg_sugar_g: float = 0
    avg_fiber_g: float = 0

    # 0..1 share of days
    high_sodium_days_pct: float = Field(0.0, ge=0, le=1)
    low_protein_days_pct: float = Field(0.0, ge=0, le=1)
    high_sugar_days_pct: float | None = Field(None, ge=0, le=1)
    low_fiber_days_pct: float | None = Field(None, ge=0, le=1)
    late_eating_pct: float | None = Field(None, ge=0, le=1)

    common_cuisine: str | None = None
    cuisine_top3: list[str] = []
    common_meal_window: TimeWindow | None = None

    @field_validator(
        "avg_calories", "avg_protein_g", "avg_sodium_mg", "avg_sugar_g", "avg_fiber_g",
        mode="before",
    )
    @classmethod
    def _coerce_average(cls, v):
        return non_negative(v)

    @field_validator(
        "high_sodium_days_pct", "low_protein_days_pct", "high_sugar_days_pct",
        "low_fiber_days_pct", "late_eating_pct",
        mode="before",
    )
    @classmethod
    def _coerce_share(cls, v):
        # bad signals are clamped into 0..1, never rejected
        return None if v is None else clamp01(v)


class BehaviorEcho(BaseModel):
    common_cuisine: str | None = None
    high_sodium_days_pct: float | None = None
    low_protein_days_pct: float | None = None
    late_eating_pct: float | None = None

    @classmethod
    def from_behavior(cls, behavior: Behavior14Day | None) -> "BehaviorEcho | None":
        if behavior is None:
            return None
        return cls(
            common_cuisine=behavior.common_cuisine,
            high_sodium_days_pct=behavior.high_sodium_days_pct,
            low_protein_days_pct=behavior.low_protein_days_pct,
            late_eating_pct=behavior.late_eating_pct,
        )


# ─── at-most-one flags (tagged by `key`) ─────────────────────────────
class DeficitFlag(BaseModel):
    key: Literal["protein", "fiber"]
    text: str


class RiskFlag(BaseModel):
    key: Literal["sodium", "sugar"]
    text: str


class WarningFlag(BaseModel):
    key: Literal["sodium", "sugar"]
    text: str


class DailyVector2(BaseModel):
    targets: DailyTargets
    consumed: DailyConsumed
    remaining: DailyRemaining

    deficit_of_day: DeficitFlag | None = None
    over_risk: RiskFlag | None = None
    warning: WarningFlag | None = None

    confidence: float = Field(..., ge=0, le=1)
    behavior14d: BehaviorEcho | None = None


class MealLogEntry(BaseModel):
    """One logged meal as it arrives from the log history."""
    captured_at: datetime
    calories: float = Field(0.0, ge=0)
    protein_g: float = Field(0.0, ge=0)
    sugar_g: float = Field(0.0, ge=0)
    sodium_mg: float = Field(0.0, ge=0)
    fiber_g: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)
    cuisine: str | None = None
    meal_type: TimeWindow | None = None
