"""
Decision artifacts produced by the next-meal pipeline:
MacroGap → BestNextMealIntent → DishOption[] → ExecutionPlan.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from core.models.nutrition import BehaviorEcho, DailyConsumed, DailyTargets, TimeWindow
from core.models.profile import AppMode, EatingStyle, Goal

RiskLevel = Literal["low", "medium", "high"]
Channel = Literal["eatout", "home", "hybrid"]
Route = Literal["home", "eatout"]
Fallback = Literal["ask-one-question", "show-two-safe-defaults"]


# ─── macro gap ──────────────────────────────────────────────────────
class GapDelta(BaseModel):
    calories: float           # signed: target − consumed
    protein_g: float          # signed
    fiber_g: float            # signed
    sugar_g_remaining: float  # ≥0, room left under the max
    sodium_mg_remaining: float


class GapSummary(BaseModel):
    protein_gap_g: float = Field(..., ge=0)
    fiber_gap_g: float = Field(..., ge=0)
    calories_remaining: float = Field(..., ge=0)
    sugar_risk: RiskLevel
    sodium_risk: RiskLevel


class MacroGap(BaseModel):
    consumed: DailyConsumed
    targets: DailyTargets
    delta: GapDelta
    summary: GapSummary
    confidence: float = Field(..., ge=0, le=1)


# ─── intent ─────────────────────────────────────────────────────────
class IntentContext(BaseModel):
    time_window: TimeWindow
    cuisines: list[str] = Field(default_factory=list, max_length=1)
    goal: Goal
    eating_style: EatingStyle | None = None
    macro_gap: MacroGap
    behavior14d: BehaviorEcho | None = None


class DecisionPolicy(BaseModel):
    max_options: Literal[2, 3] = 2
    minimize_choice: bool = True
    fallback_if_low_confidence: Fallback


class BestNextMealIntent(BaseModel):
    intent_id: str
    generated_at: datetime
    expires_at: datetime
    mode: AppMode
    context: IntentContext
    decision_policy: DecisionPolicy


# ─── options ────────────────────────────────────────────────────────
class ExecutionHints(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: Channel
    search_key: str
    constraints: list[str] = Field(default_factory=list, max_length=6)


class Handoff(BaseModel):
    model_config = ConfigDict(frozen=True)

    qr_payload: dict[str, Any] | None = None
    restaurant_filter: dict[str, Any] | None = None


class DishOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    why: str
    tags: list[str] = Field(default_factory=list, max_length=2)
    confidence: float = Field(..., ge=0, le=1)
    execution_hints: ExecutionHints
    handoff: Handoff = Handoff()


class RouteDecision(BaseModel):
    route: Route
    reason: Literal["eating-style", "control-needed", "late-trend", "low-confidence", "default"]


# ─── cooking ────────────────────────────────────────────────────────
class Quantity(BaseModel):
    ingredient: str
    grams: int
    notes: str | None = None


class PrepStep(BaseModel):
    step: int
    action: str
    temperature_c: int | None = None
    time_minutes: int | None = None


class ModularPrepPlan(BaseModel):
    dish_name: str
    total_minutes: int
    quantities: list[Quantity]
    prep_steps: list[PrepStep]
    constraints: list[str] = []


# ─── execution plan ─────────────────────────────────────────────────
class GoEatOut(BaseModel):
    search_key: str


class HowToCook(BaseModel):
    option_id: str


class LogPrompt(BaseModel):
    prompt: str


class PlanActions(BaseModel):
    go_eat_out: GoEatOut | None = None
    how_to_cook: HowToCook | None = None
    log_after_meal_prompt: LogPrompt | None = None


class PlanMeta(BaseModel):
    confidence: float = Field(..., ge=0, le=1)
    expires_at: datetime
    primary_route: Channel


class ExecutionPlan(BaseModel):
    plan_id: str
    intent_id: str
    primary_option: DishOption
    secondary_option: DishOption | None = None
    micro_steps: list[str] = Field(default_factory=list, max_length=6)
    actions: PlanActions
    cook_plan: ModularPrepPlan | None = None
    meta: PlanMeta


# ─── home headline ──────────────────────────────────────────────────
class SuggestionMeta(BaseModel):
    time_window: TimeWindow
    confidence: float = Field(..., ge=0, le=1)
    bullets: list[str]
    next_action: str | None = None


class BestNextMealV2(BaseModel):
    title: str
    suggestion_text: str
    context_note: str | None = None
    meta: SuggestionMeta
