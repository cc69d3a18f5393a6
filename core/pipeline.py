"""
core/pipeline.py
────────────────────────────────────────────────────────────────────────
One call from raw daily inputs to a renderable plan:

    profile + consumed + behavior → vector → intent → options → plan
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from core.daily_vector import build_daily_vector2
from core.execution_plan import build_execution_plan
from core.intelligence_config import IntelligenceConfig
from core.intent import build_best_next_meal_intent
from core.models.decision import BestNextMealIntent, DishOption, ExecutionPlan
from core.models.nutrition import Behavior14Day, DailyVector2, TimeWindow
from core.models.profile import ProfileSummary
from core.options import build_dish_options


@dataclass(frozen=True)
class PipelineResult:
    vector: DailyVector2
    intent: BestNextMealIntent
    options: list[DishOption]
    plan: ExecutionPlan


def run_pipeline(
    profile: ProfileSummary,
    consumed: Mapping[str, Any] | None = None,
    targets_override: Mapping[str, Any] | None = None,
    behavior14d: Behavior14Day | None = None,
    now: datetime | None = None,
    ttl_minutes: int | None = None,
    max_options: int | None = None,
    time_window: TimeWindow | None = None,
    config: IntelligenceConfig | None = None,
) -> PipelineResult:
    vector = build_daily_vector2(
        profile,
        consumed=consumed,
        targets_override=targets_override,
        behavior14d=behavior14d,
        config=config,
    )
    intent = build_best_next_meal_intent(
        profile,
        vector,
        behavior14d=behavior14d,
        now=now,
        ttl_minutes=ttl_minutes,
        max_options=max_options,
        time_window=time_window,
        config=config,
    )
    options = build_dish_options(intent)
    plan = build_execution_plan(intent, options, now=now)
    return PipelineResult(vector=vector, intent=intent, options=options, plan=plan)
