# api/v1/intelligence.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from fastapi import APIRouter, Depends, status

from api.v1.deps import base_intelligence_config, daily_log_repo, intelligence_config, member_id, today_key
from api.v1.schemas import IntelligenceRequest, NextMealResponse
from core.behavior import compute_14day_behavior
from core.daily_vector import build_daily_vector2
from core.intelligence_config import IntelligenceConfig
from core.models.nutrition import Behavior14Day, DailyConsumed, DailyVector2
from core.models.profile import ProfileSummary
from core.pipeline import run_pipeline
from core.profile import build_profile_summary
from core.suggestion import build_best_next_meal
from services.auth import current_user_id
from services.daily_log import DailyConsumedRepository

router = APIRouter()
_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineInputs:
    profile: ProfileSummary
    consumed: DailyConsumed
    behavior14d: Behavior14Day | None
    config: IntelligenceConfig


async def resolve_engine_inputs(
    body: IntelligenceRequest,
    user_id: str,
    member: str | None,
    day: str,
    repo: DailyConsumedRepository,
    base: IntelligenceConfig,
) -> EngineInputs:
    """
    Fill in whatever the client left out: today's stored totals for
    `consumed`, a log-derived 14-day summary for `behavior14d`.
    """
    config = intelligence_config(body.config_overrides, base)
    profile = build_profile_summary(
        body.profile.mode,
        preferences=body.profile.preferences,
        intel=body.profile.intel,
        user_id=user_id,
        member_id=member,
    )
    consumed = body.consumed or await repo.load_today(user_id, day)

    behavior = body.behavior14d
    if behavior is None and body.recent_logs:
        behavior = compute_14day_behavior(
            body.recent_logs,
            sodium_max_mg=config.targets.sodium_mg_max,
            protein_target_g=config.targets.protein_g.for_goal(profile.derived.primary_goal),
            sugar_max_g=config.targets.sugar_g_max,
            fiber_min_g=config.targets.fiber_g_min,
            config=config,
        )
    return EngineInputs(profile=profile, consumed=consumed, behavior14d=behavior, config=config)


# ───────────────────────── daily vector ─────────────────────
@router.post("/daily-vector", response_model=DailyVector2, status_code=status.HTTP_200_OK)
async def daily_vector(
    body: IntelligenceRequest,
    user_id: str = Depends(current_user_id),
    member: str | None = Depends(member_id),
    day: str = Depends(today_key),
    repo: DailyConsumedRepository = Depends(daily_log_repo),
    base: IntelligenceConfig = Depends(base_intelligence_config),
) -> DailyVector2:
    inputs = await resolve_engine_inputs(body, user_id, member, day, repo, base)
    return build_daily_vector2(
        inputs.profile,
        consumed=inputs.consumed,
        targets_override=body.targets_override,
        behavior14d=inputs.behavior14d,
        config=inputs.config,
    )


# ───────────────────────── next meal ────────────────────────
@router.post("/next-meal", response_model=NextMealResponse, status_code=status.HTTP_200_OK)
async def next_meal(
    body: IntelligenceRequest,
    user_id: str = Depends(current_user_id),
    member: str | None = Depends(member_id),
    day: str = Depends(today_key),
    repo: DailyConsumedRepository = Depends(daily_log_repo),
    base: IntelligenceConfig = Depends(base_intelligence_config),
) -> NextMealResponse:
    inputs = await resolve_engine_inputs(body, user_id, member, day, repo, base)
    now = datetime.now().astimezone()

    result = run_pipeline(
        inputs.profile,
        consumed=inputs.consumed,
        targets_override=body.targets_override,
        behavior14d=inputs.behavior14d,
        now=now,
        ttl_minutes=body.ttl_minutes,
        max_options=body.max_options,
        time_window=body.time_window,
        config=inputs.config,
    )
    suggestion = build_best_next_meal(
        inputs.profile,
        result.vector,
        time_window=result.intent.context.time_window,
        behavior14d=inputs.behavior14d,
        now=now,
        config=inputs.config,
    )
    _LOG.debug("next meal for %s: %s", user_id, result.plan.plan_id)
    return NextMealResponse(
        vector=result.vector,
        intent=result.intent,
        options=result.options,
        plan=result.plan,
        suggestion=suggestion,
    )
