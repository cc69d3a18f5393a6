"""
core/intent.py
────────────────────────────────────────────────────────────────────────
Build the TTL-bound `BestNextMealIntent` – "what should we suggest now".

The intent id is a pure function of (mode, day, time window, user, member)
so callers can cache on it; `expires_at` is a freshness hint for the UI,
nothing in here ever waits on it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from core.cuisine import pick_cuisine_hint
from core.intelligence_config import DEFAULT_INTELLIGENCE_CONFIG, IntelligenceConfig
from core.macro_gap import compute_macro_gap_from_vector
from core.models.decision import BestNextMealIntent, DecisionPolicy, IntentContext
from core.models.nutrition import Behavior14Day, BehaviorEcho, DailyVector2, TimeWindow
from core.models.profile import ProfileSummary

_LOG = logging.getLogger(__name__)


def infer_time_window(now: datetime, config: IntelligenceConfig | None = None) -> TimeWindow:
    brackets = (config or DEFAULT_INTELLIGENCE_CONFIG).intent
    h = now.hour
    if h < brackets.breakfast_until_hour:
        return "breakfast"
    if h < brackets.lunch_until_hour:
        return "lunch"
    if h < brackets.snack_until_hour:
        return "snack"
    return "dinner"


def local_day(now: datetime) -> str:
    return now.date().isoformat()


def stable_intent_id(
    mode: str,
    day: str,
    time_window: str,
    user_id: str | None = None,
    member_id: str | None = None,
) -> str:
    return f"intent_{user_id or 'u'}_{member_id or 'm'}_{mode}_{day}_{time_window}"


def build_best_next_meal_intent(
    profile: ProfileSummary,
    vector: DailyVector2,
    behavior14d: Behavior14Day | None = None,
    now: datetime | None = None,
    ttl_minutes: int | None = None,
    max_options: int | None = None,
    time_window: TimeWindow | None = None,
    config: IntelligenceConfig | None = None,
) -> BestNextMealIntent:
    config = config or DEFAULT_INTELLIGENCE_CONFIG
    now = now or datetime.now().astimezone()
    ttl = ttl_minutes if ttl_minutes and ttl_minutes > 0 else config.intent.ttl_minutes

    window = time_window or infer_time_window(now, config)
    macro_gap = compute_macro_gap_from_vector(vector, config)

    intent_id = stable_intent_id(
        profile.mode, local_day(now), window, profile.user_id, profile.member_id
    )
    cuisine = pick_cuisine_hint(
        profile.derived.cuisines,
        behavior14d.common_cuisine if behavior14d else None,
        now,
        user_id=profile.user_id,
        member_id=profile.member_id,
        intent_id=intent_id,
    )

    max_opts = max_options if max_options in (2, 3) else config.intent.default_max_options
    fallback = (
        "ask-one-question"
        if macro_gap.confidence < config.intent.low_confidence
        else "show-two-safe-defaults"
    )
    _LOG.debug("intent %s window=%s cuisine=%s fallback=%s", intent_id, window, cuisine, fallback)

    return BestNextMealIntent(
        intent_id=intent_id,
        generated_at=now,
        expires_at=now + timedelta(minutes=ttl),
        mode=profile.mode,
        context=IntentContext(
            time_window=window,
            cuisines=[cuisine] if cuisine else [],
            goal=profile.derived.primary_goal,
            eating_style=profile.derived.eating_style,
            macro_gap=macro_gap,
            behavior14d=BehaviorEcho.from_behavior(behavior14d),
        ),
        decision_policy=DecisionPolicy(
            max_options=max_opts,
            minimize_choice=True,
            fallback_if_low_confidence=fallback,
        ),
    )
