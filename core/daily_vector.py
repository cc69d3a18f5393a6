"""
core/daily_vector.py
────────────────────────────────────────────────────────────────────────
Daily Vector 2.0 – the foundation every other intelligence stage reads.

1. Targets   baseline by goal → × intensity → × activity → explicit overrides
2. Consumed  clamped to finite, non-negative numbers
3. Remaining max(0, target − consumed), field by field
4. Flags     at most one deficit, one over-risk, one warning
5. Confidence conservative 0.35/0.65 base, nudged up by behaviour + sync

Behaviour (14-day summary) only ever makes the engine *more* sensitive:
a user who keeps overshooting sodium sees the sodium risk earlier, a user
who keeps under-eating protein sees the protein deficit earlier.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core.coerce import clamp01, non_negative, round_half_up
from core.intelligence_config import DEFAULT_INTELLIGENCE_CONFIG, IntelligenceConfig
from core.models.nutrition import (
    MACRO_FIELDS,
    Behavior14Day,
    BehaviorEcho,
    DailyConsumed,
    DailyRemaining,
    DailyTargets,
    DailyVector2,
    DeficitFlag,
    RiskFlag,
    TargetsOverride,
    WarningFlag,
)
from core.models.profile import ProfileSummary

_LOG = logging.getLogger(__name__)

BEHAVIOR_TREND_PCT = 0.6          # "most days" in a 14-day window
SODIUM_RISK_FLOOR_PCT = 0.65
PROTEIN_DEFICIT_FLOOR_G = 10.0
WARNING_CEILING_PCT = 0.9


# ──────────────────────────────────────────────────────────────────────
#  Public entrypoint
# ──────────────────────────────────────────────────────────────────────
def build_daily_vector2(
    profile: ProfileSummary,
    consumed: DailyConsumed | Mapping[str, Any] | None = None,
    targets_override: TargetsOverride | Mapping[str, Any] | None = None,
    behavior14d: Behavior14Day | None = None,
    config: IntelligenceConfig | None = None,
) -> DailyVector2:
    config = config or DEFAULT_INTELLIGENCE_CONFIG

    targets = compute_targets(profile, targets_override, config)
    eaten = coerce_consumed(consumed)
    remaining = DailyRemaining(
        calories=max(0.0, targets.calories - eaten.calories),
        protein_g=max(0.0, targets.protein_g - eaten.protein_g),
        sugar_g=max(0.0, targets.sugar_g_max - eaten.sugar_g),
        sodium_mg=max(0.0, targets.sodium_mg_max - eaten.sodium_mg),
        fiber_g=max(0.0, targets.fiber_g_min - eaten.fiber_g),
        carbs_g=max(0.0, targets.carbs_g_min - eaten.carbs_g),
        fat_g=max(0.0, targets.fat_g_min - eaten.fat_g),
    )

    sodium_pct_threshold = adapt_sodium_threshold(config, behavior14d)
    protein_threshold = adapt_protein_threshold(config, behavior14d)

    sodium_pct = _pct(eaten.sodium_mg, targets.sodium_mg_max)
    sugar_pct = _pct(eaten.sugar_g, targets.sugar_g_max)

    deficit = _pick_deficit(remaining, protein_threshold, config)
    risk = _pick_over_risk(sodium_pct, sugar_pct, sodium_pct_threshold, config)
    warning = _pick_warning(sodium_pct, sugar_pct, sodium_pct_threshold)
    confidence = compute_confidence(eaten, behavior14d, profile.mode)

    _LOG.debug(
        "daily vector: deficit=%s risk=%s warning=%s confidence=%.2f",
        deficit and deficit.key, risk and risk.key, warning and warning.key, confidence,
    )

    return DailyVector2(
        targets=targets,
        consumed=eaten,
        remaining=remaining,
        deficit_of_day=deficit,
        over_risk=risk,
        warning=warning,
        confidence=confidence,
        behavior14d=BehaviorEcho.from_behavior(behavior14d),
    )


# ──────────────────────────────────────────────────────────────────────
#  Targets / consumed
# ──────────────────────────────────────────────────────────────────────
def compute_targets(
    profile: ProfileSummary,
    targets_override: TargetsOverride | Mapping[str, Any] | None,
    config: IntelligenceConfig,
) -> DailyTargets:
    goal = profile.derived.primary_goal
    calories: float = config.targets.calories.for_goal(goal)
    protein: float = config.targets.protein_g.for_goal(goal)

    # order matters: intensity first, activity second, round after each
    for table, key in (
        (config.multipliers.goal_intensity, profile.derived.goal_intensity),
        (config.multipliers.activity_level, profile.derived.activity_level),
    ):
        m = table.get(key) if key else None
        if m is None:
            continue
        if m.calories is not None:
            calories = round_half_up(calories * m.calories)
        if m.protein is not None:
            protein = round_half_up(protein * m.protein)

    base = {
        "calories": calories,
        "protein_g": protein,
        "sugar_g_max": config.targets.sugar_g_max,
        "sodium_mg_max": config.targets.sodium_mg_max,
        "fiber_g_min": config.targets.fiber_g_min,
        "carbs_g_min": config.targets.carbs_g_min,
        "fat_g_min": config.targets.fat_g_min,
    }
    for k, v in _as_dict(targets_override).items():
        if k in base and v is not None:
            base[k] = non_negative(v)
    return DailyTargets(**base)


def coerce_consumed(raw: DailyConsumed | Mapping[str, Any] | None) -> DailyConsumed:
    data = _as_dict(raw)
    return DailyConsumed(**{k: non_negative(data.get(k)) for k in MACRO_FIELDS})


# ──────────────────────────────────────────────────────────────────────
#  Behaviour-aware sensitivity
# ──────────────────────────────────────────────────────────────────────
def adapt_sodium_threshold(config: IntelligenceConfig, behavior: Behavior14Day | None) -> float:
    base = config.thresholds.sodium_risk_pct
    if behavior is None or behavior.high_sodium_days_pct < BEHAVIOR_TREND_PCT:
        return base
    adapted = max(SODIUM_RISK_FLOOR_PCT, base - config.thresholds.behavior_sodium_sensitivity_boost)
    # 0.8 - 0.1 is 0.7000000000000001 in floats
    return round(adapted, 6)


def adapt_protein_threshold(config: IntelligenceConfig, behavior: Behavior14Day | None) -> float:
    base = config.thresholds.protein_deficit_g
    if behavior is None or behavior.low_protein_days_pct < BEHAVIOR_TREND_PCT:
        return base
    return max(PROTEIN_DEFICIT_FLOOR_G, base - config.thresholds.behavior_protein_sensitivity_boost_g)


def compute_confidence(consumed: DailyConsumed, behavior: Behavior14Day | None, mode: str) -> float:
    # deliberately conservative: no logs → 0.35
    c = 0.65 if consumed.calories > 0 else 0.35
    if behavior is not None:
        c += 0.15
    if mode == "sync":
        c += 0.05
    return clamp01(c)


# ──────────────────────────────────────────────────────────────────────
#  Classification (priority order, at most one each)
# ──────────────────────────────────────────────────────────────────────
def _pick_deficit(
    remaining: DailyRemaining, protein_threshold: float, config: IntelligenceConfig
) -> DeficitFlag | None:
    if remaining.protein_g >= protein_threshold:
        return DeficitFlag(key="protein", text="Protein deficit")
    if remaining.fiber_g >= config.thresholds.fiber_deficit_g:
        return DeficitFlag(key="fiber", text="Fiber deficit")
    return None


def _pick_over_risk(
    sodium_pct: float, sugar_pct: float, sodium_threshold: float, config: IntelligenceConfig
) -> RiskFlag | None:
    if sodium_pct >= sodium_threshold:
        return RiskFlag(key="sodium", text="Sodium risk")
    if sugar_pct >= config.thresholds.sugar_risk_pct:
        return RiskFlag(key="sugar", text="Sugar risk")
    return None


def _pick_warning(sodium_pct: float, sugar_pct: float, sodium_threshold: float) -> WarningFlag | None:
    # tighter than the risk threshold: one warning max
    if sodium_pct >= min(WARNING_CEILING_PCT, round(sodium_threshold + 0.1, 6)):
        return WarningFlag(key="sodium", text="At this pace, sodium may exceed by dinner.")
    if sugar_pct >= WARNING_CEILING_PCT:
        return WarningFlag(key="sugar", text="Sugar is trending high today.")
    return None


def _pct(value: float, maximum: float) -> float:
    return value / maximum if maximum > 0 else 0.0


def _as_dict(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if hasattr(raw, "model_dump"):
        return raw.model_dump()
    if isinstance(raw, Mapping):
        return dict(raw)
    return {}
