"""
core/macro_gap.py
────────────────────────────────────────────────────────────────────────
Turn a `DailyVector2` into the signed gaps and coarse risk buckets the
decision stages consume.
"""

from __future__ import annotations

from core.coerce import clamp01
from core.intelligence_config import DEFAULT_INTELLIGENCE_CONFIG, IntelligenceConfig
from core.models.decision import GapDelta, GapSummary, MacroGap, RiskLevel
from core.models.nutrition import DailyVector2


def risk_bucket(pct: float, config: IntelligenceConfig | None = None) -> RiskLevel:
    buckets = (config or DEFAULT_INTELLIGENCE_CONFIG).risk
    if pct >= buckets.high_pct:
        return "high"
    if pct >= buckets.medium_pct:
        return "medium"
    return "low"


def compute_macro_gap_from_vector(
    vector: DailyVector2, config: IntelligenceConfig | None = None
) -> MacroGap:
    consumed, targets = vector.consumed, vector.targets

    sugar_pct = consumed.sugar_g / targets.sugar_g_max if targets.sugar_g_max > 0 else 0.0
    sodium_pct = consumed.sodium_mg / targets.sodium_mg_max if targets.sodium_mg_max > 0 else 0.0

    calories_delta = targets.calories - consumed.calories
    protein_delta = targets.protein_g - consumed.protein_g
    fiber_delta = targets.fiber_g_min - consumed.fiber_g

    return MacroGap(
        consumed=consumed,
        targets=targets,
        delta=GapDelta(
            calories=calories_delta,
            protein_g=protein_delta,
            fiber_g=fiber_delta,
            sugar_g_remaining=max(0.0, targets.sugar_g_max - consumed.sugar_g),
            sodium_mg_remaining=max(0.0, targets.sodium_mg_max - consumed.sodium_mg),
        ),
        summary=GapSummary(
            protein_gap_g=max(0.0, protein_delta),
            fiber_gap_g=max(0.0, fiber_delta),
            calories_remaining=max(0.0, calories_delta),
            sugar_risk=risk_bucket(sugar_pct, config),
            sodium_risk=risk_bucket(sodium_pct, config),
        ),
        confidence=clamp01(vector.confidence),
    )
