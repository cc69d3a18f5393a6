"""
core/routing.py
────────────────────────────────────────────────────────────────────────
Home vs eat-out for the primary suggestion.  First matching rule wins:

  1. eating style      home-heavy → home, eat-out-heavy → eatout
  2. control needed    sodium or sugar risk high → home
  3. late-trend dinner dinner window and late eating ≥ 60 % → home
  4. low confidence    < 0.45 → eatout (fewest steps)
  5. default           eatout
"""

from __future__ import annotations

from core.drivers import GapDrivers
from core.models.decision import BestNextMealIntent, RouteDecision

LATE_EATING_TREND_PCT = 0.6
LOW_CONFIDENCE = 0.45


def decide_route(intent: BestNextMealIntent) -> RouteDecision:
    ctx = intent.context

    if ctx.eating_style == "home-heavy":
        return RouteDecision(route="home", reason="eating-style")
    if ctx.eating_style == "eat-out-heavy":
        return RouteDecision(route="eatout", reason="eating-style")

    if GapDrivers.from_gap(ctx.macro_gap).control_needed:
        return RouteDecision(route="home", reason="control-needed")

    late = (ctx.behavior14d.late_eating_pct if ctx.behavior14d else None) or 0.0
    if ctx.time_window == "dinner" and late >= LATE_EATING_TREND_PCT:
        return RouteDecision(route="home", reason="late-trend")

    if ctx.macro_gap.confidence < LOW_CONFIDENCE:
        return RouteDecision(route="eatout", reason="low-confidence")

    return RouteDecision(route="eatout", reason="default")
