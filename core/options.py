"""
core/options.py
────────────────────────────────────────────────────────────────────────
Deterministic dish options for an intent (2–3, never more).

  opt_a     eat-out protein plate        always
  opt_b     eat-out salad + protein      always
  opt_c     eat-out beans + veg bowl     only when 3 options are allowed and
                                         fiber is short or calories are plenty
  opt_home  home-cooked analog of opt_a  always, placed by the route decider

Same intent in → same list out.  No clock, no randomness.
"""

from __future__ import annotations

import logging
from typing import Iterable

from core.coerce import clamp01, uniq_normalized
from core.drivers import GapDrivers
from core.models.decision import BestNextMealIntent, DishOption, ExecutionHints
from core.models.nutrition import TimeWindow
from core.routing import decide_route

_LOG = logging.getLogger(__name__)

DEFAULT_CUISINE = "healthy"
BOWL_CALORIES_MIN = 550


def build_dish_options(intent: BestNextMealIntent) -> list[DishOption]:
    ctx = intent.context
    gap = ctx.macro_gap
    cuisine = ctx.cuisines[0] if ctx.cuisines else DEFAULT_CUISINE
    d = GapDrivers.from_gap(gap)
    constraints = d.constraints()
    base = base_option_confidence(gap.confidence, d)

    plate = _make_option(
        "opt_a",
        title=_plate_title(ctx.time_window, cuisine),
        why=_plate_why(d),
        tags=_pick_tags(d),
        confidence=base,
        channel="eatout",
        search_key=build_search_key(cuisine, [
            "grilled chicken" if d.needs_protein else "lean protein",
            "vegetables",
            "no sauce" if d.sodium_high else None,
        ]),
        constraints=constraints,
    )

    eatout = [plate]
    eatout.append(
        _make_option(
            "opt_b",
            title=f"{cuisine} salad + protein",
            why=(
                "Keeps sodium under control while closing your protein gap."
                if d.sodium_high
                else "Light but filling: protein + fiber without overdoing calories."
            ),
            tags=_pick_tags(d),
            confidence=base - 0.05,
            channel="eatout",
            search_key=build_search_key(cuisine, [
                "salad",
                "double chicken" if d.needs_protein else "protein add-on",
                "dressing on side" if d.sodium_high else None,
            ]),
            constraints=constraints,
        )
    )

    max_options = intent.decision_policy.max_options
    if max_options == 3 and (d.needs_fiber or gap.summary.calories_remaining >= BOWL_CALORIES_MIN):
        eatout.append(
            _make_option(
                "opt_c",
                title=f"{cuisine} bowl (beans + veg)",
                why=(
                    "Beans + vegetables close your fiber gap fast."
                    if d.needs_fiber
                    else "Balanced bowl: steady energy without a sugar spike."
                ),
                tags=["fiber", "protein" if d.needs_protein else "balanced"],
                confidence=base - 0.08,
                channel="eatout",
                search_key=build_search_key(cuisine, [
                    "bowl",
                    "beans",
                    "add chicken" if d.needs_protein else None,
                    "light salsa" if d.sodium_high else None,
                ]),
                constraints=constraints,
            )
        )

    home = _make_option(
        "opt_home",
        title=f"Home-cooked {plate.title.lower()}",
        why="Same plate at home: you control the salt, oil and portion.",
        tags=list(plate.tags),
        confidence=plate.confidence + 0.05,
        channel="home",
        search_key=build_search_key(cuisine, ["home", "lean protein", "vegetables"]),
        constraints=constraints,
    )

    decision = decide_route(intent)
    ordered = [home, *eatout] if decision.route == "home" else [*eatout, home]
    _LOG.debug("options for %s: route=%s (%s)", intent.intent_id, decision.route, decision.reason)

    return ordered[:max_options]


def base_option_confidence(intent_confidence: float, d: GapDrivers) -> float:
    c = 0.45 + 0.45 * clamp01(intent_confidence)
    if d.control_needed:
        c -= 0.05   # harder constraints, slightly less sure
    if d.needs_protein:
        c += 0.03
    return clamp01(c)


def build_search_key(cuisine: str, tokens: Iterable[str | None]) -> str:
    parts = [p.strip() for p in (cuisine, *tokens) if p and p.strip()]
    return " | ".join(parts).lower()


# ──────────────────────────────── Helpers ────────────────────────────────

def _make_option(
    option_id: str,
    *,
    title: str,
    why: str,
    tags: list[str],
    confidence: float,
    channel: str,
    search_key: str,
    constraints: list[str],
) -> DishOption:
    return DishOption(
        id=option_id,
        title=title,
        why=why,
        tags=tags[:2],
        confidence=clamp01(confidence),
        execution_hints=ExecutionHints(
            channel=channel,
            search_key=search_key,
            constraints=uniq_normalized(constraints)[:6],
        ),
    )


def _plate_title(window: TimeWindow, cuisine: str) -> str:
    base = "Protein breakfast" if window == "breakfast" else "Lean protein plate"
    return f"{base} • {cuisine}" if cuisine else base


def _plate_why(d: GapDrivers) -> str:
    if d.sodium_high:
        return "High-protein, lighter on sodium: a simple win for today."
    if d.sugar_high:
        return "High-protein, low added sugar: keeps the day on track."
    if d.needs_protein and d.needs_fiber:
        return "Closes protein + fiber gaps with minimal decision-making."
    if d.needs_protein:
        return "Fastest way to close your protein gap this meal."
    if d.needs_fiber:
        return "Adds fiber without blowing calories."
    return "Balanced, easy to execute."


def _pick_tags(d: GapDrivers) -> list[str]:
    tags: list[str] = []
    if d.needs_protein:
        tags.append("protein")
    if d.sodium_high:
        tags.append("low-sodium")
    return tags[:2] or ["balanced"]
