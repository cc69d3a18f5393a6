"""
core/execution_plan.py
────────────────────────────────────────────────────────────────────────
Turn an ordered option list into the plan the client renders:
primary / secondary pick, a handful of micro-steps, action buttons and,
for the home route, a concrete cook plan.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from core.coerce import clamp01
from core.cook_plan import build_cook_plan
from core.models.decision import (
    BestNextMealIntent,
    DishOption,
    ExecutionPlan,
    GoEatOut,
    HowToCook,
    LogPrompt,
    PlanActions,
    PlanMeta,
)
from core.options import build_dish_options

MAX_MICRO_STEPS = 6
LOG_PROMPT = "Log this meal after you eat (10 seconds)."


def build_execution_plan(
    intent: BestNextMealIntent,
    options: Sequence[DishOption] | None = None,
    now: datetime | None = None,
) -> ExecutionPlan:
    now = now or datetime.now(timezone.utc)
    if not options:
        options = build_dish_options(intent)

    primary = options[0]
    secondary = options[1] if len(options) > 1 else None
    selected = [o for o in (primary, secondary) if o is not None]

    summary = intent.context.macro_gap.summary
    confidence = clamp01(0.55 * intent.context.macro_gap.confidence + 0.45 * primary.confidence)

    eatout = next((o for o in selected if o.execution_hints.channel == "eatout"), None)
    cookable = next((o for o in selected if o.execution_hints.channel != "eatout"), None)
    wants_cook_plan = any(o.execution_hints.channel == "home" for o in selected)

    return ExecutionPlan(
        plan_id=f"plan_{intent.intent_id}_{int(now.timestamp() * 1000)}",
        intent_id=intent.intent_id,
        primary_option=primary,
        secondary_option=secondary,
        micro_steps=build_micro_steps(primary, summary.sodium_risk, summary.sugar_risk),
        actions=PlanActions(
            go_eat_out=GoEatOut(search_key=eatout.execution_hints.search_key) if eatout else None,
            how_to_cook=HowToCook(option_id=cookable.id) if cookable else None,
            log_after_meal_prompt=LogPrompt(prompt=LOG_PROMPT),
        ),
        cook_plan=build_cook_plan(intent) if wants_cook_plan else None,
        meta=PlanMeta(
            confidence=confidence,
            expires_at=intent.expires_at,
            primary_route=primary.execution_hints.channel,
        ),
    )


def build_micro_steps(primary: DishOption, sodium_risk: str, sugar_risk: str) -> list[str]:
    steps = [f'Pick: "{primary.title}".']
    if primary.execution_hints.channel == "eatout":
        steps.append("Order with sauce/dressing on the side.")
    else:
        steps.append("Keep sauce/dressing on the side.")

    if sodium_risk == "high":
        steps.append("Ask for light salt / no extra seasoning.")
    if sugar_risk == "high":
        steps.append("Skip sweet drinks; choose water/unsweetened.")

    steps.append("Eat protein first, then vegetables.")
    steps.append("Log it after (10 seconds).")
    return steps[:MAX_MICRO_STEPS]
