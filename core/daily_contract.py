"""
core/daily_contract.py
────────────────────────────────────────────────────────────────────────
One committed micro-goal per user-day.

Exactly one contract is chosen, by priority:

  protein gap ≥ 35 g        → "Protein Close"    target 35–90 g
  fiber gap ≥ 10 g          → "Fiber Rescue"     target 10–25 g
  calories exceeded ≥ 250   → "Calorie Cap"      target 250–900 kcal
  otherwise                 → "Clean Execution"  2 clean meals

Computation is pure; the status lifecycle is applied by the persistence
layer using `can_transition`.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.coerce import clamp, non_negative, round_half_up, to_number
from core.models.contract import (
    ContractMetric,
    ContractProgress,
    ContractStatus,
    DailyContract,
    PlaybookItem,
)
from core.models.decision import DishOption, MacroGap

PROTEIN_CLOSE_MIN_G = 35
FIBER_RESCUE_MIN_G = 10
CALORIE_CAP_MIN_KCAL = 250
CLEAN_MEALS_TARGET = 2
MAX_PLAYBOOK = 2
MAX_ADJUST_PCT = 20

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "draft": frozenset({"active", "expired"}),
    "active": frozenset({"completed", "failed", "expired"}),
    "completed": frozenset(),
    "failed": frozenset(),
    "expired": frozenset(),
}


def contract_input_from_macro_gap(gap: MacroGap) -> dict[str, float]:
    """`calories_kcal` stays signed: negative means the day is already over."""
    return {
        "protein_g": gap.summary.protein_gap_g,
        "fiber_g": gap.summary.fiber_gap_g,
        "calories_kcal": gap.delta.calories,
    }


def compute_daily_contract(
    user_id: str,
    day_key: str,
    macro_gap: MacroGap | Mapping[str, Any],
    best_next_meal_options: Sequence[DishOption | Mapping[str, Any]] | None = None,
) -> DailyContract:
    gap = contract_input_from_macro_gap(macro_gap) if isinstance(macro_gap, MacroGap) else macro_gap

    protein_gap = non_negative(gap.get("protein_g"))
    fiber_gap = non_negative(gap.get("fiber_g"))
    calories_left = to_number(gap.get("calories_kcal"))
    exceeded = -calories_left if calories_left < 0 else 0.0

    if protein_gap >= PROTEIN_CLOSE_MIN_G:
        kind, title, why = "macro_gap", "Protein Close", "One clean meal closes the gap."
        metric = ContractMetric(
            name="protein_g", operator=">=", unit="g",
            target=round_half_up(clamp(protein_gap, PROTEIN_CLOSE_MIN_G, 90)),
        )
    elif fiber_gap >= FIBER_RESCUE_MIN_G:
        kind, title, why = "macro_gap", "Fiber Rescue", "Fiber closes appetite + stabilizes the day."
        metric = ContractMetric(
            name="fiber_g", operator=">=", unit="g",
            target=round_half_up(clamp(fiber_gap, FIBER_RESCUE_MIN_G, 25)),
        )
    elif exceeded >= CALORIE_CAP_MIN_KCAL:
        kind, title, why = "macro_gap", "Calorie Cap", "Keep the next decision light and clean."
        metric = ContractMetric(
            name="calories_kcal", operator="<=", unit="kcal",
            target=round_half_up(clamp(exceeded, CALORIE_CAP_MIN_KCAL, 900)),
        )
    else:
        kind, title, why = "execution", "Clean Execution", "Simple execution keeps you on track."
        metric = ContractMetric(
            name="clean_meals", operator=">=", unit="count", target=CLEAN_MEALS_TARGET,
        )

    return DailyContract(
        id=f"dc_{day_key}_{user_id}",
        day_key=day_key,
        status="draft",
        kind=kind,
        title=title,
        statement=contract_statement(metric),
        why=why,
        metric=metric,
        progress=ContractProgress(current=0, target=metric.target, pct=0),
        playbook=build_playbook(best_next_meal_options),
    )


def contract_statement(metric: ContractMetric) -> str:
    target = round_half_up(metric.target)
    if metric.name == "protein_g":
        return f"Add +{target}g protein today."
    if metric.name == "fiber_g":
        return f"Add +{target}g fiber today."
    if metric.name == "calories_kcal":
        return f"Recover: stay within -{target} kcal from here."
    return f"Complete {target} clean meals today."


def build_playbook(options: Sequence[DishOption | Mapping[str, Any]] | None) -> list[PlaybookItem]:
    items: list[PlaybookItem] = []
    for i, opt in enumerate((options or [])[:MAX_PLAYBOOK], start=1):
        if isinstance(opt, DishOption):
            kind = opt.execution_hints.channel
            label = opt.title
            payload: Any = {"option_id": opt.id, "search_key": opt.execution_hints.search_key}
        else:
            kind = opt.get("kind")
            label = str(opt.get("title") or "")
            payload = opt.get("payload")
        items.append(PlaybookItem(
            id=f"pb{i}",
            label=label,
            route="cook" if kind == "home" else "eatout",
            payload=payload,
        ))
    return items


def progress_pct(current: float, target: float) -> int:
    if target <= 0:
        return 0
    return int(clamp(round_half_up(current / target * 100), 0, 100))


def evaluate_contract_progress(contract: DailyContract, totals: Mapping[str, Any]) -> DailyContract:
    """
    Recompute progress from externally supplied day totals.

    `totals` keys: protein_g, fiber_g, clean_meals and, for the calorie
    cap, calories_over_kcal (how far over the day already is).
    """
    key = "calories_over_kcal" if contract.metric.name == "calories_kcal" else contract.metric.name
    current = non_negative(totals.get(key))
    target = contract.metric.target
    return contract.model_copy(update={
        "progress": ContractProgress(current=current, target=target, pct=progress_pct(current, target)),
    })


def adjust_contract_target(contract: DailyContract, delta_pct: float) -> DailyContract:
    """Nudge the target by at most ±20 %; statement and progress follow."""
    d = clamp(to_number(delta_pct), -MAX_ADJUST_PCT, MAX_ADJUST_PCT)
    target = max(1, round_half_up(contract.metric.target * (1 + d / 100)))
    metric = contract.metric.model_copy(update={"target": target})
    current = contract.progress.current
    return contract.model_copy(update={
        "metric": metric,
        "statement": contract_statement(metric),
        "progress": ContractProgress(current=current, target=target, pct=progress_pct(current, target)),
    })


def can_transition(current: ContractStatus, target: ContractStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())
