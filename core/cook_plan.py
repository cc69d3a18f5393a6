"""
core/cook_plan.py
────────────────────────────────────────────────────────────────────────
Heuristic home-cook plan for the "home" route.

Chicken breast carries roughly 23 g protein per 100 g, so the protein
target (35–60 g) maps onto 160–240 g of chicken; everything else is a
fixed, calm five-step pan recipe.
"""

from __future__ import annotations

from core.coerce import clamp, round_half_up
from core.drivers import GapDrivers
from core.models.decision import BestNextMealIntent, ModularPrepPlan, PrepStep, Quantity

PROTEIN_PER_100G_CHICKEN = 23
PROTEIN_TARGET_RANGE = (35, 60)
CHICKEN_GRAMS_RANGE = (160, 240)

_DISH_BY_CUISINE = (
    ("thai", "Thai lean basil bowl"),
    ("japanese", "Japanese protein bowl"),
    ("mediterranean", "Mediterranean chicken bowl"),
)


def build_cook_plan(intent: BestNextMealIntent) -> ModularPrepPlan:
    ctx = intent.context
    d = GapDrivers.from_gap(ctx.macro_gap)

    protein_target = clamp(ctx.macro_gap.summary.protein_gap_g, *PROTEIN_TARGET_RANGE)
    chicken_g = int(clamp(
        round_half_up(protein_target / PROTEIN_PER_100G_CHICKEN * 100), *CHICKEN_GRAMS_RANGE
    ))

    quantities = [
        Quantity(ingredient="Chicken breast", grams=chicken_g,
                 notes=f"~{round_half_up(protein_target)} g protein"),
        Quantity(ingredient="Mixed vegetables", grams=150,
                 notes="extra greens for fiber" if d.needs_fiber else None),
        Quantity(ingredient="Cooked rice or quinoa", grams=120,
                 notes="quinoa keeps it steadier" if d.sugar_high else None),
        Quantity(ingredient="Olive oil", grams=5),
        Quantity(ingredient="Fresh herbs or lemon", grams=10,
                 notes="season with these instead of salt" if d.sodium_high else None),
    ]

    steps = [
        PrepStep(step=1, action="Preheat pan", temperature_c=190, time_minutes=2),
        PrepStep(step=2, action="Add olive oil"),
        PrepStep(step=3, action="Cook chicken 5 min per side", time_minutes=10),
        PrepStep(step=4, action="Add vegetables 3-4 min", time_minutes=4),
        PrepStep(step=5, action="Assemble and serve", time_minutes=1),
    ]

    return ModularPrepPlan(
        dish_name=_dish_name(ctx.cuisines[0] if ctx.cuisines else None),
        total_minutes=sum(s.time_minutes or 0 for s in steps),
        quantities=quantities,
        prep_steps=steps,
        constraints=_constraints(d),
    )


def _dish_name(cuisine: str | None) -> str:
    c = (cuisine or "").lower()
    for key, name in _DISH_BY_CUISINE:
        if key in c:
            return name
    return "Lean protein bowl"


def _constraints(d: GapDrivers) -> list[str]:
    out: list[str] = []
    if d.sodium_high:
        out.append("No added salt; skip soy sauce and stock cubes.")
    if d.sugar_high:
        out.append("No sweet glazes or sugary sauces.")
    if d.needs_protein:
        out.append("Keep the full chicken portion.")
    if d.needs_fiber:
        out.append("Double the vegetables.")
    return out
