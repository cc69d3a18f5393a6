# tests/test_options.py
"""
Option synthesis – counts, ordering and confidence arithmetic.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.daily_vector import build_daily_vector2
from core.intent import build_best_next_meal_intent
from core.options import build_dish_options, build_search_key
from core.profile import build_profile_summary

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


def _intent(consumed=None, max_options=None, intel=None, mode="privacy", window="lunch"):
    profile = build_profile_summary(mode, intel=intel, user_id="u1")
    vector = build_daily_vector2(profile, consumed=consumed)
    return build_best_next_meal_intent(
        profile, vector, now=NOW, max_options=max_options, time_window=window
    )


# --- fresh day: big protein + fiber gap, low confidence -----------------
def test_two_eatout_options_by_default():
    opts = build_dish_options(_intent())
    assert [o.id for o in opts] == ["opt_a", "opt_b"]
    assert all(o.execution_hints.channel == "eatout" for o in opts)


def test_protein_gap_tags_and_boosts_primary():
    plate = build_dish_options(_intent())[0]
    assert "protein" in plate.tags
    # 0.45 + 0.45 × 0.35 + 0.03
    assert plate.confidence == pytest.approx(0.6375)


def test_salad_is_slightly_less_confident():
    a, b = build_dish_options(_intent())
    assert b.confidence == pytest.approx(a.confidence - 0.05)


# --- third option ---------------------------------------------------------
def test_bowl_when_three_allowed_and_fiber_short():
    opts = build_dish_options(
        _intent(consumed={"calories": 1600, "fiber_g": 18, "protein_g": 100}, max_options=3)
    )
    assert [o.id for o in opts] == ["opt_a", "opt_b", "opt_c"]
    assert opts[2].confidence == pytest.approx(opts[0].confidence - 0.08)
    assert "fiber" in opts[2].tags


def test_no_bowl_when_fiber_fine_and_calories_low():
    opts = build_dish_options(
        _intent(consumed={"calories": 1900, "fiber_g": 26, "protein_g": 100}, max_options=3)
    )
    assert [o.id for o in opts] == ["opt_a", "opt_b", "opt_home"]


# --- routing places the home analog ----------------------------------------
def test_home_heavy_puts_home_first():
    opts = build_dish_options(_intent(intel={"eating_style": "home-heavy"}))
    home, plate = opts
    assert home.id == "opt_home"
    assert home.execution_hints.channel == "home"
    assert home.title == f"Home-cooked {plate.title.lower()}"
    assert home.confidence == pytest.approx(plate.confidence + 0.05)


def test_sodium_risk_routes_home_and_adds_constraint():
    opts = build_dish_options(_intent(consumed={"calories": 1200, "sodium_mg": 2100}))
    assert opts[0].id == "opt_home"
    assert "low-sodium" in opts[0].execution_hints.constraints
    assert "no sauce" in opts[1].execution_hints.search_key


# --- invariants ---------------------------------------------------------------
@pytest.mark.parametrize("max_options", [2, 3])
@pytest.mark.parametrize(
    "consumed",
    [None, {"calories": 2000, "sugar_g": 39, "sodium_mg": 2250}, {"calories": 600, "fiber_g": 2}],
)
def test_bounds_hold(max_options, consumed):
    opts = build_dish_options(_intent(consumed=consumed, max_options=max_options))
    assert 2 <= len(opts) <= max_options
    for o in opts:
        assert len(o.tags) <= 2
        assert len(o.execution_hints.constraints) <= 6
        assert 0 <= o.confidence <= 1


def test_same_intent_same_options():
    intent = _intent(consumed={"calories": 900, "sodium_mg": 1900}, max_options=3)
    assert build_dish_options(intent) == build_dish_options(intent)


def test_search_key_skips_blanks_and_lowercases():
    assert build_search_key("Thai", ["Salad", None, " ", "no sauce"]) == "thai | salad | no sauce"
