# tests/test_intent.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.daily_vector import build_daily_vector2
from core.intelligence_config import DEFAULT_INTELLIGENCE_CONFIG
from core.intent import build_best_next_meal_intent, infer_time_window, stable_intent_id
from core.profile import build_profile_summary

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

PRIVACY = build_profile_summary("privacy", user_id="u1")
SYNC = build_profile_summary("sync", preferences={"cuisines": ["Thai"]}, user_id="u1", member_id="kid")


def _intent(profile=PRIVACY, consumed=None, **kw):
    vector = build_daily_vector2(profile, consumed=consumed)
    return build_best_next_meal_intent(profile, vector, now=kw.pop("now", NOW), **kw)


# ── time window ──────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "hour, window",
    [(0, "breakfast"), (9, "breakfast"), (10, "lunch"), (13, "lunch"), (14, "snack"), (16, "snack"), (17, "dinner"), (23, "dinner")],
)
def test_default_brackets(hour, window):
    assert infer_time_window(NOW.replace(hour=hour)) == window


def test_brackets_are_configurable():
    cfg = DEFAULT_INTELLIGENCE_CONFIG.with_overrides({"intent": {"breakfast_until_hour": 11}})
    assert infer_time_window(NOW.replace(hour=10), cfg) == "breakfast"


# ── intent id ────────────────────────────────────────────────────────
def test_intent_id_template():
    assert stable_intent_id("sync", "2026-10-17", "lunch") == "intent_u_m_sync_2026-10-17_lunch"
    assert stable_intent_id("privacy", "2026-10-17", "dinner", "u1", "kid") == (
        "intent_u1_kid_privacy_2026-10-17_dinner"
    )


def test_intent_id_stable_within_window_and_sensitive_to_inputs():
    a = _intent()
    b = _intent(now=NOW + timedelta(minutes=30))
    assert a.intent_id == b.intent_id
    assert _intent(profile=SYNC).intent_id != a.intent_id
    assert _intent(now=NOW.replace(hour=18)).intent_id != a.intent_id


# ── ttl / policy ─────────────────────────────────────────────────────
def test_expires_after_default_ttl():
    intent = _intent()
    assert intent.generated_at == NOW
    assert intent.expires_at - intent.generated_at == timedelta(minutes=10)


def test_custom_ttl():
    assert _intent(ttl_minutes=30).expires_at == NOW + timedelta(minutes=30)


@pytest.mark.parametrize("requested, expected", [(None, 2), (2, 2), (3, 3), (5, 2), (1, 2)])
def test_max_options_coerced(requested, expected):
    assert _intent(max_options=requested).decision_policy.max_options == expected


def test_low_confidence_asks_one_question():
    assert _intent().decision_policy.fallback_if_low_confidence == "ask-one-question"
    intent = _intent(profile=SYNC, consumed={"calories": 900})
    assert intent.decision_policy.fallback_if_low_confidence == "show-two-safe-defaults"


# ── context ──────────────────────────────────────────────────────────
def test_context_carries_cuisine_and_gap():
    intent = _intent(profile=SYNC)
    assert intent.mode == "sync"
    assert intent.context.cuisines == ["Thai"]
    assert intent.context.time_window == "lunch"
    assert intent.context.macro_gap.summary.protein_gap_g == 110


def test_no_cuisine_in_privacy_mode():
    assert _intent().context.cuisines == []


def test_explicit_time_window_wins():
    assert _intent(time_window="dinner").context.time_window == "dinner"
