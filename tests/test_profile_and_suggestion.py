# tests/test_profile_and_suggestion.py
from __future__ import annotations

from datetime import datetime, timezone

from core.daily_vector import build_daily_vector2
from core.intelligence_config import DEFAULT_INTELLIGENCE_CONFIG
from core.models.nutrition import Behavior14Day
from core.profile import build_profile_summary
from core.suggestion import FALLBACK_BULLET, PRIVACY_NOTE, build_best_next_meal

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)
PREFS = {"goal": "lose", "cuisines": [" Thai ", "thai", "", "Mexican"], "health": {"high_bp": True}}


# ── profile ──────────────────────────────────────────────────────────
def test_privacy_mode_drops_preferences():
    p = build_profile_summary("privacy", preferences=PREFS, intel={"activity_level": "active"})
    assert p.preferences is None
    assert p.derived.cuisines == []
    assert p.derived.primary_goal == "maintain"
    assert p.derived.activity_level == "active"
    assert not p.compliance.can_use_sync_profile
    assert not p.compliance.can_use_cloud_ai


def test_sync_mode_normalizes_cuisines():
    p = build_profile_summary("sync", preferences=PREFS, user_id="u1", member_id="")
    assert p.preferences.health.high_bp
    assert p.derived.cuisines == ["Thai", "Mexican"]
    assert p.derived.primary_goal == "lose"
    assert p.compliance.can_use_sync_profile and p.compliance.can_use_cloud_ai
    assert p.user_id == "u1"
    assert p.member_id is None


# ── best next meal headline ─────────────────────────────────────────
def _headline(profile, consumed=None, behavior=None, config=None):
    vector = build_daily_vector2(profile, consumed=consumed, behavior14d=behavior)
    return build_best_next_meal(
        profile, vector, time_window="lunch", behavior14d=behavior, now=NOW, config=config
    )


def test_bullets_from_deficit_and_risk():
    h = _headline(build_profile_summary("privacy"), consumed={"calories": 900, "sodium_mg": 2000})
    assert h.meta.bullets == [
        "Prioritize a high-protein option.",
        "Keep sodium low (avoid heavy sauces).",
    ]
    assert h.suggestion_text.startswith("Lunch: Prioritize")
    assert h.context_note == PRIVACY_NOTE


def test_behavior_bullet_only_when_not_already_said():
    trend = Behavior14Day(high_sodium_days_pct=0.8)
    h = _headline(build_profile_summary("privacy"), consumed={"protein_g": 110, "fiber_g": 28}, behavior=trend)
    assert h.meta.bullets == ["You've been trending high on sodium, go lighter today."]


def test_fallback_bullet_when_nothing_stands_out():
    h = _headline(build_profile_summary("sync"), consumed={"calories": 1000, "protein_g": 110, "fiber_g": 28})
    assert h.meta.bullets == [FALLBACK_BULLET]
    assert h.context_note is None
    assert h.title == "Best next meal"


def test_ux_caps_apply():
    cfg = DEFAULT_INTELLIGENCE_CONFIG.with_overrides({"ux": {"max_bullets": 1, "max_suggestion_chars": 20}})
    h = _headline(build_profile_summary("privacy"), consumed={"sodium_mg": 2000}, config=cfg)
    assert len(h.meta.bullets) == 1
    assert len(h.suggestion_text) <= 20
    assert h.suggestion_text.endswith("…")


def test_cuisine_direction_prefers_behavior():
    p = build_profile_summary("sync", preferences={"cuisines": ["Mexican"]})
    assert _headline(p).title == "Best next meal • Mexican"
    h = _headline(p, behavior=Behavior14Day(common_cuisine="Korean"))
    assert h.title == "Best next meal • Korean"
    assert h.meta.next_action == "Aim for Korean style choices."
