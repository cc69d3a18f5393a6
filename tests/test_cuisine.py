# tests/test_cuisine.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from core.cuisine import fnv1a_32, normalize_cuisines, pick_cuisine_hint, utc_day

NOW = datetime(2026, 10, 17, 12, 30, tzinfo=timezone.utc)
CUISINES = ["Thai", "Mexican", "Japanese", "Mediterranean"]


# ── FNV-1a reference vectors ─────────────────────────────────────────
def test_fnv1a_known_values():
    assert fnv1a_32("") == 0x811C9DC5
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968


def test_fnv1a_is_unsigned_32_bit():
    h = fnv1a_32("intent_u_m_sync_2026-10-17_lunch")
    assert 0 <= h <= 0xFFFFFFFF


# ── normalisation ───────────────────────────────────────────────────
def test_normalize_trims_and_dedupes_case_insensitively():
    assert normalize_cuisines([" Thai ", "thai", "", None, "Mexican", "MEXICAN"]) == ["Thai", "Mexican"]


# ── pick ─────────────────────────────────────────────────────────────
def test_pick_is_deterministic():
    a = pick_cuisine_hint(CUISINES, None, NOW, user_id="u1", intent_id="i1")
    b = pick_cuisine_hint(CUISINES, None, NOW, user_id="u1", intent_id="i1")
    assert a == b
    assert a in CUISINES


def test_pick_uses_modulo_of_seed_hash():
    fingerprint = fnv1a_32("|".join(c.lower() for c in CUISINES))
    seed = f"u1|m1|i1|2026-10-17|{fingerprint}"
    expected = CUISINES[fnv1a_32(seed) % len(CUISINES)]
    assert pick_cuisine_hint(CUISINES, None, NOW, "u1", "m1", "i1") == expected


def test_behavior_cuisine_moves_to_front():
    candidates = ["Japanese", "Thai", "Mexican"]
    reordered = ["Thai", "Japanese", "Mexican"]
    fingerprint = fnv1a_32("|".join(c.lower() for c in reordered))
    seed = f"u1||i1|2026-10-17|{fingerprint}"
    expected = reordered[fnv1a_32(seed) % 3]
    assert pick_cuisine_hint(candidates, "Thai", NOW, user_id="u1", intent_id="i1") == expected


def test_behavior_cuisine_alone():
    assert pick_cuisine_hint([], "Korean", NOW) == "Korean"
    assert pick_cuisine_hint(None, "  ", NOW) is None


def test_single_candidate_always_wins():
    assert pick_cuisine_hint(["Thai"], None, NOW) == "Thai"


def test_utc_day_for_aware_datetimes():
    late_evening_west = datetime(2026, 10, 17, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert utc_day(late_evening_west) == "2026-10-18"
