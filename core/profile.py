"""
core/profile.py
────────────────────────────────────────────────────────────────────────
Assemble the read-only `ProfileSummary` the engine consumes.

Privacy mode never carries server-backed preferences, even if the caller
passed some; compliance flags make that explicit for anything downstream.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.coerce import uniq_normalized
from core.models.profile import AppMode, DerivedSignals, Preferences, ProfileIntel, ProfileSummary, Compliance


def build_profile_summary(
    mode: AppMode,
    preferences: Preferences | Mapping[str, Any] | None = None,
    intel: ProfileIntel | Mapping[str, Any] | None = None,
    user_id: str | None = None,
    member_id: str | None = None,
) -> ProfileSummary:
    prefs = _as_model(Preferences, preferences) if mode == "sync" else None
    intel_m = _as_model(ProfileIntel, intel) or ProfileIntel()

    derived = DerivedSignals(
        cuisines=uniq_normalized(prefs.cuisines if prefs else []),
        primary_goal=prefs.goal if prefs else "maintain",
        goal_intensity=intel_m.goal_intensity,
        activity_level=intel_m.activity_level,
        eating_style=intel_m.eating_style,
        protein_preference=intel_m.protein_preference,
        carb_sensitive=intel_m.carb_sensitive,
        portion_appetite=intel_m.portion_appetite,
        wake_time=intel_m.wake_time,
        dinner_time=intel_m.dinner_time,
        meals_per_day=intel_m.meals_per_day,
        stress_level=intel_m.stress_level,
    )

    return ProfileSummary(
        mode=mode,
        preferences=prefs,
        intel=intel_m,
        derived=derived,
        compliance=Compliance(
            can_use_sync_profile=mode == "sync",
            can_use_cloud_ai=mode == "sync",
        ),
        user_id=user_id or None,
        member_id=member_id or None,
    )


def _as_model(cls, value):
    if value is None:
        return None
    if isinstance(value, cls):
        return value
    return cls.model_validate(value)
