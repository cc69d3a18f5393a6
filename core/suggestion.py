"""
core/suggestion.py
────────────────────────────────────────────────────────────────────────
Home-screen headline ("best next meal") built from the daily vector.

At most `ux.max_bullets` bullets, one line of text capped at
`ux.max_suggestion_chars`, and a single behaviour-driven bullet when the
14-day history shows a trend the vector itself does not already mention.
"""

from __future__ import annotations

from datetime import datetime

from core.coerce import clamp01, clamp_text
from core.daily_vector import BEHAVIOR_TREND_PCT
from core.intelligence_config import DEFAULT_INTELLIGENCE_CONFIG, IntelligenceConfig
from core.intent import infer_time_window
from core.models.decision import BestNextMealV2, SuggestionMeta
from core.models.nutrition import Behavior14Day, DailyVector2, TimeWindow
from core.models.profile import ProfileSummary

_DEFICIT_BULLETS = {
    "protein": "Prioritize a high-protein option.",
    "fiber": "Add fiber (greens, beans, whole grains).",
}
_RISK_BULLETS = {
    "sodium": "Keep sodium low (avoid heavy sauces).",
    "sugar": "Keep added sugar minimal.",
}
FALLBACK_BULLET = "Choose a balanced plate with lean protein + vegetables."
PRIVACY_NOTE = "Private estimate (on-device)."


def build_best_next_meal(
    profile: ProfileSummary,
    vector: DailyVector2,
    time_window: TimeWindow | None = None,
    behavior14d: Behavior14Day | None = None,
    now: datetime | None = None,
    config: IntelligenceConfig | None = None,
) -> BestNextMealV2:
    config = config or DEFAULT_INTELLIGENCE_CONFIG
    window = time_window or infer_time_window(now or datetime.now().astimezone(), config)

    bullets: list[str] = []
    if vector.deficit_of_day is not None:
        bullets.append(_DEFICIT_BULLETS[vector.deficit_of_day.key])
    if vector.over_risk is not None:
        bullets.append(_RISK_BULLETS[vector.over_risk.key])

    trend = _behavior_bullet(behavior14d, bullets)
    if trend:
        bullets.append(trend)
    if not bullets:
        bullets.append(FALLBACK_BULLET)

    capped = bullets[: config.ux.max_bullets]

    cuisine = _cuisine_direction(profile, behavior14d)
    prefix = window.capitalize()
    text = clamp_text(f"{prefix}: {' '.join(capped[:2])}", config.ux.max_suggestion_chars)

    return BestNextMealV2(
        title=f"Best next meal • {cuisine}" if cuisine else "Best next meal",
        suggestion_text=text,
        context_note=PRIVACY_NOTE if profile.mode == "privacy" else None,
        meta=SuggestionMeta(
            time_window=window,
            confidence=clamp01(vector.confidence),
            bullets=capped,
            next_action=f"Aim for {cuisine} style choices." if cuisine else None,
        ),
    )


def _behavior_bullet(behavior: Behavior14Day | None, bullets: list[str]) -> str | None:
    if behavior is None:
        return None
    said = " ".join(bullets).lower()
    if behavior.high_sodium_days_pct >= BEHAVIOR_TREND_PCT and "sodium" not in said:
        return "You've been trending high on sodium, go lighter today."
    if behavior.low_protein_days_pct >= BEHAVIOR_TREND_PCT and "protein" not in said:
        return "Protein has been low recently, aim higher this meal."
    return None


def _cuisine_direction(profile: ProfileSummary, behavior: Behavior14Day | None) -> str | None:
    if behavior is not None and behavior.common_cuisine:
        return behavior.common_cuisine
    return profile.derived.cuisines[0] if profile.derived.cuisines else None
