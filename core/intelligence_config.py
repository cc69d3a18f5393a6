"""
core/intelligence_config.py
────────────────────────────────────────────────────────────────────────
Every tunable knob of the intelligence engine in one immutable object.

The defaults below are the production numbers.  A caller that needs a
different behaviour (A/B test, per-request experiment) derives a copy with
`IntelligenceConfig.with_overrides({...})` instead of mutating anything.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

Goal = Literal["lose", "maintain", "gain"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# ──────────────────────────────────────────────────────────────────────
#  Sections
# ──────────────────────────────────────────────────────────────────────
class GoalTable(_Frozen):
    lose: float
    maintain: float
    gain: float

    def for_goal(self, goal: str) -> float:
        return getattr(self, goal, self.maintain)


class TargetDefaults(_Frozen):
    calories: GoalTable = GoalTable(lose=1800, maintain=2200, gain=2600)
    protein_g: GoalTable = GoalTable(lose=130, maintain=110, gain=120)
    sugar_g_max: float = 40
    sodium_mg_max: float = 2300
    fiber_g_min: float = 28
    carbs_g_min: float = 28
    fat_g_min: float = 28


class Multiplier(_Frozen):
    calories: float | None = None
    protein: float | None = None


class Multipliers(_Frozen):
    goal_intensity: dict[str, Multiplier] = Field(
        default_factory=lambda: {
            "light": Multiplier(calories=1.0, protein=1.0),
            "moderate": Multiplier(calories=0.95, protein=1.05),
            "aggressive": Multiplier(calories=0.9, protein=1.1),
        }
    )
    activity_level: dict[str, Multiplier] = Field(
        default_factory=lambda: {
            "sedentary": Multiplier(calories=0.95, protein=1.0),
            "moderate": Multiplier(calories=1.0, protein=1.0),
            "active": Multiplier(calories=1.08, protein=1.05),
        }
    )


class Thresholds(_Frozen):
    protein_deficit_g: float = 25
    fiber_deficit_g: float = 8
    sodium_risk_pct: float = 0.8
    sugar_risk_pct: float = 0.8
    carbs_risk_pct: float = 0.8
    fat_risk_pct: float = 0.8
    fiber_risk_pct: float = 0.8
    # repeated overshoot makes the engine trigger earlier
    behavior_sodium_sensitivity_boost: float = 0.1
    behavior_protein_sensitivity_boost_g: float = 10


class UxCaps(_Frozen):
    max_bullets: int = 3
    max_suggestion_chars: int = 160


class RiskBuckets(_Frozen):
    medium_pct: float = 0.65
    high_pct: float = 0.85


class IntentTuning(_Frozen):
    ttl_minutes: int = 10
    default_max_options: Literal[2, 3] = 2
    low_confidence: float = 0.45
    breakfast_until_hour: int = 10
    lunch_until_hour: int = 14
    snack_until_hour: int = 17


# ──────────────────────────────────────────────────────────────────────
#  Master model
# ──────────────────────────────────────────────────────────────────────
class IntelligenceConfig(_Frozen):
    targets: TargetDefaults = TargetDefaults()
    multipliers: Multipliers = Multipliers()
    thresholds: Thresholds = Thresholds()
    ux: UxCaps = UxCaps()
    risk: RiskBuckets = RiskBuckets()
    intent: IntentTuning = IntentTuning()

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "IntelligenceConfig":
        """Return a copy with `overrides` deep-merged over this config."""
        if not overrides:
            return self
        merged = _deep_merge(self.model_dump(), overrides)
        return IntelligenceConfig.model_validate(merged)


DEFAULT_INTELLIGENCE_CONFIG = IntelligenceConfig()


def config_from_settings(settings: Any) -> IntelligenceConfig:
    """Build the process-wide config once from the env-backed settings."""
    return DEFAULT_INTELLIGENCE_CONFIG.with_overrides(
        {
            "intent": {
                "ttl_minutes": settings.intent_ttl_minutes,
                "default_max_options": settings.default_max_options,
                "breakfast_until_hour": settings.breakfast_until_hour,
                "lunch_until_hour": settings.lunch_until_hour,
                "snack_until_hour": settings.snack_until_hour,
            }
        }
    )


def _deep_merge(base: dict[str, Any], extra: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in extra.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out
