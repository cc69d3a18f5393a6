from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

AppMode = Literal["privacy", "sync"]
Goal = Literal["lose", "maintain", "gain"]
GoalIntensity = Literal["light", "moderate", "aggressive"]
ActivityLevel = Literal["sedentary", "moderate", "active"]
EatingStyle = Literal["home-heavy", "eat-out-heavy", "balanced"]
ProteinPreference = Literal["low", "medium", "high"]
PortionAppetite = Literal["small", "average", "large"]
StressLevel = Literal["low", "moderate", "high"]


class HealthFlags(BaseModel):
    diabetes: bool = False
    high_bp: bool = False
    fatty_liver: bool = False


class Preferences(BaseModel):
    """Server-backed preferences; only ever present in sync mode."""
    health: HealthFlags = HealthFlags()
    goal: Goal = "maintain"
    cuisines: list[str] = []


class ProfileIntel(BaseModel):
    """Local-only signals the user chose to share."""
    goal_intensity: GoalIntensity | None = None
    activity_level: ActivityLevel | None = None
    eating_style: EatingStyle | None = None
    protein_preference: ProteinPreference | None = None
    carb_sensitive: bool | None = None
    portion_appetite: PortionAppetite | None = None
    wake_time: str | None = None      # "07:30"
    meals_per_day: int | None = Field(None, ge=2, le=5)
    dinner_time: str | None = None    # "19:30"
    stress_level: StressLevel | None = None


class DerivedSignals(BaseModel):
    cuisines: list[str] = []
    primary_goal: Goal = "maintain"
    goal_intensity: GoalIntensity | None = None
    activity_level: ActivityLevel | None = None
    eating_style: EatingStyle | None = None
    protein_preference: ProteinPreference | None = None
    carb_sensitive: bool | None = None
    portion_appetite: PortionAppetite | None = None
    wake_time: str | None = None
    dinner_time: str | None = None
    meals_per_day: int | None = None
    stress_level: StressLevel | None = None


class Compliance(BaseModel):
    can_use_sync_profile: bool = False
    can_use_cloud_ai: bool = False


class ProfileSummary(BaseModel):
    mode: AppMode = "privacy"
    preferences: Preferences | None = None
    intel: ProfileIntel = ProfileIntel()
    derived: DerivedSignals = DerivedSignals()
    compliance: Compliance = Compliance()
    user_id: str | None = None
    member_id: str | None = None
