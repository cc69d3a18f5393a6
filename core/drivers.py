from __future__ import annotations

from dataclasses import dataclass

from core.models.decision import MacroGap

PROTEIN_DRIVER_G = 20
FIBER_DRIVER_G = 6


@dataclass(frozen=True)
class GapDrivers:
    """Boolean reading of a MacroGap shared by options, routing and cooking."""
    needs_protein: bool
    needs_fiber: bool
    sodium_high: bool
    sugar_high: bool

    @classmethod
    def from_gap(cls, gap: MacroGap) -> "GapDrivers":
        s = gap.summary
        return cls(
            needs_protein=s.protein_gap_g >= PROTEIN_DRIVER_G,
            needs_fiber=s.fiber_gap_g >= FIBER_DRIVER_G,
            sodium_high=s.sodium_risk == "high",
            sugar_high=s.sugar_risk == "high",
        )

    @property
    def control_needed(self) -> bool:
        return self.sodium_high or self.sugar_high

    def constraints(self) -> list[str]:
        out: list[str] = []
        if self.needs_protein:
            out.append("high-protein")
        if self.needs_fiber:
            out.append("high-fiber")
        if self.sodium_high:
            out.append("low-sodium")
        if self.sugar_high:
            out.append("low-sugar")
        return out
