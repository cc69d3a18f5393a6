# api/v1/schemas/contract.py
from __future__ import annotations

from pydantic import BaseModel, Field

from .intelligence import IntelligenceRequest


class ContractGapInput(BaseModel):
    protein_g:     float | None = None
    fiber_g:       float | None = None
    calories_kcal: float | None = None   # signed remaining; negative = exceeded


class ContractCreateRequest(IntelligenceRequest):
    # explicit gap wins; otherwise the gap comes from today's vector
    macro_gap: ContractGapInput | None = None


class ContractAdjustRequest(BaseModel):
    delta_pct: float = Field(..., description="Percent change, bounded to ±20")


class ContractTotals(BaseModel):
    protein_g:          float = Field(0, ge=0)
    fiber_g:            float = Field(0, ge=0)
    calories_over_kcal: float = Field(0, ge=0)
    clean_meals:        float = Field(0, ge=0)
