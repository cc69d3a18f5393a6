"""Re-export individual schema modules for easy imports."""

from .intelligence import IntelligenceRequest, NextMealResponse, ProfileInput
from .logs import MealAddition, TodayTotals
from .contract import ContractAdjustRequest, ContractCreateRequest, ContractGapInput, ContractTotals

__all__ = [
    "IntelligenceRequest",
    "NextMealResponse",
    "ProfileInput",
    "MealAddition",
    "TodayTotals",
    "ContractAdjustRequest",
    "ContractCreateRequest",
    "ContractGapInput",
    "ContractTotals",
]
