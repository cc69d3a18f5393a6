from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ContractStatus = Literal["draft", "active", "completed", "failed", "expired"]
ContractKind = Literal["macro_gap", "decision", "execution"]
MetricName = Literal["protein_g", "fiber_g", "calories_kcal", "clean_meals"]


class ContractMetric(BaseModel):
    name: MetricName
    operator: Literal[">=", "<=", "=="]
    target: float
    unit: Literal["g", "kcal", "count"]


class ContractProgress(BaseModel):
    current: float = 0
    target: float = 0
    pct: int = Field(0, ge=0, le=100)


class PlaybookItem(BaseModel):
    id: str
    label: str
    route: Literal["cook", "eatout", "either"]
    payload: Any = None


class DailyContract(BaseModel):
    id: str
    day_key: str                    # YYYY-MM-DD, user-local
    status: ContractStatus = "draft"

    kind: ContractKind
    title: str
    statement: str
    why: str

    metric: ContractMetric
    progress: ContractProgress
    playbook: list[PlaybookItem] = Field(default_factory=list, max_length=2)
