# api/v1/contracts.py
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status

from api.v1.deps import (
    base_intelligence_config,
    contract_repo,
    daily_log_repo,
    member_id,
    today_key,
)
from api.v1.intelligence import resolve_engine_inputs
from api.v1.schemas import ContractAdjustRequest, ContractCreateRequest, ContractTotals
from core.daily_contract import adjust_contract_target, compute_daily_contract, evaluate_contract_progress
from core.intelligence_config import IntelligenceConfig
from core.models.contract import DailyContract
from core.pipeline import run_pipeline
from services.auth import current_user_id
from services.contracts import ContractTransitionError, DailyContractRepository, apply_transition
from services.daily_log import DailyConsumedRepository

router = APIRouter()
_LOG = logging.getLogger(__name__)

_ADJUSTABLE = ("draft", "active")


async def _load(repo: DailyContractRepository, user_id: str, day: str) -> DailyContract:
    contract = await repo.get(user_id, day)
    if contract is None:
        raise HTTPException(status_code=404, detail="No contract for this day")
    return contract


# ───────────────────────── create / fetch ───────────────────
@router.post("/today", response_model=DailyContract, status_code=status.HTTP_200_OK)
async def create_today(
    body: ContractCreateRequest,
    user_id: str = Depends(current_user_id),
    member: str | None = Depends(member_id),
    day: str = Depends(today_key),
    repo: DailyContractRepository = Depends(contract_repo),
    logs: DailyConsumedRepository = Depends(daily_log_repo),
    base: IntelligenceConfig = Depends(base_intelligence_config),
) -> DailyContract:
    """
    Compute today's contract once; later calls return the stored one so
    the commitment does not drift as meals get logged.
    """
    existing = await repo.get(user_id, day)
    if existing is not None:
        return existing

    if body.macro_gap is not None:
        contract = compute_daily_contract(user_id, day, body.macro_gap.model_dump())
    else:
        inputs = await resolve_engine_inputs(body, user_id, member, day, logs, base)
        result = run_pipeline(
            inputs.profile,
            consumed=inputs.consumed,
            targets_override=body.targets_override,
            behavior14d=inputs.behavior14d,
            now=datetime.now().astimezone(),
            max_options=body.max_options,
            time_window=body.time_window,
            config=inputs.config,
        )
        contract = compute_daily_contract(
            user_id, day, result.intent.context.macro_gap, result.options
        )

    stored = await repo.create_if_absent(user_id, contract)
    _LOG.info("contract %s for %s: %s", stored.id, user_id, stored.title)
    return stored


@router.get("/today", response_model=DailyContract)
async def fetch_today(
    user_id: str = Depends(current_user_id),
    day: str = Depends(today_key),
    repo: DailyContractRepository = Depends(contract_repo),
) -> DailyContract:
    return await _load(repo, user_id, day)


# ───────────────────────── lifecycle ────────────────────────
@router.post("/today/accept", response_model=DailyContract)
async def accept_today(
    user_id: str = Depends(current_user_id),
    day: str = Depends(today_key),
    repo: DailyContractRepository = Depends(contract_repo),
) -> DailyContract:
    contract = await _load(repo, user_id, day)
    try:
        accepted = apply_transition(contract, "active")
    except ContractTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    await repo.put(user_id, accepted)
    return accepted


@router.post("/today/adjust", response_model=DailyContract)
async def adjust_today(
    body: ContractAdjustRequest,
    user_id: str = Depends(current_user_id),
    day: str = Depends(today_key),
    repo: DailyContractRepository = Depends(contract_repo),
) -> DailyContract:
    contract = await _load(repo, user_id, day)
    if contract.status not in _ADJUSTABLE:
        raise HTTPException(status_code=409, detail=f"Contract is {contract.status}")
    adjusted = adjust_contract_target(contract, body.delta_pct)
    await repo.put(user_id, adjusted)
    return adjusted


@router.post("/today/progress", response_model=DailyContract)
async def progress_today(
    body: ContractTotals,
    user_id: str = Depends(current_user_id),
    day: str = Depends(today_key),
    repo: DailyContractRepository = Depends(contract_repo),
) -> DailyContract:
    contract = await _load(repo, user_id, day)
    updated = evaluate_contract_progress(contract, body.model_dump())
    await repo.put(user_id, updated)
    return updated
