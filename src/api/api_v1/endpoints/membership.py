from typing import List
import uuid

from fastapi import APIRouter, HTTPException, Query

import schemas
from api.api_v1.deps import HistoryServiceDep, TierTableDep
from services import progression_service, tier_service

router = APIRouter()


@router.get("/tiers", response_model=List[schemas.TierDefinition])
async def get_tiers(tier_table: TierTableDep):
    return list(tier_table.tiers)


@router.get("/progress", response_model=schemas.TierProgress)
async def get_progress(
    tier_table: TierTableDep,
    locked_amount: float = Query(..., description="Currently locked balance"),
):
    return tier_service.get_tier_progress(locked_amount, tier_table)


@router.get("/users/{user_id}/statistics", response_model=schemas.MembershipStatistics)
async def get_user_statistics(user_id: uuid.UUID, service: HistoryServiceDep):
    events = service.get_events(user_id)
    return progression_service.compute_statistics(events)


@router.get("/users/{user_id}/forecast", response_model=schemas.ForecastResult)
async def get_user_forecast(
    user_id: uuid.UUID, service: HistoryServiceDep, tier_table: TierTableDep
):
    events = service.get_events(user_id)
    return progression_service.forecast_next_tier(events, tier_table)


@router.post("/users/{user_id}/locks", response_model=schemas.ProgressionEvent | None)
async def record_lock(
    user_id: uuid.UUID,
    lock: schemas.LockUpdate,
    service: HistoryServiceDep,
    tier_table: TierTableDep,
):
    if lock.new_locked_amount < 0 or lock.previous_locked_amount < 0:
        raise HTTPException(status_code=400, detail="Locked amount cannot be negative")

    history = service.record_lock(
        user_id, lock.previous_locked_amount, lock.new_locked_amount, tier_table
    )
    return history.to_event() if history else None
