from typing import Dict, List
import uuid

from fastapi import APIRouter, HTTPException, Query

import schemas
from api.api_v1.deps import HistoryServiceDep, TierTableDep
from core.constants import PricingPattern
from schemas.tier import TierTable
from services import pricing_service
from services.membership_history_service import MembershipHistoryService

router = APIRouter()


def _get_catalog_item(
    service: MembershipHistoryService, reward_id: uuid.UUID
) -> schemas.CatalogItem:
    reward = service.get_reward(reward_id)
    if reward is None:
        raise HTTPException(status_code=404, detail="Reward not found")
    return reward.to_catalog_item()


def _check_tier(tier_table: TierTable, tier: str) -> str:
    if tier_table.rank(tier) is None:
        raise HTTPException(status_code=400, detail=f"Unknown tier: {tier}")
    return tier


@router.post("/tier-pricing/validate", response_model=schemas.PricingValidationResult)
async def validate_tier_pricing(
    request: schemas.PricingValidationRequest, tier_table: TierTableDep
):
    return pricing_service.validate_tier_pricing(
        request.pricing, request.base_cost, tier_table, request.require_all_filled
    )


@router.get("/tier-pricing/default", response_model=Dict[str, int])
async def get_default_tier_pricing(
    tier_table: TierTableDep,
    base_cost: int = Query(..., ge=0),
    pattern: PricingPattern = PricingPattern.none,
):
    return pricing_service.generate_default_tier_pricing(base_cost, pattern, tier_table)


@router.get("/{reward_id}/price", response_model=schemas.PriceResult)
async def get_reward_price(
    reward_id: uuid.UUID,
    service: HistoryServiceDep,
    tier_table: TierTableDep,
    tier: str = Query(...),
):
    item = _get_catalog_item(service, reward_id)
    return pricing_service.price_for_tier(item, _check_tier(tier_table, tier))


@router.get("/{reward_id}/eligibility", response_model=schemas.EligibilityResult)
async def get_claim_eligibility(
    reward_id: uuid.UUID,
    service: HistoryServiceDep,
    tier_table: TierTableDep,
    tier: str = Query(...),
    balance: float = Query(..., ge=0),
):
    item = _get_catalog_item(service, reward_id)
    return pricing_service.can_claim(
        item, _check_tier(tier_table, tier), balance, tier_table
    )


@router.get("/{reward_id}/tier-prices", response_model=List[schemas.TierPrice])
async def get_all_tier_prices(
    reward_id: uuid.UUID, service: HistoryServiceDep, tier_table: TierTableDep
):
    item = _get_catalog_item(service, reward_id)
    return pricing_service.all_tier_prices(item, tier_table)
