from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from core.constants import ClaimIneligibleReason


class CatalogItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    base_cost: int = Field(ge=0)
    per_tier_override: Optional[Dict[str, Optional[int]]] = None
    minimum_tier: Optional[str] = None
    active: bool = True
    stock_remaining: Optional[int] = None


class PriceResult(BaseModel):
    price: int
    original_price: int
    discount_percent: int
    is_free: bool


class EligibilityResult(BaseModel):
    eligible: bool
    reason: Optional[ClaimIneligibleReason] = None
    # Set for tier_locked
    required_tier: Optional[str] = None
    # Set for insufficient_balance
    shortfall: Optional[float] = None


class TierPrice(BaseModel):
    tier: str
    price: int
    is_free: bool


class PricingValidationRequest(BaseModel):
    pricing: Dict[str, Optional[int]]
    base_cost: int = Field(ge=0)
    require_all_filled: bool = True


class PricingValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = []
    warnings: List[str] = []
