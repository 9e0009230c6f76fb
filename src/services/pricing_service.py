import logging
from typing import Dict, List, Optional

from core import constants
from core.constants import ClaimIneligibleReason, PricingPattern
from schemas.pricing import (
    CatalogItem,
    EligibilityResult,
    PriceResult,
    PricingValidationResult,
    TierPrice,
)
from schemas.tier import TierTable, normalize_tier_key
from services.tier_service import DEFAULT_TIER_TABLE
from utils.extension_utils import clamp, round_half_up

logger = logging.getLogger(__name__)


def _override_price(item: CatalogItem, tier_name: str) -> Optional[int]:
    if not item.per_tier_override:
        return None
    key = normalize_tier_key(tier_name)
    for override_tier, price in item.per_tier_override.items():
        if normalize_tier_key(override_tier) == key and price is not None:
            return price
    return None


def price_for_tier(item: CatalogItem, tier_name: str) -> PriceResult:
    original_price = item.base_cost
    override = _override_price(item, tier_name)
    price = max(0, override if override is not None else original_price)

    discount = 0
    if original_price > 0:
        discount = round_half_up((1 - price / original_price) * 100)

    return PriceResult(
        price=price,
        original_price=original_price,
        discount_percent=int(clamp(discount, 0, 100)),
        is_free=price == 0,
    )


def can_claim(
    item: CatalogItem,
    tier_name: str,
    claim_balance: float,
    tier_table: TierTable = DEFAULT_TIER_TABLE,
) -> EligibilityResult:
    if item.active is False:
        return EligibilityResult(eligible=False, reason=ClaimIneligibleReason.inactive)

    if item.stock_remaining is not None and item.stock_remaining <= 0:
        return EligibilityResult(
            eligible=False, reason=ClaimIneligibleReason.out_of_stock
        )

    if item.minimum_tier:
        user_rank = tier_table.rank(tier_name)
        required_rank = tier_table.rank(item.minimum_tier)
        if user_rank is None or required_rank is None:
            logger.warning(
                "Invalid tier comparison: user_tier=%s, minimum_tier=%s",
                tier_name,
                item.minimum_tier,
            )
        elif user_rank < required_rank:
            return EligibilityResult(
                eligible=False,
                reason=ClaimIneligibleReason.tier_locked,
                required_tier=tier_table.tiers[required_rank].name,
            )

    price = price_for_tier(item, tier_name).price
    if claim_balance < price:
        return EligibilityResult(
            eligible=False,
            reason=ClaimIneligibleReason.insufficient_balance,
            shortfall=price - claim_balance,
        )

    return EligibilityResult(eligible=True)


def all_tier_prices(
    item: CatalogItem, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> List[TierPrice]:
    prices = []
    for tier in tier_table.tiers:
        result = price_for_tier(item, tier.name)
        prices.append(TierPrice(tier=tier.name, price=result.price, is_free=result.is_free))
    return prices


def validate_tier_pricing(
    pricing: Dict[str, Optional[int]],
    base_cost: int,
    tier_table: TierTable = DEFAULT_TIER_TABLE,
    require_all_filled: bool = True,
) -> PricingValidationResult:
    """
    Check a per-tier price map before it is saved on a reward.

    Higher tiers must never cost more than lower ones. Missing tiers are
    errors only when ``require_all_filled`` is set.
    """
    errors: List[str] = []
    warnings: List[str] = []
    prices = {normalize_tier_key(k): v for k, v in pricing.items()}

    for key in prices:
        if tier_table.rank(key) is None:
            warnings.append(f"Unknown tier '{key}' will be ignored")

    if require_all_filled:
        for tier in tier_table.tiers:
            if prices.get(tier.key) is None:
                errors.append(f"{tier.name} price is required")

    for tier in tier_table.tiers:
        price = prices.get(tier.key)
        if price is not None and price < 0:
            errors.append(f"{tier.name} price cannot be negative")

    filled = [(t, prices[t.key]) for t in tier_table.tiers if prices.get(t.key) is not None]
    for (lower, lower_price), (higher, higher_price) in zip(filled, filled[1:]):
        if higher_price > lower_price:
            errors.append(
                f"{higher.name} ({higher_price}) should not cost more than "
                f"{lower.name} ({lower_price})"
            )

    if filled:
        lowest_tier, lowest_price = filled[0]
        if lowest_price > base_cost:
            warnings.append(
                f"{lowest_tier.name} price ({lowest_price}) exceeds base cost ({base_cost})"
            )
        if len(filled) > 1 and lowest_price > 0 and all(p == lowest_price for _, p in filled):
            warnings.append(
                "All tiers have the same price. Consider adding tier-based discounts."
            )

    return PricingValidationResult(
        is_valid=len(errors) == 0, errors=errors, warnings=warnings
    )


def max_discount(pricing: Dict[str, Optional[int]], base_cost: int) -> int:
    prices = [p for p in pricing.values() if p is not None]
    if base_cost <= 0 or not prices:
        return 0
    return int(clamp(round_half_up((1 - min(prices) / base_cost) * 100), 0, 100))


def generate_default_tier_pricing(
    base_cost: int,
    pattern: PricingPattern = PricingPattern.none,
    tier_table: TierTable = DEFAULT_TIER_TABLE,
) -> Dict[str, int]:
    top_discount = constants.PRICING_PATTERN_TOP_DISCOUNT[PricingPattern(pattern)]
    steps = max(1, len(tier_table.tiers) - 1)

    pricing = {}
    for rank, tier in enumerate(tier_table.tiers):
        discount = top_discount * rank / steps
        pricing[tier.key] = round_half_up(base_cost * (1 - discount / 100))
    return pricing
