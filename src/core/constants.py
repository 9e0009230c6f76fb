from enum import Enum


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class ClaimIneligibleReason(str, Enum):
    inactive = "inactive"
    out_of_stock = "out_of_stock"
    tier_locked = "tier_locked"
    insufficient_balance = "insufficient_balance"


class PricingPattern(str, Enum):
    none = "none"
    gentle = "gentle"
    linear = "linear"
    steep = "steep"


# Forecast weighting. Heuristic kept as-is for parity, pending product review.
RECENT_RATE_WEIGHT = 0.7
ALL_TIME_RATE_WEIGHT = 0.3
RECENT_DELTA_WINDOW = 3

# Confidence classification
HIGH_CONFIDENCE_MIN_SAMPLES = 5
HIGH_CONFIDENCE_MAX_VARIATION = 0.5
MEDIUM_CONFIDENCE_MIN_SAMPLES = 3
MEDIUM_CONFIDENCE_MAX_VARIATION = 1.0

MIN_INTERVAL_DAYS = 1
DAYS_PER_MONTH = 30
SECONDS_PER_DAY = 60 * 60 * 24

# Discount (%) granted to the top tier; lower tiers are spread linearly
PRICING_PATTERN_TOP_DISCOUNT = {
    PricingPattern.none: 0,
    PricingPattern.gentle: 40,
    PricingPattern.linear: 80,
    PricingPattern.steep: 100,
}

DEFAULT_TIERS = [
    {
        "level": 0,
        "name": "Member",
        "requirement": 0,
        "multiplier": 1.0,
        "discount_percent": 0,
        "benefits": [
            "Access to basic rewards",
            "Earn 1x on all activities",
            "Community access",
        ],
    },
    {
        "level": 1,
        "name": "Bronze",
        "requirement": 1000,
        "multiplier": 1.1,
        "discount_percent": 5,
        "benefits": [
            "Access to bronze reward catalog",
            "1 reward claim per year",
            "Priority customer support",
            "Earn 1.1x on all activities",
            "5% discount on partner brands",
        ],
    },
    {
        "level": 2,
        "name": "Silver",
        "requirement": 2500,
        "multiplier": 1.25,
        "discount_percent": 10,
        "benefits": [
            "Access to premium reward catalog",
            "4 reward claims per year",
            "Early access to new rewards",
            "Earn 1.25x on all activities",
            "10% discount on partner brands",
        ],
    },
    {
        "level": 3,
        "name": "Gold",
        "requirement": 5000,
        "multiplier": 1.4,
        "discount_percent": 15,
        "benefits": [
            "Access to exclusive reward catalog",
            "1 reward claim per month",
            "VIP event invitations",
            "Earn 1.4x on all activities",
            "15% discount on partner brands",
        ],
    },
    {
        "level": 4,
        "name": "Platinum",
        "requirement": 10000,
        "multiplier": 1.6,
        "discount_percent": 20,
        "benefits": [
            "Access to platinum reward catalog",
            "2 reward claims per month",
            "Exclusive platinum events",
            "Earn 1.6x on all activities",
            "20% discount on partner brands",
            "Priority shipping",
        ],
    },
    {
        "level": 5,
        "name": "Diamond",
        "requirement": 25000,
        "multiplier": 2.0,
        "discount_percent": 25,
        "benefits": [
            "Access to diamond reward catalog",
            "Unlimited reward claims",
            "Exclusive diamond experiences",
            "Earn 2x on all activities",
            "25% discount on partner brands",
            "Free expedited shipping",
        ],
    },
]
