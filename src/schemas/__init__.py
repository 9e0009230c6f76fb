from .tier import TierDefinition, TierTable, TierProgress
from .pricing import (
    CatalogItem,
    PriceResult,
    EligibilityResult,
    TierPrice,
    PricingValidationRequest,
    PricingValidationResult,
)
from .progression import (
    ProgressionEvent,
    LockedHistoryPoint,
    MembershipStatistics,
    ForecastResult,
    LockUpdate,
)
