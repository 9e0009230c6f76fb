from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict

from core.constants import Confidence
from schemas.tier import TierDefinition


class ProgressionEvent(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    timestamp: datetime
    tier_level: int
    tier_name: str
    locked_amount: float
    previous_tier_level: Optional[int] = None


class LockedHistoryPoint(BaseModel):
    timestamp: datetime
    locked_amount: float
    tier_level: int
    tier_name: str


class MembershipStatistics(BaseModel):
    event_count: int = 0
    total_locked: float = 0.0
    average_tier_dwell_days: float = 0.0
    upgrade_velocity_per_month: float = 0.0
    days_since_last_upgrade: Optional[int] = None
    tier_distribution: Dict[str, int] = {}
    locked_history: List[LockedHistoryPoint] = []


class ForecastResult(BaseModel):
    next_tier: Optional[TierDefinition] = None
    estimated_arrival_date: Optional[date] = None
    days_remaining: Optional[int] = None
    amount_remaining: float = 0.0
    confidence: Confidence = Confidence.low
    daily_rate: float = 0.0


class LockUpdate(BaseModel):
    previous_locked_amount: float
    new_locked_amount: float
