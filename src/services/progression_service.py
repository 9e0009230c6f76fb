from datetime import datetime, timedelta
import logging
import math
from typing import List, Optional, Sequence

import numpy as np
import pendulum

from core import constants
from core.constants import Confidence
from schemas.progression import (
    ForecastResult,
    LockedHistoryPoint,
    MembershipStatistics,
    ProgressionEvent,
)
from schemas.tier import TierDefinition, TierTable
from services.tier_service import DEFAULT_TIER_TABLE, resolve_tier
from utils.extension_utils import days_between, to_utc

logger = logging.getLogger(__name__)


def sort_events(events: Sequence[ProgressionEvent]) -> List[ProgressionEvent]:
    return sorted(events or [], key=lambda e: to_utc(e.timestamp))


def _intervals(events: List[ProgressionEvent]) -> List[float]:
    # Day gaps between consecutive events
    return [
        days_between(prev.timestamp, curr.timestamp)
        for prev, curr in zip(events, events[1:])
    ]


def compute_statistics(
    events: Sequence[ProgressionEvent], now: Optional[datetime] = None
) -> MembershipStatistics:
    events = sort_events(events)
    if not events:
        return MembershipStatistics()

    now = now or pendulum.now(tz=pendulum.UTC)
    first, last = events[0], events[-1]

    intervals = _intervals(events)
    average_dwell = float(np.mean(intervals)) if intervals else 0.0

    span_days = days_between(first.timestamp, last.timestamp)
    velocity = 0.0
    if span_days >= constants.MIN_INTERVAL_DAYS:
        velocity = len(events) / (span_days / constants.DAYS_PER_MONTH)

    distribution = {}
    for event in events:
        distribution[event.tier_name] = distribution.get(event.tier_name, 0) + 1

    return MembershipStatistics(
        event_count=len(events),
        total_locked=last.locked_amount,
        average_tier_dwell_days=average_dwell,
        upgrade_velocity_per_month=velocity,
        days_since_last_upgrade=max(0, math.floor(days_between(last.timestamp, now))),
        tier_distribution=distribution,
        locked_history=[
            LockedHistoryPoint(
                timestamp=e.timestamp,
                locked_amount=e.locked_amount,
                tier_level=e.tier_level,
                tier_name=e.tier_name,
            )
            for e in events
        ],
    )


def _current_tier(event: ProgressionEvent, tier_table: TierTable) -> TierDefinition:
    tier = tier_table.get_by_level(event.tier_level)
    if tier is None:
        tier = resolve_tier(event.locked_amount, tier_table)
    return tier


def _recent_daily_rate(events: List[ProgressionEvent]) -> float:
    rates = []
    for prev, curr in zip(events, events[1:]):
        days = max(constants.MIN_INTERVAL_DAYS, days_between(prev.timestamp, curr.timestamp))
        rates.append((curr.locked_amount - prev.locked_amount) / days)

    recent = rates[-constants.RECENT_DELTA_WINDOW :]
    if not recent:
        return 0.0
    # Newest delta carries the most weight
    weights = np.arange(1, len(recent) + 1)
    return float(np.average(recent, weights=weights))


def _all_time_daily_rate(events: List[ProgressionEvent]) -> float:
    first, last = events[0], events[-1]
    days = max(constants.MIN_INTERVAL_DAYS, days_between(first.timestamp, last.timestamp))
    return (last.locked_amount - first.locked_amount) / days


def classify_confidence(events: Sequence[ProgressionEvent]) -> Confidence:
    """
    Confidence reflects how regular the locking cadence is.

    Uses the coefficient of variation (stddev / mean) of the day gaps between
    consecutive events, together with the number of recorded events.
    The sample thresholds count events, not intervals, so three evenly
    spaced events rate medium.
    """
    events = sort_events(events)
    intervals = _intervals(events)
    if not intervals:
        return Confidence.low

    mean = float(np.mean(intervals))
    if mean <= 0:
        return Confidence.low

    variation = float(np.std(intervals)) / mean
    if np.isnan(variation) or np.isinf(variation):
        return Confidence.low

    samples = len(events)
    if (
        samples >= constants.HIGH_CONFIDENCE_MIN_SAMPLES
        and variation < constants.HIGH_CONFIDENCE_MAX_VARIATION
    ):
        return Confidence.high
    if (
        samples >= constants.MEDIUM_CONFIDENCE_MIN_SAMPLES
        and variation < constants.MEDIUM_CONFIDENCE_MAX_VARIATION
    ):
        return Confidence.medium
    return Confidence.low


def forecast_next_tier(
    events: Sequence[ProgressionEvent],
    tier_table: TierTable = DEFAULT_TIER_TABLE,
    now: Optional[datetime] = None,
) -> ForecastResult:
    events = sort_events(events)
    if not events:
        logger.debug("No progression history, nothing to forecast")
        return ForecastResult(confidence=Confidence.low)

    last = events[-1]
    current = _current_tier(last, tier_table)
    upcoming = tier_table.next_after(current)
    amount_needed = (
        max(0.0, upcoming.requirement - last.locked_amount) if upcoming else 0.0
    )

    if len(events) < 2:
        logger.debug("Single progression event, insufficient signal")
        return ForecastResult(
            next_tier=upcoming,
            amount_remaining=amount_needed,
            confidence=Confidence.low,
        )

    if upcoming is None:
        return ForecastResult(next_tier=None, confidence=Confidence.high)

    all_time_rate = _all_time_daily_rate(events)
    recent_rate = _recent_daily_rate(events)
    predicted_rate = (
        constants.RECENT_RATE_WEIGHT * recent_rate
        + constants.ALL_TIME_RATE_WEIGHT * all_time_rate
    )

    if predicted_rate <= 0 or math.isnan(predicted_rate) or math.isinf(predicted_rate):
        logger.debug("No forward locking progress detected (rate=%s)", predicted_rate)
        return ForecastResult(
            next_tier=upcoming,
            amount_remaining=amount_needed,
            confidence=Confidence.low,
            daily_rate=0.0,
        )

    degraded = ForecastResult(
        next_tier=upcoming,
        amount_remaining=amount_needed,
        confidence=Confidence.low,
        daily_rate=predicted_rate,
    )
    days_needed = amount_needed / predicted_rate
    if math.isnan(days_needed) or math.isinf(days_needed):
        logger.debug("Arrival out of range (rate=%s)", predicted_rate)
        return degraded

    days_remaining = math.ceil(days_needed)
    today = to_utc(now) if now else pendulum.now(tz=pendulum.UTC)
    try:
        arrival = (today + timedelta(days=days_remaining)).date()
    except (OverflowError, ValueError):
        logger.debug("Arrival date not representable (%s days)", days_remaining)
        return degraded

    return ForecastResult(
        next_tier=upcoming,
        estimated_arrival_date=arrival,
        days_remaining=days_remaining,
        amount_remaining=amount_needed,
        confidence=classify_confidence(events),
        daily_rate=predicted_rate,
    )


def detect_tier_upgrade(
    previous_locked_amount: float,
    new_locked_amount: float,
    tier_table: TierTable = DEFAULT_TIER_TABLE,
    timestamp: Optional[datetime] = None,
) -> Optional[ProgressionEvent]:
    """
    Build the progression event for a lock that moves the user up a tier.

    Returns None when the tier does not increase. The caller is responsible
    for persisting the event.
    """
    previous = resolve_tier(previous_locked_amount, tier_table)
    current = resolve_tier(new_locked_amount, tier_table)
    if tier_table.rank(current.name) <= tier_table.rank(previous.name):
        return None

    return ProgressionEvent(
        timestamp=timestamp or pendulum.now(tz=pendulum.UTC),
        tier_level=current.level,
        tier_name=current.name,
        locked_amount=new_locked_amount,
        previous_tier_level=previous.level,
    )
