import json
import logging
from pathlib import Path
from typing import Optional

from core import constants
from core.config import settings
from schemas.tier import TierDefinition, TierProgress, TierTable
from utils.extension_utils import clamp

logger = logging.getLogger(__name__)

DEFAULT_TIER_TABLE = TierTable.from_list(constants.DEFAULT_TIERS)


def load_tier_table(path: Optional[str] = None) -> TierTable:
    """
    Tier schedule from ``path`` (or ``settings.TIER_TABLE_FILE``).

    Falls back to the built-in schedule when no file is configured.
    """
    path = path or settings.TIER_TABLE_FILE
    if not path:
        return DEFAULT_TIER_TABLE

    with Path(path).open(encoding="utf-8") as f:
        data = json.load(f)

    tier_table = TierTable.from_list(data)
    logger.info("Loaded %d tiers from %s", len(tier_table.tiers), path)
    return tier_table


def resolve_tier(
    locked_amount: float, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> TierDefinition:
    locked_amount = max(0.0, locked_amount or 0.0)
    for tier in reversed(tier_table.tiers):
        if locked_amount >= tier.requirement:
            return tier
    return tier_table.lowest


def next_tier(
    locked_amount: float, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> Optional[TierDefinition]:
    return tier_table.next_after(resolve_tier(locked_amount, tier_table))


def progress_percent(
    locked_amount: float, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> float:
    current = resolve_tier(locked_amount, tier_table)
    upcoming = tier_table.next_after(current)
    if upcoming is None:
        return 100.0

    band = upcoming.requirement - current.requirement
    if band <= 0:
        return 100.0

    locked_amount = max(0.0, locked_amount or 0.0)
    progress = (locked_amount - current.requirement) / band * 100
    return clamp(progress, 0.0, 100.0)


def amount_to_next_tier(
    locked_amount: float, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> float:
    upcoming = next_tier(locked_amount, tier_table)
    if upcoming is None:
        return 0.0
    return max(0.0, upcoming.requirement - max(0.0, locked_amount or 0.0))


def get_tier_progress(
    locked_amount: float, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> TierProgress:
    return TierProgress(
        locked_amount=max(0.0, locked_amount or 0.0),
        current_tier=resolve_tier(locked_amount, tier_table),
        next_tier=next_tier(locked_amount, tier_table),
        progress_percent=progress_percent(locked_amount, tier_table),
        amount_to_next_tier=amount_to_next_tier(locked_amount, tier_table),
    )


def get_tier_by_level(
    level: int, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> TierDefinition:
    return tier_table.get_by_level(level) or tier_table.lowest


def get_tier_by_name(
    tier_name: str, tier_table: TierTable = DEFAULT_TIER_TABLE
) -> Optional[TierDefinition]:
    return tier_table.get_by_name(tier_name)
