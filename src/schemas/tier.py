from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TierDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: int
    name: str
    requirement: float = Field(ge=0)
    multiplier: float = 1.0
    discount_percent: int = Field(default=0, ge=0, le=100)
    benefits: Tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return normalize_tier_key(self.name)


class TierTable(BaseModel):
    """
    Immutable, ordered tier schedule.

    Tiers are sorted by requirement on construction and duplicate names are
    dropped (first one wins), so rank is always the position in ``tiers``.
    """

    model_config = ConfigDict(frozen=True)

    tiers: Tuple[TierDefinition, ...] = Field(min_length=1)

    @field_validator("tiers", mode="after")
    def sort_tiers(cls, v: Tuple[TierDefinition, ...]) -> Tuple[TierDefinition, ...]:
        seen = set()
        ordered = []
        for tier in sorted(v, key=lambda t: (t.requirement, t.level)):
            if tier.key in seen:
                continue
            seen.add(tier.key)
            ordered.append(tier)
        return tuple(ordered)

    @classmethod
    def from_list(cls, tiers: List[Dict]) -> "TierTable":
        return cls(tiers=tuple(TierDefinition(**t) for t in tiers))

    @property
    def lowest(self) -> TierDefinition:
        return self.tiers[0]

    @property
    def highest(self) -> TierDefinition:
        return self.tiers[-1]

    def rank(self, tier_name: str) -> Optional[int]:
        key = normalize_tier_key(tier_name)
        for idx, tier in enumerate(self.tiers):
            if tier.key == key:
                return idx
        return None

    def get_by_name(self, tier_name: str) -> Optional[TierDefinition]:
        idx = self.rank(tier_name)
        return self.tiers[idx] if idx is not None else None

    def get_by_level(self, level: int) -> Optional[TierDefinition]:
        for tier in self.tiers:
            if tier.level == level:
                return tier
        return None

    def next_after(self, tier: TierDefinition) -> Optional[TierDefinition]:
        idx = self.rank(tier.name)
        if idx is None or idx + 1 >= len(self.tiers):
            return None
        return self.tiers[idx + 1]


class TierProgress(BaseModel):
    locked_amount: float
    current_tier: TierDefinition
    next_tier: Optional[TierDefinition] = None
    progress_percent: float
    amount_to_next_tier: float


def normalize_tier_key(tier_name: str) -> str:
    return tier_name.strip().lower()
