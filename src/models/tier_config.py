from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import List

from schemas.tier import TierDefinition


class TierConfig(SQLModel, table=True):
    __tablename__ = "tier_config"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    level: int = Field(index=True)
    tier_name: str = Field(unique=True)
    requirement: float
    multiplier: float = Field(default=1.0)
    discount_percent: int = Field(default=0)
    benefits: str | None = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def set_benefits(self, benefits: List[str]):
        self.benefits = "\n".join(benefits)

    def get_benefits(self) -> List[str]:
        if self.benefits:
            return self.benefits.split("\n")
        return []

    def to_tier_definition(self) -> TierDefinition:
        return TierDefinition(
            level=self.level,
            name=self.tier_name,
            requirement=self.requirement,
            multiplier=self.multiplier,
            discount_percent=self.discount_percent,
            benefits=self.get_benefits(),
        )
