from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from datetime import datetime, timezone
from typing import Dict, Optional

from schemas.pricing import CatalogItem


class Reward(SQLModel, table=True):
    __tablename__ = "rewards"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    cost: int = Field(default=0)
    # tier key -> claim price, null falls back to cost
    status_tier_claims_cost: Optional[Dict[str, Optional[int]]] = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )
    min_status_tier: str | None = None
    stock_quantity: int | None = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            base_cost=self.cost,
            per_tier_override=self.status_tier_claims_cost,
            minimum_tier=self.min_status_tier,
            active=self.is_active,
            stock_remaining=self.stock_quantity,
        )
