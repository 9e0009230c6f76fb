from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from datetime import datetime, timezone

from schemas.progression import ProgressionEvent


class MembershipHistory(SQLModel, table=True):
    """One row per tier upgrade. Rows are never updated or deleted."""

    __tablename__ = "membership_history"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(index=True)
    tier_level: int
    tier_name: str
    locked_amount: float
    previous_tier_level: int | None = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )

    def to_event(self) -> ProgressionEvent:
        return ProgressionEvent(
            timestamp=self.created_at,
            tier_level=self.tier_level,
            tier_name=self.tier_name,
            locked_amount=self.locked_amount,
            previous_tier_level=self.previous_tier_level,
        )
