import logging
from typing import List, Optional
import uuid

import pendulum
from sqlmodel import Session, select

from models.membership_history import MembershipHistory
from models.rewards import Reward
from models.tier_config import TierConfig
from schemas.progression import ProgressionEvent
from schemas.tier import TierTable
from services import progression_service, tier_service

logger = logging.getLogger(__name__)


class MembershipHistoryService:
    def __init__(self, session: Session):
        self.session = session

    def get_tier_table(self) -> TierTable:
        configs = self.session.exec(
            select(TierConfig)
            .where(TierConfig.is_active)
            .order_by(TierConfig.requirement.asc())
        ).all()
        if not configs:
            return tier_service.load_tier_table()
        return TierTable(tiers=tuple(c.to_tier_definition() for c in configs))

    def get_history(self, user_id: uuid.UUID) -> List[MembershipHistory]:
        return self.session.exec(
            select(MembershipHistory)
            .where(MembershipHistory.user_id == user_id)
            .order_by(MembershipHistory.created_at.asc())
        ).all()

    def get_events(self, user_id: uuid.UUID) -> List[ProgressionEvent]:
        return [h.to_event() for h in self.get_history(user_id)]

    def get_user_ids(self) -> List[uuid.UUID]:
        return self.session.exec(select(MembershipHistory.user_id).distinct()).all()

    def record_lock(
        self,
        user_id: uuid.UUID,
        previous_locked_amount: float,
        new_locked_amount: float,
        tier_table: Optional[TierTable] = None,
    ) -> Optional[MembershipHistory]:
        """
        Append an upgrade row when the new locked amount crosses a tier threshold.

        The first lock of a user is always recorded, as the initial event.
        """
        tier_table = tier_table or self.get_tier_table()
        is_first = (
            self.session.exec(
                select(MembershipHistory).where(MembershipHistory.user_id == user_id)
            ).first()
            is None
        )

        event = progression_service.detect_tier_upgrade(
            previous_locked_amount, new_locked_amount, tier_table
        )
        if event is None and is_first and new_locked_amount > 0:
            tier = tier_service.resolve_tier(new_locked_amount, tier_table)
            event = ProgressionEvent(
                timestamp=pendulum.now(tz=pendulum.UTC),
                tier_level=tier.level,
                tier_name=tier.name,
                locked_amount=new_locked_amount,
            )
        if event is None:
            return None

        history = MembershipHistory(
            user_id=user_id,
            tier_level=event.tier_level,
            tier_name=event.tier_name,
            locked_amount=event.locked_amount,
            previous_tier_level=event.previous_tier_level,
            created_at=event.timestamp,
        )
        self.session.add(history)
        self.session.commit()
        self.session.refresh(history)

        logger.info(
            "User %s reached tier %s with %s locked",
            user_id,
            history.tier_name,
            history.locked_amount,
        )
        return history

    def get_reward(self, reward_id: uuid.UUID) -> Optional[Reward]:
        return self.session.exec(select(Reward).where(Reward.id == reward_id)).first()
