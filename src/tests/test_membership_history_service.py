from datetime import datetime, timedelta, timezone
import uuid

from sqlmodel import Session, select

from bg_tasks.forecast_membership_progress import run
from models.membership_history import MembershipHistory
from models.tier_config import TierConfig
from services.membership_history_service import MembershipHistoryService
from services.tier_service import DEFAULT_TIER_TABLE

USER_ID = uuid.UUID("be740e89-c676-4d16-bead-133fcc844e96")


def add_history(session: Session, user_id: uuid.UUID, points):
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    service = MembershipHistoryService(session)
    tier_table = service.get_tier_table()
    for day, amount in points:
        tier = tier_table.tiers[0]
        for t in tier_table.tiers:
            if amount >= t.requirement:
                tier = t
        session.add(
            MembershipHistory(
                user_id=user_id,
                tier_level=tier.level,
                tier_name=tier.name,
                locked_amount=amount,
                created_at=start + timedelta(days=day),
            )
        )
    session.commit()


def test_get_tier_table_from_config(db_session: Session):
    service = MembershipHistoryService(db_session)

    tier_table = service.get_tier_table()

    assert tier_table == DEFAULT_TIER_TABLE


def test_get_tier_table_skips_inactive_rows(db_session: Session):
    diamond = db_session.exec(
        select(TierConfig).where(TierConfig.tier_name == "Diamond")
    ).one()
    diamond.is_active = False
    db_session.add(diamond)
    db_session.commit()

    tier_table = MembershipHistoryService(db_session).get_tier_table()

    assert tier_table.highest.name == "Platinum"


def test_get_events_are_ordered(db_session: Session):
    add_history(db_session, USER_ID, [(60, 5000), (0, 1000), (30, 2500)])

    events = MembershipHistoryService(db_session).get_events(USER_ID)

    assert [e.locked_amount for e in events] == [1000, 2500, 5000]
    assert [e.tier_name for e in events] == ["Bronze", "Silver", "Gold"]


def test_record_lock_initial_and_upgrade(db_session: Session):
    service = MembershipHistoryService(db_session)

    initial = service.record_lock(USER_ID, 0, 500)
    assert initial.tier_name == "Member"
    assert initial.previous_tier_level is None

    assert service.record_lock(USER_ID, 500, 800) is None

    upgrade = service.record_lock(USER_ID, 800, 2600)
    assert upgrade.tier_name == "Silver"
    assert upgrade.previous_tier_level == 0

    assert len(service.get_history(USER_ID)) == 2


def test_record_lock_ignores_empty_first_lock(db_session: Session):
    service = MembershipHistoryService(db_session)

    assert service.record_lock(USER_ID, 0, 0) is None
    assert service.get_history(USER_ID) == []


def test_forecast_job_runs_for_all_users(db_session: Session):
    other_user = uuid.uuid4()
    add_history(db_session, USER_ID, [(0, 1000), (30, 2500), (60, 5000)])
    add_history(db_session, other_user, [(0, 100)])

    assert run(db_session) == 2
    assert run(db_session, USER_ID) == 1
