from datetime import datetime, timedelta, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from api.api_v1.deps import get_db
from core.db import init_db
from main import app
from schemas.progression import ProgressionEvent
from schemas.tier import TierTable
from services.tier_service import resolve_tier

START = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def three_tier_table() -> TierTable:
    return TierTable.from_list(
        [
            {"level": 0, "name": "Bronze", "requirement": 0},
            {"level": 1, "name": "Silver", "requirement": 1000, "multiplier": 1.1},
            {"level": 2, "name": "Gold", "requirement": 5000, "multiplier": 1.4},
        ]
    )


def build_events(
    points: List[tuple], tier_table: TierTable, start: datetime = START
) -> List[ProgressionEvent]:
    """Build events from (day_offset, locked_amount) pairs."""
    events = []
    previous_level = None
    for day, amount in points:
        tier = resolve_tier(amount, tier_table)
        events.append(
            ProgressionEvent(
                timestamp=start + timedelta(days=day),
                tier_level=tier.level,
                tier_name=tier.name,
                locked_amount=amount,
                previous_tier_level=previous_level,
            )
        )
        previous_level = tier.level
    return events


@pytest.fixture
def make_events():
    return build_events


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with Session(engine) as session:
        init_db(session)
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(db_session: Session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
