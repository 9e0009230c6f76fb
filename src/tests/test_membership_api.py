from datetime import datetime, timedelta, timezone
import uuid

from fastapi.testclient import TestClient
from sqlmodel import Session

from models.membership_history import MembershipHistory
from models.rewards import Reward

USER_ID = uuid.UUID("3f1c2b7e-9d4a-4c55-8a1e-2b6f0c9d7e11")


def create_reward(session: Session, **kwargs) -> Reward:
    reward = Reward(title="Concert tickets", cost=100, **kwargs)
    session.add(reward)
    session.commit()
    session.refresh(reward)
    return reward


def test_healthz(client: TestClient):
    response = client.get("/api/v1/healthz/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "tiers": 6}


def test_get_tiers(client: TestClient):
    response = client.get("/api/v1/membership/tiers")

    assert response.status_code == 200
    tiers = response.json()
    assert [t["name"] for t in tiers] == [
        "Member",
        "Bronze",
        "Silver",
        "Gold",
        "Platinum",
        "Diamond",
    ]
    assert tiers[1]["benefits"][0] == "Access to bronze reward catalog"


def test_get_progress(client: TestClient):
    response = client.get("/api/v1/membership/progress", params={"locked_amount": 1750})

    assert response.status_code == 200
    data = response.json()
    assert data["current_tier"]["name"] == "Bronze"
    assert data["next_tier"]["name"] == "Silver"
    assert data["progress_percent"] == 50
    assert data["amount_to_next_tier"] == 750


def test_user_statistics_and_forecast(client: TestClient, db_session: Session):
    start = datetime.now(timezone.utc) - timedelta(days=60)
    for day, amount, level, name in [
        (0, 1000, 1, "Bronze"),
        (30, 2500, 2, "Silver"),
        (60, 3500, 2, "Silver"),
    ]:
        db_session.add(
            MembershipHistory(
                user_id=USER_ID,
                tier_level=level,
                tier_name=name,
                locked_amount=amount,
                created_at=start + timedelta(days=day),
            )
        )
    db_session.commit()

    stats = client.get(f"/api/v1/membership/users/{USER_ID}/statistics").json()
    assert stats["event_count"] == 3
    assert stats["total_locked"] == 3500
    assert stats["tier_distribution"] == {"Bronze": 1, "Silver": 2}

    forecast = client.get(f"/api/v1/membership/users/{USER_ID}/forecast").json()
    assert forecast["next_tier"]["name"] == "Gold"
    assert forecast["amount_remaining"] == 1500
    assert forecast["daily_rate"] > 0
    assert forecast["days_remaining"] > 0
    assert forecast["estimated_arrival_date"] is not None
    assert forecast["confidence"] == "medium"


def test_forecast_for_unknown_user_is_low(client: TestClient):
    forecast = client.get(f"/api/v1/membership/users/{uuid.uuid4()}/forecast").json()

    assert forecast["confidence"] == "low"
    assert forecast["estimated_arrival_date"] is None


def test_record_lock(client: TestClient):
    url = f"/api/v1/membership/users/{USER_ID}/locks"

    first = client.post(url, json={"previous_locked_amount": 0, "new_locked_amount": 1200})
    assert first.status_code == 200
    assert first.json()["tier_name"] == "Bronze"

    same = client.post(
        url, json={"previous_locked_amount": 1200, "new_locked_amount": 1300}
    )
    assert same.status_code == 200
    assert same.json() is None

    bad = client.post(url, json={"previous_locked_amount": 0, "new_locked_amount": -1})
    assert bad.status_code == 400


def test_reward_price(client: TestClient, db_session: Session):
    reward = create_reward(db_session, status_tier_claims_cost={"gold": 0, "silver": 50})

    response = client.get(f"/api/v1/rewards/{reward.id}/price", params={"tier": "Gold"})

    assert response.status_code == 200
    assert response.json() == {
        "price": 0,
        "original_price": 100,
        "discount_percent": 100,
        "is_free": True,
    }


def test_reward_price_unknown_tier(client: TestClient, db_session: Session):
    reward = create_reward(db_session)

    response = client.get(f"/api/v1/rewards/{reward.id}/price", params={"tier": "wood"})

    assert response.status_code == 400


def test_reward_not_found(client: TestClient):
    response = client.get(
        f"/api/v1/rewards/{uuid.uuid4()}/price", params={"tier": "gold"}
    )

    assert response.status_code == 404


def test_reward_eligibility(client: TestClient, db_session: Session):
    reward = create_reward(db_session, min_status_tier="gold")

    locked = client.get(
        f"/api/v1/rewards/{reward.id}/eligibility",
        params={"tier": "silver", "balance": 10_000},
    ).json()
    assert locked == {
        "eligible": False,
        "reason": "tier_locked",
        "required_tier": "Gold",
        "shortfall": None,
    }

    short = client.get(
        f"/api/v1/rewards/{reward.id}/eligibility",
        params={"tier": "platinum", "balance": 30},
    ).json()
    assert short["reason"] == "insufficient_balance"
    assert short["shortfall"] == 70


def test_reward_tier_prices(client: TestClient, db_session: Session):
    reward = create_reward(db_session, status_tier_claims_cost={"diamond": 0})

    prices = client.get(f"/api/v1/rewards/{reward.id}/tier-prices").json()

    assert len(prices) == 6
    assert prices[0] == {"tier": "Member", "price": 100, "is_free": False}
    assert prices[-1] == {"tier": "Diamond", "price": 0, "is_free": True}


def test_validate_and_default_tier_pricing(client: TestClient):
    default = client.get(
        "/api/v1/rewards/tier-pricing/default",
        params={"base_cost": 100, "pattern": "steep"},
    ).json()
    assert default == {
        "member": 100,
        "bronze": 80,
        "silver": 60,
        "gold": 40,
        "platinum": 20,
        "diamond": 0,
    }

    result = client.post(
        "/api/v1/rewards/tier-pricing/validate",
        json={"pricing": default, "base_cost": 100},
    ).json()
    assert result == {"is_valid": True, "errors": [], "warnings": []}


def test_reward_with_partial_tier_pricing(client: TestClient, db_session: Session):
    reward = create_reward(db_session, status_tier_claims_cost={"gold": 0, "silver": None})

    price = client.get(f"/api/v1/rewards/{reward.id}/price", params={"tier": "silver"})
    assert price.status_code == 200
    assert price.json()["price"] == 100

    eligibility = client.get(
        f"/api/v1/rewards/{reward.id}/eligibility",
        params={"tier": "silver", "balance": 40},
    ).json()
    assert eligibility["shortfall"] == 60

    prices = client.get(f"/api/v1/rewards/{reward.id}/tier-prices").json()
    assert [p["price"] for p in prices] == [100, 100, 100, 0, 100, 100]
