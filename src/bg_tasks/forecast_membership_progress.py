import logging
from typing import Optional
import uuid

import click
from sqlmodel import Session

from core.db import engine
from log import setup_logging_to_console, setup_logging_to_file
from services import progression_service
from services.membership_history_service import MembershipHistoryService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("forecast_membership_progress")


def forecast_user(service: MembershipHistoryService, user_id: uuid.UUID, tier_table):
    events = service.get_events(user_id)
    stats = progression_service.compute_statistics(events)
    forecast = progression_service.forecast_next_tier(events, tier_table)

    next_tier = forecast.next_tier.name if forecast.next_tier else "max tier"
    logger.info(
        "user=%s locked=%s upgrades=%d velocity=%.2f/month next=%s eta=%s confidence=%s",
        user_id,
        stats.total_locked,
        stats.event_count,
        stats.upgrade_velocity_per_month,
        next_tier,
        forecast.estimated_arrival_date,
        forecast.confidence.value,
    )
    return forecast


def run(session: Session, user_id: Optional[uuid.UUID] = None) -> int:
    service = MembershipHistoryService(session)
    tier_table = service.get_tier_table()
    user_ids = [user_id] if user_id else service.get_user_ids()

    for uid in user_ids:
        forecast_user(service, uid, tier_table)

    logger.info("Forecasted %d users", len(user_ids))
    return len(user_ids)


@click.command()
@click.option("--user-id", default=None, help="Only forecast this user")
def main(user_id: Optional[str]):
    setup_logging_to_console()
    setup_logging_to_file(
        app="forecast_membership_progress", level=logging.INFO, logger=logger
    )

    with Session(engine) as session:
        run(session, uuid.UUID(user_id) if user_id else None)


if __name__ == "__main__":
    main()
