from sqlmodel import Session, SQLModel, create_engine, select

from core import constants
from core.config import settings
from models import MembershipHistory, Reward, TierConfig  # noqa: F401

connect_args = {}
if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    str(settings.SQLALCHEMY_DATABASE_URI), pool_pre_ping=True, connect_args=connect_args
)


# make sure all SQLModel models are imported (models) before initializing DB
# otherwise, SQLModel might fail to initialize relationships properly
# for more details: https://github.com/tiangolo/full-stack-fastapi-postgresql/issues/28


def init_tier_config(session: Session):
    existing = session.exec(select(TierConfig)).first()
    if existing:
        return

    for tier in constants.DEFAULT_TIERS:
        config = TierConfig(
            level=tier["level"],
            tier_name=tier["name"],
            requirement=tier["requirement"],
            multiplier=tier["multiplier"],
            discount_percent=tier["discount_percent"],
            is_active=True,
        )
        config.set_benefits(tier["benefits"])
        session.add(config)
    session.commit()


def init_db(session: Session) -> None:
    SQLModel.metadata.create_all(session.get_bind())
    init_tier_config(session)
