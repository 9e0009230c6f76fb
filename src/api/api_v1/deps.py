from typing import Annotated, Generator

from fastapi import Depends
from sqlmodel import Session

from core.db import engine
from schemas.tier import TierTable
from services.membership_history_service import MembershipHistoryService


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]


def get_history_service(session: SessionDep) -> MembershipHistoryService:
    return MembershipHistoryService(session)


HistoryServiceDep = Annotated[MembershipHistoryService, Depends(get_history_service)]


def get_tier_table(service: HistoryServiceDep) -> TierTable:
    return service.get_tier_table()


TierTableDep = Annotated[TierTable, Depends(get_tier_table)]
