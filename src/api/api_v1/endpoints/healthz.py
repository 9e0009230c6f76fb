from fastapi import APIRouter, status
from pydantic import BaseModel

from api.api_v1.deps import TierTableDep

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    tiers: int


@router.get("/", response_model=HealthCheckResponse, status_code=status.HTTP_200_OK)
async def health_check(tier_table: TierTableDep):
    return HealthCheckResponse(status="ok", tiers=len(tier_table.tiers))
