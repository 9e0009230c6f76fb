from fastapi import APIRouter

from api.api_v1.endpoints import (
    healthz,
    membership,
    rewards,
)

api_router = APIRouter()

# Group routes by adding tags parameter
api_router.include_router(membership.router, prefix="/membership", tags=["Membership"])
api_router.include_router(rewards.router, prefix="/rewards", tags=["Rewards"])
api_router.include_router(healthz.router, prefix="/healthz", tags=["Others"])
api_router.redirect_slashes = False
