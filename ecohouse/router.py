"""Central API router aggregating all domain routers."""

from fastapi import APIRouter

from ecohouse.auth.router import router as auth_router
from ecohouse.health.router import router as health_router
from ecohouse.house.router import router as house_router
from ecohouse.profile.router import router as profile_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(house_router)
api_router.include_router(profile_router)
