"""Main API router."""

from fastapi import APIRouter

from rpsarena.api.stats import router as stats_router

api_router = APIRouter()
api_router.include_router(stats_router)
