"""Coordinator statistics endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from rpsarena.server import get_coordinator

router = APIRouter(prefix="/stats", tags=["stats"])


class StatsResponse(BaseModel):
    """Live view of the coordinator."""

    connected: int
    waiting: int
    active_sessions: int = Field(alias="activeSessions")
    sessions_started: int = Field(alias="sessionsStarted")
    waiting_names: list[str] = Field(alias="waitingNames")

    model_config = {"populate_by_name": True}


@router.get("", response_model=StatsResponse)
async def get_stats() -> StatsResponse:
    """Get connection, pool and session counts."""
    stats = get_coordinator().stats()
    return StatsResponse(
        connected=stats.connected,
        waiting=stats.waiting,
        active_sessions=stats.active_sessions,
        sessions_started=stats.sessions_started,
        waiting_names=stats.waiting_names,
    )
