"""Test status API endpoints."""

import asyncio

import pytest
from httpx import AsyncClient

from rpsarena.server import init_coordinator
from rpsarena.settings import Settings


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test that health check returns ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_root(client: AsyncClient) -> None:
    """Test root endpoint."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Rock Paper Scissors Arena"
    assert "version" in data


@pytest.mark.asyncio
async def test_stats_idle(client: AsyncClient) -> None:
    """Stats of a coordinator with nobody connected."""
    init_coordinator(Settings(_env_file=None))

    response = await client.get("/api/stats")

    assert response.status_code == 200
    assert response.json() == {
        "connected": 0,
        "waiting": 0,
        "activeSessions": 0,
        "sessionsStarted": 0,
        "waitingNames": [],
    }


@pytest.mark.asyncio
async def test_stats_reports_waiting_players(client: AsyncClient, scripted) -> None:
    """Waiting participants show up in the stats."""
    coordinator = init_coordinator(Settings(_env_file=None))
    await coordinator.pool.enqueue(scripted("Alice"))

    response = await client.get("/api/stats")

    data = response.json()
    assert data["waiting"] == 1
    assert data["waitingNames"] == ["Alice"]


@pytest.mark.asyncio
async def test_stats_reports_held_player(client: AsyncClient, scripted) -> None:
    """A participant held by the matchmaker still counts as waiting."""
    coordinator = init_coordinator(Settings(_env_file=None))
    alice = scripted("Alice")
    await coordinator.pool.enqueue(alice)
    await coordinator.pool.enqueue(scripted("Bob"))
    alice.disconnect()
    assert await coordinator.matchmaker.pair_once() is None

    waiting = asyncio.create_task(coordinator.matchmaker.pair_once())
    await asyncio.sleep(0.01)

    response = await client.get("/api/stats")

    data = response.json()
    assert data["waiting"] == 1
    assert data["waitingNames"] == ["Bob"]

    waiting.cancel()
    await asyncio.gather(waiting, return_exceptions=True)
