"""Pytest configuration and fixtures."""

import os

# Keep tests independent of any local .env or shell configuration
os.environ.pop("RPS_STATUS_PORT", None)
os.environ.pop("RPS_PORT", None)

from collections import deque  # noqa: E402
from collections.abc import Callable, Iterable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from rpsarena.main import app  # noqa: E402
from rpsarena.server import reset_coordinator  # noqa: E402
from rpsarena.settings import get_settings  # noqa: E402

get_settings.cache_clear()


class FakeWriter:
    """In-memory stand-in for asyncio.StreamWriter."""

    def __init__(self, peer: tuple[str, int] = ("127.0.0.1", 40000)) -> None:
        self.buffer = bytearray()
        self.closed = False
        self.fail_writes = False
        self._peer = peer

    def get_extra_info(self, name: str, default: object = None) -> object:
        return self._peer if name == "peername" else default

    def write(self, data: bytes) -> None:
        if self.closed or self.fail_writes:
            raise ConnectionResetError("connection reset by peer")
        self.buffer.extend(data)

    async def drain(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True

    def is_closing(self) -> bool:
        return self.closed

    @property
    def lines(self) -> list[str]:
        return self.buffer.decode("utf-8").splitlines()


class ScriptedConnection:
    """Connection double that answers prompts from a fixed script.

    When the script runs out the participant behaves as if they had
    disconnected: ``receive()`` returns None and the connection goes dead.
    """

    def __init__(
        self,
        name: str,
        replies: Iterable[str] = (),
        live: bool = True,
        journal: list[str] | None = None,
    ) -> None:
        self.name = name
        self.replies = deque(replies)
        self.sent: list[str] = []
        self.closed = False
        self.claimed = True
        self.claim_calls = 0
        self._live = live
        self._journal = journal

    def __repr__(self) -> str:
        return f"ScriptedConnection({self.name!r})"

    @property
    def is_live(self) -> bool:
        return self._live

    async def send(self, text: str) -> None:
        if self._live:
            self.sent.append(text)

    async def receive(self) -> str | None:
        if self._journal is not None:
            self._journal.append(self.name)
        if self._live and self.replies:
            return self.replies.popleft()
        self._live = False
        return None

    async def request(self, prompt: str) -> str | None:
        await self.send(prompt)
        return await self.receive()

    def claim(self) -> None:
        self.claim_calls += 1
        self.claimed = True

    def release(self) -> None:
        self.claimed = False

    def close(self) -> None:
        self._live = False
        self.closed = True

    def disconnect(self) -> None:
        self._live = False

    @property
    def output(self) -> str:
        return "\n".join(self.sent)


@pytest.fixture
def scripted() -> Callable[..., ScriptedConnection]:
    """Factory for scripted participants."""
    return ScriptedConnection


@pytest.fixture
def fake_writer() -> Callable[..., FakeWriter]:
    """Factory for in-memory stream writers."""
    return FakeWriter


@pytest.fixture(autouse=True)
def clear_coordinator() -> None:
    """Start every test without a global coordinator."""
    reset_coordinator()


@pytest.fixture
async def client() -> AsyncClient:
    """Create an async test client for the status API."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
