"""Game coordinator: accepts participants and feeds the matchmaker.

The Coordinator owns the listening socket, the waiting pool and the
matchmaker. Each accepted client gets a Connection, a handshake for its
display name, and a place in the pool.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from rpsarena.connection import Connection
from rpsarena.lobby.matchmaker import Matchmaker
from rpsarena.lobby.pool import WaitingPool
from rpsarena.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class CoordinatorStats:
    """Snapshot of the coordinator's state.

    Attributes:
        connected: Participants with an open connection
        waiting: Participants waiting for an opponent
        active_sessions: Sessions currently running
        sessions_started: Sessions started since the coordinator began
        waiting_names: Names of waiting participants, oldest first
    """

    connected: int = 0
    waiting: int = 0
    active_sessions: int = 0
    sessions_started: int = 0
    waiting_names: list[str] = field(default_factory=list)


class Coordinator:
    """Accepts connections and runs the matchmaker."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the coordinator.

        Args:
            settings: Settings to use (defaults to the cached application settings)
        """
        self.settings = settings or get_settings()
        self.pool = WaitingPool()
        self.matchmaker = Matchmaker(self.pool, wins_needed=self.settings.wins_needed)
        self._server: asyncio.Server | None = None
        self._matchmaker_task: asyncio.Task[None] | None = None
        self._connections: set[Connection] = set()

    @property
    def is_running(self) -> bool:
        return self._server is not None and self._server.is_serving()

    @property
    def bound_port(self) -> int | None:
        """Port actually bound, which differs from the setting when 0 was requested."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    async def start(self, host: str | None = None, port: int | None = None) -> None:
        """Bind the listening socket and start the matchmaker.

        Args:
            host: Interface to bind (defaults to settings.host)
            port: Port to bind (defaults to settings.port)

        Raises:
            OSError: If the socket cannot be bound
        """
        host = host if host is not None else self.settings.host
        port = port if port is not None else self.settings.port

        self._server = await asyncio.start_server(self._handle_client, host, port)
        self._matchmaker_task = asyncio.create_task(self.matchmaker.run(), name="matchmaker")
        logger.info(f"Server listening on {host}:{self.bound_port}")

    async def serve_forever(self) -> None:
        """Serve until the coordinator is stopped."""
        if self._server is None:
            await self.start()
        assert self._server is not None
        try:
            await self._server.serve_forever()
        except asyncio.CancelledError:
            logger.info("Server loop cancelled")
            raise

    async def stop(self) -> None:
        """Stop accepting, cancel running sessions and close every connection."""
        if self._server is not None:
            self._server.close()

        if self._matchmaker_task is not None:
            self._matchmaker_task.cancel()
            await asyncio.gather(self._matchmaker_task, return_exceptions=True)
            self._matchmaker_task = None

        await self.matchmaker.shutdown()

        for conn in list(self._connections):
            conn.close()

        if self._server is not None:
            await self._server.wait_closed()
            self._server = None
        logger.info("Server stopped")

    def stats(self) -> CoordinatorStats:
        """Get a snapshot of connections, waiting participants and sessions."""
        waiting_names = [conn.name for conn in self.matchmaker.held]
        waiting_names.extend(self.pool.waiting_names())
        return CoordinatorStats(
            connected=len(self._connections),
            waiting=len(waiting_names),
            active_sessions=self.matchmaker.active_sessions,
            sessions_started=self.matchmaker.sessions_started,
            waiting_names=waiting_names,
        )

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Handle one accepted client for as long as it stays connected."""
        conn = Connection(reader, writer)
        self._connections.add(conn)
        logger.info(f"New connection from {conn.peer}")
        conn.start()

        try:
            joined = await conn.handshake(
                name_prefix=self.settings.guest_name_prefix,
                name_range=self.settings.guest_name_range,
            )
            if joined:
                logger.info(f"{conn.name} joined from {conn.peer}")
                await self.pool.enqueue(conn)
            await conn.wait_closed()
        finally:
            conn.close()
            self._connections.discard(conn)


# Global coordinator instance
_coordinator: Coordinator | None = None


def get_coordinator() -> Coordinator:
    """Get the global coordinator instance."""
    global _coordinator
    if _coordinator is None:
        _coordinator = Coordinator()
    return _coordinator


def init_coordinator(settings: Settings | None = None) -> Coordinator:
    """Initialize the global coordinator with the given settings.

    Args:
        settings: Settings to use (defaults to the cached application settings)

    Returns:
        The initialized Coordinator instance.
    """
    global _coordinator
    _coordinator = Coordinator(settings)
    return _coordinator


def reset_coordinator() -> None:
    """Reset the global coordinator. Used for testing."""
    global _coordinator
    _coordinator = None
