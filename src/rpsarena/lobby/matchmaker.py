"""Matchmaker that turns pairs of waiting participants into sessions."""

import asyncio
import logging

from rpsarena.connection import Connection
from rpsarena.game.match import DEFAULT_WINS_NEEDED
from rpsarena.game.session import Session
from rpsarena.lobby.pool import WaitingPool

logger = logging.getLogger(__name__)


class Matchmaker:
    """Continuously pairs participants from the waiting pool.

    Pairing is strict arrival order. Each session runs in its own task so a
    running match never blocks further pairing.

    Liveness policy when drawing a pair:
    - first dead: it is dropped, and the second one is held over as the first
      candidate of the next pairing attempt;
    - first live, second dead: the first one is re-queued at the tail;
    - both live: a new session starts.
    """

    def __init__(self, pool: WaitingPool, wins_needed: int = DEFAULT_WINS_NEEDED) -> None:
        """Initialize the matchmaker.

        Args:
            pool: The pool to draw participants from
            wins_needed: Round wins required to take a match
        """
        self._pool = pool
        self._wins_needed = wins_needed
        self._held: Connection | None = None
        self._session_tasks: set[asyncio.Task[None]] = set()
        self.sessions_started = 0

    @property
    def held(self) -> list[Connection]:
        """Participants drawn from the pool but not yet paired."""
        return [self._held] if self._held is not None else []

    @property
    def active_sessions(self) -> int:
        """Number of sessions currently running."""
        return len(self._session_tasks)

    async def run(self) -> None:
        """Pair participants until cancelled."""
        logger.info("Matchmaker started")
        while True:
            try:
                await self.pair_once()
            except Exception as e:
                logger.exception(f"Matchmaker error: {e}")

    async def _draw(self) -> tuple[Connection, Connection]:
        if self._held is not None:
            # The held participant stays visible until an opponent arrives
            second = await self._pool.take()
            first, self._held = self._held, None
            return first, second
        return await self._pool.take_pair()

    async def pair_once(self) -> Session | None:
        """Draw one pair and act on it.

        Returns:
            The started session, or None if the pair was not playable
        """
        first, second = await self._draw()

        if not first.is_live:
            logger.info(f"Dropping {first.name}: disconnected while waiting")
            first.close()
            self._held = second
            return None

        if not second.is_live:
            logger.info(f"{second.name} disconnected while waiting, re-queueing {first.name}")
            second.close()
            await self._pool.enqueue(first)
            return None

        try:
            session = Session(first, second, self._pool, wins_needed=self._wins_needed)
            self._start(session)
        except Exception as e:
            logger.exception(f"Failed to start session for {first.name} vs {second.name}: {e}")
            first.close()
            second.close()
            return None
        return session

    def _start(self, session: Session) -> None:
        task = asyncio.create_task(session.run(), name=f"session-{session.id}")
        self._session_tasks.add(task)
        task.add_done_callback(self._session_tasks.discard)
        self.sessions_started += 1

    async def wait_sessions(self) -> None:
        """Wait for every running session to finish."""
        if self._session_tasks:
            await asyncio.gather(*self._session_tasks, return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel running sessions and wait for them to unwind."""
        for task in self._session_tasks:
            task.cancel()
        await self.wait_sessions()
        if self._held is not None:
            self._held.close()
            self._held = None
