"""Waiting pool of participants who are not currently in a match."""

import asyncio
import logging
from collections import deque

from rpsarena import protocol
from rpsarena.connection import Connection

logger = logging.getLogger(__name__)


class WaitingPool:
    """FIFO hand-off point between connection handlers and the matchmaker.

    Entries are handed out strictly in arrival order. The pool does not
    check liveness when handing entries out; that is the matchmaker's job.
    """

    def __init__(self) -> None:
        """Initialize an empty pool."""
        self._entries: deque[Connection] = deque()
        self._ready = asyncio.Condition()

    def __len__(self) -> int:
        return len(self._entries)

    def waiting_names(self) -> list[str]:
        """Get the names of waiting participants, oldest first."""
        return [conn.name for conn in self._entries]

    async def enqueue(self, conn: Connection | None) -> bool:
        """Add a participant to the tail of the pool and let them know.

        Args:
            conn: The participant to queue

        Returns:
            True if queued, False if the connection was missing or dead
        """
        if conn is None or not conn.is_live:
            return False

        # Nobody reads a waiting participant, so their input is dropped
        conn.release()
        async with self._ready:
            self._entries.append(conn)
            self._ready.notify_all()

        logger.info(f"{conn.name} entered the waiting pool ({len(self._entries)} waiting)")
        await conn.send(protocol.pool_notice())
        return True

    async def take(self) -> Connection:
        """Wait for and remove the oldest entry."""
        async with self._ready:
            await self._ready.wait_for(lambda: len(self._entries) > 0)
            return self._entries.popleft()

    async def take_pair(self) -> tuple[Connection, Connection]:
        """Wait until two entries are queued and remove them in arrival order.

        Nothing is removed while only one participant is waiting, so a lone
        participant stays visible in the pool.
        """
        async with self._ready:
            await self._ready.wait_for(lambda: len(self._entries) >= 2)
            first = self._entries.popleft()
            second = self._entries.popleft()
        return first, second
