"""A single live participant attached to the coordinator.

Each Connection owns one transport stream. A background reader task pumps
incoming lines into a private inbox so that a disconnect is noticed even
while the participant is idle in the waiting pool. Lines are only kept
while the Connection is claimed: the pool releases it and a session claims
it, and the owner consumes the inbox through ``receive()``.
"""

import asyncio
import logging
import random

from rpsarena import protocol

logger = logging.getLogger(__name__)

DEFAULT_NAME = "?"


class Connection:
    """One network participant.

    Attributes:
        name: Display name, assigned during the handshake
        peer: Remote address reported by the transport, if any
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Wrap an accepted stream pair.

        Args:
            reader: Stream to read client lines from
            writer: Stream to write server lines to
        """
        self.name = DEFAULT_NAME
        self.peer = writer.get_extra_info("peername")
        self._reader = reader
        self._writer = writer
        self._live = True
        # Lines are only kept while someone is reading them; see release()
        self._claimed = True
        self._inbox: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = asyncio.Event()
        self._reader_task: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        state = "live" if self._live else "dead"
        return f"Connection({self.name!r}, {state})"

    @property
    def is_live(self) -> bool:
        """Check if the transport is still usable."""
        return self._live

    def start(self) -> None:
        """Start the background reader for this connection."""
        if self._reader_task is None:
            self._reader_task = asyncio.create_task(
                self._read_lines(), name=f"reader-{self.peer}"
            )

    async def _read_lines(self) -> None:
        """Pump lines from the transport into the inbox until it ends."""
        try:
            while True:
                raw = await self._reader.readline()
                if not raw:
                    break
                if not self._claimed:
                    continue
                self._inbox.put_nowait(raw.decode("utf-8", errors="replace").rstrip("\r\n"))
        except (ConnectionError, OSError, ValueError) as e:
            # ValueError is raised by readline() when a line exceeds the buffer limit
            logger.debug(f"Read failed for {self.name}: {e}")
        finally:
            self.close()

    async def send(self, text: str) -> None:
        """Send text to the participant, one line per newline in ``text``.

        Sending to a dead connection does nothing.
        """
        if not self._live:
            return
        try:
            self._writer.write((text + "\n").encode("utf-8"))
            await self._writer.drain()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Send failed for {self.name}: {e}")
            self.close()

    async def receive(self) -> str | None:
        """Wait for the next line from the participant.

        Returns:
            The line without its terminator, or None once the stream has ended
        """
        if not self._live and self._inbox.empty():
            return None
        return await self._inbox.get()

    async def request(self, prompt: str) -> str | None:
        """Send a prompt and wait for the reply line."""
        await self.send(prompt)
        return await self.receive()

    async def handshake(self, name_prefix: str = "Player", name_range: int = 1000) -> bool:
        """Greet the participant and ask for a display name.

        An empty or blank reply is replaced with a generated guest name.

        Args:
            name_prefix: Prefix of the generated guest name
            name_range: Upper bound (exclusive) of the guest name number

        Returns:
            True if the participant is still connected after the handshake
        """
        reply = await self.request(protocol.welcome())
        if reply is None:
            return False

        name = reply.strip()
        if not name:
            name = f"{name_prefix}{random.randrange(name_range)}"
        self.name = name

        await self.send(protocol.greeting(name))
        return self._live

    def discard_pending(self) -> int:
        """Drop lines typed before the current owner took over.

        The end-of-stream marker is kept so a disconnect is not lost.

        Returns:
            Number of lines discarded
        """
        dropped = 0
        ended = False
        while not self._inbox.empty():
            if self._inbox.get_nowait() is None:
                ended = True
            else:
                dropped += 1
        if ended:
            self._inbox.put_nowait(None)
        return dropped

    @property
    def is_claimed(self) -> bool:
        """Check if incoming lines are being kept for a reader."""
        return self._claimed

    def claim(self) -> None:
        """Take over the connection's input, starting from a clean inbox."""
        self.discard_pending()
        self._claimed = True

    def release(self) -> None:
        """Stop keeping input; lines typed until the next claim() are dropped."""
        self._claimed = False
        self.discard_pending()

    def close(self) -> None:
        """Mark the connection dead and release the transport. Safe to call twice."""
        if self._closed.is_set():
            return
        self._live = False
        self._closed.set()
        self._inbox.put_nowait(None)

        task = self._reader_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

        try:
            self._writer.close()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error closing transport for {self.name}: {e}")

        logger.info(f"Client disconnected: {self.name}")

    async def wait_closed(self) -> None:
        """Wait until the connection has been closed."""
        await self._closed.wait()
