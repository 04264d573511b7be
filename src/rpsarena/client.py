"""Console client for the Rock Paper Scissors Arena.

Usage:
    rps-client [host] [port]

Every line the server sends is printed as it arrives. Lines typed on
stdin are forwarded to the server. The client exits when the server closes
the connection or stdin ends.
"""

import argparse
import asyncio
import logging
import sys
import threading

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000
DISCONNECTED = "[Disconnected]"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rps-client",
        description="Console client for the Rock Paper Scissors Arena",
    )
    parser.add_argument("host", nargs="?", default=DEFAULT_HOST, help="Server host")
    parser.add_argument("port", nargs="?", type=int, default=DEFAULT_PORT, help="Server port")
    return parser.parse_args(argv)


async def print_server_lines(reader: asyncio.StreamReader) -> None:
    """Print server lines until the stream ends."""
    try:
        while True:
            raw = await reader.readline()
            if not raw:
                break
            print(raw.decode("utf-8", errors="replace").rstrip("\r\n"), flush=True)
    except (ConnectionError, OSError) as e:
        logger.debug(f"Read from server failed: {e}")
    print(DISCONNECTED, flush=True)


def _read_stdin(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue[str | None]) -> None:
    """Blocking stdin reader for the daemon input thread."""
    for line in sys.stdin:
        loop.call_soon_threadsafe(lines.put_nowait, line.rstrip("\r\n"))
    loop.call_soon_threadsafe(lines.put_nowait, None)


async def forward_input(lines: asyncio.Queue[str | None], writer: asyncio.StreamWriter) -> None:
    """Send queued input lines to the server until input ends."""
    while True:
        line = await lines.get()
        if line is None:
            return
        writer.write((line + "\n").encode("utf-8"))
        await writer.drain()


async def run_client(host: str, port: int) -> None:
    reader, writer = await asyncio.open_connection(host, port)
    lines: asyncio.Queue[str | None] = asyncio.Queue()
    threading.Thread(
        target=_read_stdin,
        args=(asyncio.get_running_loop(), lines),
        name="stdin-reader",
        daemon=True,
    ).start()

    receiving = asyncio.create_task(print_server_lines(reader), name="server-reader")
    sending = asyncio.create_task(forward_input(lines, writer), name="stdin-forwarder")
    try:
        await asyncio.wait({receiving, sending}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (receiving, sending):
            task.cancel()
        await asyncio.gather(receiving, sending, return_exceptions=True)
        writer.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        asyncio.run(run_client(args.host, args.port))
    except OSError as e:
        print(f"Cannot connect to {args.host}:{args.port}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
