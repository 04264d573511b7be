"""Command line entry point for the game coordinator.

Usage:
    rps-server [port]
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from rpsarena.main import app, setup_logging
from rpsarena.server import init_coordinator
from rpsarena.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rps-server",
        description="Rock Paper Scissors Arena game coordinator",
    )
    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=None,
        help="TCP port to listen on (default: RPS_PORT or 5000)",
    )
    return parser.parse_args(argv)


async def run_server(settings: Settings) -> None:
    """Run the coordinator, and the status API when configured, until cancelled."""
    coordinator = init_coordinator(settings)
    await coordinator.start()

    tasks = [asyncio.create_task(coordinator.serve_forever(), name="coordinator")]
    status_server: uvicorn.Server | None = None
    if settings.status_api_enabled:
        config = uvicorn.Config(
            app,
            host=settings.status_host,
            port=settings.status_port,
            log_level=settings.log_level.lower(),
        )
        status_server = uvicorn.Server(config)
        tasks.append(asyncio.create_task(status_server.serve(), name="status-api"))
        logger.info(f"Status API on http://{settings.status_host}:{settings.status_port}")

    try:
        await asyncio.gather(*tasks)
    finally:
        if status_server is not None:
            status_server.should_exit = True
        await coordinator.stop()


def main(argv: list[str] | None = None) -> int:
    """Start the coordinator. Returns the process exit status."""
    args = parse_args(argv)
    settings = get_settings()
    if args.port is not None:
        settings = settings.model_copy(update={"port": args.port})

    setup_logging(settings.log_level)
    try:
        asyncio.run(run_server(settings))
    except OSError as e:
        logger.error(f"Cannot start server on {settings.host}:{settings.port}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
