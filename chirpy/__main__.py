"""
Chirpy Server Entry Point

Allows running the server directly via `python -m chirpy`.
Reads secrets from the environment, configures logging to stderr and
starts the HTTP server.
"""

import argparse
import asyncio
import logging
import sys

from .core.config import ConfigError, ServerConfig
from .core.constants import LOG_FORMAT
from .persistence.json_store import FlatStore
from .transport.http_transport import HttpTransport


def setup_logging(level: str = "INFO"):
    """Configure logging to stderr"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chirpy API server")
    parser.add_argument(
        "--dev",
        action="store_true",
        help="clear the database on startup",
    )
    parser.add_argument("--host", type=str, default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Listen port")
    parser.add_argument("--db", type=str, default=None, help="Path to the JSON store")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    return parser.parse_args(argv)


async def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger("main")

    try:
        config = ServerConfig.from_env()
    except ConfigError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.db is not None:
        config.db_path = args.db
    config.dev_mode = args.dev

    try:
        store = FlatStore(config.db_path)
        if config.dev_mode:
            logger.info("dev mode: clearing database")
            store.clear()

        transport = HttpTransport(config, store=store)
        logger.info("Starting Chirpy server...")
        await transport.serve_forever()

    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


def run():
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
