#!/usr/bin/env python3
"""
bucketkv Server Entry Point

Usage:
    python -m bucketkv.server                           # Default settings (0.0.0.0:3000)
    python -m bucketkv.server --port 8080               # Custom port
    python -m bucketkv.server --host 127.0.0.1          # Custom host
    python -m bucketkv.server --data-file /tmp/kv.txt   # Custom data file
    python -m bucketkv.server --debug                   # Enable debug logging

Environment Variables:
    BUCKETKV_HOST       - Server bind address
    BUCKETKV_PORT       - Server port
    BUCKETKV_DATA_FILE  - Path of the persisted data file
    BUCKETKV_DEBUG      - Enable debug mode (true/false)
    BUCKETKV_LOG_LEVEL  - Log level when debug mode is off
"""

import argparse
import asyncio
import logging
import signal
import sys

from .config.settings import settings
from .network.tcp_server import KVServer
from .storage.store import HashMapStore


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="bucketkv: Bucketed Hash Map Key-Value Store Server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--data-file",
        type=str,
        default=settings.DATA_FILE,
        help="File the store is persisted to",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def main(argv=None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    # One store per process, handed to the front end
    store = HashMapStore(file_path=args.data_file)
    server = KVServer(host=args.host, port=args.port, store=store)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    async def shutdown(sig: signal.Signals) -> None:
        """Handle shutdown signal."""
        logger.info(f"Received signal {sig.name}, initiating shutdown...")
        await server.stop()

    # Register signal handlers (Unix only)
    if sys.platform != 'win32':
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: asyncio.create_task(shutdown(s))
            )

    logger.info("Starting bucketkv server")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Data file: {args.data_file}")
    logger.info(f"  Buckets: {store.bucket_count}, keys: {store.size()}")

    try:
        loop.run_until_complete(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        loop.run_until_complete(server.stop())
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
