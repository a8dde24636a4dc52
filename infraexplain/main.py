"""Main entry point for serving the InfraExplain UI."""

import argparse
import logging

import uvicorn

from infraexplain.config import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(description="Serve the InfraExplain web UI")
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Interface to bind (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=5173,
        help="Port to listen on (default: 5173)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on source changes (development only)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None):
    """Main function for the UI server CLI."""
    args = build_parser().parse_args(argv)

    log_level = "debug" if args.verbose else settings.log_level.lower()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if settings.api_base_url:
        logger.info(f"Explanation service: {settings.api_base_url}")
    else:
        logger.info(f"Explanation service: same origin, relayed to {settings.explain_backend_url}")

    uvicorn.run(
        "infraexplain.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
