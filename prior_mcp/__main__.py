"""Command-line entry point: ``prior-mcp`` / ``python -m prior_mcp``."""

import argparse
import logging
import os
import sys

from prior_mcp import __version__
from prior_mcp.logging_config import setup_prior_logging

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "PRIOR_LOG_LEVEL"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prior-mcp",
        description="Prior knowledge exchange for AI agents (MCP stdio server)",
    )
    parser.add_argument("--version", action="version", version=f"prior-mcp {__version__}")
    parser.add_argument("--api-url", help="Prior API base URL (default: PRIOR_API_URL or https://api.cg3.io)")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "INFO"),
        help="Log level for ~/.prior/logs (default: PRIOR_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--auto-register",
        action="store_true",
        default=None,
        help="Register a new agent on first use when no API key is configured",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        setup_prior_logging(args.log_level)
    except OSError as e:
        print(f"prior-mcp: file logging disabled: {e}", file=sys.stderr)

    from prior_mcp.mcp.server import main as mcp_main

    try:
        mcp_main(api_url=args.api_url, auto_register=args.auto_register)
    except KeyboardInterrupt:
        logger.info("Prior MCP server stopped")


if __name__ == "__main__":
    main()
