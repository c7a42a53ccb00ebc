"""dhis2connect entry point.

Runs the OAuth2 handshake against a DHIS2 server and prints the token pair
as JSON on stdout. Connection settings come from DHIS2CONNECT_* environment
variables (or .env) and can be overridden with flags.
"""

import argparse
import asyncio
import json
import logging
from importlib.metadata import version as get_version

from dhis2connect.config import get_settings
from dhis2connect.connector import DHIS2Connector
from dhis2connect.errors import ConnectionFailure, TokenFailure
from dhis2connect.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dhis2connect",
        description="Obtain an OAuth2 bearer token from a DHIS2 server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dhis2connect                                   Use settings from env / .env
  dhis2connect --url https://dhis2.example.org   Connect to another server
  dhis2connect -u admin -p district              Override the login
""",
    )
    parser.add_argument("--url", type=str, default=None, help="DHIS2 server base URL")
    parser.add_argument("--username", "-u", type=str, default=None, help="DHIS2 username")
    parser.add_argument("--password", "-p", type=str, default=None, help="DHIS2 password")
    parser.add_argument(
        "--client-id",
        type=str,
        default=None,
        help="OAuth client identifier to look up or register",
    )
    parser.add_argument(
        "--timeout", type=_positive_float, default=None, help="Per-request timeout in seconds"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: from settings, INFO)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {get_version('dhis2connect')}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    setup_logging(level=args.log_level or settings.log_level)

    base_url = args.url or settings.base_url
    username = args.username or settings.username
    password = args.password or settings.password.get_secret_value()

    connector = DHIS2Connector(
        client_id=args.client_id,
        timeout=args.timeout,
        settings=settings,
    )

    try:
        tokens = asyncio.run(connector.connect(base_url, username, password))
    except (ConnectionFailure, TokenFailure) as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130

    print(json.dumps(tokens.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
