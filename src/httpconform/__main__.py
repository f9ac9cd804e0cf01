"""
=============================================================================
COMMAND-LINE INTERFACE
=============================================================================

Run the conformance cases against a server:

    python -m httpconform http://localhost:8080/
    httpconform https://example.com/ --timeout 5
    httpconform https://self-signed.test/ --insecure --no-color

=============================================================================
EXIT CODES
=============================================================================

    0   every case passed
    1   at least one case failed
    2   the URL is invalid, or its scheme is not http/https
    3   the connection could not be established

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ClientConfig, LOG_FORMATS, LOG_LEVELS, setup_logging
from .conformance import DEFAULT_REGISTRY, format_result, run_cases
from .core.client import HttpClient
from .http.errors import ConnectError
from .http.url import parse_url


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_URL = 2
EXIT_CONNECT_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="httpconform",
        description="Strict HTTP/1.1 conformance tester",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m httpconform http://localhost:8080/        # Run all cases
  python -m httpconform https://example.com/ -t 5     # 5 second timeout
  python -m httpconform https://localhost/ --insecure # Self-signed cert
        """
    )

    parser.add_argument(
        "url",
        help="http:// or https:// URL of the server under test"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Socket timeout in seconds (default: 30)"
    )

    parser.add_argument(
        "--insecure", "-k",
        action="store_true",
        help="Do not verify TLS certificates"
    )

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Exchange log format (default: text)"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors in the report"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"httpconform {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Environment first, then flags on top."""
    config = ClientConfig.from_env()
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.insecure:
        config.verify_tls = False
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format
    if args.no_color:
        config.color = False
    config.validate()
    return config


def main(argv=None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILED

    setup_logging(config)

    # =========================================================================
    # TARGET URL
    # =========================================================================

    outcome = parse_url(args.url)
    if not outcome.ok:
        print(f'Invalid URL "{args.url}": {outcome.diagnosis}', file=sys.stderr)
        return EXIT_BAD_URL
    url = outcome.value

    # =========================================================================
    # CONNECT AND RUN
    # =========================================================================

    with HttpClient(config) as client:
        try:
            client.connect_url(url)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_BAD_URL
        except ConnectError as e:
            print(f"Failed to connect: {e}", file=sys.stderr)
            return EXIT_CONNECT_FAILED

        report = run_cases(client, DEFAULT_REGISTRY)

    for result in report.results:
        print(format_result(result, color=config.color))
        if not result.passed and result.detail:
            print(f"\t{result.detail}")
    print(report.summary())

    return EXIT_OK if report.all_passed else EXIT_FAILED


# =============================================================================
# ENTRY POINT
# =============================================================================
# This allows running: python -m httpconform

if __name__ == "__main__":
    sys.exit(main())
