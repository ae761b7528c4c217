"""Entry point for running the CLI as a module."""

import argparse
import logging
import sys

from .resolve import run


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Resolve the client IP of a request from its headers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "example:\n"
            "  python -m cli --analyzed-header cf-connecting-ip \\\n"
            "      --header 'CF-Connecting-IP: 1.2.3.4' --peer 10.0.0.1"
        ),
    )

    parser.add_argument(
        "--header",
        dest="headers",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Request header; repeat for several headers",
    )
    parser.add_argument(
        "--peer",
        type=str,
        default=None,
        help="Transport-level remote peer address",
    )
    parser.add_argument(
        "--strategy",
        choices=("pluggable", "cloudflare"),
        default="pluggable",
        help="Resolution strategy (default: pluggable)",
    )
    parser.add_argument(
        "--analyzed-header",
        dest="analyzed_headers",
        action="append",
        default=None,
        help="Trusted header name, highest trust first; repeatable",
    )
    parser.add_argument(
        "--fallback",
        dest="fallbacks",
        action="append",
        default=None,
        help="Fallback source: x-forwarded-for, rfc-7239, remote-peer-address",
    )
    parser.add_argument(
        "--restrict-family",
        choices=("ipv4", "ipv6"),
        default=None,
        help="Accept only one address family (pluggable strategy)",
    )
    parser.add_argument(
        "--v4-only",
        action="store_true",
        help="Accept only IPv4 addresses (cloudflare strategy)",
    )
    parser.add_argument(
        "--skip-loopback",
        action="store_true",
        help="Accept loopback addresses",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def cli_entry(argv=None) -> None:
    """CLI entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    sys.exit(
        run(
            headers=args.headers,
            peer=args.peer,
            strategy=args.strategy,
            analyzed_headers=args.analyzed_headers,
            fallbacks=args.fallbacks,
            restrict_family=args.restrict_family,
            v4_only=args.v4_only,
            skip_loopback=args.skip_loopback,
        )
    )


if __name__ == "__main__":
    cli_entry()
