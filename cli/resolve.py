"""Resolve a client IP from headers given on the command line."""

import logging
import sys
from typing import Sequence, TextIO

from clientip.configs.system import CloudFlareConfig
from clientip.core.base import ConfigurationError
from clientip.core.resolver import build_pluggable_config, resolve_client_ip

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def parse_header(raw: str) -> tuple[str, str]:
    """Split ``"Name: value"`` into a lower-cased name and stripped value."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Header must look like 'Name: value', got {raw!r}")
    return name.strip().lower(), value.strip()


def run(
    *,
    headers: Sequence[str],
    peer: str | None,
    strategy: str,
    analyzed_headers: Sequence[str] | None,
    fallbacks: Sequence[str] | None,
    restrict_family: str | None,
    v4_only: bool,
    skip_loopback: bool,
    output_stream: TextIO | None = None,
) -> int:
    """Resolve and print the client IP; returns the process exit code.

    An unknown client IP prints an empty line and still exits 0.
    """
    if output_stream is None:
        output_stream = sys.stdout
    try:
        header_set: dict[str, str] = {}
        for raw in headers:
            name, value = parse_header(raw)
            if name in header_set:
                header_set[name] = f"{header_set[name]}, {value}"
            else:
                header_set[name] = value

        if strategy == "cloudflare":
            options: dict = {"v4_only": v4_only, "skip_loopback": skip_loopback}
            if analyzed_headers:
                options["analyzed_headers"] = tuple(analyzed_headers)
            config = CloudFlareConfig(**options)
        else:
            options = {"skip_loopback": skip_loopback}
            if analyzed_headers is not None:
                options["analyzed_headers"] = tuple(analyzed_headers)
            if fallbacks is not None:
                options["fallbacks"] = tuple(fallbacks)
            if restrict_family:
                options["restrict_family"] = restrict_family
            config = build_pluggable_config(**options)
    except (ConfigurationError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    output_stream.write(resolve_client_ip(header_set, peer, config) + "\n")
    return EXIT_OK
