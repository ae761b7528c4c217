"""Candidate generation from request headers and the transport peer.

Candidates are produced lazily, highest trust first:

1. Headers listed in ``analyzed_headers`` (edge-injected, e.g. CloudFlare's
   ``CF-Connecting-IP``) — one raw value each.
2. Fallback sources in configured order — ``X-Forwarded-For`` entries,
   RFC 7239 ``Forwarded: for=`` values, then the remote peer address.

Nothing here validates; malformed values are yielded as-is and rejected
later by :class:`~clientip.core.validator.AddressValidator`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping

logger = logging.getLogger(__name__)

FALLBACK_X_FORWARDED_FOR = "x-forwarded-for"
FALLBACK_RFC_7239 = "rfc-7239"
FALLBACK_REMOTE_PEER_ADDRESS = "remote-peer-address"

KNOWN_FALLBACKS = frozenset(
    {FALLBACK_X_FORWARDED_FOR, FALLBACK_RFC_7239, FALLBACK_REMOTE_PEER_ADDRESS}
)

_X_FORWARDED_FOR_HEADER = "x-forwarded-for"
_FORWARDED_HEADER = "forwarded"

_COMMA_RE = re.compile(r"\s*,\s*")
# Permissive; every match is re-checked by the validator.
_FORWARDED_FOR_RE = re.compile(
    r"for=(?:(\d{1,3}.\d{1,3}.\d{1,3}.\d{1,3})|\"?\[([\w:]+)\])",
    re.IGNORECASE,
)


def normalize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Lower-case header names and join repeated lines with ``", "``.

    Accepts a plain mapping or a Starlette ``Headers`` object, whose
    ``items()`` yields one pair per header line.
    """
    normalized: dict[str, str] = {}
    for name, value in headers.items():
        key = name.lower()
        if key in normalized:
            normalized[key] = f"{normalized[key]}, {value}"
        else:
            normalized[key] = value
    return normalized


def split_forwarded_for(value: str) -> list[str]:
    """Split an ``X-Forwarded-For`` value into its entries, left to right."""
    return [part for part in _COMMA_RE.split(value.strip()) if part]


def parse_forwarded(value: str) -> list[str]:
    """Extract ``for=`` addresses from an RFC 7239 ``Forwarded`` value.

    IPv4 dotted quads are taken bare; IPv6 literals are unwrapped from
    their brackets (and optional quotes), dropping any port suffix.
    """
    addresses: list[str] = []
    for part in value.split(";"):
        for pair in _COMMA_RE.split(part):
            match = _FORWARDED_FOR_RE.search(pair)
            if match:
                addresses.append(match.group(1) or match.group(2))
    return addresses


def _header_candidates(
    headers: Mapping[str, str], analyzed_headers: Iterable[str]
) -> Iterator[str]:
    for name in analyzed_headers:
        value = headers.get(name.lower())
        if value is not None:
            yield value


def iter_candidates(
    headers: Mapping[str, str],
    peer_address: str | None,
    analyzed_headers: Iterable[str],
    fallbacks: Iterable[str],
) -> Iterator[str]:
    """Yield candidates for the pluggable strategy.

    ``headers`` must already be keyed by lower-case name (see
    :func:`normalize_headers`). Unknown fallback identifiers are skipped
    with a warning.
    """
    yield from _header_candidates(headers, analyzed_headers)

    for fallback in fallbacks:
        fallback = fallback.lower()
        if fallback == FALLBACK_X_FORWARDED_FOR:
            xff = headers.get(_X_FORWARDED_FOR_HEADER)
            if xff:
                yield from split_forwarded_for(xff)
        elif fallback == FALLBACK_RFC_7239:
            forwarded = headers.get(_FORWARDED_HEADER)
            if forwarded:
                yield from parse_forwarded(forwarded)
        elif fallback == FALLBACK_REMOTE_PEER_ADDRESS:
            if peer_address:
                yield peer_address
        else:
            logger.warning("Unknown fallback option %s, ignoring", fallback)


def iter_cloudflare_candidates(
    headers: Mapping[str, str],
    peer_address: str | None,
    analyzed_headers: Iterable[str],
) -> Iterator[str]:
    """Yield candidates for the fixed CloudFlare strategy.

    ``X-Forwarded-For`` is expected to read ``client, [proxies...,]
    cloudflare``; the CloudFlare hop is dropped and the entry before it
    is the single candidate taken from that header.
    """
    yield from _header_candidates(headers, analyzed_headers)

    xff = headers.get(_X_FORWARDED_FOR_HEADER)
    if xff:
        # Leading and interior empty entries keep their position; only
        # trailing ones are dropped.
        entries = _COMMA_RE.split(xff.strip())
        while entries and not entries[-1]:
            entries.pop()
        if len(entries) > 1:
            entries.pop()
        if entries:
            yield entries[-1]

    if peer_address:
        yield peer_address
