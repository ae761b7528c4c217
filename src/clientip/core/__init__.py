"""Client IP resolution core.

Two layers, evaluated per request:

1. **Candidates** — a lazy stream of raw address strings, trusted headers
   first, then the configured fallback sources.

2. **Validator** — syntax, family, restriction and trust checks; the first
   candidate that passes is the client IP, otherwise ``""``.

Resolvers combining both live in :mod:`clientip.core.resolver`.
"""

from .base import ClientIPResolver, ConfigurationError
from .candidates import (
    FALLBACK_REMOTE_PEER_ADDRESS,
    FALLBACK_RFC_7239,
    FALLBACK_X_FORWARDED_FOR,
    iter_candidates,
    iter_cloudflare_candidates,
    normalize_headers,
    parse_forwarded,
    split_forwarded_for,
)
from .validator import UNKNOWN_IP, AddressFamily, AddressValidator, classify_address

__all__ = [
    "FALLBACK_REMOTE_PEER_ADDRESS",
    "FALLBACK_RFC_7239",
    "FALLBACK_X_FORWARDED_FOR",
    "UNKNOWN_IP",
    "AddressFamily",
    "AddressValidator",
    "ClientIPResolver",
    "ConfigurationError",
    "classify_address",
    "iter_candidates",
    "iter_cloudflare_candidates",
    "normalize_headers",
    "parse_forwarded",
    "split_forwarded_for",
]
