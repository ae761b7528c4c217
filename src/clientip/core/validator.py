"""Address validation: syntax, family, restriction and trust checks.

Every candidate goes through four stages and the first one to pass all
of them wins:

1. **Syntax** — a valid IPv4 or IPv6 literal (``ipaddress.ip_address``).
2. **Family** — classified as ``ipv4`` or ``ipv6``.
3. **Restriction** — rejected when ``restrict_family`` is set and differs.
4. **Trust** — family-specific rejection of unroutable, private,
   documentation and (unless ``skip_loopback``) loopback addresses.

Rejections are silent; an exhausted candidate stream resolves to ``""``.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Callable, Iterable
from enum import Enum

IPv4Network = ipaddress.IPv4Network
IPv6Network = ipaddress.IPv6Network

UNKNOWN_IP = ""

_IPV4_UNROUTABLE = (
    IPv4Network("0.0.0.0/8"),
    IPv4Network("100.64.0.0/10"),
    IPv4Network("192.0.0.0/29"),
    IPv4Network("198.18.0.0/15"),
    IPv4Network("240.0.0.0/4"),
)
_IPV4_PRIVATE = (
    IPv4Network("10.0.0.0/8"),
    IPv4Network("172.16.0.0/12"),
    IPv4Network("192.168.0.0/16"),
)
_IPV4_LOOPBACK = IPv4Network("127.0.0.0/8")

_IPV6_PRIVATE = IPv6Network("fc00::/7")
_IPV6_DOCUMENTATION = IPv6Network("2001:db8::/32")
_IPV6_LOOPBACK = ipaddress.IPv6Address("::1")


class AddressFamily(str, Enum):
    """Closed set of address families a candidate can belong to."""

    IPV4 = "ipv4"
    IPV6 = "ipv6"


def _parse(candidate: object) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    if not isinstance(candidate, str) or "%" in candidate:
        return None
    try:
        return ipaddress.ip_address(candidate)
    except ValueError:
        return None


def classify_address(candidate: object) -> AddressFamily | None:
    """Return the family of *candidate*, or ``None`` if it is not an IP."""
    address = _parse(candidate)
    if address is None:
        return None
    if address.version == 4:
        return AddressFamily.IPV4
    return AddressFamily.IPV6


class AddressValidator:
    """Accepts or rejects candidate strings; never raises for bad input."""

    def __init__(
        self,
        *,
        restrict_family: AddressFamily | None = None,
        skip_loopback: bool = False,
    ) -> None:
        self._restrict_family = (
            AddressFamily(restrict_family) if restrict_family else None
        )
        self._skip_loopback = skip_loopback
        self._checks: dict[AddressFamily, Callable[..., bool]] = {
            AddressFamily.IPV4: self._check_ipv4,
            AddressFamily.IPV6: self._check_ipv6,
        }

    @property
    def restrict_family(self) -> AddressFamily | None:
        return self._restrict_family

    @property
    def skip_loopback(self) -> bool:
        return self._skip_loopback

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def accepts(self, candidate: object) -> bool:
        """Run all four stages against *candidate*."""
        address = _parse(candidate)
        if address is None:
            return False

        family = AddressFamily.IPV4 if address.version == 4 else AddressFamily.IPV6

        if self._restrict_family is not None and family != self._restrict_family:
            return False

        return self._checks[family](address)

    def first_valid(self, candidates: Iterable[str]) -> str:
        """Return the first accepted candidate, or ``""`` when none is."""
        for candidate in candidates:
            if self.accepts(candidate):
                return candidate
        return UNKNOWN_IP

    # -----------------------------------------------------------------
    # Family-specific trust checks
    # -----------------------------------------------------------------

    def _check_ipv4(self, address: ipaddress.IPv4Address) -> bool:
        if any(address in net for net in _IPV4_UNROUTABLE):
            return False
        if any(address in net for net in _IPV4_PRIVATE):
            return False
        return self._skip_loopback or address not in _IPV4_LOOPBACK

    def _check_ipv6(self, address: ipaddress.IPv6Address) -> bool:
        if address in _IPV6_PRIVATE:
            return False
        if address in _IPV6_DOCUMENTATION:
            return False
        return self._skip_loopback or address != _IPV6_LOOPBACK
