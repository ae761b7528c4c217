"""Client IP resolution: abstract resolver and exceptions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Raised at setup time when the resolver cannot be configured."""


# ---------------------------------------------------------------------------
# Abstract resolver
# ---------------------------------------------------------------------------


class ClientIPResolver(ABC):
    """Interface for per-request client IP resolution strategies.

    Instances are built once at registration time and are immutable, so a
    single resolver can serve any number of concurrent requests.
    """

    @abstractmethod
    def resolve(self, headers: Mapping[str, str], peer_address: str | None) -> str:
        """Return the best client IP for a request.

        Returns:
            The first accepted candidate, unchanged, or ``""`` when no
            candidate passes validation (client IP unknown).
        """
