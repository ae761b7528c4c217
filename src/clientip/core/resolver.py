"""Resolution strategies: candidate generation + shared validation.

Two strategies exist and are chosen explicitly by the host:

* ``PluggableResolver`` — mandatory header list, explicit fallback chain
  (``x-forwarded-for``, ``rfc-7239``, ``remote-peer-address``), every
  ``X-Forwarded-For`` entry is a candidate.
* ``CloudFlareResolver`` — default CloudFlare header list, then the
  second-to-last ``X-Forwarded-For`` entry, then the peer address.

Both share :class:`AddressValidator`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Union

from pydantic import ValidationError

from clientip.configs.config import STRATEGY_CLOUDFLARE, AppConfig
from clientip.configs.system import CloudFlareConfig, PluggableConfig

from .base import ClientIPResolver, ConfigurationError
from .candidates import iter_candidates, iter_cloudflare_candidates, normalize_headers
from .validator import AddressFamily, AddressValidator

logger = logging.getLogger(__name__)

ResolverConfig = Union[PluggableConfig, CloudFlareConfig]


class PluggableResolver(ClientIPResolver):
    """Configurable header priority and fallback chain."""

    def __init__(self, config: PluggableConfig) -> None:
        if not isinstance(config, PluggableConfig):
            raise ConfigurationError("PluggableResolver requires a PluggableConfig")
        self.config = config
        self.validator = AddressValidator(
            restrict_family=config.restrict_family,
            skip_loopback=config.skip_loopback,
        )

    def resolve(self, headers: Mapping[str, str], peer_address: str | None) -> str:
        candidates = iter_candidates(
            normalize_headers(headers),
            peer_address,
            self.config.analyzed_headers,
            self.config.fallbacks,
        )
        return self.validator.first_valid(candidates)


class CloudFlareResolver(ClientIPResolver):
    """Fixed CloudFlare header precedence."""

    def __init__(self, config: CloudFlareConfig | None = None) -> None:
        self.config = config or CloudFlareConfig()
        self.validator = AddressValidator(
            restrict_family=AddressFamily.IPV4 if self.config.v4_only else None,
            skip_loopback=self.config.skip_loopback,
        )

    def resolve(self, headers: Mapping[str, str], peer_address: str | None) -> str:
        candidates = iter_cloudflare_candidates(
            normalize_headers(headers),
            peer_address,
            self.config.analyzed_headers,
        )
        return self.validator.first_valid(candidates)


def make_resolver(config: ResolverConfig) -> ClientIPResolver:
    """Build the resolver matching the type of *config*."""
    if isinstance(config, PluggableConfig):
        return PluggableResolver(config)
    if isinstance(config, CloudFlareConfig):
        return CloudFlareResolver(config)
    raise ConfigurationError(f"Unsupported resolver config: {type(config).__name__}")


def resolve_client_ip(
    headers: Mapping[str, str],
    peer_address: str | None,
    config: ResolverConfig,
) -> str:
    """One-shot resolution; prefer a long-lived resolver in request paths."""
    return make_resolver(config).resolve(headers, peer_address)


def build_resolver(app_config: AppConfig) -> ClientIPResolver:
    """Build the resolver selected by ``app_config.strategy``.

    Raises:
        ConfigurationError: when the pluggable strategy is selected without
            a ``pluggable`` section.
    """
    config: ResolverConfig
    if app_config.strategy == STRATEGY_CLOUDFLARE:
        config = app_config.cloudflare
    elif app_config.pluggable is None:
        raise ConfigurationError(
            "Please specify 'pluggable.analyzed_headers' for the pluggable strategy"
        )
    else:
        config = app_config.pluggable

    logger.info(
        "Client IP resolver ready: strategy=%s headers=%s",
        app_config.strategy,
        ",".join(config.analyzed_headers),
    )
    return make_resolver(config)


def build_pluggable_config(**options: object) -> PluggableConfig:
    """Validate keyword options into a :class:`PluggableConfig`.

    Raises:
        ConfigurationError: when ``analyzed_headers`` is missing or any
            option is invalid.
    """
    try:
        return PluggableConfig(**options)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid pluggable configuration: {exc}") from exc
