import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clientip.core.candidates import KNOWN_FALLBACKS
from clientip.core.validator import AddressFamily

logger = logging.getLogger(__name__)

DEFAULT_CLOUDFLARE_HEADERS = ("cf-pseudo-ipv4", "cf-connecting-ip", "true-client-ip")
DEFAULT_FALLBACKS = ("remote-peer-address",)


class PluggableConfig(BaseModel):
    """Configuration for the pluggable resolution strategy."""

    model_config = ConfigDict(frozen=True)

    analyzed_headers: tuple[str, ...] = Field(
        description="Trusted header names, highest trust first"
    )
    fallbacks: tuple[str, ...] = Field(
        default=DEFAULT_FALLBACKS,
        description="Fallback sources consulted after the analyzed headers",
    )
    restrict_family: AddressFamily | None = Field(
        default=None, description="Accept only this address family"
    )
    skip_loopback: bool = Field(
        default=False, description="Accept loopback addresses (tests only)"
    )

    @field_validator("analyzed_headers")
    @classmethod
    def _lower_headers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(name.lower() for name in value)

    @field_validator("fallbacks")
    @classmethod
    def _known_fallbacks(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        known = []
        for fallback in value:
            fallback = fallback.lower()
            if fallback in KNOWN_FALLBACKS:
                known.append(fallback)
            else:
                logger.warning("Unknown fallback option %s, ignoring", fallback)
        return tuple(known)


class CloudFlareConfig(BaseModel):
    """Configuration for the fixed CloudFlare resolution strategy."""

    model_config = ConfigDict(frozen=True)

    analyzed_headers: tuple[str, ...] = Field(
        default=DEFAULT_CLOUDFLARE_HEADERS,
        description="CloudFlare-injected header names, highest trust first",
    )
    v4_only: bool = Field(default=False, description="Accept only IPv4 addresses")
    skip_loopback: bool = Field(
        default=False, description="Accept loopback addresses (tests only)"
    )

    @field_validator("analyzed_headers")
    @classmethod
    def _lower_headers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(name.lower() for name in value)


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="Emit JSON lines instead of coloured text"
    )
    resolver_level: str = Field(
        default="WARNING",
        description="Level for clientip.core (unknown fallbacks, resolver setup)",
    )
