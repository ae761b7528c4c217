"""Configuration management using pydantic-settings.

**Not a singleton** — each call to ``get_app_config()`` re-reads config
from disk, so a host can rebuild its resolver after editing the files.

Priority order (highest first):

1. Override YAML (path from ``CLIENTIP_CONFIG_FILE`` env var)
2. Environment variables (``CLIENTIP_`` prefix, ``__`` nesting)
3. ``.env`` dotenv file
4. Static YAML (``configs/config.yaml``)
5. Init defaults / field defaults
6. File secrets

The pluggable strategy has no default header list: selecting it without
``pluggable.analyzed_headers`` is a :class:`ConfigurationError`.
"""

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
    YamlConfigSettingsSource,
)

from clientip.core.base import ConfigurationError

from .system import CloudFlareConfig, LoggingConfig, PluggableConfig

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"

_override_env = os.environ.get("CLIENTIP_CONFIG_FILE")
OVERRIDE_CONFIG_FILE: Optional[Path] = Path(_override_env) if _override_env else None

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"  # Nested environment variable delimiter
ENV_PREFIX = "CLIENTIP_"

DEFAULT_ENCODING = "utf-8"

STRATEGY_PLUGGABLE = "pluggable"
STRATEGY_CLOUDFLARE = "cloudflare"


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    strategy: Literal["pluggable", "cloudflare"] = Field(
        default=STRATEGY_PLUGGABLE,
        description="Which resolution strategy the host registers",
    )

    pluggable: Optional[PluggableConfig] = Field(
        default=None,
        description="Pluggable strategy settings (analyzed_headers is required)",
    )

    cloudflare: CloudFlareConfig = Field(
        default_factory=CloudFlareConfig,
        description="CloudFlare strategy settings",
    )

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = []

        # 1. Override YAML -- highest priority
        if OVERRIDE_CONFIG_FILE is not None and OVERRIDE_CONFIG_FILE.is_file():
            sources.append(
                YamlConfigSettingsSource(
                    settings_cls,
                    yaml_file=OVERRIDE_CONFIG_FILE,
                )
            )

        # 2-3. Env vars and dotenv
        sources.append(env_settings)
        sources.append(dotenv_settings)

        # 4. Static YAML
        sources.append(YamlConfigSettingsSource(settings_cls))

        # 5-6. Init defaults and file secrets
        sources.append(init_settings)
        sources.append(file_secret_settings)

        return tuple(sources)


def get_app_config() -> AppConfig:
    """Read the application configuration.

    Raises:
        ConfigurationError: when any source holds an invalid value, e.g.
            a ``pluggable`` section without ``analyzed_headers``, or an
            environment value that is not valid JSON for a list field.
    """
    try:
        return AppConfig()
    except (ValidationError, SettingsError) as exc:
        raise ConfigurationError(f"Invalid client IP configuration: {exc}") from exc
