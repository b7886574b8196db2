"""Configuration management for musicbrainz-automatcher."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from musicbrainz_automatcher.cache.executor import parse_daily_time
from musicbrainz_automatcher.cache.store import BACKENDS
from musicbrainz_automatcher.catalog.client import (
    DEFAULT_HOST,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
)
from musicbrainz_automatcher.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "musicbrainz-automatcher" / "config.toml"


def get_default_cache_path() -> Path:
    """Get the default SQLite cache path."""
    return Path.home() / ".cache" / "musicbrainz-automatcher" / "cache.db"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        network_timeout: HTTP connect/read timeout in seconds.
        network_retries: Maximum attempts per MusicBrainz call.
        musicbrainz_host: Web service host (or base URL with scheme).
        proxy: Optional HTTP(S) proxy URL.
        rate_limit_interval: Minimum seconds between requests.
        user_agent: User-Agent sent to MusicBrainz.
        cache_backend: "memory" or "sqlite".
        cache_path: SQLite file used by the "sqlite" backend.
        cache_expires_at: Daily "HH:MM" at which cached results expire.
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    network_timeout: float = DEFAULT_TIMEOUT
    network_retries: int = 3
    musicbrainz_host: str = DEFAULT_HOST
    proxy: str | None = None
    rate_limit_interval: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    cache_backend: str = "memory"
    cache_path: Path = field(default_factory=get_default_cache_path)
    cache_expires_at: str = "18:00"
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        self.cache_path = self.cache_path.expanduser()

        if self.network_timeout <= 0:
            raise ConfigValidationError(
                "network.timeout", self.network_timeout, "must be greater than 0"
            )
        if self.network_retries < 1:
            raise ConfigValidationError(
                "network.retries", self.network_retries, "must be at least 1"
            )
        if self.cache_backend not in BACKENDS:
            raise ConfigValidationError(
                "cache.backend", self.cache_backend, f"must be one of: {', '.join(BACKENDS)}"
            )
        parse_daily_time(self.cache_expires_at)

        if self.rate_limit_interval < 1.0 and "musicbrainz.org" in self.musicbrainz_host:
            warnings.append(
                f"network.rate_limit_interval={self.rate_limit_interval} is below "
                f"the 1 request/second allowed by musicbrainz.org"
            )

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Use defaults
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: musicbrainz-automatcher init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    # Load from file
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _expect(section: dict[str, Any], name: str, key: str, types: tuple[type, ...], what: str):
    """Fetch ``section[key]`` and check its type, or raise ConfigValidationError."""
    value = section[key]
    # bool is an int subclass; never accept it for numeric options
    if isinstance(value, bool) and bool not in types:
        raise ConfigValidationError(f"{name}.{key}", value, f"must be {what}")
    if not isinstance(value, types):
        raise ConfigValidationError(f"{name}.{key}", value, f"must be {what}")
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [network] section
    network = data.get("network", {})
    if "timeout" in network:
        config.network_timeout = float(
            _expect(network, "network", "timeout", (int, float), "a number")
        )
    if "retries" in network:
        config.network_retries = _expect(network, "network", "retries", (int,), "an integer")
    if "host" in network:
        config.musicbrainz_host = _expect(network, "network", "host", (str,), "a string")
    if "proxy" in network:
        value = network["proxy"]
        if value is not None and not isinstance(value, str):
            raise ConfigValidationError("network.proxy", value, "must be a string or null")
        config.proxy = value or None
    if "rate_limit_interval" in network:
        config.rate_limit_interval = float(
            _expect(network, "network", "rate_limit_interval", (int, float), "a number")
        )
    if "user_agent" in network:
        config.user_agent = _expect(network, "network", "user_agent", (str,), "a string")

    # Parse [cache] section
    cache = data.get("cache", {})
    if "backend" in cache:
        config.cache_backend = _expect(cache, "cache", "backend", (str,), "a string")
    if "path" in cache:
        config.cache_path = Path(_expect(cache, "cache", "path", (str,), "a string path"))
    if "expires_at" in cache:
        config.cache_expires_at = _expect(cache, "cache", "expires_at", (str,), "an HH:MM string")

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        config.colored_output = _expect(display, "display", "colored_output", (bool,), "a boolean")

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "network": {
            "timeout": config.network_timeout,
            "retries": config.network_retries,
            "host": config.musicbrainz_host,
            "rate_limit_interval": config.rate_limit_interval,
            "user_agent": config.user_agent,
        },
        "cache": {
            "backend": config.cache_backend,
            "path": str(config.cache_path),
            "expires_at": config.cache_expires_at,
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    if config.proxy is not None:
        data["network"]["proxy"] = config.proxy

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
