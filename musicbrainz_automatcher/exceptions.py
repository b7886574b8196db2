"""Exception hierarchy for musicbrainz-automatcher."""

from pathlib import Path


class AutomatcherError(Exception):
    """Base exception for all musicbrainz-automatcher errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all automatcher errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(AutomatcherError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Catalog Errors
class CatalogError(AutomatcherError):
    """A single call to the MusicBrainz web service failed."""

    pass


class CatalogConnectionError(CatalogError):
    """Network-level failure (DNS, refused connection, timeout)."""

    pass


class CatalogRateLimitError(CatalogError):
    """The web service refused the request (HTTP 429/503)."""

    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Rate limited by MusicBrainz (HTTP {status_code}): {url}")


class CatalogParseError(CatalogError):
    """The web service returned a response we could not understand."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Unexpected response from {url}: {detail}")


class LookupFailedError(AutomatcherError):
    """A catalog lookup still failed after every retry.

    This is a hard failure and is deliberately distinct from a
    ``NoMatch`` result: it does not mean the artist doesn't exist.
    """

    def __init__(self, operation: str, attempts: int, cause: BaseException) -> None:
        self.operation = operation
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"{operation} failed after {attempts} attempt(s): {cause}")


# Cache Errors
class CacheError(AutomatcherError):
    """Cache backend failure."""

    pass
