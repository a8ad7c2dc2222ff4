"""
Error types for scraped.

Configuration errors are raised as soon as a registry is misconfigured.
Lookup, URL and fetch errors are raised while producing results.
"""

from typing import Iterable, Optional


class ScrapedError(Exception):
    """Base exception for all scraped errors."""
    pass


class ConfigurationError(ScrapedError):
    """Raised when a selector registry is configured incorrectly."""
    pass


class InvalidSelectorPattern(ConfigurationError):
    """Raised when a CSS pattern cannot be compiled."""

    def __init__(self, name: str, pattern: str, reason: str = ""):
        self.name = name
        self.pattern = pattern
        message = f"'{pattern}' is an invalid selector pattern for '{name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnknownSelectorReference(ConfigurationError):
    """Raised when child selectors reference names that were never registered."""

    def __init__(self, unknown: Iterable[str], known: Iterable[str]):
        self.unknown = list(unknown)
        self.known = sorted(known)
        super().__init__(
            f"Child selectors reference unknown selectors {self.unknown}; "
            f"valid selectors are {self.known}"
        )


class RegistryFrozen(ConfigurationError):
    """Raised when a registry is modified after a document has been loaded with it."""
    pass


class KeyNotFound(ScrapedError, KeyError):
    """Raised when neither a property nor a selector has the requested name."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Couldn't find the property or selector called '{key}'")

    def __str__(self) -> str:
        return self.args[0]


class UrlParseFailure(ScrapedError, ValueError):
    """Raised when a string cannot be parsed as an absolute URL."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        message = f"Failed to parse the URL string received: {url}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class FetchFailure(ScrapedError):
    """Raised when a document could not be fetched."""

    def __init__(self, url: str, reason: str = "", status: Optional[int] = None):
        self.url = url
        self.status = status
        self.reason = reason
        message = f"Problem occurred while fetching {url}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
