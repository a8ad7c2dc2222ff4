"""
Utility functions for scraped.

Provides URL validation, host comparison, path joining and extension helpers.
"""

import logging
import posixpath
import re
from typing import Optional
from urllib.parse import urlsplit

from .errors import UrlParseFailure

logger = logging.getLogger(__name__)

# schemes which are meaningless without a host
HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_INVALID_CHARS = re.compile(r"[\s<>\"\\^`{|}]")


def parse_url(url: str) -> str:
    """
    Validate that a string is an absolute URL.

    Args:
        url: URL string to validate

    Returns:
        The URL, unchanged

    Raises:
        UrlParseFailure: if the URL has no scheme, contains characters which are
            not allowed in a URL, is missing a required host or has a bad port
    """
    if not url or not _SCHEME.match(url):
        raise UrlParseFailure(url, "relative URL without a base")

    if _INVALID_CHARS.search(url):
        raise UrlParseFailure(url, "invalid characters")

    try:
        parsed = urlsplit(url)
        # accessing the port validates it
        parsed.port
    except ValueError as e:
        raise UrlParseFailure(url, str(e)) from e

    if parsed.scheme.lower() in HOST_SCHEMES and not parsed.hostname:
        raise UrlParseFailure(url, "empty host")

    return url


def has_scheme(url: str) -> bool:
    """Check whether a string starts with a URL scheme (e.g. `https:`)."""
    return bool(_SCHEME.match(url or ""))


def is_absolute_url(url: str) -> bool:
    """
    Check whether a string is an absolute URL with both a scheme and a host.

    Args:
        url: URL to check

    Returns:
        True if the URL names a scheme and a network location
    """
    if not has_scheme(url):
        return False
    try:
        parsed = urlsplit(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def extract_host(url: str) -> str:
    """
    Extract the host from a URL.

    Args:
        url: URL to extract the host from

    Returns:
        Lower-cased host name or empty string if there is none
    """
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError as e:
        logger.warning(f"Failed to extract host from URL {url}: {e}")
        return ""


def is_same_host(url1: str, url2: str) -> bool:
    """
    Check if two URLs point at the same host.

    Args:
        url1: First URL
        url2: Second URL

    Returns:
        True if both URLs have a host and the hosts are equal
    """
    host1 = extract_host(url1)
    host2 = extract_host(url2)
    return bool(host1) and host1 == host2


def join_path(base: str, href: str) -> str:
    """
    Append `href` to `base` as a path segment.

    This is a plain string join; no normalization of `.` or `..` segments
    takes place.
    """
    return base.rstrip("/") + "/" + href


def file_extension(url: Optional[str]) -> Optional[str]:
    """
    Get the lower-cased file extension of the last path segment of a URL.

    Query strings and fragments are ignored.

    Args:
        url: absolute or relative URL

    Returns:
        Extension without the leading dot, or None
    """
    if not url:
        return None
    try:
        path = urlsplit(url).path
    except ValueError:
        return None

    _, ext = posixpath.splitext(posixpath.basename(path))
    if not ext or ext == ".":
        return None
    return ext[1:].lower()
