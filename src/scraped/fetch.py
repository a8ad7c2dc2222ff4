"""
Fetch module for scraped.

Loads documents over the network with `requests` (or from disk for `file:`
URLs). The extraction engine only depends on the `Fetcher` protocol, so any
object with an async `fetch(url)` method can be used instead.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol
from urllib.parse import urlsplit
from urllib.request import url2pathname

import requests

from .errors import FetchFailure
from .utils import extract_host

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class FetchedPage:
    """A document as returned by a fetcher."""
    url: str
    body: str
    headers: Dict[str, List[str]] = field(default_factory=dict)


class Fetcher(Protocol):
    """Anything which can load the document at a URL."""

    async def fetch(self, url: str) -> FetchedPage:
        """
        Load a document.

        Raises:
            FetchFailure: if the document can't be loaded
        """
        ...


class BearerTokens:
    """
    Bearer tokens used for auth and/or rate-limiting purposes.

    A token can apply to every host, or be scoped to a single host by
    prefixing it with the host and a "|" separator (e.g. "github.com|abc123").
    """

    def __init__(self, tokens: Optional[Iterable[str]] = None):
        self.global_token: Optional[str] = None
        self.scoped: Dict[str, str] = {}
        for token in tokens or []:
            self.add(token)

    def __bool__(self) -> bool:
        return bool(self.global_token or self.scoped)

    @staticmethod
    def _validate(token: str) -> str:
        token = token.strip()
        if not token or any(ch.isspace() for ch in token):
            raise ValueError(f"invalid bearer token: {token!r}")
        return token

    def add(self, token: str) -> None:
        """
        Add a global token, or a host scoped one ("host|token").

        Raises:
            ValueError: if the token is empty or contains whitespace
        """
        if "|" in token:
            host, value = token.split("|", 1)
            self.scoped[host.strip().lower()] = self._validate(value)
        else:
            self.global_token = self._validate(token)

    def get(self, url: str) -> Optional[str]:
        """Get the token for a URL, preferring a host scoped token."""
        host = extract_host(url)
        if not host:
            return None
        return self.scoped.get(host, self.global_token)


class RequestsFetcher:
    """Fetches documents with a `requests.Session`."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        bearer_tokens: Optional[BearerTokens] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize RequestsFetcher.

        Args:
            user_agent: explicit User-Agent header
            bearer_tokens: tokens sent in the Authorization header
            timeout: request timeout in seconds
            session: session to use instead of a new one
        """
        self.session = session or requests.Session()
        self.bearer_tokens = bearer_tokens or BearerTokens()
        self.timeout = timeout
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.session.close()

    def _request_headers(self, url: str) -> Dict[str, str]:
        token = self.bearer_tokens.get(url)
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _read_file(self, url: str) -> FetchedPage:
        path = Path(url2pathname(urlsplit(url).path))
        try:
            body = path.read_text(encoding="utf-8")
        except OSError as e:
            raise FetchFailure(url, str(e)) from e
        return FetchedPage(url=url, body=body)

    def fetch_sync(self, url: str) -> FetchedPage:
        """
        Load a document, blocking until it has been received.

        Raises:
            FetchFailure: on network errors and non-2xx responses
        """
        if urlsplit(url).scheme == "file":
            return self._read_file(url)

        try:
            response = self.session.get(url, headers=self._request_headers(url), timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 429:
                raise FetchFailure(url, "rate limited", status) from e
            raise FetchFailure(url, str(e), status) from e
        except requests.RequestException as e:
            raise FetchFailure(url, str(e)) from e

        headers: Dict[str, List[str]] = {}
        for name, value in response.headers.items():
            headers.setdefault(name.lower(), []).append(value)

        logger.debug(f"Fetched {url} ({response.status_code}, {len(response.content)} bytes)")
        return FetchedPage(url=url, body=response.text, headers=headers)

    async def fetch(self, url: str) -> FetchedPage:
        """Load a document without blocking the event loop."""
        return await asyncio.to_thread(self.fetch_sync, url)
