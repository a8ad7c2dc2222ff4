from pathlib import Path
from typing import Dict, List

import pytest

from scraped import FetchedPage, FetchFailure

FIXTURES = Path(__file__).parent / "fixtures"

PAGE_URL = "https://dev.null/page"


class FakeFetcher:
    """Serves pages from memory and records every requested URL."""

    def __init__(self, pages: Dict[str, str]):
        self.pages = pages
        self.requested: List[str] = []

    async def fetch(self, url: str) -> FetchedPage:
        self.requested.append(url)
        if url not in self.pages:
            raise FetchFailure(url, "not found", 404)
        return FetchedPage(url=url, body=self.pages[url], headers={"content-type": ["text/html"]})


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def page_url():
    """URL every fixture document is served from."""
    return PAGE_URL


@pytest.fixture
def simple_doc():
    """Provide the simple HTML fixture."""
    return load_fixture("simple-doc.html")


@pytest.fixture
def child_doc():
    """Provide the HTML fixture used for child pages."""
    return load_fixture("child-doc.html")


@pytest.fixture
def fake_fetcher():
    """Provide a factory for in-memory fetchers."""
    return FakeFetcher
