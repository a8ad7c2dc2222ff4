"""
Document module for scraped.

A `Document` is a URL paired with a selector registry and a fetcher. Loading
it produces a `LoadedDocument`, which applies the registry to the parsed page
to build results and, on request, follows child links one level deep.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .errors import FetchFailure, KeyNotFound
from .fetch import Fetcher, RequestsFetcher
from .registry import SelectorRegistry
from .results import ResultNode, SelectionMap, selection_to_json
from .selection import extract_selection, extract_selections, parse_html
from .traversal import child_urls
from .utils import parse_url

logger = logging.getLogger(__name__)


class Document:
    """A page to be scraped with a given selector configuration."""

    def __init__(self, url: str, registry: Optional[SelectorRegistry] = None, fetcher: Optional[Fetcher] = None):
        """
        Initialize Document.

        Args:
            url: absolute URL of the page
            registry: selectors, properties and child selectors to apply
            fetcher: loads the page (and its children); defaults to `RequestsFetcher`

        Raises:
            UrlParseFailure: if `url` isn't a valid absolute URL
        """
        self.url = parse_url(url)
        self.registry = registry if registry is not None else SelectorRegistry()
        self.fetcher = fetcher if fetcher is not None else RequestsFetcher()

    def __repr__(self) -> str:
        return f"Document[ {self.url} ]"

    async def load(self) -> "LoadedDocument":
        """
        Fetch and parse the page.

        Raises:
            FetchFailure: if the page can't be fetched
        """
        page = await self.fetcher.fetch(self.url)
        logger.info(f"Loaded {self.url}")
        return LoadedDocument(self.url, page.body, self.registry, headers=page.headers, fetcher=self.fetcher)

    def provide_response(self, body: str, headers: Optional[Dict[str, List[str]]] = None) -> "LoadedDocument":
        """Use caller supplied content instead of fetching the page."""
        return LoadedDocument(self.url, body, self.registry, headers=headers, fetcher=self.fetcher)

    async def scrape(self) -> ResultNode:
        """Fetch the page and return its results, without children."""
        loaded = await self.load()
        return loaded.results()

    async def scrape_graph(self) -> ResultNode:
        """Fetch the page and return its results with child pages attached."""
        loaded = await self.load()
        return await loaded.results_graph()


class LoadedDocument:
    """
    A page whose content has been received and parsed.

    Nothing is cached: each call to `results()` re-applies every selector and
    property callback to the DOM.
    """

    def __init__(
        self,
        url: str,
        body: str,
        registry: SelectorRegistry,
        headers: Optional[Dict[str, List[str]]] = None,
        fetcher: Optional[Fetcher] = None,
    ):
        self.url = url
        self.headers = headers or {}
        self.registry = registry.freeze()
        self.dom = parse_html(body)
        self.fetcher = fetcher if fetcher is not None else RequestsFetcher()

    def __repr__(self) -> str:
        return f"LoadedDocument[ {self.url} ]"

    def selection_results(self) -> SelectionMap:
        """Apply every selector to the page."""
        return extract_selections(self.dom, self.registry, self.url)

    def property_results(self, selections: Optional[SelectionMap] = None) -> Dict[str, Any]:
        """
        Run every property callback over the selection results.

        Args:
            selections: selection map to use; computed when not given
        """
        if selections is None:
            selections = self.selection_results()
        return {name: callback(selections) for name, callback in self.registry.properties.items()}

    def get_child_urls(self, selections: Optional[SelectionMap] = None) -> List[str]:
        """
        Get the URLs of child pages.

        A child URL is an href of an element matched by a selector designated
        with `child_selectors()`, which is allowed by that selector's scope.
        """
        if selections is None:
            selections = self.selection_results()
        return child_urls(selections, self.registry, self.url)

    def get(self, name: str) -> Any:
        """
        Get the value of a single property or selector.

        A property masks a selector of the same name.

        Raises:
            KeyNotFound: if there is no property or selector called `name`
        """
        callback = self.registry.properties.get(name)
        if callback is not None:
            logger.debug(f"Getting '{name}' as a property")
            return callback(self.selection_results())

        selector = self.registry.selectors.get(name)
        if selector is not None:
            logger.debug(f"Getting '{name}' as a {selector.kind.value} selector")
            return selection_to_json(extract_selection(self.dom, selector, self.url))

        raise KeyNotFound(name)

    def results(self) -> ResultNode:
        """Get the selections and properties of this page without visiting child pages."""
        selections = self.selection_results()
        return ResultNode(
            url=self.url,
            selections=selections,
            properties=self.property_results(selections),
            child_urls=self.get_child_urls(selections),
        )

    async def _load_children(self, urls: List[str]) -> Tuple[List[ResultNode], Dict[str, str]]:
        children: List[ResultNode] = []
        errors: Dict[str, str] = {}

        logger.info(f"Loading {len(urls)} child pages of {self.url}")
        for url in urls:
            child = Document(url, self.registry, self.fetcher)
            try:
                loaded = await child.load()
            except FetchFailure as e:
                logger.warning(f"Skipping child page {url}: {e}")
                errors[url] = str(e)
                continue
            # children are never expanded further
            children.append(loaded.results())
            logger.debug(f"Finished loading child page {url}")

        return children, errors

    async def get_children(self) -> List[ResultNode]:
        """
        Fetch every child page, one after another, and get its results.

        Children use the same registry as this page. Child pages which fail to
        load are logged and left out.
        """
        children, _ = await self._load_children(self.get_child_urls())
        return children

    async def results_graph(self) -> ResultNode:
        """Get this page's results with the results of its child pages attached."""
        node = self.results()
        children, errors = await self._load_children(node.child_urls)
        return ResultNode(
            url=node.url,
            selections=node.selections,
            properties=node.properties,
            child_urls=node.child_urls,
            children=children,
            child_errors=errors,
        )
