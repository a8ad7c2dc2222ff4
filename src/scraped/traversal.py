"""
Child traversal module for scraped.

Decides which hrefs found by child selectors point at child pages, and
turns them into absolute URLs.
"""

import logging
import re
from typing import Callable, Dict, List, NamedTuple, Optional

from .element import Element
from .errors import UrlParseFailure
from .registry import ChildScope, SelectorRegistry
from .results import ItemSelection, Selection, SelectionMap
from .utils import has_scheme, is_absolute_url, join_path, parse_url

logger = logging.getLogger(__name__)

RELATIVE_HREF = re.compile(r"^[\w.#]+$")


class ScopeRule(NamedTuple):
    """Acceptance test and URL builder for one child scope."""
    accepts: Callable[[str], bool]
    to_url: Callable[[str, str], str]


def _as_is(href: str, page_url: str) -> str:
    return href


def _join(href: str, page_url: str) -> str:
    return join_path(page_url, href)


def _join_unless_absolute(href: str, page_url: str) -> str:
    return href if has_scheme(href) else _join(href, page_url)


SCOPE_RULES: Dict[ChildScope, ScopeRule] = {
    ChildScope.ALL: ScopeRule(lambda href: True, _join_unless_absolute),
    ChildScope.HTTP: ScopeRule(lambda href: href.startswith("http"), _as_is),
    ChildScope.FILE: ScopeRule(lambda href: href.startswith("file"), _as_is),
    ChildScope.RELATIVE: ScopeRule(lambda href: bool(RELATIVE_HREF.match(href)), _join),
    ChildScope.ABSOLUTE: ScopeRule(is_absolute_url, _as_is),
}


def validate_child_href(href: str, scope: ChildScope, page_url: str) -> Optional[str]:
    """
    Check an href against a child scope.

    Args:
        href: raw href value
        scope: scope of the child selector the href came from
        page_url: URL of the current page; relative hrefs are joined to it

    Returns:
        The child URL, or None if the href is out of scope or isn't a valid URL
    """
    if not href:
        return None

    rule = SCOPE_RULES[ChildScope(scope)]
    if not rule.accepts(href):
        return None

    url = rule.to_url(href, page_url)
    try:
        return parse_url(url)
    except UrlParseFailure as e:
        logger.debug(f"Skipping child candidate: {e}")
        return None


def _elements(selection: Optional[Selection]) -> List[Element]:
    if selection is None:
        return []
    if isinstance(selection, ItemSelection):
        return [selection.element]
    return list(selection.elements)


def child_urls(selections: SelectionMap, registry: SelectorRegistry, page_url: str) -> List[str]:
    """
    Collect the child URLs found by a page's child selectors.

    Selectors are visited in registration order and elements in document
    order. Duplicates are kept.
    """
    urls = []
    for name in registry.selectors:
        scope = registry.child_scopes.get(name)
        if scope is None:
            continue
        for element in _elements(selections.get(name)):
            if element.href is None:
                continue
            url = validate_child_href(element.href, scope, page_url)
            if url is not None:
                urls.append(url)

    logger.debug(f"Got {len(urls)} child URLs for {page_url}")
    return urls
