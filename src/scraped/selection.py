"""
Selection module for scraped.

Applies registered selectors to a parsed DOM and turns the matched nodes into
`Element` records.
"""

import logging
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .element import Element, HrefSource
from .href import classify_href, infer_image_type, infer_target_type
from .registry import SelectorKind, SelectorRegistry, CompiledSelector
from .results import ItemSelection, ListSelection, Selection, SelectionMap

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"


def parse_html(body: str) -> BeautifulSoup:
    """Parse raw markup into a queryable DOM."""
    return BeautifulSoup(body, HTML_PARSER)


def _attribute_value(value) -> Optional[str]:
    # multi-valued attributes such as `class` come back as lists
    if isinstance(value, (list, tuple)):
        value = " ".join(value)
    if value is None or value == "":
        return None
    return str(value)


def _only_child(tag: Tag) -> Optional[Tag]:
    """The single child node of `tag`, ignoring whitespace and comments."""
    children = []
    for node in tag.children:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString) and not node.strip():
            continue
        children.append(node)

    if len(children) == 1 and isinstance(children[0], Tag):
        return children[0]
    return None


def discover_href(tag: Tag) -> Tuple[Optional[str], Optional[HrefSource]]:
    """
    Find the href of an element.

    The element's own `href` attribute is used when present; otherwise the
    href of its only child element, if it has one.
    """
    if tag.has_attr("href"):
        return _attribute_value(tag["href"]) or "", HrefSource.ELEMENT

    child = _only_child(tag)
    if child is not None and child.has_attr("href"):
        return _attribute_value(child["href"]) or "", HrefSource.ONLY_CHILD

    return None, None


def build_element(tag: Tag, page_url: str) -> Element:
    """
    Build an `Element` record from a matched DOM node.

    Args:
        tag: matched node
        page_url: URL of the document the node belongs to
    """
    text = tag.get_text().strip()
    inner_html = tag.decode_contents().strip()

    attributes = {}
    for name, value in tag.attrs.items():
        value = _attribute_value(value)
        if value is not None:
            attributes[name] = value

    element = Element(
        tag_name=tag.name,
        text=text or None,
        inner_html=inner_html or None,
        attributes=attributes,
        src=attributes.get("src"),
    )

    href, href_source = discover_href(tag)
    if href is not None:
        href_type, full_href = classify_href(href, page_url)
        element.href = href
        element.href_source = href_source
        element.href_type = href_type
        element.full_href = full_href

    element.target_type = infer_target_type(
        tag.name,
        page_url,
        href=element.href,
        full_href=element.full_href,
        href_type=element.href_type,
        src=element.src,
    )
    element.image_type = infer_image_type(tag.name, element.src)

    return element


def extract_selection(dom: BeautifulSoup, selector: CompiledSelector, page_url: str) -> Optional[Selection]:
    """
    Apply one selector to a DOM.

    Returns:
        `ItemSelection` with the first match for item selectors,
        `ListSelection` with all matches for list selectors, or None when
        nothing matched
    """
    if selector.kind == SelectorKind.ITEM:
        tag = selector.compiled.select_one(dom)
        if tag is None:
            logger.debug(f"Item selector '{selector.name}' matched nothing")
            return None
        return ItemSelection(element=build_element(tag, page_url))

    tags: List[Tag] = selector.compiled.select(dom)
    if not tags:
        # an empty list is reported exactly like a missing item
        logger.debug(f"List selector '{selector.name}' matched nothing")
        return None
    logger.debug(f"List selector '{selector.name}' matched {len(tags)} elements")
    return ListSelection(elements=[build_element(tag, page_url) for tag in tags])


def extract_selections(dom: BeautifulSoup, registry: SelectorRegistry, page_url: str) -> SelectionMap:
    """Apply every registered selector to a DOM, in registration order."""
    selections: Dict[str, Optional[Selection]] = {}
    for name, selector in registry.selectors.items():
        selections[name] = extract_selection(dom, selector, page_url)
    return selections
