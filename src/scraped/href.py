"""
Href classification module for scraped.

Classifies `href` values relative to the page they were found on, resolves
them to absolute URLs and infers the kind of resource an element points at.
Everything here works on plain strings so it can be used without a DOM.
"""

import logging
from typing import Callable, List, NamedTuple, Optional, Tuple, Union
from urllib.parse import urljoin

from .element import HrefType, ImageType, OtherImageType, TargetType
from .utils import file_extension, is_same_host

logger = logging.getLogger(__name__)


class HrefRule(NamedTuple):
    """One row of the classification table."""
    name: str
    matches: Callable[[str], bool]
    href_type: HrefType
    resolve: Callable[[str, str], Optional[str]]


def _no_full_href(href: str, page_url: str) -> Optional[str]:
    return None


def _verbatim(href: str, page_url: str) -> Optional[str]:
    return href


def _page_url(href: str, page_url: str) -> Optional[str]:
    # fragment dropped
    return page_url


def _resolve(href: str, page_url: str) -> Optional[str]:
    try:
        return urljoin(page_url, href)
    except ValueError as e:
        logger.debug(f"Can't resolve href '{href}' against {page_url}: {e}")
        return None


# Evaluated top to bottom; the first matching rule wins.
HREF_RULES: List[HrefRule] = [
    HrefRule("empty", lambda href: href == "", HrefType.EMPTY, _no_full_href),
    HrefRule("http prefix", lambda href: href.startswith("http"), HrefType.ABSOLUTE, _verbatim),
    HrefRule("bare anchor", lambda href: href == "#", HrefType.SELF_REFERENCING_ANCHOR, _page_url),
    HrefRule("fragment", lambda href: href.startswith("#"), HrefType.ANCHOR_LINK, _page_url),
    HrefRule("javascript call", lambda href: "Javascript(" in href, HrefType.JAVASCRIPT, _no_full_href),
    HrefRule("relative path", lambda href: True, HrefType.RELATIVE, _resolve),
]

FONT_EXTENSIONS = {"woff", "woff2", "ttf", "otf", "fnt"}
STYLE_EXTENSIONS = {"css"}
IMAGE_EXTENSIONS = {"svg", "jpg", "jpeg", "png", "ico"}
HTML_EXTENSIONS = {"html", "htm"}

IMAGE_TYPES = {
    "gif": ImageType.GIF,
    "jpg": ImageType.JPEG,
    "jpeg": ImageType.JPEG,
    "avif": ImageType.AVIF,
    "webp": ImageType.WEBP,
    "ico": ImageType.ICO,
    "png": ImageType.PNG,
    "tif": ImageType.TIFF,
    "tiff": ImageType.TIFF,
    "svg": ImageType.SVG,
}

SAME_SITE_HREF_TYPES = {
    HrefType.RELATIVE,
    HrefType.ANCHOR_LINK,
    HrefType.SELF_REFERENCING_ANCHOR,
}


def classify_href(href: str, page_url: str) -> Tuple[HrefType, Optional[str]]:
    """
    Classify an href and resolve its absolute form.

    Args:
        href: raw value of the href attribute
        page_url: URL of the document the href was found on

    Returns:
        Tuple of the href type and the absolute URL (None when the href
        does not point anywhere)
    """
    for rule in HREF_RULES:
        if rule.matches(href):
            return rule.href_type, rule.resolve(href, page_url)

    # the last rule matches everything
    raise AssertionError(f"no href rule matched '{href}'")


def _site_type(url: Optional[str], page_url: str) -> TargetType:
    if not url:
        return TargetType.UNKNOWN
    if is_same_host(url, page_url):
        return TargetType.HTML_SAME_SITE
    return TargetType.HTML_FOREIGN_SITE


def source_extension(src: Optional[str]) -> Optional[str]:
    """
    Get the extension of a `src` value, looking inside `data:` URIs.

    `data:image/svg+xml;base64,...` gives "svg".
    """
    if src and src.startswith("data:"):
        mime = src[5:].split(";", 1)[0].split(",", 1)[0]
        if "/" not in mime:
            return None
        subtype = mime.split("/", 1)[1]
        return subtype.split("+", 1)[0].lower() or None
    return file_extension(src)


def infer_target_type(
    tag_name: str,
    page_url: str,
    href: Optional[str] = None,
    full_href: Optional[str] = None,
    href_type: Optional[HrefType] = None,
    src: Optional[str] = None,
) -> Optional[TargetType]:
    """
    Infer what kind of resource an element points at.

    Args:
        tag_name: tag of the element (e.g. "a", "img", "link")
        page_url: URL of the current document
        href: raw href of the element, if any
        full_href: resolved href of the element, if any
        href_type: classification of the href, if any
        src: src attribute of the element, if any

    Returns:
        Target type, or None when the element points at nothing
    """
    if tag_name == "img":
        return TargetType.IMAGE
    if href is None and src is None:
        return None

    ext = file_extension(href) if href is not None else source_extension(src)

    if ext in FONT_EXTENSIONS:
        return TargetType.FONT
    if ext in STYLE_EXTENSIONS:
        return TargetType.STYLE
    if ext in IMAGE_EXTENSIONS:
        return TargetType.IMAGE
    if ext in HTML_EXTENSIONS:
        if href_type is None:
            return _site_type(_resolve(src or "", page_url), page_url)
        if href_type in SAME_SITE_HREF_TYPES:
            return TargetType.HTML_SAME_SITE
        if href_type == HrefType.ABSOLUTE:
            return _site_type(full_href, page_url)
        return TargetType.UNKNOWN
    if tag_name == "a" and href is not None:
        return _site_type(full_href, page_url)

    return TargetType.UNKNOWN


def infer_image_type(tag_name: str, src: Optional[str]) -> Optional[Union[ImageType, OtherImageType]]:
    """
    Classify the image format of a `src` value.

    Unrecognized extensions are only reported for `img` tags.
    """
    if src is None:
        return None
    ext = source_extension(src)
    if ext in IMAGE_TYPES:
        return IMAGE_TYPES[ext]
    if tag_name == "img" and ext:
        return OtherImageType(other=ext)
    return None
