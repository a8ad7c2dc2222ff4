"""
scraped - Selector driven extraction of structured data from HTML pages

This package provides:
- Named CSS selectors (item or list) and derived properties
- Classification of hrefs and linked resources for every selected element
- A single lookup surface where properties mask selectors
- Following designated child links one level deep
"""

__version__ = "0.1.0"

from .registry import SelectorRegistry, SelectorKind, CompiledSelector, ChildScope
from .presets import add_generic_selectors, for_docs_rs, apply_preset, PRESETS
from .element import Element, HrefType, HrefSource, TargetType, ImageType, OtherImageType
from .results import ItemSelection, ListSelection, ResultNode, FlatResult, flatten
from .document import Document, LoadedDocument
from .fetch import Fetcher, FetchedPage, RequestsFetcher, BearerTokens
from .config import load_config, ScrapeConfig
from .errors import (
    ScrapedError,
    ConfigurationError,
    InvalidSelectorPattern,
    UnknownSelectorReference,
    RegistryFrozen,
    KeyNotFound,
    UrlParseFailure,
    FetchFailure,
)
from .cli import main

__all__ = [
    "SelectorRegistry",
    "SelectorKind",
    "CompiledSelector",
    "ChildScope",
    "add_generic_selectors",
    "for_docs_rs",
    "apply_preset",
    "PRESETS",
    "Element",
    "HrefType",
    "HrefSource",
    "TargetType",
    "ImageType",
    "OtherImageType",
    "ItemSelection",
    "ListSelection",
    "ResultNode",
    "FlatResult",
    "flatten",
    "Document",
    "LoadedDocument",
    "Fetcher",
    "FetchedPage",
    "RequestsFetcher",
    "BearerTokens",
    "load_config",
    "ScrapeConfig",
    "ScrapedError",
    "ConfigurationError",
    "InvalidSelectorPattern",
    "UnknownSelectorReference",
    "RegistryFrozen",
    "KeyNotFound",
    "UrlParseFailure",
    "FetchFailure",
    "main",
]
