"""
Selector registry module for scraped.

Holds the named CSS selectors, property callbacks and child selector scopes
that describe what to extract from a page. A registry is configured up front
and frozen once a document is loaded with it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping

import soupsieve
from soupsieve import SelectorSyntaxError

from .errors import InvalidSelectorPattern, RegistryFrozen, UnknownSelectorReference

logger = logging.getLogger(__name__)


class SelectorKind(str, Enum):
    """Whether a selector keeps the first match or all matches."""
    ITEM = "item"
    LIST = "list"


class ChildScope(str, Enum):
    """Filter deciding which hrefs of a child selector are followed."""
    # any href is followed
    ALL = "all"
    # only relative paths are followed
    RELATIVE = "relative"
    # only fully qualified URLs are followed
    ABSOLUTE = "absolute"
    # only hrefs starting with "http"
    HTTP = "http"
    # only hrefs starting with "file"
    FILE = "file"


# receives the selection map, returns a JSON-compatible value
PropertyCallback = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class CompiledSelector:
    """A named and compiled CSS pattern."""
    name: str
    kind: SelectorKind
    pattern: str
    compiled: Any

    @classmethod
    def compile(cls, name: str, kind: SelectorKind, pattern: str) -> "CompiledSelector":
        """
        Compile a named CSS pattern.

        Raises:
            InvalidSelectorPattern: if soupsieve rejects the pattern
        """
        try:
            compiled = soupsieve.compile(pattern)
        except SelectorSyntaxError as e:
            raise InvalidSelectorPattern(name, pattern, str(e).splitlines()[0]) from e
        return cls(name=name, kind=kind, pattern=pattern, compiled=compiled)


class SelectorRegistry:
    """
    Configuration of selectors, properties and child selectors.

    All mutators return the registry so calls can be chained:

        registry = (
            SelectorRegistry()
            .add_selector("title", "title")
            .add_list_selector("links", "a[href]")
            .child_selectors(["links"], ChildScope.RELATIVE)
        )
    """

    def __init__(self):
        self._selectors: Dict[str, CompiledSelector] = {}
        self._properties: Dict[str, PropertyCallback] = {}
        self._child_scopes: Dict[str, ChildScope] = {}
        self._frozen = False

    def __repr__(self) -> str:
        return (
            f"SelectorRegistry(selectors={list(self._selectors)}, "
            f"properties={list(self._properties)}, frozen={self._frozen})"
        )

    @property
    def selectors(self) -> Mapping[str, CompiledSelector]:
        """Registered selectors in registration order."""
        return MappingProxyType(self._selectors)

    @property
    def properties(self) -> Mapping[str, PropertyCallback]:
        """Registered property callbacks."""
        return MappingProxyType(self._properties)

    @property
    def child_scopes(self) -> Mapping[str, ChildScope]:
        """Selector names designated as child selectors, with their scope."""
        return MappingProxyType(self._child_scopes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "SelectorRegistry":
        """Prevent further changes; called when a document is loaded."""
        if not self._frozen:
            logger.debug(f"Freezing registry with {len(self._selectors)} selectors and {len(self._properties)} properties")
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozen("The selector registry can't be changed once a document has been loaded with it")

    def _register(self, name: str, kind: SelectorKind, pattern: str) -> "SelectorRegistry":
        self._check_mutable()
        selector = CompiledSelector.compile(name, kind, pattern)
        if name in self._selectors:
            logger.debug(f"Replacing selector '{name}' with {kind.value} selector '{pattern}'")
        self._selectors[name] = selector
        return self

    def add_selector(self, name: str, pattern: str) -> "SelectorRegistry":
        """
        Add a selector for an item where at most one result is expected.

        Args:
            name: name the result is stored under
            pattern: CSS pattern

        Raises:
            InvalidSelectorPattern: if the pattern can't be compiled
        """
        return self._register(name, SelectorKind.ITEM, pattern)

    def add_list_selector(self, name: str, pattern: str) -> "SelectorRegistry":
        """
        Add a selector which is expected to bring a list of results.

        Raises:
            InvalidSelectorPattern: if the pattern can't be compiled
        """
        return self._register(name, SelectorKind.LIST, pattern)

    def add_property(self, name: str, callback: PropertyCallback) -> "SelectorRegistry":
        """
        Add a property callback, replacing any property of the same name.

        The callback receives the selection map (selector name to selection
        result) and must return a JSON-compatible value. It must not depend
        on other properties.
        """
        self._check_mutable()
        self._properties[name] = callback
        return self

    def child_selectors(self, names: Iterable[str], scope: ChildScope = ChildScope.ALL) -> "SelectorRegistry":
        """
        Designate selectors whose hrefs point at child pages.

        Selectors must be registered before calling this method.

        Args:
            names: selector names
            scope: which hrefs of those selectors count as child pages

        Raises:
            UnknownSelectorReference: if any of the names isn't a registered selector
        """
        self._check_mutable()
        names = list(names)
        unknown = [name for name in names if name not in self._selectors]
        if unknown:
            raise UnknownSelectorReference(unknown, self._selectors.keys())

        scope = ChildScope(scope)
        for name in names:
            self._child_scopes[name] = scope
        return self
