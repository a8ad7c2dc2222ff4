"""
Preset selector bundles for scraped.

Presets only call the public registry methods; they add no behaviour of their own.
"""

from typing import Callable, Dict

from .registry import ChildScope, SelectorRegistry


def add_generic_selectors(registry: SelectorRegistry) -> SelectorRegistry:
    """
    Add useful but generic selectors:

    - `h1` and `title`
    - `h2` and `h3`
    - `links`, `images`, `scripts`, `styles` and `meta`
    """
    return (
        registry
        .add_selector("h1", "h1")
        .add_selector("title", "title")
        .add_list_selector("h2", "h2")
        .add_list_selector("h3", "h3")
        .add_list_selector("links", "[href]")
        .add_list_selector("images", "img")
        .add_list_selector("scripts", "script")
        .add_list_selector("styles", "[rel='stylesheet']")
        .add_list_selector("meta", "meta")
    )


def for_docs_rs(registry: SelectorRegistry) -> SelectorRegistry:
    """Add selectors suited to module pages on the `docs.rs` site."""
    return (
        registry
        .add_selector("h1", "h1 .in-band a")
        .add_selector("description", ".docblock")
        .add_list_selector("h2", "h2")
        .add_list_selector("modules", ".module-item a.mod")
        .add_list_selector("structs", ".module-item a.struct")
        .add_list_selector("functions", ".module-item a.fn")
        .add_list_selector("traits", ".module-item a.trait")
        .add_list_selector("enums", ".module-item a.enum")
        .add_list_selector("macros", ".module-item a.macro")
        .add_list_selector("type_defs", ".module-item a.type")
        .add_list_selector("attr_macros", ".module-item a.attr")
        .add_selector("desc", "section .docblock")
        .child_selectors(
            ["modules", "structs", "functions", "traits", "type_defs", "enums", "macros"],
            ChildScope.RELATIVE,
        )
    )


PRESETS: Dict[str, Callable[[SelectorRegistry], SelectorRegistry]] = {
    "generic": add_generic_selectors,
    "docs-rs": for_docs_rs,
}


def apply_preset(registry: SelectorRegistry, name: str) -> SelectorRegistry:
    """
    Apply a named preset to a registry.

    Raises:
        ValueError: if no preset has that name
    """
    try:
        preset = PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown preset '{name}'; available presets: {sorted(PRESETS)}") from None
    return preset(registry)
