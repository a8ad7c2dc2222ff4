import pytest

from scraped import (
    ChildScope,
    InvalidSelectorPattern,
    PRESETS,
    RegistryFrozen,
    SelectorKind,
    SelectorRegistry,
    UnknownSelectorReference,
    add_generic_selectors,
    apply_preset,
    for_docs_rs,
)


class TestSelectorRegistry:
    """Test suite for selector registration."""

    def test_item_and_list_selectors(self):
        registry = SelectorRegistry().add_selector("h1", "h1").add_list_selector("links", "a[href]")

        assert list(registry.selectors) == ["h1", "links"]
        assert registry.selectors["h1"].kind == SelectorKind.ITEM
        assert registry.selectors["links"].kind == SelectorKind.LIST
        assert registry.selectors["links"].pattern == "a[href]"

    @pytest.mark.parametrize("pattern", ["h1[", "!!invalid"])
    def test_invalid_pattern_is_rejected(self, pattern):
        registry = SelectorRegistry()

        with pytest.raises(InvalidSelectorPattern) as excinfo:
            registry.add_selector("bad", pattern)

        assert excinfo.value.pattern == pattern
        assert "bad" not in registry.selectors

    def test_invalid_list_pattern_is_rejected(self):
        with pytest.raises(InvalidSelectorPattern):
            SelectorRegistry().add_list_selector("bad", "h1[")

    def test_reregistering_replaces_kind(self):
        registry = SelectorRegistry().add_selector("h2", "h2").add_list_selector("h2", "h2")

        assert len(registry.selectors) == 1
        assert registry.selectors["h2"].kind == SelectorKind.LIST

    def test_property_overwrites(self):
        registry = SelectorRegistry().add_property("p", lambda s: 1).add_property("p", lambda s: 2)

        assert registry.properties["p"]({}) == 2

    def test_child_selectors_must_be_registered(self):
        registry = SelectorRegistry().add_list_selector("links", "a")

        with pytest.raises(UnknownSelectorReference) as excinfo:
            registry.child_selectors(["links", "missing", "other"], ChildScope.HTTP)

        assert excinfo.value.unknown == ["missing", "other"]
        # nothing is marked when any name is unknown
        assert registry.child_scopes == {}

    def test_child_selectors_record_scope(self):
        registry = (
            SelectorRegistry()
            .add_list_selector("links", "a")
            .add_selector("next", "a.next")
            .child_selectors(["links"])
            .child_selectors(["next"], "relative")
        )

        assert registry.child_scopes["links"] == ChildScope.ALL
        assert registry.child_scopes["next"] == ChildScope.RELATIVE

    def test_frozen_registry_rejects_changes(self):
        registry = SelectorRegistry().add_selector("h1", "h1").freeze()

        assert registry.frozen
        with pytest.raises(RegistryFrozen):
            registry.add_selector("title", "title")
        with pytest.raises(RegistryFrozen):
            registry.add_list_selector("links", "a")
        with pytest.raises(RegistryFrozen):
            registry.add_property("p", lambda s: None)
        with pytest.raises(RegistryFrozen):
            registry.child_selectors(["h1"])

    def test_exposed_mappings_are_read_only(self):
        registry = SelectorRegistry().add_selector("h1", "h1")

        with pytest.raises(TypeError):
            registry.selectors["title"] = None


class TestPresets:
    """Test suite for preset selector bundles."""

    def test_generic_selectors(self):
        registry = add_generic_selectors(SelectorRegistry())

        assert set(registry.selectors) == {
            "h1", "title", "h2", "h3", "links", "images", "scripts", "styles", "meta"
        }
        assert registry.selectors["title"].kind == SelectorKind.ITEM
        assert registry.selectors["links"].kind == SelectorKind.LIST
        assert registry.child_scopes == {}

    def test_docs_rs_marks_relative_children(self):
        registry = for_docs_rs(SelectorRegistry())

        assert registry.child_scopes["modules"] == ChildScope.RELATIVE
        assert registry.child_scopes["type_defs"] == ChildScope.RELATIVE
        assert "attr_macros" not in registry.child_scopes

    def test_apply_preset_by_name(self):
        assert set(PRESETS) == {"generic", "docs-rs"}
        registry = apply_preset(SelectorRegistry(), "generic")
        assert "title" in registry.selectors

        with pytest.raises(ValueError):
            apply_preset(SelectorRegistry(), "nope")
