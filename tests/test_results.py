import json

import pytest
from pydantic import ValidationError

from scraped import Element, ItemSelection, KeyNotFound, ListSelection, ResultNode, flatten


def make_node(url, **kwargs):
    return ResultNode(url=url, **kwargs)


@pytest.fixture
def node():
    return make_node(
        "https://dev.null/page",
        selections={
            "h1": ItemSelection(element=Element(tag_name="h1", text="My Title")),
            "h2": ListSelection(elements=[
                Element(tag_name="h2", text="One"),
                Element(tag_name="h2", text="Two"),
            ]),
            "missing": None,
            "masked": ItemSelection(element=Element(tag_name="p", text="hidden")),
        },
        properties={"greeting": "world", "masked": None},
    )


class TestResultNodeGet:
    """Test suite for merged selector/property lookups."""

    def test_selector_values(self, node):
        assert node.get("h1") == {"tagName": "h1", "text": "My Title"}
        assert node.get("h2") == [{"tagName": "h2", "text": "One"}, {"tagName": "h2", "text": "Two"}]

    def test_selector_without_match_is_none(self, node):
        assert node.get("missing") is None

    def test_property_value(self, node):
        assert node.get("greeting") == "world"

    def test_property_masks_selector_even_when_null(self, node):
        assert node.get("masked") is None

    def test_unknown_key(self, node):
        with pytest.raises(KeyNotFound) as excinfo:
            node.get("nope")
        assert excinfo.value.key == "nope"
        # also usable as a KeyError
        with pytest.raises(KeyError):
            node.get("nope")


def test_selection_get_reads_fields(node):
    assert node.selections["h1"].get("text") == "My Title"
    assert node.selections["h2"].get("text") == ["One", "Two"]
    assert node.selections["h2"].get("href") == [None, None]


def test_to_dict_shape(node):
    data = node.to_dict()

    assert data["url"] == "https://dev.null/page"
    assert data["selections"]["h1"] == {"tagName": "h1", "text": "My Title"}
    assert data["selections"]["missing"] is None
    assert data["properties"] == {"greeting": "world", "masked": None}
    assert data["childUrls"] == []
    assert data["children"] == []
    assert "childErrors" not in data
    assert json.loads(node.to_json()) == data


def test_children_limited_to_one_level():
    grandchild = make_node("https://dev.null/c/g")
    child = make_node("https://dev.null/c", children=[grandchild])

    with pytest.raises(ValidationError):
        make_node("https://dev.null", children=[child])

    root = make_node("https://dev.null")
    with pytest.raises(ValidationError):
        root.children = [child]


def test_flatten_parent_first():
    children = [make_node(f"https://dev.null/{i}", properties={"i": i}) for i in range(3)]
    tree = make_node("https://dev.null", children=children, child_urls=[c.url for c in children])

    flat = flatten(tree)

    assert len(flat) == 1 + len(tree.children)
    assert [page.url for page in flat] == [
        "https://dev.null",
        "https://dev.null/0",
        "https://dev.null/1",
        "https://dev.null/2",
    ]
    assert flat[2].properties == {"i": 1}
    assert flat[0].to_dict() == {"url": "https://dev.null", "selections": {}, "properties": {}}


def test_flatten_leaf():
    assert len(flatten(make_node("https://dev.null"))) == 1
