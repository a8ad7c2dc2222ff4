"""
Results module for scraped.

Defines selection results, the per-page `ResultNode` which merges selections
and properties into a single lookup surface, and flattening of result trees.
"""

import json
import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .element import Element
from .errors import KeyNotFound

logger = logging.getLogger(__name__)


class ItemSelection(BaseModel):
    """A selector with a single DOM element as result."""
    kind: Literal["item"] = "item"
    element: Element

    def get(self, key: str) -> Any:
        """Get a field (e.g. "text", "href") of the selected element."""
        return self.element.get(key)

    def to_json(self) -> Dict[str, Any]:
        return self.element.to_dict()


class ListSelection(BaseModel):
    """A selector with a non-empty list of DOM elements as result."""
    kind: Literal["list"] = "list"
    elements: List[Element]

    def get(self, key: str) -> List[Any]:
        """Get a field of every selected element, in document order."""
        return [element.get(key) for element in self.elements]

    def to_json(self) -> List[Dict[str, Any]]:
        return [element.to_dict() for element in self.elements]


Selection = Annotated[Union[ItemSelection, ListSelection], Field(discriminator="kind")]

# None stands for "nothing matched", for both item and list selectors
SelectionMap = Dict[str, Optional[Selection]]


def selection_to_json(selection: Optional[Selection]) -> Any:
    """Convert a selection result to its JSON value."""
    if selection is None:
        return None
    return selection.to_json()


class FlatResult(BaseModel):
    """A single page's results, as found in a flattened result tree."""
    url: str
    selections: Dict[str, Optional[Selection]] = Field(default_factory=dict)
    properties: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "selections": {name: selection_to_json(s) for name, s in self.selections.items()},
            "properties": dict(self.properties),
        }


class ResultNode(BaseModel):
    """
    The `url`, selections and properties of a page, plus the results of its
    child pages (one level deep at most).
    """
    url: str
    # raw data extracted with the configured CSS selectors
    selections: Dict[str, Optional[Selection]] = Field(default_factory=dict)
    # values derived from the selections by property callbacks
    properties: Dict[str, Any] = Field(default_factory=dict)
    # URLs identified by the child selectors
    child_urls: List[str] = Field(default_factory=list, alias="childUrls")
    children: List["ResultNode"] = Field(default_factory=list)
    # child URL -> reason, for children which couldn't be fetched
    child_errors: Dict[str, str] = Field(default_factory=dict, alias="childErrors")

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    @field_validator("children")
    @classmethod
    def _one_level_only(cls, children: List["ResultNode"]) -> List["ResultNode"]:
        for child in children:
            if child.children:
                raise ValueError("result trees are limited to one level of children")
        return children

    def get(self, key: str) -> Any:
        """
        Look up a property or selector by name.

        A property always masks a selector of the same name, even when the
        property's value is None. A selector which matched nothing gives None.

        Raises:
            KeyNotFound: if there is neither a property nor a selector called `key`
        """
        if key in self.properties:
            return self.properties[key]
        if key in self.selections:
            return selection_to_json(self.selections[key])
        raise KeyNotFound(key)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON result shape."""
        data = {
            "url": self.url,
            "selections": {name: selection_to_json(s) for name, s in self.selections.items()},
            "properties": dict(self.properties),
            "childUrls": list(self.child_urls),
            "children": [child.to_dict() for child in self.children],
        }
        if self.child_errors:
            data["childErrors"] = dict(self.child_errors)
        return data

    def to_json(self, **kwargs) -> str:
        kwargs.setdefault("default", str)
        return json.dumps(self.to_dict(), **kwargs)


ResultNode.model_rebuild()


def flatten(tree: ResultNode) -> List[FlatResult]:
    """
    Flatten a result tree depth-first, parent first.

    Args:
        tree: root of the result tree

    Returns:
        The parent's results followed by each child's, in order
    """
    flat = [FlatResult(url=tree.url, selections=tree.selections, properties=tree.properties)]
    for child in tree.children:
        flat.extend(flatten(child))
    return flat
