"""
Element module for scraped.

An `Element` is the structured record extracted from one DOM node matched by
a selector. Pydantic models are used so results serialize to camelCase JSON.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class HrefType(str, Enum):
    """How the `href` of an element relates to the page it was found on."""
    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    # the href called a page level Javascript function
    JAVASCRIPT = "javascript"
    EMPTY = "empty"
    # offsets into the current page, as H2/H3 tags often do
    ANCHOR_LINK = "anchor-link"
    # an anchor of just "#"
    SELF_REFERENCING_ANCHOR = "self-referencing-anchor"


class HrefSource(str, Enum):
    """Where the `href` of an element was found."""
    # the selected element carries the attribute itself
    ELEMENT = "element"
    # the element's only child carries the attribute
    ONLY_CHILD = "only-child"


class TargetType(str, Enum):
    """Broad category of resource an element points at."""
    IMAGE = "image"
    STYLE = "style"
    FONT = "font"
    HTML_SAME_SITE = "html-same-site"
    HTML_FOREIGN_SITE = "html-foreign-site"
    UNKNOWN = "unknown"


class ImageType(str, Enum):
    """Recognized image formats."""
    GIF = "gif"
    JPEG = "jpeg"
    AVIF = "avif"
    WEBP = "webp"
    ICO = "ico"
    TIFF = "tiff"
    PNG = "png"
    SVG = "svg"


class OtherImageType(BaseModel):
    """An `img` source whose extension isn't a recognized image format."""
    other: str


class Element(BaseModel):
    """A DOM node targeted by one of the document's selectors."""
    tag_name: str = Field(alias="tagName")
    text: Optional[str] = None
    inner_html: Optional[str] = Field(None, alias="innerHtml")
    attributes: Dict[str, Any] = Field(default_factory=dict)

    src: Optional[str] = None
    href: Optional[str] = None
    full_href: Optional[str] = Field(None, alias="fullHref")
    href_type: Optional[HrefType] = Field(None, alias="hrefType")
    href_source: Optional[HrefSource] = Field(None, alias="hrefSource")
    target_type: Optional[TargetType] = Field(None, alias="targetType")
    image_type: Optional[Union[ImageType, OtherImageType]] = Field(None, alias="imageType")

    model_config = ConfigDict(populate_by_name=True)

    def get(self, key: str) -> Any:
        """
        Get a field or attribute by its JSON name.

        Fields take precedence over attributes of the same name; unknown keys
        return None.
        """
        data = self.to_dict()
        if key in data:
            return data[key]
        return self.attributes.get(key)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict, omitting absent fields."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not data.get("attributes"):
            data.pop("attributes", None)
        return data
