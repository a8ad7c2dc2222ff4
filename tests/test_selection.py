from scraped import (
    HrefSource,
    HrefType,
    ImageType,
    ItemSelection,
    ListSelection,
    OtherImageType,
    SelectorRegistry,
    TargetType,
    add_generic_selectors,
)
from scraped.selection import build_element, discover_href, extract_selections, parse_html


def select(simple_doc, page_url, registry):
    return extract_selections(parse_html(simple_doc), registry, page_url)


def test_item_selector_takes_first_match(simple_doc, page_url):
    selections = select(simple_doc, page_url, SelectorRegistry().add_selector("h2", "h2"))

    assert isinstance(selections["h2"], ItemSelection)
    assert selections["h2"].element.text == "Installation"


def test_list_selector_keeps_document_order(simple_doc, page_url):
    selections = select(simple_doc, page_url, SelectorRegistry().add_list_selector("h2", "h2"))

    assert isinstance(selections["h2"], ListSelection)
    assert selections["h2"].get("text") == ["Installation", "Top", "Usage"]


def test_no_match_is_none_for_items_and_lists(simple_doc, page_url):
    registry = (
        SelectorRegistry()
        .add_selector("missing_item", "article")
        .add_list_selector("missing_list", "table tr")
    )
    selections = select(simple_doc, page_url, registry)

    assert selections == {"missing_item": None, "missing_list": None}


def test_my_title(simple_doc, page_url):
    selections = select(simple_doc, page_url, SelectorRegistry().add_selector("h1", "h1"))

    assert selections["h1"].element.text == "My Title"
    assert selections["h1"].element.tag_name == "h1"


def test_element_text_html_and_attributes(simple_doc, page_url):
    selections = select(simple_doc, page_url, SelectorRegistry().add_selector("intro", "p"))
    element = selections["intro"].element

    assert element.text == "An introduction paragraph."
    assert element.inner_html == "An <em>introduction</em> paragraph."
    assert element.attributes == {"class": "intro lead", "id": "intro"}
    assert element.href is None
    assert element.target_type is None


def test_empty_text_and_attributes_are_absent(page_url):
    dom = parse_html('<div><span class="" data-x="1"></span></div>')
    element = build_element(dom.select_one("span"), page_url)

    assert element.text is None
    assert element.inner_html is None
    assert element.attributes == {"data-x": "1"}
    assert element.to_dict() == {"tagName": "span", "attributes": {"data-x": "1"}}


def test_href_from_only_child(simple_doc, page_url):
    selections = select(simple_doc, page_url, SelectorRegistry().add_list_selector("h2", "h2"))
    install, top, usage = selections["h2"].elements

    assert install.href == "#install"
    assert install.href_source == HrefSource.ONLY_CHILD
    assert install.href_type == HrefType.ANCHOR_LINK
    assert install.full_href == page_url

    assert top.href_type == HrefType.SELF_REFERENCING_ANCHOR
    assert usage.href is None
    assert usage.href_type is None


def test_href_not_taken_from_one_of_many_children(page_url):
    dom = parse_html('<div><a href="a.html">A</a><a href="b.html">B</a></div>')
    assert discover_href(dom.select_one("div")) == (None, None)

    dom = parse_html('<div>text <a href="a.html">A</a></div>')
    assert discover_href(dom.select_one("div")) == (None, None)


def test_own_href_wins_over_child(page_url):
    dom = parse_html('<a href="outer.html"><span href="inner.html">x</span></a>')
    assert discover_href(dom.select_one("a")) == ("outer.html", HrefSource.ELEMENT)


def test_generic_links_are_classified(simple_doc, page_url):
    selections = select(simple_doc, page_url, add_generic_selectors(SelectorRegistry()))
    links = {element.text or element.href: element for element in selections["links"].elements}

    stylesheet = links["/static/main.css"]
    assert stylesheet.tag_name == "link"
    assert stylesheet.href_type == HrefType.RELATIVE
    assert stylesheet.full_href == "https://dev.null/static/main.css"
    assert stylesheet.target_type == TargetType.STYLE

    assert links["/static/font.woff2"].target_type == TargetType.FONT

    about = links["About"]
    assert about.href_source == HrefSource.ELEMENT
    assert about.full_href == "https://dev.null/about.html"
    assert about.target_type == TargetType.HTML_SAME_SITE

    assert links["Elsewhere"].href_type == HrefType.ABSOLUTE
    assert links["Elsewhere"].target_type == TargetType.HTML_FOREIGN_SITE
    assert links["Docs"].target_type == TargetType.HTML_SAME_SITE

    assert links["Nothing"].href_type == HrefType.JAVASCRIPT
    assert links["Nothing"].full_href is None

    blank = links["Blank"]
    assert blank.href == ""
    assert blank.href_type == HrefType.EMPTY
    assert blank.full_href is None

    # every element with an href has exactly one href type
    assert all(element.href_type is not None for element in selections["links"].elements)


def test_generic_images_and_scripts(simple_doc, page_url):
    selections = select(simple_doc, page_url, add_generic_selectors(SelectorRegistry()))
    logo, photo = selections["images"].elements

    assert logo.target_type == TargetType.IMAGE
    assert logo.image_type == ImageType.PNG
    assert logo.attributes["alt"] == "Logo"
    assert photo.image_type == OtherImageType(other="bmp")
    assert photo.to_dict()["imageType"] == {"other": "bmp"}

    # a single match of a list selector is still a list
    assert isinstance(selections["scripts"], ListSelection)
    script = selections["scripts"].elements[0]
    assert script.src == "/js/app.js"
    assert script.target_type == TargetType.UNKNOWN
    assert script.image_type is None


def test_element_json_uses_camel_case(simple_doc, page_url):
    selections = select(simple_doc, page_url, SelectorRegistry().add_selector("about", "a.internal"))

    assert selections["about"].to_json() == {
        "tagName": "a",
        "text": "About",
        "innerHtml": "About",
        "attributes": {"class": "internal", "href": "about.html"},
        "href": "about.html",
        "fullHref": "https://dev.null/about.html",
        "hrefType": "relative",
        "hrefSource": "element",
        "targetType": "html-same-site",
    }
