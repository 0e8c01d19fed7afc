from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from mdview import markup
from mdview.models import CodeBlock, Image, Link, Ordered, Unordered
from mdview.services.element_service import (
    DEFAULT_ELEMENTS,
    DEFAULT_RENDERERS,
    Construct,
    ElementRenderers,
    RendererSetError,
)

TEXT = [markup.Text("x")]
ITEMS = [
    markup.element("li", children=[markup.Text("a")]),
    markup.element("li", children=[markup.Text("b")]),
]


def test_heading_levels_one_to_five_are_distinct() -> None:
    heading = DEFAULT_ELEMENTS[Construct.HEADING]
    tags = [heading(level, TEXT).tag for level in range(1, 6)]
    assert tags == ["h1", "h2", "h3", "h4", "h5"]


def test_heading_levels_from_six_share_lowest_tier() -> None:
    heading = DEFAULT_ELEMENTS[Construct.HEADING]
    assert heading(6, TEXT) == heading(9, TEXT)
    assert heading(6, TEXT).tag == "h6"
    assert heading(6, TEXT) != heading(5, TEXT)


def test_paragraph_unwrapped_returns_children() -> None:
    paragraph = DEFAULT_ELEMENTS[Construct.PARAGRAPH]
    children = [markup.Text("a"), markup.element("em", children=[markup.Text("b")])]

    assert paragraph(False, children) == children
    assert paragraph(True, children) == [markup.element("p", children=children)]


def test_code_block_language_hook() -> None:
    code = DEFAULT_ELEMENTS[Construct.CODE]

    with_language = code(CodeBlock(code="print(1)\n", language="python"))
    assert with_language.tag == "pre"
    inner = with_language.children[0]
    assert inner.tag == "code"
    assert inner.get("class") == "language-python"
    assert inner.children == (markup.Text("print(1)\n"),)

    without_language = code(CodeBlock(code="x"))
    assert without_language.children[0].attributes == ()


def test_code_text_is_never_markup() -> None:
    code = DEFAULT_ELEMENTS[Construct.CODE]
    html = markup.to_html([code(CodeBlock(code="<script>alert(1)</script>"))])
    assert html == "<pre><code>&lt;script&gt;alert(1)&lt;/script&gt;</code></pre>"

    span = DEFAULT_ELEMENTS[Construct.CODE_SPAN]("<b>")
    assert markup.to_html([span]) == "<code>&lt;b&gt;</code>"


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (Ordered(1), markup.element("ol", children=ITEMS)),
        (Ordered(3), markup.element("ol", [("start", "3")], ITEMS)),
        (Ordered(5), markup.element("ol", [("start", "5")], ITEMS)),
        (Unordered(), markup.element("ul", children=ITEMS)),
    ],
)
def test_list_start_marker(kind, expected) -> None:
    assert DEFAULT_ELEMENTS[Construct.LIST](kind, ITEMS) == expected


def test_link_title_only_when_present() -> None:
    link = DEFAULT_ELEMENTS[Construct.LINK]

    plain = link(Link(url="https://example.com"), TEXT)
    assert plain.attributes == (("href", "https://example.com"),)
    assert plain.children == tuple(TEXT)

    titled = link(Link(url="/a", title="Home"), TEXT)
    assert titled.attributes == (("href", "/a"), ("title", "Home"))


def test_image_title_only_when_present() -> None:
    image = DEFAULT_ELEMENTS[Construct.IMAGE]

    untitled = image(Image(alt="a", src="s"))
    assert untitled.attributes == (("alt", "a"), ("src", "s"))
    assert untitled.get("title") is None
    assert untitled.children == ()

    titled = image(Image(alt="a", src="s", title="t"))
    assert titled.get("title") == "t"
    assert markup.to_html([titled]) == '<img alt="a" src="s" title="t">'


def test_constant_renderers() -> None:
    assert markup.to_html([DEFAULT_ELEMENTS[Construct.THEMATIC_BREAK]()]) == "<hr>"
    assert markup.to_html([DEFAULT_ELEMENTS[Construct.HARD_LINE_BREAK]()]) == "<br>"
    assert DEFAULT_ELEMENTS[Construct.BLOCK_QUOTE](TEXT).tag == "blockquote"
    assert DEFAULT_ELEMENTS[Construct.EMPHASIS](TEXT).tag == "em"
    assert DEFAULT_ELEMENTS[Construct.STRONG_EMPHASIS](TEXT).tag == "strong"


def test_default_set_covers_every_construct() -> None:
    assert set(DEFAULT_ELEMENTS) == set(Construct)
    assert len(DEFAULT_ELEMENTS) == 12


def test_missing_renderer_is_rejected() -> None:
    partial = {key: value for key, value in DEFAULT_RENDERERS.items() if key is not Construct.IMAGE}
    with pytest.raises(RendererSetError, match="image"):
        ElementRenderers(partial)


def test_non_callable_renderer_is_rejected() -> None:
    with pytest.raises(RendererSetError):
        DEFAULT_ELEMENTS.override(image="<img>")


def test_unknown_construct_is_rejected() -> None:
    with pytest.raises(RendererSetError):
        DEFAULT_ELEMENTS.override(blink=lambda children: children)


def test_override_replaces_one_entry_and_shares_the_rest() -> None:
    def ruled_break() -> markup.Element:
        return markup.element("hr", [("class", "rule")])

    elements = DEFAULT_ELEMENTS.override(thematic_break=ruled_break)

    assert elements[Construct.THEMATIC_BREAK] is ruled_break
    assert DEFAULT_ELEMENTS[Construct.THEMATIC_BREAK] is not ruled_break
    for construct in Construct:
        if construct is not Construct.THEMATIC_BREAK:
            assert elements[construct] is DEFAULT_ELEMENTS[construct]
    assert "thematic_break" in repr(elements)


def test_string_keys_are_accepted() -> None:
    elements = ElementRenderers({construct.value: DEFAULT_RENDERERS[construct] for construct in Construct})
    assert elements[Construct.HEADING] is DEFAULT_RENDERERS[Construct.HEADING]


def test_raw_text_elements_are_serialized_verbatim() -> None:
    script = markup.element("script", children=[markup.Text("if (a && b < c) {}")])
    style = markup.element("style", children=[markup.Text("p > a { color: red }")])
    div = markup.element("div", children=[markup.Text("a && b")])

    assert markup.to_html([script]) == "<script>if (a && b < c) {}</script>"
    assert markup.to_html([style]) == "<style>p > a { color: red }</style>"
    assert markup.to_html([div]) == "<div>a &amp;&amp; b</div>"
