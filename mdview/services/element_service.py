"""Renderer table mapping each markdown construct to the markup it produces.

Every entry is a pure function. Callers replace individual entries with
``ElementRenderers.override`` and keep the defaults for the rest::

    elements = DEFAULT_ELEMENTS.override(
        thematic_break=lambda: markup.element("hr", [("class", "rule")]),
    )
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Sequence

from .. import markup
from ..models import CodeBlock, Image, Link, ListKind, Ordered

Nodes = Sequence[markup.Node]


class RendererSetError(ValueError):
    """Raised when a renderer table is incomplete or holds invalid entries."""


class Construct(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BLOCK_QUOTE = "block_quote"
    CODE = "code"
    LIST = "list"
    EMPHASIS = "emphasis"
    STRONG_EMPHASIS = "strong_emphasis"
    CODE_SPAN = "code_span"
    LINK = "link"
    IMAGE = "image"
    THEMATIC_BREAK = "thematic_break"
    HARD_LINE_BREAK = "hard_line_break"


_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5")


def heading(level: int, children: Nodes) -> markup.Element:
    # Levels 1-5 get their own tag, everything deeper shares h6.
    if level < 1:
        level = 1
    tag = _HEADING_TAGS[level - 1] if level <= len(_HEADING_TAGS) else "h6"
    return markup.element(tag, children=children)


def paragraph(wrap_as_block: bool, children: Nodes) -> List[markup.Node]:
    if not wrap_as_block:
        return list(children)
    return [markup.element("p", children=children)]


def block_quote(children: Nodes) -> markup.Element:
    return markup.element("blockquote", children=children)


def code(code_block: CodeBlock) -> markup.Element:
    attributes = []
    if code_block.language:
        attributes.append(("class", "language-" + code_block.language))
    inner = markup.element("code", attributes, [markup.Text(code_block.code)])
    return markup.element("pre", children=[inner])


def list_(kind: ListKind, items: Nodes) -> markup.Element:
    if isinstance(kind, Ordered):
        attributes = [] if kind.start == 1 else [("start", str(kind.start))]
        return markup.element("ol", attributes, items)
    return markup.element("ul", children=items)


def emphasis(children: Nodes) -> markup.Element:
    return markup.element("em", children=children)


def strong_emphasis(children: Nodes) -> markup.Element:
    return markup.element("strong", children=children)


def code_span(text: str) -> markup.Element:
    return markup.element("code", children=[markup.Text(text)])


def link(link: Link, children: Nodes) -> markup.Element:
    attributes = [("href", link.url)]
    if link.title is not None:
        attributes.append(("title", link.title))
    return markup.element("a", attributes, children)


def image(image: Image) -> markup.Element:
    attributes = [("alt", image.alt), ("src", image.src)]
    if image.title is not None:
        attributes.append(("title", image.title))
    return markup.element("img", attributes)


def thematic_break() -> markup.Element:
    return markup.element("hr")


def hard_line_break() -> markup.Element:
    return markup.element("br")


DEFAULT_RENDERERS: Mapping[Construct, Callable[..., Any]] = MappingProxyType(
    {
        Construct.HEADING: heading,
        Construct.PARAGRAPH: paragraph,
        Construct.BLOCK_QUOTE: block_quote,
        Construct.CODE: code,
        Construct.LIST: list_,
        Construct.EMPHASIS: emphasis,
        Construct.STRONG_EMPHASIS: strong_emphasis,
        Construct.CODE_SPAN: code_span,
        Construct.LINK: link,
        Construct.IMAGE: image,
        Construct.THEMATIC_BREAK: thematic_break,
        Construct.HARD_LINE_BREAK: hard_line_break,
    }
)


def _coerce_construct(key: Any) -> Construct:
    try:
        return Construct(key)
    except ValueError as exc:
        raise RendererSetError(f"Unknown construct: {key!r}") from exc


class ElementRenderers(Mapping[Construct, Callable[..., Any]]):
    """Immutable, complete table of renderer functions keyed by ``Construct``."""

    __slots__ = ("_table",)

    def __init__(self, renderers: Mapping[Any, Callable[..., Any]]) -> None:
        table: Dict[Construct, Callable[..., Any]] = {}
        for key, renderer in renderers.items():
            construct = _coerce_construct(key)
            if not callable(renderer):
                raise RendererSetError(f"Renderer for {construct.value} is not callable.")
            table[construct] = renderer

        missing = [construct.value for construct in Construct if construct not in table]
        if missing:
            raise RendererSetError("Missing renderers for: {0}".format(", ".join(missing)))
        self._table = MappingProxyType(table)

    def __getitem__(self, construct: Construct) -> Callable[..., Any]:
        return self._table[construct]

    def __iter__(self) -> Iterator[Construct]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        overridden = [
            construct.value
            for construct, renderer in self._table.items()
            if renderer is not DEFAULT_RENDERERS[construct]
        ]
        return f"ElementRenderers(overridden={overridden!r})"

    def override(self, **renderers: Callable[..., Any]) -> "ElementRenderers":
        table: Dict[Any, Callable[..., Any]] = dict(self._table)
        for key, renderer in renderers.items():
            table[_coerce_construct(key)] = renderer
        return ElementRenderers(table)


DEFAULT_ELEMENTS = ElementRenderers(DEFAULT_RENDERERS)
