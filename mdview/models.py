from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class CodeBlock:
    code: str
    language: Optional[str] = None


@dataclass(frozen=True)
class Unordered:
    pass


@dataclass(frozen=True)
class Ordered:
    start: int = 1


ListKind = Union[Unordered, Ordered]


@dataclass(frozen=True)
class Link:
    url: str
    title: Optional[str] = None


@dataclass(frozen=True)
class Image:
    alt: str
    src: str
    title: Optional[str] = None


# Inline spans


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class CodeSpan:
    text: str


@dataclass(frozen=True)
class Emphasis:
    children: Tuple["Inline", ...] = ()


@dataclass(frozen=True)
class Strong:
    children: Tuple["Inline", ...] = ()


@dataclass(frozen=True)
class LinkSpan:
    link: Link
    children: Tuple["Inline", ...] = ()


@dataclass(frozen=True)
class ImageSpan:
    image: Image


@dataclass(frozen=True)
class HtmlElement:
    """A raw HTML element found in the source.

    ``start_source`` and ``end_source`` keep the tag text exactly as written so
    the element can be shown literally. ``end_source`` is empty for void or
    unclosed elements.
    """

    tag: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["Inline", ...] = ()
    start_source: str = ""
    end_source: str = ""
    void: bool = False


@dataclass(frozen=True)
class RawHtml:
    """Comments, declarations and stray end tags."""

    source: str


Inline = Union[
    Text,
    SoftBreak,
    HardBreak,
    CodeSpan,
    Emphasis,
    Strong,
    LinkSpan,
    ImageSpan,
    HtmlElement,
    RawHtml,
]


# Blocks


@dataclass(frozen=True)
class Heading:
    level: int
    children: Tuple[Inline, ...] = ()


@dataclass(frozen=True)
class Paragraph:
    children: Tuple[Inline, ...] = ()


@dataclass(frozen=True)
class BlockQuote:
    children: Tuple["Block", ...] = ()


@dataclass(frozen=True)
class ListBlock:
    kind: ListKind
    items: Tuple[Tuple["Block", ...], ...] = ()
    tight: bool = True


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class HtmlBlock:
    source: str
    nodes: Tuple[Inline, ...] = ()


@dataclass(frozen=True)
class HtmlSection:
    """A raw HTML element opened in one HTML block and closed in a later one.

    ``leading`` is the content that follows the start tag inside the opening
    block; ``children`` are the markdown blocks between the two HTML blocks.
    """

    tag: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    leading: Tuple[Inline, ...] = ()
    children: Tuple["Block", ...] = ()
    start_source: str = ""
    end_source: str = ""


Block = Union[Heading, Paragraph, BlockQuote, CodeBlock, ListBlock, ThematicBreak, HtmlBlock, HtmlSection]
