from __future__ import annotations

import logging
from typing import List, Sequence

from .. import markup
from ..models import (
    Block,
    BlockQuote,
    CodeBlock,
    CodeSpan,
    Emphasis,
    HardBreak,
    Heading,
    HtmlBlock,
    HtmlElement,
    HtmlSection,
    ImageSpan,
    Inline,
    LinkSpan,
    ListBlock,
    Paragraph,
    RawHtml,
    SoftBreak,
    Strong,
    Text,
    ThematicBreak,
)
from ..schemas import DEFAULT_OPTIONS, Options
from .element_service import DEFAULT_ELEMENTS, Construct, ElementRenderers
from .html_service import render_html_block, render_html_fragment, render_html_section

logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 100


class RenderDepthError(RuntimeError):
    """Raised when the document nests deeper than ``MAX_NESTING_DEPTH``."""


class _Renderer:
    def __init__(self, options: Options, elements: ElementRenderers) -> None:
        self.options = options
        self.elements = elements

    def _check_depth(self, depth: int) -> None:
        if depth > MAX_NESTING_DEPTH:
            raise RenderDepthError(
                f"Document nesting exceeds the limit of {MAX_NESTING_DEPTH} levels."
            )

    def blocks(self, blocks: Sequence[Block], depth: int, tight: bool = False) -> List[markup.Node]:
        self._check_depth(depth)
        nodes: List[markup.Node] = []
        for block in blocks:
            nodes.extend(self.block(block, depth, tight))
        return nodes

    def block(self, block: Block, depth: int, tight: bool) -> List[markup.Node]:
        elements = self.elements
        if isinstance(block, Paragraph):
            children = self.inlines(block.children, depth + 1)
            return list(elements[Construct.PARAGRAPH](not tight, children))
        if isinstance(block, Heading):
            children = self.inlines(block.children, depth + 1)
            return [elements[Construct.HEADING](block.level, children)]
        if isinstance(block, BlockQuote):
            children = self.blocks(block.children, depth + 1)
            return [elements[Construct.BLOCK_QUOTE](children)]
        if isinstance(block, CodeBlock):
            return [elements[Construct.CODE](block)]
        if isinstance(block, ListBlock):
            items = [
                markup.element("li", children=self.blocks(item, depth + 1, tight=block.tight))
                for item in block.items
            ]
            return [elements[Construct.LIST](block.kind, items)]
        if isinstance(block, ThematicBreak):
            return [elements[Construct.THEMATIC_BREAK]()]
        if isinstance(block, HtmlBlock):
            return render_html_block(
                block,
                self.options.html,
                lambda children: self.inlines(children, depth + 1),
            )
        if isinstance(block, HtmlSection):
            return render_html_section(
                block,
                self.options.html,
                lambda children: self.inlines(children, depth + 1),
                lambda children: self.blocks(children, depth + 1),
            )
        raise TypeError(f"Unsupported block node: {type(block).__name__}")

    def inlines(self, inlines: Sequence[Inline], depth: int) -> List[markup.Node]:
        self._check_depth(depth)
        nodes: List[markup.Node] = []
        for inline in inlines:
            nodes.extend(self.inline(inline, depth))
        return nodes

    def inline(self, inline: Inline, depth: int) -> List[markup.Node]:
        elements = self.elements
        if isinstance(inline, Text):
            return [markup.Text(inline.value)]
        if isinstance(inline, SoftBreak):
            if self.options.soft_as_hard_line_break:
                return [elements[Construct.HARD_LINE_BREAK]()]
            return [markup.Text("\n")]
        if isinstance(inline, HardBreak):
            return [elements[Construct.HARD_LINE_BREAK]()]
        if isinstance(inline, CodeSpan):
            return [elements[Construct.CODE_SPAN](inline.text)]
        if isinstance(inline, Emphasis):
            return [elements[Construct.EMPHASIS](self.inlines(inline.children, depth + 1))]
        if isinstance(inline, Strong):
            return [elements[Construct.STRONG_EMPHASIS](self.inlines(inline.children, depth + 1))]
        if isinstance(inline, LinkSpan):
            children = self.inlines(inline.children, depth + 1)
            return [elements[Construct.LINK](inline.link, children)]
        if isinstance(inline, ImageSpan):
            return [elements[Construct.IMAGE](inline.image)]
        if isinstance(inline, (HtmlElement, RawHtml)):
            return render_html_fragment(
                inline,
                self.options.html,
                lambda children: self.inlines(children, depth + 1),
            )
        raise TypeError(f"Unsupported inline node: {type(inline).__name__}")


def render_document(
    blocks: Sequence[Block],
    options: Options = DEFAULT_OPTIONS,
    elements: ElementRenderers = DEFAULT_ELEMENTS,
) -> List[markup.Node]:
    """Render a parsed document into markup nodes.

    ``options`` and ``elements`` are only read, so the same values can be
    shared by renders running in parallel.
    """
    logger.debug("Rendering %d blocks with html mode %s", len(blocks), options.html.mode)
    return _Renderer(options, elements).blocks(blocks, depth=0)
