from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag
from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.tree import SyntaxTreeNode

from ..markup import VOID_ELEMENTS, to_html
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
    Image,
    ImageSpan,
    Inline,
    Link,
    LinkSpan,
    ListBlock,
    Ordered,
    Paragraph,
    RawHtml,
    SoftBreak,
    Strong,
    Text,
    ThematicBreak,
    Unordered,
)
from ..schemas import DEFAULT_OPTIONS, Options
from .element_service import DEFAULT_ELEMENTS, ElementRenderers
from .render_service import MAX_NESTING_DEPTH, RenderDepthError, render_document

logger = logging.getLogger(__name__)

_START_TAG_RE = re.compile(r"^<([A-Za-z][A-Za-z0-9-]*)")
_END_TAG_RE = re.compile(r"^</([A-Za-z][A-Za-z0-9-]*)\s*>$")
_SELF_CLOSED_START_RE = re.compile(r"^<[^>]*/>")


class MarkdownConversionError(ValueError):
    """Raised when the parser produces a node this project cannot represent."""


def _markdown() -> MarkdownIt:
    return MarkdownIt("commonmark", {"html": True})


def _soup(source: str) -> BeautifulSoup:
    return BeautifulSoup(source, "html.parser", multi_valued_attributes=None)


def _check_depth(depth: int) -> None:
    if depth > MAX_NESTING_DEPTH:
        raise RenderDepthError(
            f"Document nesting exceeds the limit of {MAX_NESTING_DEPTH} levels."
        )


def _tag_attributes(tag: Tag) -> Tuple[Tuple[str, str], ...]:
    return tuple((name, "" if value is None else str(value)) for name, value in tag.attrs.items())


def _convert_soup_children(parent: Tag, depth: int) -> Tuple[Inline, ...]:
    _check_depth(depth)
    nodes: List[Inline] = []
    for child in parent.children:
        if isinstance(child, Tag):
            nodes.append(
                HtmlElement(
                    tag=child.name,
                    attributes=_tag_attributes(child),
                    children=_convert_soup_children(child, depth + 1),
                    void=bool(child.can_be_empty_element),
                )
            )
        elif isinstance(child, PreformattedString):
            # Comments, doctypes and CDATA never become markup.
            continue
        elif isinstance(child, NavigableString):
            nodes.append(Text(str(child)))
    return tuple(nodes)


def _end_tag_name(source: str) -> Optional[str]:
    match = _END_TAG_RE.match(source.strip())
    return match.group(1).lower() if match else None


def _start_tag_name(source: str) -> Optional[str]:
    match = _START_TAG_RE.match(source)
    return match.group(1).lower() if match else None


def _is_self_closing(source: str, tag_name: str) -> bool:
    return source.rstrip().endswith("/>") or tag_name in VOID_ELEMENTS


def _unclosed_block_tag(source: str) -> Optional[str]:
    """Name of the element an HTML block opens but does not close, if any."""
    source = source.strip()
    tag_name = _start_tag_name(source)
    if tag_name is None or tag_name in VOID_ELEMENTS or _SELF_CLOSED_START_RE.match(source):
        return None
    name = re.escape(tag_name)
    opened = len(re.findall(rf"<{name}(?=[\s/>])", source, re.IGNORECASE))
    closed = len(re.findall(rf"</{name}\s*>", source, re.IGNORECASE))
    return tag_name if opened > closed else None


def _pair_tags(nodes: Sequence[SyntaxTreeNode], node_type: str) -> Dict[int, int]:
    """Map the position of each opening tag to the position of its end tag.

    Tags of the same name nest; tags of different names are paired
    independently.
    """
    open_positions: Dict[str, List[int]] = {}
    pairs: Dict[int, int] = {}
    for position, node in enumerate(nodes):
        if node.type != node_type:
            continue
        end_name = _end_tag_name(node.content)
        if end_name is not None:
            stack = open_positions.get(end_name)
            if stack:
                pairs[stack.pop()] = position
            continue
        if node_type == "html_block":
            start_name = _unclosed_block_tag(node.content)
        else:
            start_name = _start_tag_name(node.content)
            if start_name is not None and _is_self_closing(node.content, start_name):
                start_name = None
        if start_name is not None:
            open_positions.setdefault(start_name, []).append(position)
    return pairs


def _convert_html_inline(
    nodes: Sequence[SyntaxTreeNode],
    pairs: Dict[int, int],
    index: int,
    stop: int,
    depth: int,
) -> Tuple[Union[HtmlElement, RawHtml], int]:
    source = nodes[index].content
    tag_name = _start_tag_name(source)
    if tag_name is None:
        return RawHtml(source), index + 1

    parsed = _soup(source).find(tag_name)
    if not isinstance(parsed, Tag):
        return RawHtml(source), index + 1
    attributes = _tag_attributes(parsed)

    if _is_self_closing(source, tag_name):
        return HtmlElement(tag_name, attributes, (), source, "", True), index + 1

    end = pairs.get(index)
    if end is None or end >= stop:
        return HtmlElement(tag_name, attributes, (), source, ""), index + 1
    children = _convert_inline_range(nodes, pairs, index + 1, end, depth + 1)
    return HtmlElement(tag_name, attributes, children, source, nodes[end].content), end + 1


def _plain_text(node: SyntaxTreeNode) -> str:
    if node.type in {"text", "text_special", "code_inline"}:
        return node.content
    if node.type in {"softbreak", "hardbreak"}:
        return "\n"
    return "".join(_plain_text(child) for child in node.children)


def _convert_inline(node: SyntaxTreeNode, depth: int) -> Inline:
    node_type = node.type
    if node_type in {"text", "text_special"}:
        return Text(node.content)
    if node_type == "softbreak":
        return SoftBreak()
    if node_type == "hardbreak":
        return HardBreak()
    if node_type == "code_inline":
        return CodeSpan(node.content)
    if node_type == "em":
        return Emphasis(_convert_inlines(node.children, depth + 1))
    if node_type == "strong":
        return Strong(_convert_inlines(node.children, depth + 1))
    if node_type == "link":
        title = node.attrs.get("title")
        link = Link(url=str(node.attrs.get("href", "")), title=str(title) if title is not None else None)
        return LinkSpan(link, _convert_inlines(node.children, depth + 1))
    if node_type == "image":
        title = node.attrs.get("title")
        image = Image(
            alt=_plain_text(node),
            src=str(node.attrs.get("src", "")),
            title=str(title) if title is not None else None,
        )
        return ImageSpan(image)
    raise MarkdownConversionError(f"Unsupported inline node: {node_type}")


def _convert_inline_range(
    nodes: Sequence[SyntaxTreeNode],
    pairs: Dict[int, int],
    start: int,
    stop: int,
    depth: int,
) -> Tuple[Inline, ...]:
    _check_depth(depth)
    result: List[Inline] = []
    index = start
    while index < stop:
        node = nodes[index]
        if node.type == "html_inline":
            fragment, index = _convert_html_inline(nodes, pairs, index, stop, depth)
            result.append(fragment)
            continue
        result.append(_convert_inline(node, depth))
        index += 1
    return tuple(result)


def _convert_inlines(nodes: Sequence[SyntaxTreeNode], depth: int) -> Tuple[Inline, ...]:
    return _convert_inline_range(nodes, _pair_tags(nodes, "html_inline"), 0, len(nodes), depth)


def _inline_children(node: SyntaxTreeNode, depth: int) -> Tuple[Inline, ...]:
    inlines: List[SyntaxTreeNode] = []
    for child in node.children:
        if child.type == "inline":
            inlines.extend(child.children)
    return _convert_inlines(inlines, depth)


def _is_tight(node: SyntaxTreeNode) -> bool:
    paragraphs = [
        child
        for item in node.children
        for child in item.children
        if child.type == "paragraph"
    ]
    return all(paragraph.hidden for paragraph in paragraphs)


def _fence_language(info: str) -> Optional[str]:
    info = unescapeAll(info).strip()
    if not info:
        return None
    return info.split()[0]


def _convert_block(node: SyntaxTreeNode, depth: int) -> Block:
    node_type = node.type
    if node_type == "paragraph":
        return Paragraph(_inline_children(node, depth + 1))
    if node_type == "heading":
        return Heading(int(node.tag[1:]), _inline_children(node, depth + 1))
    if node_type == "blockquote":
        return BlockQuote(_convert_blocks(node.children, depth + 1))
    if node_type == "fence":
        return CodeBlock(code=node.content, language=_fence_language(node.info))
    if node_type == "code_block":
        return CodeBlock(code=node.content)
    if node_type in {"bullet_list", "ordered_list"}:
        if node_type == "ordered_list":
            kind = Ordered(int(node.attrs.get("start", 1)))
        else:
            kind = Unordered()
        items = tuple(_convert_blocks(item.children, depth + 1) for item in node.children)
        return ListBlock(kind=kind, items=items, tight=_is_tight(node))
    if node_type == "hr":
        return ThematicBreak()
    if node_type == "html_block":
        return HtmlBlock(
            source=node.content,
            nodes=_convert_soup_children(_soup(node.content), depth + 1),
        )
    raise MarkdownConversionError(f"Unsupported block node: {node_type}")


def _convert_html_section(
    nodes: Sequence[SyntaxTreeNode],
    pairs: Dict[int, int],
    index: int,
    end: int,
    depth: int,
) -> HtmlSection:
    source = nodes[index].content
    tag_name = _start_tag_name(source.strip())
    parsed = _soup(source).find(tag_name)
    attributes: Tuple[Tuple[str, str], ...] = ()
    leading: Tuple[Inline, ...] = ()
    if isinstance(parsed, Tag):
        attributes = _tag_attributes(parsed)
        leading = _convert_soup_children(parsed, depth + 1)
    return HtmlSection(
        tag=tag_name,
        attributes=attributes,
        leading=leading,
        children=_convert_block_range(nodes, pairs, index + 1, end, depth + 1),
        start_source=source,
        end_source=nodes[end].content,
    )


def _convert_block_range(
    nodes: Sequence[SyntaxTreeNode],
    pairs: Dict[int, int],
    start: int,
    stop: int,
    depth: int,
) -> Tuple[Block, ...]:
    _check_depth(depth)
    result: List[Block] = []
    index = start
    while index < stop:
        end = pairs.get(index)
        if end is not None and end < stop:
            result.append(_convert_html_section(nodes, pairs, index, end, depth))
            index = end + 1
            continue
        result.append(_convert_block(nodes[index], depth))
        index += 1
    return tuple(result)


def _convert_blocks(nodes: Sequence[SyntaxTreeNode], depth: int) -> Tuple[Block, ...]:
    return _convert_block_range(nodes, _pair_tags(nodes, "html_block"), 0, len(nodes), depth)


def parse_markdown(text: str) -> Tuple[Block, ...]:
    tree = SyntaxTreeNode(_markdown().parse(text or ""))
    blocks = _convert_blocks(tree.children, 0)
    logger.debug("Parsed markdown into %d blocks", len(blocks))
    return blocks


def render_markdown(
    content: str | None,
    options: Options | None = None,
    elements: ElementRenderers | None = None,
) -> str | None:
    if not content:
        return None

    nodes = render_document(
        parse_markdown(content),
        options if options is not None else DEFAULT_OPTIONS,
        elements if elements is not None else DEFAULT_ELEMENTS,
    )
    return to_html(nodes)
