"""Per-fragment handling of raw HTML according to the active ``HtmlMode``."""

from __future__ import annotations

from typing import Callable, List, Sequence, Union

from .. import markup
from ..models import Block, HtmlBlock, HtmlElement, HtmlSection, Inline, RawHtml
from ..schemas import DontParse, HtmlMode, ParseUnsafe, Sanitize
from .sanitize_service import filter_attributes, is_element_allowed

RenderChildren = Callable[[Sequence[Inline]], List[markup.Node]]
RenderBlocks = Callable[[Sequence[Block]], List[markup.Node]]


def render_html_fragment(
    fragment: Union[HtmlElement, RawHtml],
    mode: HtmlMode,
    render_children: RenderChildren,
) -> List[markup.Node]:
    """Turn one raw HTML fragment into markup nodes.

    ``render_children`` renders the fragment's children and is expected to
    route nested raw HTML back through this function with the same mode.
    """
    if isinstance(fragment, RawHtml):
        if isinstance(mode, DontParse):
            return [markup.Text(fragment.source)]
        return []

    if isinstance(mode, ParseUnsafe):
        return [
            markup.element(
                fragment.tag,
                fragment.attributes,
                render_children(fragment.children),
            )
        ]

    if isinstance(mode, Sanitize):
        policy = mode.options
        if not is_element_allowed(fragment.tag, policy):
            if fragment.void or not fragment.children:
                return []
            return render_children(fragment.children)
        return [
            markup.element(
                fragment.tag,
                filter_attributes(fragment.tag, fragment.attributes, policy),
                render_children(fragment.children),
            )
        ]

    nodes: List[markup.Node] = [markup.Text(fragment.start_source)]
    nodes.extend(render_children(fragment.children))
    if fragment.end_source:
        nodes.append(markup.Text(fragment.end_source))
    return nodes


def render_html_block(
    block: HtmlBlock,
    mode: HtmlMode,
    render_children: RenderChildren,
) -> List[markup.Node]:
    if isinstance(mode, DontParse):
        return [markup.Text(block.source)]
    return render_children(block.nodes)


def render_html_section(
    section: HtmlSection,
    mode: HtmlMode,
    render_children: RenderChildren,
    render_blocks: RenderBlocks,
) -> List[markup.Node]:
    if isinstance(mode, DontParse):
        nodes: List[markup.Node] = [markup.Text(section.start_source)]
        nodes.extend(render_blocks(section.children))
        if section.end_source:
            nodes.append(markup.Text(section.end_source))
        return nodes

    content = render_children(section.leading) + render_blocks(section.children)
    if isinstance(mode, ParseUnsafe):
        return [markup.element(section.tag, section.attributes, content)]

    policy = mode.options
    if not is_element_allowed(section.tag, policy):
        return content
    return [
        markup.element(
            section.tag,
            filter_attributes(section.tag, section.attributes, policy),
            content,
        )
    ]
