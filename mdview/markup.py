"""Markup node tree and its HTML serialization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from markupsafe import escape

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)


# Their text content is not decoded by browsers, so it is written unescaped.
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Element:
    tag: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["Node", ...] = ()

    def get(self, name: str) -> str | None:
        for key, value in self.attributes:
            if key == name:
                return value
        return None


Node = Union[Element, Text]


def element(tag: str, attributes: Iterable[Tuple[str, str]] = (), children: Iterable[Node] = ()) -> Element:
    return Element(tag=tag, attributes=tuple(attributes), children=tuple(children))


def _render_attrs(attributes: Sequence[Tuple[str, str]]) -> str:
    if not attributes:
        return ""
    parts = [f'{name}="{escape(value)}"' for name, value in attributes]
    return " " + " ".join(parts)


def _render_node(node: Node, parts: List[str], raw_text: bool = False) -> None:
    if isinstance(node, Text):
        parts.append(node.value if raw_text else str(escape(node.value)))
        return
    attrs = _render_attrs(node.attributes)
    if node.tag in VOID_ELEMENTS and not node.children:
        parts.append(f"<{node.tag}{attrs}>")
        return
    parts.append(f"<{node.tag}{attrs}>")
    raw_children = node.tag in RAW_TEXT_ELEMENTS
    for child in node.children:
        _render_node(child, parts, raw_children)
    parts.append(f"</{node.tag}>")


def to_html(nodes: Iterable[Node]) -> str:
    parts: List[str] = []
    for node in nodes:
        _render_node(node, parts)
    return "".join(parts)
