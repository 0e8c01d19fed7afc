from __future__ import annotations

from typing import Annotated, FrozenSet, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


DEFAULT_ALLOWED_ELEMENTS: FrozenSet[str] = frozenset(
    {
        "address",
        "article",
        "aside",
        "b",
        "blockquote",
        "br",
        "caption",
        "cite",
        "code",
        "col",
        "colgroup",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "figcaption",
        "figure",
        "footer",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "i",
        "legend",
        "li",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "small",
        "strike",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

DEFAULT_ALLOWED_ATTRIBUTES: FrozenSet[str] = frozenset({"name", "class"})


class SanitizeOptions(BaseModel):
    """Allow-lists applied to raw HTML when sanitizing.

    Both sets are matched exactly and case-sensitively. An attribute that is
    allowed is allowed on every element.
    """

    model_config = ConfigDict(frozen=True)

    allowed_elements: FrozenSet[str] = DEFAULT_ALLOWED_ELEMENTS
    allowed_attributes: FrozenSet[str] = DEFAULT_ALLOWED_ATTRIBUTES

    @field_serializer("allowed_elements", "allowed_attributes")
    def _serialize_sorted(self, value: FrozenSet[str]) -> list[str]:
        return sorted(value)


DEFAULT_SANITIZE_OPTIONS = SanitizeOptions()


class ParseUnsafe(BaseModel):
    """Keep raw HTML exactly as written.

    This is unsafe for untrusted input: script tags, event handler attributes
    and embedded content all reach the output unchanged.
    """

    model_config = ConfigDict(frozen=True)

    mode: Literal["parse_unsafe"] = "parse_unsafe"


class Sanitize(BaseModel):
    """Filter raw HTML through the allow-lists in ``options``."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["sanitize"] = "sanitize"
    options: SanitizeOptions = DEFAULT_SANITIZE_OPTIONS


class DontParse(BaseModel):
    """Show raw HTML as literal text."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["dont_parse"] = "dont_parse"


HtmlMode = Annotated[Union[ParseUnsafe, Sanitize, DontParse], Field(discriminator="mode")]


class Options(BaseModel):
    model_config = ConfigDict(frozen=True)

    soft_as_hard_line_break: bool = False
    html: HtmlMode = Sanitize()


DEFAULT_OPTIONS = Options()


class MarkdownPreviewRequest(BaseModel):
    content: str = ""
    options: Optional[Options] = None


class MarkdownPreviewResponse(BaseModel):
    html: str
