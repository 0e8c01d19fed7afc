from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from mdview.schemas import (
    DEFAULT_ALLOWED_ELEMENTS,
    DEFAULT_OPTIONS,
    DEFAULT_SANITIZE_OPTIONS,
    DontParse,
    Options,
    ParseUnsafe,
    Sanitize,
    SanitizeOptions,
)
from mdview.services.sanitize_service import filter_attributes, is_element_allowed


@pytest.fixture()
def policy() -> SanitizeOptions:
    return SanitizeOptions(allowed_elements={"div", "span"}, allowed_attributes={"class", "id"})


def test_is_element_allowed_matches_membership(policy: SanitizeOptions) -> None:
    assert is_element_allowed("div", policy)
    assert is_element_allowed("span", policy)
    assert not is_element_allowed("script", policy)
    assert not is_element_allowed("", policy)


def test_is_element_allowed_is_case_sensitive(policy: SanitizeOptions) -> None:
    assert not is_element_allowed("DIV", policy)
    assert not is_element_allowed("Span", policy)


def test_filter_attributes_keeps_order_and_values(policy: SanitizeOptions) -> None:
    attributes = [
        ("onclick", "steal()"),
        ("id", "main"),
        ("style", "color: red"),
        ("class", "note wide"),
        ("data-x", "1"),
    ]

    result = filter_attributes("div", attributes, policy)

    assert result == [("id", "main"), ("class", "note wide")]


def test_filter_attributes_ignores_tag(policy: SanitizeOptions) -> None:
    attributes = [("class", "a"), ("href", "/")]

    assert filter_attributes("div", attributes, policy) == filter_attributes("nonsense", attributes, policy)
    assert filter_attributes("script", attributes, policy) == [("class", "a")]


def test_filter_attributes_handles_empty_input(policy: SanitizeOptions) -> None:
    assert filter_attributes("div", [], policy) == []


def test_filter_attributes_is_idempotent(policy: SanitizeOptions) -> None:
    attributes = [("class", "x"), ("onload", "y"), ("id", "z")]
    once = filter_attributes("div", attributes, policy)
    assert filter_attributes("div", once, policy) == once


def test_default_policy_is_conservative() -> None:
    assert len(DEFAULT_ALLOWED_ELEMENTS) == 45
    assert DEFAULT_SANITIZE_OPTIONS.allowed_attributes == frozenset({"name", "class"})
    for tag in ("div", "p", "table", "ul", "ol", "li", "h1", "h6", "blockquote", "pre", "code"):
        assert is_element_allowed(tag, DEFAULT_SANITIZE_OPTIONS)
    for tag in ("script", "style", "iframe", "object", "embed", "img", "a", "form"):
        assert not is_element_allowed(tag, DEFAULT_SANITIZE_OPTIONS)
    assert filter_attributes("div", [("onclick", "x"), ("class", "y")], DEFAULT_SANITIZE_OPTIONS) == [
        ("class", "y")
    ]


def test_default_options() -> None:
    assert DEFAULT_OPTIONS.soft_as_hard_line_break is False
    assert isinstance(DEFAULT_OPTIONS.html, Sanitize)
    assert DEFAULT_OPTIONS.html.options == DEFAULT_SANITIZE_OPTIONS


def test_options_are_frozen() -> None:
    options = Options()
    with pytest.raises(ValidationError):
        options.soft_as_hard_line_break = True


def test_html_mode_is_selected_by_discriminator() -> None:
    assert isinstance(Options.model_validate({"html": {"mode": "parse_unsafe"}}).html, ParseUnsafe)
    assert isinstance(Options.model_validate({"html": {"mode": "dont_parse"}}).html, DontParse)

    options = Options.model_validate(
        {
            "html": {
                "mode": "sanitize",
                "options": {"allowed_elements": ["b"], "allowed_attributes": []},
            }
        }
    )
    assert isinstance(options.html, Sanitize)
    assert options.html.options.allowed_elements == frozenset({"b"})
    assert options.html.options.allowed_attributes == frozenset()

    with pytest.raises(ValidationError):
        Options.model_validate({"html": {"mode": "whatever"}})
