"""Tests for locating the JSON array inside model output."""

from market_sentinel.extract.payload import (
    bracket_span,
    fenced_block,
    locate_payload,
    object_array_start,
)

# -- Fenced block scan --


def test_fenced_block_returns_inner_text() -> None:
    raw = 'Here you go:\n```json\n[{"title": "A"}]\n```\nThanks'
    assert fenced_block(raw) == '[{"title": "A"}]'


def test_fenced_block_requires_json_tag() -> None:
    assert fenced_block('```\n[{"title": "A"}]\n```') is None


def test_fenced_block_wins_over_bracketed_prose() -> None:
    raw = 'See [1] and [{"x": 1}] here\n```json\n[{"title": "fenced"}]\n```\nmore [2]'
    assert locate_payload(raw) == '[{"title": "fenced"}]'


def test_fenced_block_takes_first_block() -> None:
    raw = '```json\n[{"a": 1}]\n```\n```json\n[{"b": 2}]\n```'
    assert locate_payload(raw) == '[{"a": 1}]'


def test_empty_fenced_block_is_returned_as_empty() -> None:
    assert locate_payload("```json\n```") == ""


# -- Bracket pair scan --


def test_object_array_start_skips_citation_markers() -> None:
    raw = 'prefix [1] more text [{"title": "t"}] trailing'
    assert object_array_start(raw) == raw.index('[{"')


def test_object_array_start_allows_whitespace_before_brace() -> None:
    raw = "text [ \n  {}]"
    assert object_array_start(raw) == 5


def test_object_array_start_none_found() -> None:
    assert object_array_start("only [1] and [2]") == -1


def test_bracket_scan_ignores_leading_citation() -> None:
    raw = 'prefix [1] more text [{"title":"t"}] trailing'
    assert locate_payload(raw) == '[{"title":"t"}]'


def test_bracket_scan_ends_at_last_bracket() -> None:
    raw = 'Intro [{"title": "a", "tags": ["x"]}] note [3]'
    # Trailing citations widen the span; the last "]" is a heuristic bound.
    assert locate_payload(raw) == '[{"title": "a", "tags": ["x"]}] note [3]'


# -- Naive fallback --


def test_naive_fallback_for_non_object_array() -> None:
    assert bracket_span('values: [1, 2, 3] done') == "[1, 2, 3]"


def test_naive_fallback_on_lone_citation() -> None:
    assert locate_payload("According to reports [1].") == "[1]"


def test_no_brackets_returns_none() -> None:
    assert locate_payload("The model refused to answer.") is None


def test_closing_before_opening_returns_none() -> None:
    assert locate_payload("oops ] then [") is None
