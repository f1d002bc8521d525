from __future__ import annotations

from callsnip.synthesis.examples import extract_example, string_literal, tokenize_examples


def test_extract_example_returns_first_token() -> None:
    assert extract_example("the speed, eg: 5, 6, 7") == "5"
    assert tokenize_examples("the speed, eg: 5, 6, 7") == ["5", "6", "7"]


def test_extract_example_is_stable_across_calls() -> None:
    doc = "eg: 5, 6, 7"
    assert extract_example(doc) == extract_example(doc) == "5"


def test_extract_example_quoted_tokens_become_string_literals() -> None:
    assert extract_example('text to show, eg: "Hello", "Bye"') == '"Hello"'
    assert extract_example("eg: 'Hi there'") == '"Hi there"'
    assert tokenize_examples("eg: 'a' \"b\" c") == ['"a"', '"b"', "c"]


def test_extract_example_escapes_embedded_quotes() -> None:
    assert extract_example("eg: 'say \"hi\"'") == '"say \\"hi\\""'
    assert string_literal("a\\b") == '"a\\\\b"'


def test_extract_example_marker_variants() -> None:
    assert extract_example("EG. 42") == "42"
    assert extract_example("eg.: 42") == "42"
    assert extract_example("eg 3") == "3"
    assert extract_example("Eg:Direction.Left") == "Direction.Left"


def test_extract_example_reads_token_on_next_line() -> None:
    assert extract_example("angle in degrees eg:\n    90 180") == "90"


def test_extract_example_stops_at_end_of_token_line() -> None:
    assert tokenize_examples("eg: 1 2\nmore: 3") == ["1", "2"]


def test_extract_example_absent_marker() -> None:
    assert extract_example("") is None
    assert extract_example("the speed of the motor") is None
    assert extract_example("a leg: 5") is None
    assert extract_example("eggs: 5") is None


def test_extract_example_marker_without_token() -> None:
    assert extract_example("eg:") is None
    assert extract_example("eg: , ,") is None
    assert tokenize_examples("eg:   ") == []


def test_extract_example_unterminated_quote_is_bare() -> None:
    assert extract_example('eg: "abc') == '"abc'
