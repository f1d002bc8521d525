"""Inline example annotations in parameter documentation.

A parameter's documentation may carry an example value for snippet
synthesis::

    :param speed: the motor speed, eg: 50
    :param text: what to show, eg: "Hello", "Bye"

Grammar (case-insensitive)::

    annotation := WORD_BOUNDARY "eg" ["."] [":"] SEP* token (SEP+ token)*
    token      := '"' chars '"' | "'" chars "'" | bare
    bare       := (any char except whitespace and ",")+
    SEP        := whitespace | ","

The marker must be followed by a colon or whitespace. The token list starts at
the first non-blank character after the marker and ends with that line.
"""

from __future__ import annotations

import re
from typing import List

_MARKER_RE = re.compile(r"\beg\.?(?::|(?=\s))", re.IGNORECASE)
_SEPARATORS = " \t\r\f\v,"
_QUOTES = "\"'"


def string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _annotation_tail(documentation: str) -> str | None:
    match = _MARKER_RE.search(documentation)
    if match is None:
        return None
    tail = documentation[match.end() :].lstrip()
    return tail.split("\n", 1)[0]


def _scan_token(text: str, start: int) -> tuple[str, int]:
    """Read one token at ``start``; returns the rendered token and the end index."""
    char = text[start]
    if char in _QUOTES:
        close = text.find(char, start + 1)
        if close != -1:
            return string_literal(text[start + 1 : close]), close + 1
    end = start
    while end < len(text) and not text[end].isspace() and text[end] != ",":
        end += 1
    return text[start:end], end


def tokenize_examples(documentation: str) -> List[str]:
    """Return every example token of the first annotation, in order."""
    if not documentation:
        return []
    tail = _annotation_tail(documentation)
    if tail is None:
        return []
    tokens: List[str] = []
    idx = 0
    while idx < len(tail):
        if tail[idx] in _SEPARATORS:
            idx += 1
            continue
        token, idx = _scan_token(tail, idx)
        tokens.append(token)
    return tokens


def extract_example(documentation: str) -> str | None:
    """First example token of the documentation, or ``None`` when absent."""
    tokens = tokenize_examples(documentation)
    if not tokens:
        return None
    return tokens[0]
