"""Placeholder and literal spellings for each snippet dialect."""

from __future__ import annotations

import re
from typing import List

from callsnip.invariants import never
from callsnip.synthesis.examples import string_literal
from callsnip.synthesis.model import (
    AnonymousFunctionType,
    Dialect,
    PrimitiveKind,
    ReturnKind,
)

_PLACEHOLDER_RE = re.compile(r"\$\{\d+:((?:\\.|[^}\\])*)\}|\$\{\d+\}|\$\d+")
_SNIPPET_ESCAPE_RE = re.compile(r"\\([$}\\])")


def placeholder(name: str, tab_stop: int = 1) -> str:
    return f"${{{tab_stop}:{name}}}"


def strip_placeholders(snippet: str) -> str:
    """Reduce snippet syntax to the plain text it would insert."""
    text = _PLACEHOLDER_RE.sub(lambda match: match.group(1) or "", snippet)
    return _SNIPPET_ESCAPE_RE.sub(r"\1", text)


def primitive_literal(dialect: Dialect, kind: PrimitiveKind) -> str | None:
    if kind is PrimitiveKind.NUMBER:
        return "0"
    if kind is PrimitiveKind.STRING:
        return string_literal("")
    if kind is PrimitiveKind.BOOLEAN:
        return "False" if dialect is Dialect.PYTHON else "false"
    return None


def block_literal(dialect: Dialect, text: str) -> str:
    if dialect is Dialect.PYTHON:
        return f'"""{text}"""'
    return f"`{text}`"


def empty_array_literal(dialect: Dialect, is_tuple: bool) -> str:
    if dialect is Dialect.PYTHON and is_tuple:
        return "()"
    return "[]"


def enum_member_literal(enum_name: str, member: str) -> str:
    return f"{enum_name}.{member}"


def _split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for idx, char in enumerate(text):
        if char in "([{<":
            depth += 1
        elif char in ")]}>" and not (char == ">" and idx and text[idx - 1] in "=-"):
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def _lambda_parameters(parameter_list_text: str) -> str:
    text = parameter_list_text.strip()
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1]
    names: List[str] = []
    for part in _split_top_level(text):
        name = part.split(":", 1)[0].split("=", 1)[0].strip().rstrip("?")
        if name.startswith("..."):
            name = "*" + name[3:]
        if name:
            names.append(name)
    return ", ".join(names)


def _return_value(dialect: Dialect, kind: ReturnKind) -> str | None:
    if kind is ReturnKind.NUMBER:
        return "0"
    if kind is ReturnKind.STRING:
        return string_literal("")
    if kind is ReturnKind.BOOLEAN:
        return "False" if dialect is Dialect.PYTHON else "false"
    return None


def function_literal(dialect: Dialect, function_type: AnonymousFunctionType) -> str:
    value = _return_value(dialect, function_type.return_kind)
    if dialect is Dialect.PYTHON:
        parameters = _lambda_parameters(function_type.parameter_list_text)
        head = f"lambda {parameters}:" if parameters else "lambda:"
        return f"{head} {value if value is not None else 'None'}"
    if dialect is Dialect.TYPESCRIPT:
        body = f"return {value};$0" if value is not None else "$0"
        return f"function {function_type.parameter_list_text} {{\n\t{body}\n}}"
    never("unknown snippet dialect", dialect=dialect)
