from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping, Tuple, TypeAlias


class PrimitiveKind(StrEnum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    VOID = "void"


class ReturnKind(StrEnum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    OTHER = "other"


class Dialect(StrEnum):
    TYPESCRIPT = "typescript"
    PYTHON = "python"


@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind


@dataclass(frozen=True)
class EnumLiteralType:
    enum_name: str
    first_member: str | None = None


@dataclass(frozen=True)
class AnonymousFunctionType:
    parameter_list_text: str
    return_kind: ReturnKind = ReturnKind.OTHER


@dataclass(frozen=True)
class ArrayOrTupleType:
    is_tuple: bool = False


@dataclass(frozen=True)
class OtherType:
    printed: str = ""


TypeDescriptor: TypeAlias = (
    PrimitiveType | EnumLiteralType | AnonymousFunctionType | ArrayOrTupleType | OtherType
)


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeDescriptor = field(default_factory=OtherType)
    documentation: str = ""


@dataclass(frozen=True)
class Signature:
    parameters: Tuple[Parameter, ...] = ()
    min_argument_count: int = 0
    return_type: TypeDescriptor = field(default_factory=OtherType)

    @property
    def required_parameters(self) -> Tuple[Parameter, ...]:
        count = max(0, min(self.min_argument_count, len(self.parameters)))
        return self.parameters[:count]


DEFAULT_IMAGE_LITERAL = """
    . . . . .
    . . . . .
    . . # . .
    . . . . .
    . . . . .
    """

DEFAULT_SPECIAL_LITERALS: Mapping[str, str] = MappingProxyType(
    {"leds": DEFAULT_IMAGE_LITERAL}
)


@dataclass(frozen=True)
class SnippetConfig:
    dialect: Dialect = Dialect.TYPESCRIPT
    numbered_placeholders: bool = True
    special_literals: Mapping[str, str] = field(default_factory=lambda: DEFAULT_SPECIAL_LITERALS)


def strip_return_annotation(signature_text: str) -> str:
    """Drop the trailing return annotation from a printed call signature.

    ``(a: number): number`` and ``(a: int) -> int`` both become ``(a: ...)``.
    The parameter list is the balanced group opened by the first ``(``; an
    unbalanced text is returned stripped but otherwise unchanged.
    """
    text = signature_text.strip()
    if not text.startswith("("):
        return text
    depth = 0
    for idx, char in enumerate(text):
        if char in "([{<":
            depth += 1
        elif char in ")]}>" and not (char == ">" and text[idx - 1] in "=-"):
            depth -= 1
            if depth == 0:
                return text[: idx + 1]
    return text
