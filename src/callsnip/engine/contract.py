from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, Tuple, runtime_checkable

from callsnip.synthesis.model import Signature


class SymbolKind(StrEnum):
    FUNCTION = "function"
    METHOD = "method"
    CLASS = "class"
    ENUM = "enum"
    ENUM_MEMBER = "enum member"
    VARIABLE = "variable"
    PARAMETER = "parameter"
    INTERFACE = "interface"
    TYPE_ALIAS = "type"


@dataclass(frozen=True)
class Position:
    """Zero-based line and character, as exchanged with editors."""

    line: int
    character: int = 0


@dataclass(frozen=True)
class EngineSymbol:
    name: str
    kind: SymbolKind
    container: str = ""
    handle: object = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class SymbolDetail:
    name: str
    kind: SymbolKind
    modifiers: Tuple[str, ...] = ()
    display: str = ""
    documentation: str = ""


@runtime_checkable
class TypeEngine(Protocol):
    language_id: str

    def resolve_symbol(
        self,
        name: str,
        position: Position | None = None,
        parent: str | None = None,
    ) -> EngineSymbol | None: ...

    def call_signatures(self, symbol: EngineSymbol) -> Tuple[Signature, ...]: ...

    def describe(self, symbol: EngineSymbol) -> SymbolDetail: ...

    def visible_symbols(self, position: Position | None = None) -> Tuple[EngineSymbol, ...]: ...

    def member_symbols(
        self, parent: str, position: Position | None = None
    ) -> Tuple[EngineSymbol, ...]: ...
