from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Tuple

from callsnip.engine.contract import EngineSymbol, Position, SymbolDetail, SymbolKind, TypeEngine
from callsnip.synthesis.model import SnippetConfig
from callsnip.synthesis.synthesizer import build_snippet

_DEFAULT_CONFIG = SnippetConfig()

# Boxed, unsupported and fixed-width builtin types a checker reports but editors
# should not offer. A user symbol of the same name and another kind is kept.
IGNORED_COMPLETIONS: Mapping[str, SymbolKind] = MappingProxyType(
    {
        "Boolean": SymbolKind.INTERFACE,
        "Number": SymbolKind.INTERFACE,
        "String": SymbolKind.INTERFACE,
        "Function": SymbolKind.INTERFACE,
        "Object": SymbolKind.INTERFACE,
        "RegExp": SymbolKind.INTERFACE,
        "IArguments": SymbolKind.INTERFACE,
        "int8": SymbolKind.TYPE_ALIAS,
        "int16": SymbolKind.TYPE_ALIAS,
        "int32": SymbolKind.TYPE_ALIAS,
        "uint8": SymbolKind.TYPE_ALIAS,
        "uint16": SymbolKind.TYPE_ALIAS,
        "uint32": SymbolKind.TYPE_ALIAS,
    }
)


@dataclass(frozen=True)
class CompletionSnippet:
    detail: SymbolDetail
    snippet: str


def _is_offered(symbol: EngineSymbol) -> bool:
    if IGNORED_COMPLETIONS.get(symbol.name) is symbol.kind:
        return False
    return not symbol.name.startswith("_")


def completion_items(
    engine: TypeEngine,
    position: Position | None = None,
    parent: str | None = None,
) -> Tuple[EngineSymbol, ...]:
    if parent:
        candidates = engine.member_symbols(parent, position)
    else:
        candidates = engine.visible_symbols(position)
    symbols: List[EngineSymbol] = [symbol for symbol in candidates if _is_offered(symbol)]
    return tuple(symbols)


def resolve_completion(
    engine: TypeEngine,
    entry: str,
    label: str | None = None,
    position: Position | None = None,
    parent: str | None = None,
    config: SnippetConfig = _DEFAULT_CONFIG,
) -> CompletionSnippet | None:
    """Symbol details and call snippet for one completion entry.

    The entry is resolved by name first and then as a member of ``parent``.
    Returns ``None`` when neither resolves.
    """
    symbol = engine.resolve_symbol(entry, position, parent)
    if symbol is None:
        return None
    snippet = build_snippet(label or entry, engine.call_signatures(symbol), config)
    return CompletionSnippet(detail=engine.describe(symbol), snippet=snippet)
