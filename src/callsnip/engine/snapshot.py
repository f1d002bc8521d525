"""Type engine over symbol snapshots sent by an external checker.

The checker resolves the symbol and serializes its call shapes as
``SymbolSnapshotDTO`` payloads. Classification into the closed descriptor
union happens here, once per parameter.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from callsnip.engine.contract import (
    EngineSymbol,
    Position,
    SymbolDetail,
    SymbolKind,
    TypeEngine,
)
from callsnip.schema import CallSignatureDTO, SymbolSnapshotDTO, TypeDTO
from callsnip.synthesis.model import (
    AnonymousFunctionType,
    ArrayOrTupleType,
    EnumLiteralType,
    OtherType,
    Parameter,
    PrimitiveKind,
    PrimitiveType,
    ReturnKind,
    Signature,
    TypeDescriptor,
    strip_return_annotation,
)

_PRIMITIVE_KINDS = {kind.value: kind for kind in PrimitiveKind}
_RETURN_KINDS = {
    PrimitiveKind.NUMBER: ReturnKind.NUMBER,
    PrimitiveKind.STRING: ReturnKind.STRING,
    PrimitiveKind.BOOLEAN: ReturnKind.BOOLEAN,
}
_ARRAY_SUFFIX = "[]"


def classify_type(dto: TypeDTO | None) -> TypeDescriptor:
    if dto is None:
        return OtherType()
    if dto.kind == "primitive":
        kind = _PRIMITIVE_KINDS.get((dto.intrinsic or dto.printed).strip())
        if kind is None:
            return OtherType(dto.printed)
        return PrimitiveType(kind)
    if dto.kind == "enum":
        enum_name = dto.enum_name or dto.printed
        if not enum_name:
            return OtherType(dto.printed)
        first = dto.enum_members[0] if dto.enum_members else None
        return EnumLiteralType(enum_name, first)
    if dto.kind == "function" or (dto.kind == "object" and dto.anonymous):
        if not dto.call_signatures:
            return OtherType(dto.printed)
        signature = dto.call_signatures[0]
        return AnonymousFunctionType(
            strip_return_annotation(signature.text) or "()",
            return_kind(signature.return_type),
        )
    if dto.kind == "object":
        if dto.is_tuple or dto.printed.strip().endswith(_ARRAY_SUFFIX):
            return ArrayOrTupleType(is_tuple=dto.is_tuple)
    return OtherType(dto.printed)


def return_kind(dto: TypeDTO | None) -> ReturnKind:
    descriptor = classify_type(dto)
    if isinstance(descriptor, PrimitiveType):
        return _RETURN_KINDS.get(descriptor.kind, ReturnKind.OTHER)
    return ReturnKind.OTHER


def signature_from_snapshot(dto: CallSignatureDTO) -> Signature:
    parameters = tuple(
        Parameter(param.name, classify_type(param.type), param.documentation)
        for param in dto.parameters
    )
    return Signature(parameters, dto.min_argument_count, classify_type(dto.return_type))


def _symbol_kind(value: str) -> SymbolKind:
    try:
        return SymbolKind(value)
    except ValueError:
        return SymbolKind.VARIABLE


class SnapshotEngine(TypeEngine):
    language_id = "snapshot"

    def __init__(self, snapshots: Iterable[SymbolSnapshotDTO]) -> None:
        self.snapshots: Tuple[SymbolSnapshotDTO, ...] = tuple(snapshots)

    def _symbol(self, snapshot: SymbolSnapshotDTO) -> EngineSymbol:
        return EngineSymbol(
            snapshot.name,
            _symbol_kind(snapshot.kind),
            snapshot.container,
            snapshot,
        )

    def resolve_symbol(
        self,
        name: str,
        position: Position | None = None,
        parent: str | None = None,
    ) -> EngineSymbol | None:
        for snapshot in self.snapshots:
            if snapshot.name == name and not snapshot.container:
                return self._symbol(snapshot)
        if not parent:
            return None
        for snapshot in self.snapshots:
            if snapshot.name == name and snapshot.container == parent:
                return self._symbol(snapshot)
        return None

    def call_signatures(self, symbol: EngineSymbol) -> Tuple[Signature, ...]:
        snapshot = symbol.handle
        if not isinstance(snapshot, SymbolSnapshotDTO):
            return ()
        return tuple(signature_from_snapshot(dto) for dto in snapshot.call_signatures)

    def describe(self, symbol: EngineSymbol) -> SymbolDetail:
        snapshot = symbol.handle
        if not isinstance(snapshot, SymbolSnapshotDTO):
            return SymbolDetail(symbol.name, symbol.kind)
        return SymbolDetail(
            name=snapshot.name,
            kind=symbol.kind,
            modifiers=tuple(snapshot.modifiers),
            display=snapshot.display or snapshot.name,
            documentation=snapshot.documentation,
        )

    def visible_symbols(self, position: Position | None = None) -> Tuple[EngineSymbol, ...]:
        symbols: List[EngineSymbol] = [
            self._symbol(snapshot) for snapshot in self.snapshots if not snapshot.container
        ]
        return tuple(symbols)

    def member_symbols(
        self, parent: str, position: Position | None = None
    ) -> Tuple[EngineSymbol, ...]:
        return tuple(
            self._symbol(snapshot) for snapshot in self.snapshots if snapshot.container == parent
        )
