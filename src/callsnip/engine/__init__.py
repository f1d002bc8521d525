from callsnip.engine.contract import (
    EngineSymbol,
    Position,
    SymbolDetail,
    SymbolKind,
    TypeEngine,
)
from callsnip.engine.python_engine import PythonSourceEngine
from callsnip.engine.snapshot import SnapshotEngine, classify_type, signature_from_snapshot

__all__ = [
    "EngineSymbol",
    "Position",
    "PythonSourceEngine",
    "SnapshotEngine",
    "SymbolDetail",
    "SymbolKind",
    "TypeEngine",
    "classify_type",
    "signature_from_snapshot",
]
