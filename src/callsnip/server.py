from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Sequence
from urllib.parse import unquote, urlparse

from pygls.lsp.server import LanguageServer
from pydantic import ValidationError
from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    TEXT_DOCUMENT_COMPLETION,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    InsertTextFormat,
    MarkupContent,
    MarkupKind,
)

from callsnip import __version__
from callsnip.completion import completion_items, resolve_completion
from callsnip.config import merge_payload, snippet_config, snippet_defaults
from callsnip.engine import PythonSourceEngine, SymbolDetail, SymbolKind
from callsnip.engine import Position as SourcePosition
from callsnip.engine.snapshot import signature_from_snapshot
from callsnip.exceptions import NeverThrown
from callsnip.invariants import never
from callsnip.schema import (
    CompletionSnippetRequest,
    CompletionSnippetResponse,
    SnippetOptionsDTO,
    SnippetRequest,
    SnippetResponse,
    SymbolDetailDTO,
)
from callsnip.synthesis import Dialect, SnippetConfig, build_snippet

logger = logging.getLogger(__name__)

server = LanguageServer("callsnip", __version__)
BUILD_SNIPPET_COMMAND = "callsnip.buildSnippet"
COMPLETION_SNIPPET_COMMAND = "callsnip.completionSnippet"

_PARENT_RE = re.compile(r"([A-Za-z_][\w.]*)\.\w*$")
_COMPLETION_KINDS = {
    SymbolKind.FUNCTION: CompletionItemKind.Function,
    SymbolKind.METHOD: CompletionItemKind.Method,
    SymbolKind.CLASS: CompletionItemKind.Class,
    SymbolKind.ENUM: CompletionItemKind.Enum,
    SymbolKind.ENUM_MEMBER: CompletionItemKind.EnumMember,
    SymbolKind.VARIABLE: CompletionItemKind.Variable,
    SymbolKind.PARAMETER: CompletionItemKind.Variable,
}


def _require_payload(payload: object, *, command: str) -> dict[str, object]:
    if payload is None:
        never("missing command payload", command=command)
    if not isinstance(payload, dict):
        never(
            "invalid command payload type",
            command=command,
            payload_type=type(payload).__name__,
        )
    return payload


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def _workspace_root(ls: LanguageServer) -> Path | None:
    root = ls.workspace.root_path
    return Path(root) if root else None


def _snippet_config(
    ls: LanguageServer,
    options: SnippetOptionsDTO,
    *,
    default_dialect: Dialect,
) -> SnippetConfig:
    defaults = snippet_defaults(root=_workspace_root(ls))
    overrides = options.model_dump(include={"dialect", "numbered_placeholders", "special_literals"})
    return snippet_config(merge_payload(overrides, defaults), default_dialect=default_dialect)


def _document_source(ls: LanguageServer, path: Path) -> str:
    for uri, document in ls.workspace.text_documents.items():
        if _uri_to_path(uri) == path:
            return document.source
    return path.read_text(encoding="utf-8")


def _detail_dto(detail: SymbolDetail) -> SymbolDetailDTO:
    return SymbolDetailDTO(
        name=detail.name,
        kind=str(detail.kind),
        modifiers=list(detail.modifiers),
        display=detail.display,
        documentation=detail.documentation,
    )


def _parent_at(lines: Sequence[str], line: int, character: int) -> str | None:
    if line < 0 or line >= len(lines):
        return None
    match = _PARENT_RE.search(lines[line][:character])
    if match is None:
        return None
    return match.group(1)


@server.command(BUILD_SNIPPET_COMMAND)
def execute_build_snippet(ls: LanguageServer, payload: dict | None = None) -> dict:
    payload = _require_payload(payload, command=BUILD_SNIPPET_COMMAND)
    try:
        request = SnippetRequest.model_validate(payload)
    except ValidationError as exc:
        return SnippetResponse(errors=[str(exc)]).model_dump()
    try:
        config = _snippet_config(ls, request, default_dialect=Dialect.TYPESCRIPT)
    except NeverThrown as exc:
        return SnippetResponse(errors=[str(exc)]).model_dump()
    signatures = [signature_from_snapshot(dto) for dto in request.symbol.call_signatures]
    snippet = build_snippet(request.label, signatures, config)
    return SnippetResponse(snippet=snippet).model_dump()


@server.command(COMPLETION_SNIPPET_COMMAND)
def execute_completion_snippet(ls: LanguageServer, payload: dict | None = None) -> dict:
    payload = _require_payload(payload, command=COMPLETION_SNIPPET_COMMAND)
    try:
        request = CompletionSnippetRequest.model_validate(payload)
    except ValidationError as exc:
        return CompletionSnippetResponse(errors=[str(exc)]).model_dump()
    try:
        config = _snippet_config(ls, request, default_dialect=Dialect.PYTHON)
    except NeverThrown as exc:
        return CompletionSnippetResponse(errors=[str(exc)]).model_dump()
    path = Path(request.path)
    try:
        source = _document_source(ls, path)
    except OSError as exc:
        return CompletionSnippetResponse(errors=[f"cannot read {path}: {exc}"]).model_dump()
    engine = PythonSourceEngine(source, path)
    position = None
    if request.line is not None:
        position = SourcePosition(request.line, request.character)
    result = resolve_completion(
        engine,
        request.entry,
        request.label,
        position,
        request.parent,
        config,
    )
    if result is None:
        logger.debug("no symbol for %s in %s", request.entry, path)
        return CompletionSnippetResponse().model_dump()
    return CompletionSnippetResponse(
        detail=_detail_dto(result.detail),
        snippet=result.snippet,
    ).model_dump()


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(trigger_characters=["."], resolve_provider=True),
)
def completions(ls: LanguageServer, params: CompletionParams) -> CompletionList:
    uri = params.text_document.uri
    document = ls.workspace.get_text_document(uri)
    engine = PythonSourceEngine(document.source, _uri_to_path(uri))
    line = params.position.line
    character = params.position.character
    parent = _parent_at(document.lines, line, character)
    items = [
        CompletionItem(
            label=symbol.name,
            kind=_COMPLETION_KINDS.get(symbol.kind),
            data={"uri": uri, "line": line, "character": character, "parent": parent},
        )
        for symbol in completion_items(engine, SourcePosition(line, character), parent)
    ]
    return CompletionList(is_incomplete=False, items=items)


@server.feature(COMPLETION_ITEM_RESOLVE)
def resolve_completion_item(ls: LanguageServer, item: CompletionItem) -> CompletionItem:
    data = item.data if isinstance(item.data, dict) else {}
    uri = data.get("uri")
    if not uri:
        return item
    document = ls.workspace.get_text_document(str(uri))
    engine = PythonSourceEngine(document.source, _uri_to_path(str(uri)))
    position = SourcePosition(int(data.get("line", 0)), int(data.get("character", 0)))
    try:
        config = _snippet_config(ls, SnippetOptionsDTO(), default_dialect=Dialect.PYTHON)
    except NeverThrown as exc:
        logger.warning("invalid snippet configuration: %s", exc)
        return item
    result = resolve_completion(
        engine,
        item.label,
        item.label,
        position,
        data.get("parent"),
        config,
    )
    if result is None:
        logger.debug("no symbol for completion item %s", item.label)
        return item
    item.insert_text = result.snippet
    item.insert_text_format = InsertTextFormat.Snippet
    item.detail = result.detail.display
    if result.detail.documentation:
        item.documentation = MarkupContent(
            kind=MarkupKind.PlainText,
            value=result.detail.documentation,
        )
    return item


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server over stdio."""
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
