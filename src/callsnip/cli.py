from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError

from callsnip.completion import resolve_completion
from callsnip.config import merge_payload, snippet_config, snippet_defaults
from callsnip.engine import Position, PythonSourceEngine
from callsnip.engine.snapshot import signature_from_snapshot
from callsnip.exceptions import NeverThrown
from callsnip.schema import SymbolSnapshotDTO
from callsnip.synthesis import Dialect, SnippetConfig, build_snippet

app = typer.Typer(add_completion=False)


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=2)


def _load_snippet_config(
    *,
    root: Path,
    config: Optional[Path],
    dialect: Optional[str],
    default_dialect: Dialect,
) -> SnippetConfig:
    defaults = snippet_defaults(root=root, config_path=config)
    try:
        return snippet_config(
            merge_payload({"dialect": dialect}, defaults),
            default_dialect=default_dialect,
        )
    except NeverThrown as exc:
        _fail(f"{exc}: {exc.env_dict.get('dialect', '')}")


def _read_payload(source: Path) -> str:
    if str(source) == "-":
        return sys.stdin.read()
    try:
        return source.read_text(encoding="utf-8")
    except OSError as exc:
        _fail(f"cannot read {source}: {exc}")


@app.command("snippet")
def snippet(
    path: Path = typer.Argument(..., help="Python source file."),
    name: str = typer.Argument(..., help="Symbol to complete."),
    label: Optional[str] = typer.Option(None, "--label"),
    parent: Optional[str] = typer.Option(None, "--parent"),
    line: Optional[int] = typer.Option(None, "--line", help="Zero-based line."),
    character: int = typer.Option(0, "--character"),
    dialect: Optional[str] = typer.Option(None, "--dialect"),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print the call snippet for a symbol of a Python file."""
    snippet_settings = _load_snippet_config(
        root=root, config=config, dialect=dialect, default_dialect=Dialect.PYTHON
    )
    try:
        engine = PythonSourceEngine.from_path(path)
    except OSError as exc:
        _fail(f"cannot read {path}: {exc}")
    position = Position(line, character) if line is not None else None
    result = resolve_completion(engine, name, label, position, parent, snippet_settings)
    if result is None:
        _fail(f"symbol not found: {name}")
    typer.echo(result.snippet)


@app.command("build")
def build(
    snapshot: Path = typer.Argument(..., help="Symbol snapshot JSON, or - for stdin."),
    label: Optional[str] = typer.Option(None, "--label"),
    dialect: Optional[str] = typer.Option(None, "--dialect"),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Print the call snippet for a symbol snapshot."""
    snippet_settings = _load_snippet_config(
        root=root, config=config, dialect=dialect, default_dialect=Dialect.TYPESCRIPT
    )
    raw = _read_payload(snapshot)
    try:
        symbol = SymbolSnapshotDTO.model_validate(json.loads(raw))
    except json.JSONDecodeError as exc:
        _fail(f"invalid JSON: {exc}")
    except ValidationError as exc:
        _fail(str(exc))
    signatures = [signature_from_snapshot(dto) for dto in symbol.call_signatures]
    typer.echo(build_snippet(label or symbol.name, signatures, snippet_settings))


@app.command("lsp")
def lsp() -> None:
    """Run the language server over stdio."""
    from callsnip.server import start

    start()


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
