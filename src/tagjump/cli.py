"""CLI entrypoint using Typer."""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import typer

from tagjump.core.config import AppConfig
from tagjump.core.errors import TagJumpError
from tagjump.tags import TagsEngine
from tagjump.tools.ctags_tools import GenerationArgs

app = typer.Typer(help="Jump to C/C++ definitions through a ctags index")


def _engine(config: str, root: Optional[str]) -> TagsEngine:
    try:
        return TagsEngine(AppConfig.load(config, root=root))
    except TagJumpError as exc:
        raise _fail(exc) from exc


def _fail(exc: Exception) -> typer.Exit:
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command()
def lookup(
    symbol: str = typer.Argument(..., help="Symbol to look up"),
    config: str = typer.Option("tagjump.yaml", help="Path to config YAML"),
    root: Optional[str] = typer.Option(None, help="Override workspace root"),
    language: Optional[str] = typer.Option(None, help="Language id (c, cpp, ...)"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    # Demo: tagjump lookup main --root /path/to/project
    # Purpose: print definition locations (1-based lines) for a symbol.
    logging.basicConfig(level=logging.WARNING)
    engine = _engine(config, root)
    try:
        engine.reindex()
    except TagJumpError as exc:
        raise _fail(exc) from exc
    if language:
        locations = engine.definitions(language, symbol)
    else:
        locations = engine.lookup(symbol)
    if as_json:
        payload = [{"path": str(loc.path), "lineno": loc.lineno} for loc in locations]
        typer.echo(json.dumps(payload, indent=2))
        return
    if not locations:
        typer.echo(f'"{symbol}" has no matches.')
        raise typer.Exit(code=1)
    for loc in locations:
        typer.echo(f"{loc.path}:{loc.lineno + 1}")


@app.command()
def reindex(
    config: str = typer.Option("tagjump.yaml", help="Path to config YAML"),
    root: Optional[str] = typer.Option(None, help="Override workspace root"),
) -> None:
    # Demo: tagjump reindex --root /path/to/project
    # Purpose: check that the existing tags file parses, without running ctags.
    logging.basicConfig(level=logging.INFO)
    engine = _engine(config, root)
    try:
        snapshot = engine.reindex()
    except TagJumpError as exc:
        raise _fail(exc) from exc
    typer.echo(
        f"Tags index loaded: symbols={len(snapshot.index)} records={snapshot.index.record_count}"
    )


@app.command()
def regenerate(
    config: str = typer.Option("tagjump.yaml", help="Path to config YAML"),
    root: Optional[str] = typer.Option(None, help="Override workspace root"),
    language: List[str] = typer.Option(
        [], "--language", "-l", help="ctags language (repeatable, default from config)"
    ),
    exclude: List[str] = typer.Option(
        [], "--exclude", "-e", help="Exclude glob (repeatable, default from config)"
    ),
    timeout: Optional[float] = typer.Option(None, help="Kill ctags after this many seconds"),
) -> None:
    # Demo: tagjump regenerate -l C -l C++ -e build -e third_party
    # Purpose: run ctags and load the fresh index.
    logging.basicConfig(level=logging.INFO)
    engine = _engine(config, root)
    gen_cfg = engine.config.generator
    args = GenerationArgs.build(
        language or gen_cfg.languages,
        exclude or gen_cfg.exclude_patterns,
    )
    typer.echo(f"Generating CTags index ({args.describe()})")
    try:
        snapshot = engine.regenerate(args, timeout_sec=timeout)
    except TagJumpError as exc:
        raise _fail(exc) from exc
    typer.echo(
        f"Tags index generated: symbols={len(snapshot.index)} records={snapshot.index.record_count}"
    )


@app.command()
def status(
    config: str = typer.Option("tagjump.yaml", help="Path to config YAML"),
    root: Optional[str] = typer.Option(None, help="Override workspace root"),
) -> None:
    # Demo: tagjump status --root /path/to/project
    # Purpose: show what the tags file on disk currently provides.
    engine = _engine(config, root)
    try:
        engine.reindex()
    except TagJumpError as exc:
        typer.echo(f"no usable index: {exc}", err=True)
    typer.echo(json.dumps(engine.status(), indent=2))


if __name__ == "__main__":
    app()
