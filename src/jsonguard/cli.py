"""jsonguard CLI — entry point.

Commands:
    jsonguard check   <file>   Parse and validate one JSON document
    jsonguard ndjson  <file>   Parse and validate an NDJSON stream
    jsonguard schemas          List registered schema names
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from .config import settings
from .errors import JsonGuardError
from .parsers.json_parser import parse_json_with_result, safe_json_parse
from .parsers.ndjson import iter_lines, stream_ndjson
from .parsers.options import JsonParseOptions
from .schemas.base import Schema
from .schemas.registry import default_registry

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _to_jsonable(value: Any) -> Any:
    """Schema output may be pydantic models; dump them the way they arrived."""
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True)
    return value


def _resolve_schema(name: str) -> Schema[Any] | None:
    if not name:
        return None
    default_registry.discover()
    schema = default_registry.get(name)
    if schema is None:
        known = ", ".join(default_registry.names()) or "none"
        raise click.BadParameter(f"Unknown schema {name!r} (known: {known})", param_hint="--schema")
    return schema


def _options(max_size: int | None, allow_prototype: bool) -> JsonParseOptions:
    base = settings.parse_options()
    return JsonParseOptions(
        max_size=max_size if max_size is not None else base.max_size,
        allow_prototype=allow_prototype or base.allow_prototype,
    )


def _read(file: Path) -> str:
    """Decode strictly; malformed UTF-8 is rejected like any other bad input."""
    try:
        return file.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        err_console.print(f"[red]✗ {file.name}: {escape(str(exc))}[/red]", soft_wrap=True)
        sys.exit(1)


def _guard_options(func: Any) -> Any:
    func = click.option(
        "--allow-prototype", is_flag=True,
        help="Accept top-level __proto__/constructor/prototype keys.",
    )(func)
    func = click.option(
        "--max-size", type=click.IntRange(min=0), default=None,
        help=f"Byte ceiling per document/line (default: {settings.max_size}).",
    )(func)
    func = click.option("--schema", "-s", "schema_name", default="", help="Registered schema to validate against.")(func)
    return func


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="jsonguard")
@click.option("--verbose", "-v", is_flag=True, help="Log guard decisions to stderr.")
def main(verbose: bool) -> None:
    """jsonguard — size-limited, pollution-safe JSON/NDJSON parsing."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_guard_options
@click.option(
    "--output", "-o", "output_fmt", default="json",
    type=click.Choice(["json", "table"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
def check(
    file: Path,
    schema_name: str,
    max_size: int | None,
    allow_prototype: bool,
    output_fmt: str,
) -> None:
    """Parse one JSON document and print it if every guard passes.

    \b
    Examples:
      jsonguard check package.json --schema npm-manifest
      jsonguard check response.json --max-size 1048576 --output table
    """
    schema = _resolve_schema(schema_name)
    opts = _options(max_size, allow_prototype)

    try:
        value = safe_json_parse(_read(file), schema, opts)
    except JsonGuardError as exc:
        err_console.print(f"[red]✗ {file.name}: {escape(str(exc))}[/red]", soft_wrap=True)
        sys.exit(1)

    value = _to_jsonable(value)
    if output_fmt == "table":
        from .visualization.tables import print_records_table

        print_records_table([value], title=file.name, console=console)
    else:
        click.echo(json.dumps(value, indent=2, ensure_ascii=False, default=str))
    err_console.print(f"[green]✓ {file.name} accepted[/green]")


# ── ndjson ───────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_guard_options
@click.option(
    "--output", "-o", "output_fmt", default="stream",
    type=click.Choice(["stream", "json", "table"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max records to display (0 = all).")
@click.option("--keep-going", "-k", is_flag=True, help="Report every bad line instead of stopping at the first.")
def ndjson(
    file: Path,
    schema_name: str,
    max_size: int | None,
    allow_prototype: bool,
    output_fmt: str,
    limit: int,
    keep_going: bool,
) -> None:
    """Parse an NDJSON file line by line.

    Stops at the first rejected line unless --keep-going is given.

    \b
    Examples:
      jsonguard ndjson events.ndjson
      jsonguard ndjson packuments.ndjson --schema npm-packument --keep-going
      jsonguard ndjson events.ndjson --output table --limit 20
    """
    schema = _resolve_schema(schema_name)
    opts = _options(max_size, allow_prototype)
    text = _read(file)

    records: list[Any] = []
    errors: list[tuple[int, str]] = []

    if keep_going:
        for line_number, line in iter_lines(text):
            result = parse_json_with_result(line, schema, opts)
            if result.success:
                records.append(_to_jsonable(result.data))
            else:
                errors.append((line_number, result.error))
            if limit and len(records) >= limit:
                break
    else:
        try:
            for record in stream_ndjson(text, schema, opts):
                records.append(_to_jsonable(record))
                if limit and len(records) >= limit:
                    break
        except JsonGuardError as exc:
            _emit(records, output_fmt, file)
            err_console.print(f"[red]✗ {escape(str(exc))}[/red]", soft_wrap=True)
            sys.exit(1)

    _emit(records, output_fmt, file)

    if errors:
        from .visualization.tables import print_line_errors_table

        print_line_errors_table(errors, console=err_console)
    err_console.print(
        f"[dim]{len(records)} record{'s' if len(records) != 1 else ''} accepted, "
        f"{len(errors)} rejected from {file.name}[/dim]",
        soft_wrap=True,
    )
    if errors:
        sys.exit(1)


def _emit(records: list[Any], output_fmt: str, file: Path) -> None:
    if output_fmt == "table":
        from .visualization.tables import print_records_table

        print_records_table(records, title=file.name, console=console)
    elif output_fmt == "json":
        click.echo(json.dumps(records, indent=2, ensure_ascii=False, default=str))
    else:
        for record in records:
            click.echo(json.dumps(record, ensure_ascii=False, default=str))


# ── schemas ──────────────────────────────────────────────────────────────────


@main.command()
def schemas() -> None:
    """List schemas available to --schema."""
    loaded = default_registry.discover()
    logger.debug("Discovered %d schema(s) from entry points", loaded)
    for name in default_registry.names():
        click.echo(name)


if __name__ == "__main__":
    main()
