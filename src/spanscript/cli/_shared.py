"""Shared helpers for CLI commands."""

from __future__ import annotations

import contextlib
import json
import sys
from collections.abc import AsyncIterator
from pathlib import Path

import click

from spanscript.adapters._base import AdapterError, ConnectionConfig, DatabaseAdapter
from spanscript.adapters._registry import get_adapter, resolve_alias
from spanscript.connections import get_connection

DB_OPTION_HELP = "Connection name or type:key=val,key=val."


def resolve_script(sql: str | None, from_stdin: bool, file: str | None = None) -> str:
    """Resolve a script from positional argument, --file or stdin. Exactly one source required."""
    sources = [s for s in (sql, file, from_stdin or None) if s]
    if len(sources) > 1:
        raise click.UsageError("Provide SQL as an argument, --file or --from-stdin, not several.")
    if file:
        text = Path(file).read_text()
        if not text.strip():
            raise click.UsageError(f"--file: {file} is empty.")
        return text
    if from_stdin:
        if sys.stdin.isatty():
            raise click.UsageError("--from-stdin requires piped input (stdin is a terminal).")
        text = sys.stdin.read()
        if not text.strip():
            raise click.UsageError("--from-stdin: stdin was empty.")
        return text
    if not sql:
        raise click.UsageError("Missing argument 'SQL'. Provide SQL, --file or --from-stdin.")
    return sql


def _inline_params(params_str: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in filter(None, (p.strip() for p in params_str.split(","))):
        key, sep, val = pair.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected key=value pair, got '{pair}'", param_hint="'--db'")
        params[key.strip()] = val.strip()
    return params


def parse_db(value: str) -> ConnectionConfig:
    """Turn a --db value into a config.

    A saved connection name wins; otherwise the value must be inline,
    ``driver:key=val,key=val`` where driver is any alias of a known driver.
    """
    saved = get_connection(value)
    if saved is not None:
        return saved

    driver, sep, params_str = value.partition(":")
    if not sep:
        raise click.BadParameter(
            f"Connection '{value}' not found in ~/.spanscript/connections.toml "
            "and not an inline 'driver:key=val' value.\n"
            f"  Add it: spanscript connect add {value} <driver> <key>=<value>",
            param_hint="'--db'",
        )
    try:
        db_type = resolve_alias(driver)
    except AdapterError as e:
        raise click.BadParameter(str(e), param_hint="'--db'") from e
    return ConnectionConfig(name=driver, db_type=db_type, params=_inline_params(params_str))


def resolve_db(value: str, output_format: str) -> ConnectionConfig:
    try:
        return parse_db(value)
    except click.BadParameter as e:
        fail(output_format, e.format_message())


@contextlib.asynccontextmanager
async def open_adapter(config: ConnectionConfig) -> AsyncIterator[DatabaseAdapter]:
    """Connect an adapter for ``config`` and close it on exit."""
    adapter = get_adapter(config.db_type)()
    await adapter.connect(config)
    try:
        yield adapter
    finally:
        await adapter.close()


def fail(output_format: str, message: str, **extra: object) -> None:
    """Report an error in the requested format and exit with status 1."""
    if output_format == "json":
        click.echo(json.dumps({"error": message, **extra}, indent=2, default=str))
    else:
        click.echo(f"error: {message}", err=True)
    raise SystemExit(1)
