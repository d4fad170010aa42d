"""The `connect` command group: named connections in ~/.spanscript/connections.toml."""

from __future__ import annotations

import asyncio
from typing import NoReturn

import click

from spanscript.adapters._base import AdapterError, ConnectionConfig
from spanscript.adapters._registry import DRIVER_ALIASES
from spanscript.cli._shared import open_adapter
from spanscript.connections import (
    get_connection,
    list_connections,
    remove_connection,
    save_connection,
)
from spanscript.dispatch import run_script

# Params shown masked by `connect list`.
_MASKED_PARAMS = frozenset({"key_file"})


def _parse_params(params: tuple[str, ...]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for pair in params:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint="PARAMS")
        parsed[key] = value
    return parsed


def _not_found(name: str) -> NoReturn:
    click.echo(f"Connection '{name}' not found.", err=True)
    raise SystemExit(1)


def _lookup(name: str) -> ConnectionConfig:
    config = get_connection(name)
    if config is None:
        _not_found(name)
    return config


@click.group()
def connect() -> None:
    """Add, list, remove and test named connections."""


@connect.command("add")
@click.argument("name")
@click.argument("driver", type=click.Choice(sorted(DRIVER_ALIASES), case_sensitive=False))
@click.argument("params", nargs=-1, required=True)
def connect_add(name: str, driver: str, params: tuple[str, ...]) -> None:
    """Save connection NAME for DRIVER with key=value PARAMS.

    \b
    Examples:
      spanscript connect add prod spanner project=my-project instance=main database=orders
      spanscript connect add emu spanner project=test instance=test database=db \\
        connect_to_emulator=true
      spanscript connect add local duckdb path=:memory:
    """
    db_type = DRIVER_ALIASES[driver.lower()]
    path = save_connection(name, db_type.value, _parse_params(params))
    click.echo(f"Saved connection '{name}' ({db_type.value}) to {path}")


@connect.command("list")
def connect_list() -> None:
    """Show every named connection; secrets are masked."""
    saved = list_connections()
    if not saved:
        click.echo("No connections configured.")
        click.echo("Add one: spanscript connect add <name> <driver> <key>=<value>")
        return

    for name, entry in saved.items():
        shown = ", ".join(
            f"{key}={'****' if key in _MASKED_PARAMS else value}"
            for key, value in entry.items()
            if key != "type"
        )
        click.echo(f"  {name} ({entry.get('type', '?')}): {shown}")


@connect.command("remove")
@click.argument("name")
def connect_remove(name: str) -> None:
    """Forget connection NAME."""
    if not remove_connection(name):
        _not_found(name)
    click.echo(f"Removed connection '{name}'.")


@connect.command("test")
@click.argument("name")
def connect_test(name: str) -> None:
    """Open connection NAME and run SELECT 1 through the script runner."""
    config = _lookup(name)

    async def _probe() -> None:
        async with open_adapter(config) as adapter:
            await run_script(adapter, "SELECT 1", db=config.name)

    try:
        asyncio.run(_probe())
    except AdapterError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from e
    click.echo(f"Connection '{name}' ok.")
