"""The `schema` command: drill-down introspection (schemas → tables/views → columns)."""

from __future__ import annotations

import asyncio
import json

import click

from spanscript.adapters._base import AdapterError
from spanscript.cli._output import (
    column_to_dict,
    format_execution_result,
    result_to_dict,
    table_to_dict,
)
from spanscript.cli._shared import DB_OPTION_HELP, fail, open_adapter, resolve_db

_DB_OPTION = click.option("--db", required=True, envvar="SPANSCRIPT_DB", help=DB_OPTION_HELP)
_FORMAT_OPTION = click.option(
    "--format", "output_format", type=click.Choice(["json", "text"]), default="json",
)


def _split_ref(table_ref: str) -> tuple[str | None, str]:
    if "." in table_ref:
        schema_name, table_name = table_ref.split(".", 1)
        return schema_name, table_name
    return None, table_ref


def _call(db: str, output_format: str, method: str, *args: object, **kwargs: object):
    """Connect, call one adapter method and close again."""
    config = resolve_db(db, output_format)

    async def _go():
        async with open_adapter(config) as adapter:
            return await getattr(adapter, method)(*args, **kwargs)

    try:
        return asyncio.run(_go())
    except AdapterError as e:
        fail(output_format, str(e))


@click.group("schema")
def schema() -> None:
    """Browse database schemas, tables, views, and columns."""


@schema.command("ls")
@click.argument("schema_name", required=False, default=None)
@click.option("--views", is_flag=True, help="List views instead of tables.")
@_DB_OPTION
@_FORMAT_OPTION
def ls(schema_name: str | None, views: bool, db: str, output_format: str) -> None:
    """List schemas, or the tables (or views) within a schema."""
    if schema_name is None and not views:
        schemas = _call(db, output_format, "list_schemas")
        if output_format == "json":
            click.echo(json.dumps({"schemas": schemas}, indent=2))
        elif not schemas:
            click.echo("No schemas found.")
        else:
            for s in schemas:
                click.echo(s)
        return

    tables = _call(db, output_format, "list_tables", schema_name, views=views)
    key = "views" if views else "tables"
    if output_format == "json":
        click.echo(json.dumps({"schema": schema_name, key: [t.name for t in tables]}, indent=2))
    elif not tables:
        click.echo(f"No {key} in '{schema_name}'.")
    else:
        for t in tables:
            click.echo(t.name)


@schema.command("show")
@click.argument("table_ref")
@_DB_OPTION
@_FORMAT_OPTION
def show(table_ref: str, db: str, output_format: str) -> None:
    """Show columns of a table. TABLE_REF is schema.table or just table."""
    schema_name, table_name = _split_ref(table_ref)
    info = _call(db, output_format, "describe_table", table_name, schema=schema_name)
    if output_format == "json":
        click.echo(json.dumps(table_to_dict(info), indent=2, default=str))
        return

    click.echo(f"{info.schema}.{info.name}" + (" (view)" if info.is_view else ""))
    for c in info.columns:
        nullable = "NULL" if c.is_nullable else "NOT NULL"
        line = f"  {c.name}  {c.data_type}  {nullable}"
        if c.default is not None:
            line += f"  DEFAULT {c.default}"
        click.echo(line)


@schema.command("search")
@click.argument("text", required=False, default=None)
@click.option("--columns", is_flag=True, help="Search columns instead of tables.")
@click.option("--table", "tables", multiple=True, help="Restrict column search to a table.")
@click.option("--limit", type=int, default=100, show_default=True)
@_DB_OPTION
@_FORMAT_OPTION
def search(
    text: str | None,
    columns: bool,
    tables: tuple[str, ...],
    limit: int,
    db: str,
    output_format: str,
) -> None:
    """Search tables and views (or columns) whose name contains TEXT."""
    if columns:
        found = _call(db, output_format, "search_columns", text, tables=tables, limit=limit)
        if output_format == "json":
            click.echo(json.dumps({"columns": [column_to_dict(c) for c in found]}, indent=2))
        else:
            for c in found:
                click.echo(f"{c.table}.{c.name}  {c.data_type}")
        return

    found = _call(db, output_format, "search_tables", text)
    if output_format == "json":
        click.echo(json.dumps({"tables": [table_to_dict(t) for t in found]}, indent=2))
    else:
        for t in found:
            click.echo(f"{t.schema}.{t.name}" + (" (view)" if t.is_view else ""))


@schema.command("preview")
@click.argument("table_ref")
@click.option("--limit", type=int, default=50, show_default=True)
@click.option("--offset", type=int, default=0, show_default=True)
@_DB_OPTION
@_FORMAT_OPTION
def preview(table_ref: str, limit: int, offset: int, db: str, output_format: str) -> None:
    """Show the first rows of a table."""
    result = _call(db, output_format, "fetch_records", table_ref, limit=limit, offset=offset)
    result.message = f"Query ok with {result.row_count} results"
    if output_format == "json":
        click.echo(json.dumps(result_to_dict(result), indent=2, default=str))
    else:
        click.echo(format_execution_result(result))
