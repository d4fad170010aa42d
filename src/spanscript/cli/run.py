"""The `run` and `split` commands: execute a script, or show how it would be split."""

from __future__ import annotations

import asyncio
import json

import click

from spanscript.adapters._base import AdapterError, ConnectionConfig, ExecutionResult
from spanscript.cli._output import format_execution_result, format_statements, result_to_dict
from spanscript.cli._shared import DB_OPTION_HELP, fail, open_adapter, resolve_db, resolve_script
from spanscript.dispatch import MAX_QUERY_RESULTS, UnsupportedStatementError, run_script
from spanscript.querylog import cleanup_old_logs
from spanscript.script import parse_script

_FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="json",
    help="Output format.",
)


async def _run(script: str, config: ConnectionConfig, *, max_rows: int) -> list[ExecutionResult]:
    async with open_adapter(config) as adapter:
        return await run_script(adapter, script, max_rows=max_rows, db=config.name)


@click.command("run")
@click.argument("sql", required=False, default=None)
@click.option("--from-stdin", is_flag=True, help="Read the script from stdin.")
@click.option("--file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Read the script from a file.")
@click.option("--db", required=True, envvar="SPANSCRIPT_DB", help=DB_OPTION_HELP)
@click.option("--max-rows", type=int, default=MAX_QUERY_RESULTS, show_default=True,
              help="Refuse to return queries with more rows than this.")
@_FORMAT_OPTION
def run(
    sql: str | None,
    from_stdin: bool,
    file: str | None,
    db: str,
    max_rows: int,
    output_format: str,
) -> None:
    """Execute a script of semicolon-separated statements.

    Queries run in read-only transactions, DML statements each in their own
    read/write transaction, DDL statements as schema updates. A script with
    a statement of unknown kind is rejected before anything runs.
    """
    cleanup_old_logs()
    script = resolve_script(sql, from_stdin, file)
    config = resolve_db(db, output_format)

    try:
        results = asyncio.run(_run(script, config, max_rows=max_rows))
    except UnsupportedStatementError as e:
        fail(output_format, str(e), sql=e.sql)
    except AdapterError as e:
        fail(output_format, str(e))

    if output_format == "json":
        click.echo(json.dumps(
            {"statements": [result_to_dict(r) for r in results]}, indent=2, default=str,
        ))
    else:
        click.echo("\n\n".join(format_execution_result(r) for r in results))


@click.command("split")
@click.argument("sql", required=False, default=None)
@click.option("--from-stdin", is_flag=True, help="Read the script from stdin.")
@click.option("--file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Read the script from a file.")
@_FORMAT_OPTION
def split_cmd(sql: str | None, from_stdin: bool, file: str | None, output_format: str) -> None:
    """Show the statements of a script and their kinds, without a database."""
    statements = parse_script(resolve_script(sql, from_stdin, file))
    if output_format == "json":
        click.echo(json.dumps(
            {"statements": [{"sql": s.text, "kind": s.kind.value} for s in statements]},
            indent=2,
        ))
    else:
        click.echo(format_statements(statements))
