"""Execute a script statement by statement, each in the transaction mode its kind requires.

    QUERY          read-only snapshot, guarded by a row count
    DATA_CHANGE    one read/write transaction per statement
    SCHEMA_CHANGE  schema update, awaited until complete
    UNSPECIFIED    the whole script is rejected before anything runs
"""

from __future__ import annotations

from spanscript.adapters._base import (
    AdapterError,
    DatabaseAdapter,
    ExecutionResult,
    ResultTooLargeError,
)
from spanscript.querylog import log_query
from spanscript.script import Statement, StatementKind, parse_script

# Max number of rows a single query may return. Guards against out-of-memory
# errors and runaway queries when a LIMIT clause is forgotten.
MAX_QUERY_RESULTS = 100_000


class UnsupportedStatementError(AdapterError):
    """The script holds a statement whose kind cannot be determined."""

    def __init__(self, sql: str) -> None:
        self.sql = sql
        super().__init__(f"Unsupported statement: {sql}")


def too_large_result(statement: Statement, error: ResultTooLargeError) -> ExecutionResult:
    """Error result returned in place of rows when the guard count is exceeded."""
    message = str(error)
    return ExecutionResult(
        columns=["Error"],
        rows=[{"Error": message}],
        row_count=0,
        kind=statement.kind,
        sql=statement.text,
        message=message,
        is_error=True,
    )


async def _execute(
    adapter: DatabaseAdapter, statement: Statement, *, max_rows: int
) -> ExecutionResult:
    sql = statement.text
    if statement.kind == StatementKind.QUERY:
        try:
            result = await adapter.execute_query(sql, max_rows=max_rows)
        except ResultTooLargeError as e:
            return too_large_result(statement, e)
        result.message = f"Query ok with {result.row_count} results"
        return result

    if statement.kind == StatementKind.DATA_CHANGE:
        row_count = await adapter.execute_update(sql)
        return ExecutionResult(
            columns=["rowCount"],
            rows=[{"rowCount": row_count}],
            row_count=row_count,
            kind=statement.kind,
            sql=sql,
            message=f"Update ok with {row_count} updated rows",
        )

    await adapter.update_schema(sql)
    return ExecutionResult(
        columns=["Result"],
        rows=[{"Result": "Success"}],
        row_count=0,
        kind=statement.kind,
        sql=sql,
        message="DDL statement executed successfully",
    )


async def run_script(
    adapter: DatabaseAdapter,
    script: str,
    *,
    max_rows: int = MAX_QUERY_RESULTS,
    db: str | None = None,
) -> list[ExecutionResult]:
    """Split, classify and execute ``script``; one result per statement, in order.

    Raises UnsupportedStatementError, before executing anything, if any
    statement is UNSPECIFIED. AdapterError from the adapter stops the script;
    statements executed before it stay committed.
    """
    statements = parse_script(script)
    for statement in statements:
        if statement.kind == StatementKind.UNSPECIFIED:
            log_query(sql=statement.text, kind=statement.kind.value, db=db, blocked=True)
            raise UnsupportedStatementError(statement.text)

    results: list[ExecutionResult] = []
    for statement in statements:
        try:
            result = await _execute(adapter, statement, max_rows=max_rows)
        except AdapterError as e:
            log_query(sql=statement.text, kind=statement.kind.value, db=db, error=str(e))
            raise
        log_query(
            sql=statement.text,
            kind=statement.kind.value,
            db=db,
            row_count=result.row_count,
            duration_ms=result.duration_ms,
            error=result.message if result.is_error else None,
        )
        results.append(result)
    return results
