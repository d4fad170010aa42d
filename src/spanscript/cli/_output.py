"""Shared output formatting for CLI commands."""

from __future__ import annotations

from spanscript.adapters._base import ColumnInfo, ExecutionResult, TableInfo
from spanscript.script import Statement


def result_to_dict(result: ExecutionResult) -> dict[str, object]:
    data: dict[str, object] = {
        "sql": result.sql,
        "kind": result.kind.value,
        "columns": result.columns,
        "rows": result.rows,
        "row_count": result.row_count,
        "message": result.message,
        "duration_ms": result.duration_ms,
        "result_id": result.result_id,
    }
    if result.is_error:
        data["error"] = result.message
    return data


def format_execution_result(result: ExecutionResult) -> str:
    """Render one statement result as a simple text table."""
    lines: list[str] = [f"-- {result.sql}"]
    if result.columns:
        lines.append(" | ".join(result.columns))
        lines.append("-+-".join("-" * max(len(c), 5) for c in result.columns))
        for row in result.rows:
            lines.append(" | ".join(str(row.get(c, "")) for c in result.columns))

    duration = f", {result.duration_ms:.0f}ms" if result.duration_ms is not None else ""
    prefix = "error: " if result.is_error else ""
    lines.append(f"({prefix}{result.message}{duration})")
    return "\n".join(lines)


def format_statements(statements: list[Statement]) -> str:
    return "\n".join(
        f"[{i}] {s.kind.value}: {s.text}" for i, s in enumerate(statements, start=1)
    )


def table_to_dict(info: TableInfo) -> dict[str, object]:
    doc: dict[str, object] = {
        "schema": info.schema,
        "table": info.name,
        "view": info.is_view,
    }
    if info.columns:
        doc["columns"] = [column_to_dict(c) for c in info.columns]
    return doc


def column_to_dict(column: ColumnInfo) -> dict[str, object]:
    doc: dict[str, object] = {
        "name": column.name,
        "type": column.data_type,
        "nullable": column.is_nullable,
    }
    if column.table:
        doc["table"] = column.table
    if column.size is not None:
        doc["size"] = column.size
    if column.default is not None:
        doc["default"] = column.default
    return doc
