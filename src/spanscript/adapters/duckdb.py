"""DuckDB adapter: an in-process database for trying scripts without Spanner."""

from __future__ import annotations

import contextlib
import time

import duckdb as _duckdb

from spanscript import queries
from spanscript.adapters._base import (
    AdapterError,
    ColumnInfo,
    ConnectionConfig,
    DatabaseType,
    ExecutionResult,
    ResultTooLargeError,
    TableInfo,
)
from spanscript.script import StatementKind

_SYSTEM_SCHEMAS = ("pg_catalog", "information_schema")


class DuckDBAdapter:
    """Runs scripts against a DuckDB file or an in-memory database."""

    def __init__(self) -> None:
        self._conn: _duckdb.DuckDBPyConnection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        path = config.params.get("path", ":memory:")
        try:
            self._conn = _duckdb.connect(path, config={"custom_user_agent": "spanscript/0.1.0"})
        except Exception as e:
            raise AdapterError(f"DuckDB connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _ensure_conn(self) -> _duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise AdapterError("Not connected. Call connect() first.")
        return self._conn

    def _read(self, sql: str, params: list[object] | None = None) -> list[tuple]:
        conn = self._ensure_conn()
        try:
            return conn.execute(sql, params or []).fetchall()
        except Exception as e:
            raise AdapterError(f"DuckDB query failed: {e}") from e

    async def execute_query(self, sql: str, *, max_rows: int) -> ExecutionResult:
        conn = self._ensure_conn()

        t0 = time.monotonic()
        try:
            # Reads never commit: count and query share a transaction that is rolled back.
            conn.begin()
            try:
                count = conn.execute(queries.guard_count(sql)).fetchone()[0]
                if count > max_rows:
                    raise ResultTooLargeError(count, max_rows)
                result = conn.execute(sql)
                columns = [desc[0] for desc in result.description] if result.description else []
                rows_raw = result.fetchall()
            finally:
                conn.rollback()
        except ResultTooLargeError:
            raise
        except Exception as e:
            raise AdapterError(f"DuckDB query failed: {e}") from e
        duration_ms = (time.monotonic() - t0) * 1000

        rows = [dict(zip(columns, row, strict=True)) for row in rows_raw]

        return ExecutionResult(
            columns=columns,
            rows=rows,
            row_count=len(rows),
            kind=StatementKind.QUERY,
            sql=sql,
            duration_ms=duration_ms,
        )

    async def execute_update(self, sql: str) -> int:
        conn = self._ensure_conn()
        try:
            conn.begin()
            row = conn.execute(sql).fetchone()
            conn.commit()
        except Exception as e:
            with contextlib.suppress(_duckdb.Error):
                conn.rollback()
            raise AdapterError(f"DuckDB update failed: {e}") from e
        return int(row[0]) if row else 0

    async def update_schema(self, sql: str) -> None:
        conn = self._ensure_conn()
        try:
            conn.execute(sql)
        except Exception as e:
            raise AdapterError(f"DuckDB schema update failed: {e}") from e

    async def list_schemas(self) -> list[str]:
        rows = self._read(
            "SELECT DISTINCT table_schema FROM information_schema.tables "
            "WHERE table_schema NOT IN (?, ?) ORDER BY table_schema",
            list(_SYSTEM_SCHEMAS),
        )
        return [row[0] for row in rows]

    async def list_tables(
        self, schema: str | None = None, *, views: bool = False
    ) -> list[TableInfo]:
        schema = schema or "main"
        rows = self._read(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = ? AND table_type = ? ORDER BY table_name",
            [schema, "VIEW" if views else "BASE TABLE"],
        )
        return [TableInfo(schema=schema, name=row[0], is_view=views) for row in rows]

    async def describe_table(self, table: str, schema: str | None = None) -> TableInfo:
        schema = schema or "main"
        rows = self._read(
            "SELECT c.column_name, c.data_type, c.is_nullable, c.column_default, "
            "c.character_maximum_length, t.table_type "
            "FROM information_schema.columns c "
            "JOIN information_schema.tables t "
            "  ON t.table_schema = c.table_schema AND t.table_name = c.table_name "
            "WHERE c.table_schema = ? AND c.table_name = ? "
            "ORDER BY c.ordinal_position",
            [schema, table],
        )
        if not rows:
            raise AdapterError(f"Table not found: {schema}.{table}")

        columns = [
            ColumnInfo(
                name=name,
                data_type=data_type,
                is_nullable=(nullable == "YES"),
                size=size,
                default=default,
                table=table,
            )
            for name, data_type, nullable, default, size, _ in rows
        ]
        return TableInfo(
            schema=schema, name=table, is_view=(rows[0][5] == "VIEW"), columns=columns,
        )

    async def search_tables(self, search: str | None = None) -> list[TableInfo]:
        sql = (
            "SELECT table_schema, table_name, table_type FROM information_schema.tables "
            "WHERE table_schema NOT IN (?, ?)"
        )
        params: list[object] = list(_SYSTEM_SCHEMAS)
        if search:
            sql += " AND lower(table_schema || '.' || table_name) LIKE ?"
            params.append(f"%{search.lower()}%")
        rows = self._read(sql + " ORDER BY table_name", params)
        return [
            TableInfo(schema=schema, name=name, is_view=(table_type == "VIEW"))
            for schema, name, table_type in rows
        ]

    async def search_columns(
        self,
        search: str | None = None,
        *,
        tables: tuple[str, ...] = (),
        limit: int = 100,
    ) -> list[ColumnInfo]:
        sql = (
            "SELECT column_name, table_name, data_type, is_nullable "
            "FROM information_schema.columns WHERE table_schema NOT IN (?, ?)"
        )
        params: list[object] = list(_SYSTEM_SCHEMAS)
        names = [t.lower() for t in tables if t]
        if names:
            sql += f" AND lower(table_name) IN ({', '.join('?' for _ in names)})"
            params.extend(names)
        if search:
            sql += (
                " AND (lower(table_name || '.' || column_name) LIKE ?"
                " OR lower(column_name) LIKE ?)"
            )
            params.extend([f"%{search.lower()}%"] * 2)
        sql += f" ORDER BY column_name, ordinal_position LIMIT {int(limit)}"
        return [
            ColumnInfo(name=name, data_type=data_type, is_nullable=(nullable == "YES"), table=tbl)
            for name, tbl, data_type, nullable in self._read(sql, params)
        ]

    async def fetch_records(
        self, table: str, *, limit: int = 50, offset: int = 0
    ) -> ExecutionResult:
        sql = queries.fetch_records(table, limit=limit, offset=offset, dialect=self.dialect())
        return await self.execute_query(sql, max_rows=limit)

    def db_type(self) -> DatabaseType:
        return DatabaseType.DUCKDB

    def dialect(self) -> str:
        return "duckdb"
