"""Cloud Spanner adapter: snapshots, read/write transactions and DDL via google-cloud-spanner."""

from __future__ import annotations

import os
import re
import time

from google.auth.credentials import AnonymousCredentials
from google.cloud import spanner

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

_EMULATOR_ENV = "SPANNER_EMULATOR_HOST"
_EMULATOR_CONFIG = "emulator-config"

# Sizes reported for STRING(MAX) and BYTES(MAX) columns.
_MAX_STRING_SIZE = 2621440
_MAX_BYTES_SIZE = 10485760

_TYPE_SIZE_RE = re.compile(r"\(\s*(\w+)\s*\)")


def _is_true(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def column_size(spanner_type: str) -> int | None:
    """Parse the length out of a Spanner type such as STRING(36) or BYTES(MAX)."""
    match = _TYPE_SIZE_RE.search(spanner_type)
    if match is None:
        return None
    size = match.group(1)
    if size.upper() == "MAX":
        return _MAX_STRING_SIZE if "STRING" in spanner_type.upper() else _MAX_BYTES_SIZE
    try:
        return int(size)
    except ValueError:
        return None


def _emulator_client(project: str, target: str) -> spanner.Client:
    """Build a client for the emulator at ``target`` (host:port).

    The client reads SPANNER_EMULATOR_HOST once, when it is constructed, to pick
    an insecure channel. The variable is restored afterwards so clients built
    later in this process still reach Cloud Spanner.
    """
    previous = os.environ.get(_EMULATOR_ENV)
    os.environ[_EMULATOR_ENV] = target
    try:
        return spanner.Client(project=project, credentials=AnonymousCredentials())
    finally:
        if previous is None:
            os.environ.pop(_EMULATOR_ENV, None)
        else:
            os.environ[_EMULATOR_ENV] = previous


def _schema_name(label: str | None) -> str:
    """Map the display label of the default schema back to its real (empty) name."""
    if not label or label == queries.DEFAULT_SCHEMA_LABEL:
        return ""
    return label


def _schema_label(name: str) -> str:
    return name or queries.DEFAULT_SCHEMA_LABEL


class SpannerAdapter:
    """Cloud Spanner adapter using the google-cloud-spanner SDK."""

    def __init__(self) -> None:
        self._client: spanner.Client | None = None
        self._database = None

    async def connect(self, config: ConnectionConfig) -> None:
        params = config.params
        missing = [k for k in ("project", "instance", "database") if not params.get(k)]
        if missing:
            raise AdapterError(
                f"Spanner requires {', '.join(repr(m) for m in missing)} in connection params"
            )

        emulator = _is_true(params.get("connect_to_emulator"))
        try:
            if emulator:
                host = params.get("emulator_host") or "localhost"
                port = params.get("emulator_port") or "9010"
                client = _emulator_client(params["project"], f"{host}:{port}")
                instance = client.instance(
                    params["instance"],
                    configuration_name=(
                        f"{client.project_name}/instanceConfigs/{_EMULATOR_CONFIG}"
                    ),
                    display_name="Auto-created emulator instance",
                    node_count=1,
                )
                if not instance.exists():
                    instance.create().result()
            else:
                from spanscript.auth import load_spanner_credentials

                credentials = load_spanner_credentials(params.get("key_file"))
                client = spanner.Client(project=params["project"], credentials=credentials)
                instance = client.instance(params["instance"])

            database = instance.database(params["database"])
            if emulator and not database.exists():
                database.create().result()
        except Exception as e:
            raise AdapterError(f"Spanner connection failed: {e}") from e

        self._client = client
        self._database = database

    async def close(self) -> None:
        self._database = None
        self._client = None

    def _ensure_database(self):
        if self._database is None:
            raise AdapterError("Not connected. Call connect() first.")
        return self._database

    def _read(self, sql: str) -> list[list[object]]:
        database = self._ensure_database()
        try:
            with database.snapshot() as snapshot:
                return [list(row) for row in snapshot.execute_sql(sql)]
        except Exception as e:
            raise AdapterError(f"Spanner query failed: {e}") from e

    async def execute_query(self, sql: str, *, max_rows: int) -> ExecutionResult:
        database = self._ensure_database()

        t0 = time.monotonic()
        try:
            # Count and query share one read-only snapshot.
            with database.snapshot(multi_use=True) as snapshot:
                count = list(snapshot.execute_sql(queries.guard_count(sql)))[0][0]
                if count > max_rows:
                    raise ResultTooLargeError(count, max_rows)
                results = snapshot.execute_sql(sql)
                rows_raw = [list(row) for row in results]
                fields = list(results.fields or [])
        except ResultTooLargeError:
            raise
        except Exception as e:
            raise AdapterError(f"Spanner query failed: {e}") from e
        duration_ms = (time.monotonic() - t0) * 1000

        columns = [f.name if f.name else f"_{index}" for index, f in enumerate(fields)]
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
        database = self._ensure_database()
        try:
            return database.run_in_transaction(lambda txn: txn.execute_update(sql))
        except Exception as e:
            raise AdapterError(f"Spanner update failed: {e}") from e

    async def update_schema(self, sql: str) -> None:
        database = self._ensure_database()
        try:
            operation = database.update_ddl([sql])
            operation.result()
        except Exception as e:
            raise AdapterError(f"Spanner schema update failed: {e}") from e

    async def list_schemas(self) -> list[str]:
        return [_schema_label(row[0]) for row in self._read(queries.fetch_schemas())]

    async def list_tables(
        self, schema: str | None = None, *, views: bool = False
    ) -> list[TableInfo]:
        rows = self._read(queries.fetch_tables(_schema_name(schema), views=views))
        return [
            TableInfo(schema=_schema_label(table_schema), name=name, is_view=views)
            for table_schema, name in rows
        ]

    async def describe_table(self, table: str, schema: str | None = None) -> TableInfo:
        schema_name = _schema_name(schema)
        rows = self._read(queries.fetch_columns(schema_name, table))
        if not rows:
            raise AdapterError(f"Table not found: {table}")
        columns = [
            ColumnInfo(
                name=name,
                data_type=spanner_type,
                is_nullable=(nullable == "YES"),
                size=column_size(spanner_type),
                default=default,
                table=table_name,
            )
            for name, table_name, spanner_type, default, nullable in rows
        ]
        return TableInfo(
            schema=_schema_label(schema_name),
            name=table,
            is_view=bool(schema_name),
            columns=columns,
        )

    async def search_tables(self, search: str | None = None) -> list[TableInfo]:
        rows = self._read(queries.search_tables(search))
        return [
            TableInfo(schema=_schema_label(table_schema), name=name, is_view=bool(table_schema))
            for table_schema, name in rows
        ]

    async def search_columns(
        self,
        search: str | None = None,
        *,
        tables: tuple[str, ...] = (),
        limit: int = 100,
    ) -> list[ColumnInfo]:
        rows = self._read(queries.search_columns(search, tables=tables, limit=limit))
        return [
            ColumnInfo(
                name=name,
                data_type=spanner_type,
                is_nullable=(nullable == "YES"),
                size=column_size(spanner_type),
                table=table_name,
            )
            for name, table_name, spanner_type, nullable in rows
        ]

    async def fetch_records(
        self, table: str, *, limit: int = 50, offset: int = 0
    ) -> ExecutionResult:
        sql = queries.fetch_records(table, limit=limit, offset=offset, dialect=self.dialect())
        return await self.execute_query(sql, max_rows=limit)

    def db_type(self) -> DatabaseType:
        return DatabaseType.SPANNER

    def dialect(self) -> str:
        return queries.SPANNER_DIALECT
