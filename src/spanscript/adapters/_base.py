"""Adapter contract between the script runner and database drivers."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from spanscript.script import StatementKind


class DatabaseType(enum.Enum):
    SPANNER = "spanner"
    DUCKDB = "duckdb"


@dataclass
class ConnectionConfig:
    name: str
    db_type: DatabaseType
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class ExecutionResult:
    """Result of one statement of a script."""

    columns: list[str]
    rows: list[dict[str, object]]
    row_count: int
    kind: StatementKind = StatementKind.UNSPECIFIED
    sql: str = ""
    message: str = ""
    duration_ms: float | None = None
    is_error: bool = False
    result_id: str = field(default_factory=lambda: str(uuid.uuid4()))


class AdapterError(Exception):
    """Raised by adapters for connection/execution failures."""


class ResultTooLargeError(AdapterError):
    """The guard count of a query exceeded the allowed number of rows."""

    def __init__(self, count: int, max_rows: int) -> None:
        self.count = count
        self.max_rows = max_rows
        super().__init__(
            f"Query result is too large with {count} results. "
            f"Limit the query results to max {max_rows} and rerun the query."
        )


@dataclass
class ColumnInfo:
    name: str
    data_type: str
    is_nullable: bool = True
    size: int | None = None
    default: str | None = None
    table: str | None = None


@dataclass
class TableInfo:
    schema: str | None
    name: str
    is_view: bool = False
    columns: list[ColumnInfo] = field(default_factory=list)


@runtime_checkable
class DatabaseAdapter(Protocol):
    async def connect(self, config: ConnectionConfig) -> None: ...
    async def close(self) -> None: ...
    async def execute_query(self, sql: str, *, max_rows: int) -> ExecutionResult: ...
    async def execute_update(self, sql: str) -> int: ...
    async def update_schema(self, sql: str) -> None: ...
    async def list_schemas(self) -> list[str]: ...
    async def list_tables(
        self, schema: str | None = None, *, views: bool = False
    ) -> list[TableInfo]: ...
    async def describe_table(self, table: str, schema: str | None = None) -> TableInfo: ...
    async def search_tables(self, search: str | None = None) -> list[TableInfo]: ...
    async def search_columns(
        self,
        search: str | None = None,
        *,
        tables: tuple[str, ...] = (),
        limit: int = 100,
    ) -> list[ColumnInfo]: ...
    async def fetch_records(
        self, table: str, *, limit: int = 50, offset: int = 0
    ) -> ExecutionResult: ...
    def db_type(self) -> DatabaseType: ...
    def dialect(self) -> str: ...
