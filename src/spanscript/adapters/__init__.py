"""Database adapters — implementations of the DatabaseAdapter protocol."""

from spanscript.adapters._base import (
    AdapterError,
    ColumnInfo,
    ConnectionConfig,
    DatabaseAdapter,
    DatabaseType,
    ExecutionResult,
    ResultTooLargeError,
    TableInfo,
)

__all__ = [
    "AdapterError",
    "ColumnInfo",
    "ConnectionConfig",
    "DatabaseAdapter",
    "DatabaseType",
    "ExecutionResult",
    "ResultTooLargeError",
    "TableInfo",
]
