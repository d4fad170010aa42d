"""SQL text for the guard count, record previews and Spanner INFORMATION_SCHEMA lookups.

Values that come from the user (schema names, search text) are rendered as
literals through sqlglot so quoting is always correct for the dialect.
"""

from __future__ import annotations

from sqlglot import exp

# Spanner speaks GoogleSQL, which sqlglot renders through its BigQuery dialect.
SPANNER_DIALECT = "bigquery"

DEFAULT_SCHEMA_LABEL = "(default)"


def _lit(value: str) -> str:
    return exp.Literal.string(value).sql(dialect=SPANNER_DIALECT)


def _contains(value: str) -> str:
    return _lit(f"%{value.lower()}%")


def guard_count(sql: str) -> str:
    """Wrap a query in a row count.

    The newline before the closing parenthesis keeps a trailing line comment
    in ``sql`` from swallowing it.
    """
    return f"SELECT COUNT(*) FROM (\n{sql}\n)"


def fetch_records(table: str, *, limit: int = 50, offset: int = 0, dialect: str) -> str:
    """Preview rows of a table. ``table`` may be ``schema.table``."""
    query = exp.select("*").from_(exp.to_table(table)).limit(limit).offset(offset)
    return query.sql(dialect=dialect)


def fetch_schemas() -> str:
    return "SELECT SCHEMA_NAME FROM INFORMATION_SCHEMA.SCHEMATA ORDER BY SCHEMA_NAME"


def fetch_tables(schema: str, *, views: bool = False) -> str:
    """Tables or views of one schema.

    The default (nameless) schema only holds tables, all other schemas only
    hold views.
    """
    table_type = "'VIEW'" if views else "'TABLE'"
    return (
        "SELECT TABLE_SCHEMA, TABLE_NAME\n"
        "FROM INFORMATION_SCHEMA.TABLES\n"
        "WHERE TABLE_CATALOG = ''\n"
        f"  AND TABLE_SCHEMA = {_lit(schema)}\n"
        f"  AND CASE WHEN TABLE_SCHEMA = '' THEN 'TABLE' ELSE 'VIEW' END = {table_type}\n"
        "ORDER BY TABLE_NAME"
    )


def fetch_columns(schema: str, table: str) -> str:
    return (
        "SELECT COLUMN_NAME, TABLE_NAME, SPANNER_TYPE,\n"
        "       CAST(COLUMN_DEFAULT AS STRING) AS COLUMN_DEFAULT, IS_NULLABLE\n"
        "FROM INFORMATION_SCHEMA.COLUMNS\n"
        "WHERE TABLE_CATALOG = ''\n"
        f"  AND TABLE_SCHEMA = {_lit(schema)}\n"
        f"  AND TABLE_NAME = {_lit(table)}\n"
        "ORDER BY ORDINAL_POSITION ASC"
    )


def search_tables(search: str | None = None) -> str:
    where = ""
    if search:
        pattern = _contains(search)
        where = (
            "\n  AND (\n"
            f"    (TABLE_SCHEMA = '' AND LOWER(TABLE_NAME) LIKE {pattern})\n"
            f"    OR (LOWER(TABLE_SCHEMA) || '.' || LOWER(TABLE_NAME)) LIKE {pattern}\n"
            "  )"
        )
    return (
        "SELECT TABLE_SCHEMA, TABLE_NAME\n"
        "FROM INFORMATION_SCHEMA.TABLES\n"
        f"WHERE TABLE_CATALOG = ''{where}\n"
        "ORDER BY TABLE_NAME"
    )


def search_columns(
    search: str | None = None,
    *,
    tables: tuple[str, ...] = (),
    limit: int = 100,
) -> str:
    clauses: list[str] = []
    names = [t for t in tables if t]
    if names:
        in_list = ", ".join(_lit(t.lower()) for t in names)
        clauses.append(f"AND LOWER(TABLE_NAME) IN ({in_list})")
    if search:
        pattern = _contains(search)
        clauses.append(
            f"AND (LOWER(TABLE_NAME || '.' || COLUMN_NAME) LIKE {pattern}\n"
            f"     OR LOWER(COLUMN_NAME) LIKE {pattern})"
        )
    filters = "".join(f"\n{c}" for c in clauses)
    return (
        "SELECT COLUMN_NAME, TABLE_NAME, SPANNER_TYPE, IS_NULLABLE\n"
        "FROM INFORMATION_SCHEMA.COLUMNS\n"
        f"WHERE 1 = 1{filters}\n"
        "ORDER BY COLUMN_NAME ASC, ORDINAL_POSITION ASC\n"
        f"LIMIT {int(limit)}"
    )
