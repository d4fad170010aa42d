"""Driver registry: aliases and lazily imported adapter classes."""

from __future__ import annotations

import importlib

from spanscript.adapters._base import AdapterError, DatabaseAdapter, DatabaseType

_ADAPTER_MAP: dict[DatabaseType, tuple[str, str]] = {
    DatabaseType.SPANNER: ("spanscript.adapters.spanner", "SpannerAdapter"),
    DatabaseType.DUCKDB: ("spanscript.adapters.duckdb", "DuckDBAdapter"),
}

_EXTRAS: dict[DatabaseType, str] = {
    DatabaseType.SPANNER: "spanner",
    DatabaseType.DUCKDB: "duckdb",
}

# Names a driver can be referred to by, case-insensitive.
DRIVER_ALIASES: dict[str, DatabaseType] = {
    "spanner": DatabaseType.SPANNER,
    "cloud-spanner": DatabaseType.SPANNER,
    "google-cloud-spanner": DatabaseType.SPANNER,
    "google cloud spanner driver": DatabaseType.SPANNER,
    "duckdb": DatabaseType.DUCKDB,
}


def resolve_alias(name: str) -> DatabaseType:
    """Resolve a driver name or alias to its database type.

    Raises AdapterError listing the known names if nothing matches.
    """
    db_type = DRIVER_ALIASES.get(name.strip().lower())
    if db_type is None:
        valid = ", ".join(sorted(DRIVER_ALIASES))
        raise AdapterError(f"Unknown database type '{name}'. Valid: {valid}")
    return db_type


def get_adapter(db_type: DatabaseType) -> type[DatabaseAdapter]:
    """Import the adapter module for ``db_type`` on first use and return its class.

    A missing driver package surfaces as AdapterError naming the extra to install.
    """
    try:
        module_path, class_name = _ADAPTER_MAP[db_type]
    except KeyError:
        raise AdapterError(f"No adapter registered for {db_type.value}") from None

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise AdapterError(
            f"Missing driver for {db_type.value}. "
            f"Install with: pip install 'spanscript[{_EXTRAS.get(db_type, 'all')}]'"
        ) from e
    return getattr(module, class_name)
