"""Named connections stored in ~/.spanscript/connections.toml.

Each connection is a table keyed by its name holding ``type`` (a driver name or
alias) plus the adapter params, all as strings.
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path

from spanscript.adapters._base import AdapterError, ConnectionConfig
from spanscript.adapters._registry import resolve_alias

_CONNECTIONS_FILE = Path.home() / ".spanscript" / "connections.toml"
_FILE_MODE = 0o600


def _quote(value: object) -> str:
    # JSON string escapes are a subset of TOML basic-string escapes.
    return json.dumps(str(value), ensure_ascii=False)


def _render(data: dict[str, dict]) -> str:
    tables = []
    for name, entry in data.items():
        body = "".join(f"{_quote(key)} = {_quote(value)}\n" for key, value in entry.items())
        tables.append(f"[{_quote(name)}]\n{body}")
    return "\n".join(tables)


def _read() -> dict[str, dict]:
    if not _CONNECTIONS_FILE.exists():
        return {}
    with _CONNECTIONS_FILE.open("rb") as f:
        return tomllib.load(f)


def _write(data: dict[str, dict]) -> None:
    if not data:
        _CONNECTIONS_FILE.unlink(missing_ok=True)
        return
    _CONNECTIONS_FILE.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    fd = os.open(_CONNECTIONS_FILE, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
    with os.fdopen(fd, "w") as f:
        f.write(_render(data))
    # os.open only applies the mode to new files.
    os.chmod(_CONNECTIONS_FILE, _FILE_MODE)


def list_connections() -> dict[str, dict]:
    return _read()


def get_connection(name: str) -> ConnectionConfig | None:
    """Build the config of a named connection; None if missing or of an unknown type."""
    entry = _read().get(name)
    if not entry or "type" not in entry:
        return None
    try:
        db_type = resolve_alias(str(entry["type"]))
    except AdapterError:
        return None
    params = {key: str(value) for key, value in entry.items() if key != "type"}
    return ConnectionConfig(name=name, db_type=db_type, params=params)


def save_connection(name: str, db_type: str, params: dict[str, str]) -> Path:
    """Add or replace a named connection; return the file it was written to."""
    data = _read()
    data[name] = {"type": db_type, **params}
    _write(data)
    return _CONNECTIONS_FILE


def remove_connection(name: str) -> bool:
    """Remove a named connection; False if there was none by that name."""
    data = _read()
    if data.pop(name, None) is None:
        return False
    _write(data)
    return True
