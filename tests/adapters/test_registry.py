"""Test lazy adapter registry and driver aliases."""

import pytest

from spanscript.adapters._base import AdapterError, DatabaseType
from spanscript.adapters._registry import DRIVER_ALIASES, get_adapter, resolve_alias


def test_get_duckdb_adapter():
    cls = get_adapter(DatabaseType.DUCKDB)
    assert cls.__name__ == "DuckDBAdapter"


def test_get_spanner_adapter():
    """Spanner adapter class can be loaded (google-cloud-spanner may or may not be installed)."""
    try:
        cls = get_adapter(DatabaseType.SPANNER)
        assert cls.__name__ == "SpannerAdapter"
    except AdapterError as e:
        assert "Missing driver" in str(e)
        assert "spanscript[spanner]" in str(e)


def test_missing_driver_has_install_hint():
    from spanscript.adapters._registry import _ADAPTER_MAP, _EXTRAS

    for db_type in _ADAPTER_MAP:
        assert db_type in _EXTRAS


def test_missing_driver_message(monkeypatch):
    from spanscript.adapters import _registry

    monkeypatch.setitem(
        _registry._ADAPTER_MAP, DatabaseType.DUCKDB, ("spanscript.adapters._nope", "Nope"),
    )
    with pytest.raises(AdapterError, match=r"pip install 'spanscript\[duckdb\]'"):
        get_adapter(DatabaseType.DUCKDB)


@pytest.mark.parametrize(
    "name",
    [
        "spanner",
        "Spanner",
        " cloud-spanner ",
        "google-cloud-spanner",
        "Google Cloud Spanner Driver",
    ],
)
def test_spanner_aliases(name):
    assert resolve_alias(name) == DatabaseType.SPANNER


def test_duckdb_alias():
    assert resolve_alias("DUCKDB") == DatabaseType.DUCKDB


def test_unknown_alias_lists_valid_names():
    with pytest.raises(AdapterError) as exc_info:
        resolve_alias("oracle")
    message = str(exc_info.value)
    assert "Unknown database type 'oracle'" in message
    for name in DRIVER_ALIASES:
        assert name in message
