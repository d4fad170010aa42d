"""Test named connections in connections.toml."""

import os

from click.testing import CliRunner

from spanscript import connections
from spanscript.adapters._base import DatabaseType
from spanscript.cli import main
from spanscript.connections import (
    get_connection,
    list_connections,
    remove_connection,
    save_connection,
)


def test_save_and_get():
    save_connection("prod", "spanner", {"project": "p", "instance": "i", "database": "d"})
    config = get_connection("prod")
    assert config is not None
    assert config.name == "prod"
    assert config.db_type == DatabaseType.SPANNER
    assert config.params == {"project": "p", "instance": "i", "database": "d"}


def test_file_is_private():
    path = save_connection("local", "duckdb", {"path": ":memory:"})
    assert os.stat(path).st_mode & 0o777 == 0o600


def test_values_are_escaped():
    save_connection("odd", "duckdb", {"path": 'C:\\data\\"x".duckdb'})
    assert get_connection("odd").params["path"] == 'C:\\data\\"x".duckdb'


def test_type_alias_is_resolved():
    save_connection("aliased", "Cloud-Spanner", {"project": "p"})
    assert get_connection("aliased").db_type == DatabaseType.SPANNER


def test_unknown_type_or_name_returns_none():
    save_connection("weird", "oracle", {})
    assert get_connection("weird") is None
    assert get_connection("missing") is None


def test_remove_last_connection_deletes_file():
    save_connection("a", "duckdb", {})
    save_connection("b", "duckdb", {})
    assert remove_connection("a") is True
    assert list(list_connections()) == ["b"]
    assert remove_connection("b") is True
    assert not connections._CONNECTIONS_FILE.exists()
    assert remove_connection("b") is False


def test_connect_cli_round_trip(tmp_path):
    runner = CliRunner()
    db_path = tmp_path / "local.duckdb"

    result = runner.invoke(main, ["connect", "add", "local", "DuckDB", f"path={db_path}"])
    assert result.exit_code == 0
    assert "Saved connection 'local'" in result.output
    assert list_connections()["local"]["type"] == "duckdb"

    result = runner.invoke(main, ["connect", "test", "local"])
    assert result.exit_code == 0
    assert "Connection 'local' ok." in result.output

    result = runner.invoke(main, ["connect", "list"])
    assert f"local (duckdb): path={db_path}" in result.output

    result = runner.invoke(main, ["connect", "remove", "local"])
    assert result.exit_code == 0
    result = runner.invoke(main, ["connect", "list"])
    assert "No connections configured." in result.output


def test_connect_add_canonicalizes_alias():
    result = CliRunner().invoke(
        main, ["connect", "add", "prod", "google-cloud-spanner", "project=p", "key_file=/k.json"],
    )
    assert result.exit_code == 0
    assert list_connections()["prod"]["type"] == "spanner"

    result = CliRunner().invoke(main, ["connect", "list"])
    assert "key_file=****" in result.output
    assert "/k.json" not in result.output


def test_connect_add_rejects_unknown_type():
    result = CliRunner().invoke(main, ["connect", "add", "x", "oracle", "a=b"])
    assert result.exit_code != 0


def test_connect_remove_missing():
    result = CliRunner().invoke(main, ["connect", "remove", "nope"])
    assert result.exit_code == 1
    assert "not found" in result.output
