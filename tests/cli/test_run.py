"""CLI integration tests for `spanscript run` and `spanscript split`."""

from __future__ import annotations

import json

import duckdb
from click.testing import CliRunner

from spanscript.cli import main


def _create_test_db(tmp_path) -> str:
    path = str(tmp_path / "test.duckdb")
    conn = duckdb.connect(path)
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name VARCHAR)")
    conn.execute("INSERT INTO users VALUES (1, 'ada'), (2, 'bob')")
    conn.close()
    return path


class TestRun:
    def test_query_json(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "SELECT 1 AS x", "--db", "duckdb:"])
        assert result.exit_code == 0
        (statement,) = json.loads(result.output)["statements"]
        assert statement["sql"] == "SELECT 1 AS x"
        assert statement["kind"] == "query"
        assert statement["columns"] == ["x"]
        assert statement["rows"] == [{"x": 1}]
        assert statement["message"] == "Query ok with 1 results"
        assert "error" not in statement

    def test_script_changes_are_committed(self, tmp_path) -> None:
        path = _create_test_db(tmp_path)
        runner = CliRunner()
        result = runner.invoke(main, [
            "run",
            "DELETE FROM users WHERE id = 2; INSERT INTO users VALUES (3, 'cy; d')",
            "--db", f"duckdb:path={path}",
        ])
        assert result.exit_code == 0
        statements = json.loads(result.output)["statements"]
        assert [s["kind"] for s in statements] == ["dml", "dml"]
        assert [s["row_count"] for s in statements] == [1, 1]

        conn = duckdb.connect(path)
        assert conn.execute("SELECT name FROM users ORDER BY id").fetchall() == [
            ("ada",), ("cy; d",),
        ]
        conn.close()

    def test_text_format(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [
            "run", "SELECT 42 AS answer", "--db", "duckdb:", "--format", "text",
        ])
        assert result.exit_code == 0
        assert result.output.startswith("-- SELECT 42 AS answer\nanswer\n")
        assert "(Query ok with 1 results" in result.output

    def test_max_rows(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [
            "run", "SELECT * FROM range(10)", "--db", "duckdb:", "--max-rows", "5",
        ])
        assert result.exit_code == 0
        (statement,) = json.loads(result.output)["statements"]
        assert statement["error"] == (
            "Query result is too large with 10 results. "
            "Limit the query results to max 5 and rerun the query."
        )
        assert statement["columns"] == ["Error"]

    def test_unsupported_statement_json(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "SELECT 1; PRAGMA version", "--db", "duckdb:"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data == {"error": "Unsupported statement: PRAGMA version", "sql": "PRAGMA version"}

    def test_unsupported_statement_text(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [
            "run", "PRAGMA version", "--db", "duckdb:", "--format", "text",
        ])
        assert result.exit_code == 1
        assert "error: Unsupported statement: PRAGMA version" in result.output

    def test_adapter_error(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "SELECT * FROM nope", "--db", "duckdb:"])
        assert result.exit_code == 1
        assert "DuckDB query failed" in json.loads(result.output)["error"]

    def test_from_stdin(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["run", "--from-stdin", "--db", "duckdb:"],
            input="SELECT 1 AS a;\nSELECT 2 AS b;\n",
        )
        assert result.exit_code == 0
        statements = json.loads(result.output)["statements"]
        assert [s["rows"] for s in statements] == [[{"a": 1}], [{"b": 2}]]

    def test_from_file(self, tmp_path) -> None:
        script = tmp_path / "script.sql"
        script.write_text("-- setup\nCREATE TABLE t (id INTEGER);\nINSERT INTO t VALUES (1);\n")
        runner = CliRunner()
        result = runner.invoke(main, ["run", "--file", str(script), "--db", "duckdb:"])
        assert result.exit_code == 0
        messages = [s["message"] for s in json.loads(result.output)["statements"]]
        assert messages == ["DDL statement executed successfully", "Update ok with 1 updated rows"]

    def test_db_from_env(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "SELECT 1 AS x"], env={"SPANSCRIPT_DB": "duckdb:"})
        assert result.exit_code == 0

    def test_named_connection(self, tmp_path) -> None:
        path = _create_test_db(tmp_path)
        runner = CliRunner()
        runner.invoke(main, ["connect", "add", "local", "duckdb", f"path={path}"])
        result = runner.invoke(main, ["run", "SELECT COUNT(*) AS n FROM users", "--db", "local"])
        assert result.exit_code == 0
        assert json.loads(result.output)["statements"][0]["rows"] == [{"n": 2}]

    def test_unknown_db(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "SELECT 1", "--db", "nowhere"])
        assert result.exit_code == 1
        assert "not found" in json.loads(result.output)["error"]

    def test_unknown_db_type(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "SELECT 1", "--db", "oracle:host=x"])
        assert result.exit_code == 1
        assert "Unknown database type 'oracle'" in json.loads(result.output)["error"]

    def test_missing_sql(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["run", "--db", "duckdb:"])
        assert result.exit_code == 2
        assert "Missing argument 'SQL'" in result.output

    def test_several_sources(self, tmp_path) -> None:
        script = tmp_path / "script.sql"
        script.write_text("SELECT 1")
        runner = CliRunner()
        result = runner.invoke(main, ["run", "SELECT 1", "--file", str(script), "--db", "duckdb:"])
        assert result.exit_code == 2


class TestSplit:
    def test_split_json(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [
            "split", "select 1; /* ; */ insert into t values (';'); explain select 2",
        ])
        assert result.exit_code == 0
        assert json.loads(result.output)["statements"] == [
            {"sql": "select 1", "kind": "query"},
            {"sql": "/* ; */ insert into t values (';')", "kind": "dml"},
            {"sql": "explain select 2", "kind": "unspecified"},
        ]

    def test_split_text(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, [
            "split", "CREATE TABLE t (id INT64) PRIMARY KEY (id); SELECT 1", "--format", "text",
        ])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "[1] ddl: CREATE TABLE t (id INT64) PRIMARY KEY (id)",
            "[2] query: SELECT 1",
        ]

    def test_split_empty_script(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["split", " ; ; "])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"statements": []}
