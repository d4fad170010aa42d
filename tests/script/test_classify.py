"""Test statement classification by first keyword."""

import pytest

from spanscript.script import (
    KEYWORD_SETS,
    Statement,
    StatementKind,
    classify,
    first_keyword,
    parse_script,
)


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("  select * from t", StatementKind.QUERY),
        ("SELECT 1", StatementKind.QUERY),
        ("WITH a AS (SELECT 1) SELECT * FROM a", StatementKind.QUERY),
        ("SELECT*FROM t", StatementKind.QUERY),
        ("Insert into t values (1)", StatementKind.DATA_CHANGE),
        ("update t set x = 1 where true", StatementKind.DATA_CHANGE),
        ("DELETE FROM t WHERE id = 1", StatementKind.DATA_CHANGE),
        ("create table t (id INT64) PRIMARY KEY (id)", StatementKind.SCHEMA_CHANGE),
        ("ALTER TABLE t ADD COLUMN c STRING(MAX)", StatementKind.SCHEMA_CHANGE),
        ("\n\tDROP TABLE t", StatementKind.SCHEMA_CHANGE),
        # Leading comments are skipped
        ("-- comment\nSELECT 1", StatementKind.QUERY),
        ("# note\nDELETE FROM t WHERE true", StatementKind.DATA_CHANGE),
        ("/* INSERT */ SELECT 1", StatementKind.QUERY),
        ("/* a */ /* b */\n-- c\nCREATE INDEX i ON t (c)", StatementKind.SCHEMA_CHANGE),
        # Everything else is unspecified
        ("explain select 1", StatementKind.UNSPECIFIED),
        ("GRANT SELECT ON TABLE t TO ROLE r", StatementKind.UNSPECIFIED),
        ("SELECTED", StatementKind.UNSPECIFIED),
        ("(SELECT 1)", StatementKind.UNSPECIFIED),
        ("", StatementKind.UNSPECIFIED),
        ("   \n\t ", StatementKind.UNSPECIFIED),
        ("-- only a comment", StatementKind.UNSPECIFIED),
        ("/* unterminated SELECT", StatementKind.UNSPECIFIED),
    ],
)
def test_classify(sql: str, expected: StatementKind) -> None:
    assert classify(sql) == expected


@pytest.mark.parametrize(
    "sql,expected",
    [
        ("  select * from t", "select"),
        ("-- c\n  INSERT INTO t", "INSERT"),
        ("SEL/* x */ECT 1", "SEL"),
        ("SELECT-- x\n1", "SELECT"),
        ("", ""),
        ("/* all comment */", ""),
    ],
)
def test_first_keyword(sql: str, expected: str) -> None:
    assert first_keyword(sql) == expected


@pytest.mark.parametrize("sql", ["\u017felect 1", "\u017fELECT 1", "INSER\u0442 INTO t VALUES (1)"])
def test_only_ascii_letters_form_keywords(sql: str) -> None:
    assert classify(sql) == StatementKind.UNSPECIFIED


def test_lowercase_ascii_keyword_is_recognized() -> None:
    assert classify("update t set x = 1 where true") == StatementKind.DATA_CHANGE


def test_keyword_sets_order_and_contents():
    assert list(KEYWORD_SETS) == [
        StatementKind.QUERY,
        StatementKind.DATA_CHANGE,
        StatementKind.SCHEMA_CHANGE,
    ]
    assert KEYWORD_SETS[StatementKind.QUERY] == {"SELECT", "WITH"}
    assert KEYWORD_SETS[StatementKind.DATA_CHANGE] == {"INSERT", "UPDATE", "DELETE"}
    assert KEYWORD_SETS[StatementKind.SCHEMA_CHANGE] == {"CREATE", "ALTER", "DROP"}


def test_keyword_sets_are_read_only():
    with pytest.raises(TypeError):
        KEYWORD_SETS[StatementKind.QUERY] = frozenset({"SHOW"})  # type: ignore[index]


def test_parse_script_pairs_statements_with_kinds():
    script = (
        "CREATE TABLE t (id INT64) PRIMARY KEY (id);\n"
        "INSERT INTO t (id) VALUES (1);\n"
        "-- check it\n"
        "SELECT id FROM t"
    )
    assert parse_script(script) == [
        Statement("CREATE TABLE t (id INT64) PRIMARY KEY (id)", StatementKind.SCHEMA_CHANGE),
        Statement("INSERT INTO t (id) VALUES (1)", StatementKind.DATA_CHANGE),
        Statement("-- check it\nSELECT id FROM t", StatementKind.QUERY),
    ]
