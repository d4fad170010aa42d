"""Script parsing: split a script into statements and classify each one."""

from __future__ import annotations

from spanscript.script._types import KEYWORD_SETS, Statement, StatementKind
from spanscript.script.classify import classify, first_keyword
from spanscript.script.split import find_delimiter, split

__all__ = [
    "KEYWORD_SETS",
    "Statement",
    "StatementKind",
    "classify",
    "find_delimiter",
    "first_keyword",
    "parse_script",
    "split",
]


def parse_script(script: str) -> list[Statement]:
    """Split ``script`` and pair every statement with its kind, in order."""
    return [Statement(text=sql, kind=classify(sql)) for sql in split(script)]
