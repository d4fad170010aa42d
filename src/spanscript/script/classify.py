"""Classify statements by their first keyword outside comments."""

from __future__ import annotations

import re

from spanscript.script._types import KEYWORD_SETS, StatementKind
from spanscript.script.scanner import Scanner

# ASCII letters only: Unicode case mapping upper-cases "ſ" to "S".
_LEADING_WORD_RE = re.compile(r"[A-Za-z]+", re.ASCII)


def first_keyword(sql: str) -> str:
    """Return the first run of non-whitespace characters outside comments.

    A comment ends the run: ``SELECT/* x */1`` yields ``SELECT``.
    """
    keyword: list[str] = []
    scanner = Scanner(sql, strings=False)
    while not scanner.at_end:
        char = scanner.advance()
        if char is None or char.isspace():
            if keyword:
                break
            continue
        keyword.append(char)
    return "".join(keyword)


def classify(sql: str) -> StatementKind:
    """Map a statement to the kind that decides its transaction mode.

    Case-insensitive. Only the leading letters of the first keyword count, so
    ``SELECT*FROM t`` is a query while ``EXPLAIN SELECT 1`` is UNSPECIFIED.
    """
    match = _LEADING_WORD_RE.match(first_keyword(sql))
    if match is None:
        return StatementKind.UNSPECIFIED
    word = match.group().upper()
    for kind, keywords in KEYWORD_SETS.items():
        if word in keywords:
            return kind
    return StatementKind.UNSPECIFIED
