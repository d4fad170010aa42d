"""Split a script into statements on semicolons outside strings and comments."""

from __future__ import annotations

from spanscript.script.scanner import Scanner

DELIMITER = ";"


def find_delimiter(text: str) -> int | None:
    """Index of the first statement-terminating semicolon, or None."""
    scanner = Scanner(text)
    while not scanner.at_end:
        index = scanner.pos
        if scanner.advance() == DELIMITER:
            return index
    return None


def split(script: str) -> list[str]:
    """Split ``script`` into trimmed, non-empty statements in source order.

    The terminating semicolon is not part of the statement text. A script
    without any delimiter is returned as a single statement. An unterminated
    string or comment runs to the end of the script.
    """
    statements: list[str] = []
    scanner = Scanner(script)
    start = 0
    while not scanner.at_end:
        index = scanner.pos
        if scanner.advance() == DELIMITER:
            statements.append(script[start:index].strip())
            start = index + 1
    statements.append(script[start:].strip())
    return [s for s in statements if s]
