"""Internal types for script parsing."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType


class StatementKind(enum.Enum):
    UNSPECIFIED = "unspecified"
    QUERY = "query"
    DATA_CHANGE = "dml"
    SCHEMA_CHANGE = "ddl"


# Checked in insertion order; first match wins.
KEYWORD_SETS = MappingProxyType({
    StatementKind.QUERY: frozenset({"SELECT", "WITH"}),
    StatementKind.DATA_CHANGE: frozenset({"INSERT", "UPDATE", "DELETE"}),
    StatementKind.SCHEMA_CHANGE: frozenset({"CREATE", "ALTER", "DROP"}),
})


@dataclass(frozen=True)
class Statement:
    text: str
    kind: StatementKind
