"""Static completion items for Spanner keywords and built-in functions."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from spanscript.script import KEYWORD_SETS

SQL_KEYWORDS = tuple(kw for keywords in KEYWORD_SETS.values() for kw in sorted(keywords))

NUMERIC_FUNCTIONS = (
    "ABS,SIGN,IS_INF,IS_NAN,IEEE_DIVIDE,SQRT,POW,POWER,EXP,LN,LOG,LOG10,GREATEST,LEAST,"
    "DIV,MOD,ROUND,TRUNC,CEIL,CEILING,FLOOR,COS,COSH,ACOS,ACOSH,SIN,SINH,ASIN,ASINH,TAN,"
    "TANH,ATAN,ATANH,ATAN2,FARM_FINGERPRINT,SHA1,SHA256,SHA512"
).split(",")

STRING_FUNCTIONS = (
    "BYTE_LENGTH,CHAR_LENGTH,CHARACTER_LENGTH,CODE_POINTS_TO_BYTES,CODE_POINTS_TO_STRING,"
    "CONCAT,ENDS_WITH,FORMAT,FROM_BASE64,FROM_HEX,LENGTH,LPAD,LOWER,LTRIM,REGEXP_CONTAINS,"
    "REGEXP_EXTRACT,REGEXP_EXTRACT_ALL,REGEXP_REPLACE,REPLACE,REPEAT,REVERSE,RPAD,RTRIM,"
    "SAFE_CONVERT_BYTES_TO_STRING,SPLIT,STARTS_WITH,STRPOS,SUBSTR,TO_BASE64,TO_CODE_POINTS,"
    "TO_HEX,TRIM,UPPER,JSON_QUERY,JSON_VALUE"
).split(",")

DATE_FUNCTIONS = (
    "CURRENT_DATE,EXTRACT,DATE,DATE_ADD,DATE_SUB,DATE_DIFF,DATE_TRUNC,DATE_FROM_UNIX_DATE,"
    "FORMAT_DATE,PARSE_DATE,UNIX_DATE,CURRENT_TIMESTAMP,STRING,TIMESTAMP,TIMESTAMP_ADD,"
    "TIMESTAMP_SUB,TIMESTAMP_DIFF,TIMESTAMP_TRUNC,FORMAT_TIMESTAMP,PARSE_TIMESTAMP,"
    "TIMESTAMP_SECONDS,TIMESTAMP_MILLIS,TIMESTAMP_MICROS,UNIX_SECONDS,UNIX_MILLIS,UNIX_MICROS"
).split(",")

# Keywords sort ahead of function names.
_KEYWORD_SORT_PREFIX = "2:"


@dataclass(frozen=True)
class Completion:
    label: str
    detail: str
    filter_text: str
    sort_text: str
    documentation: str


_cache: Mapping[str, Completion] | None = None
_cache_lock = threading.Lock()


def _build() -> Mapping[str, Completion]:
    keywords = set(SQL_KEYWORDS)
    items: dict[str, Completion] = {}
    for word in (*SQL_KEYWORDS, *NUMERIC_FUNCTIONS, *STRING_FUNCTIONS, *DATE_FUNCTIONS):
        prefix = _KEYWORD_SORT_PREFIX if word in keywords else ""
        items[word] = Completion(
            label=word,
            detail=word,
            filter_text=word,
            sort_text=f"{prefix}{word}",
            documentation=word,
        )
    return MappingProxyType(items)


def get_static_completions() -> Mapping[str, Completion]:
    """Return the completion items, building them once on first use.

    Concurrent first callers wait on the lock and all receive the same
    read-only mapping.
    """
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                _cache = _build()
    return _cache
