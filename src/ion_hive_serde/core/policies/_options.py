"""Helpers compartilhados pelos resolvers de política."""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from ..config.source import ConfigurationSource
from ..exceptions import ConfigurationError, InvalidOptionValueError, UnknownColumnError
from ..schema.columns import ColumnSchema

PREFIX = "ion."

ENCODING_KEY = "ion.encoding"
SERIALIZE_NULL_KEY = "ion.serialize_null"
TIMESTAMP_OFFSET_KEY = "ion.timestamp.serialization_offset"
FAIL_ON_OVERFLOW_KEY = "ion.fail_on_overflow"
INVERTED_COLUMNS_KEY = "ion.fail_on_overflow.inverted_columns"
CASE_SENSITIVE_KEY = "ion.path_extractor.case_sensitive"
ALLOW_ALIASING_KEY = "ion.path_extractor.allow_aliasing"
IGNORE_MALFORMED_KEY = "ion.ignore_malformed"

GLOBAL_KEYS = frozenset(
    {
        ENCODING_KEY,
        SERIALIZE_NULL_KEY,
        TIMESTAMP_OFFSET_KEY,
        FAIL_ON_OVERFLOW_KEY,
        INVERTED_COLUMNS_KEY,
        CASE_SENSITIVE_KEY,
        ALLOW_ALIASING_KEY,
        IGNORE_MALFORMED_KEY,
    }
)

_INDEXED_KEY = re.compile(r"^ion\.column\[(?P<index>\d+)\]\.(?P<option>[a-z_]+)$")
_NAMED_KEY = re.compile(r"^ion\.(?P<name>.+)\.(?P<option>fail_on_overflow|path_extractor|serialize_as)$")


def parse_bool(
    source: ConfigurationSource,
    key: str,
    default: bool,
    errors: List[ConfigurationError],
) -> bool:
    raw = source.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in ("true", "false"):
        return value == "true"
    errors.append(
        InvalidOptionValueError(
            message=f"Invalid boolean for {key}: {raw!r}; expected one of ['false', 'true']",
            details={"key": key, "value": raw, "allowed": ["false", "true"]},
        )
    )
    return default


def parse_enum(
    source: ConfigurationSource,
    key: str,
    enum_cls,
    default,
    errors: List[ConfigurationError],
):
    """Casamento exato contra os nomes do enum."""
    raw = source.get(key)
    if raw is None:
        return default
    allowed = [m.name for m in enum_cls]
    if raw in allowed:
        return enum_cls[raw]
    errors.append(
        InvalidOptionValueError(
            message=f"Invalid value for {key}: {raw!r}; expected one of {allowed}",
            details={"key": key, "value": raw, "allowed": allowed},
        )
    )
    return default


def named_column_options(
    source: ConfigurationSource,
    option: str,
    columns: ColumnSchema,
    errors: List[ConfigurationError],
) -> List[Tuple[str, str, str]]:
    """Lista `(key, column_name, raw_value)` para `ion.<coluna>.<option>`.

    Chaves que referenciam colunas não declaradas viram `UnknownColumnError`.
    """
    found = []
    for key in sorted(source.keys()):
        if _INDEXED_KEY.match(key):
            continue
        m = _NAMED_KEY.match(key)
        if m is None or m.group("option") != option:
            continue
        name = m.group("name")
        if name not in columns:
            errors.append(unknown_column(key, name, columns))
            continue
        found.append((key, name, source.get(key)))
    return found


def indexed_column_options(
    source: ConfigurationSource,
    option: str,
    columns: ColumnSchema,
    errors: List[ConfigurationError],
) -> List[Tuple[str, int, str]]:
    """Lista `(key, column_index, raw_value)` para `ion.column[N].<option>`."""
    found = []
    for key in sorted(source.keys()):
        m = _INDEXED_KEY.match(key)
        if m is None or m.group("option") != option:
            continue
        index = int(m.group("index"))
        if index >= len(columns):
            errors.append(
                UnknownColumnError(
                    message=f"{key} references column index {index}, table has {len(columns)} columns",
                    details={"key": key, "index": index, "column_count": len(columns)},
                )
            )
            continue
        found.append((key, index, source.get(key)))
    return found


def unknown_column(key: str, name: str, columns: ColumnSchema) -> UnknownColumnError:
    return UnknownColumnError(
        message=f"{key} references unknown column '{name}'",
        details={"key": key, "column": name, "columns": list(columns.names)},
        hint="Column names in options must match the table definition exactly.",
    )


def unrecognized_keys(source: ConfigurationSource, extra: Sequence[str] = ()) -> List[str]:
    """Chaves `ion.*` que nenhum resolver interpreta."""
    out = []
    for key in sorted(source.keys()):
        if not key.startswith(PREFIX) or key in GLOBAL_KEYS or key in extra:
            continue
        indexed = _INDEXED_KEY.match(key)
        if indexed is not None and indexed.group("option") == "serialize_as":
            continue
        if indexed is None and _NAMED_KEY.match(key):
            continue
        out.append(key)
    return out
