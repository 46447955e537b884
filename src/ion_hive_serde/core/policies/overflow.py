"""
Política de overflow por coluna.

Resolução (do mais específico para o mais geral):
    1. `ion.<coluna>.fail_on_overflow`
    2. coluna listada em `ion.fail_on_overflow.inverted_columns` → `not default`
    3. `ion.fail_on_overflow` (default `true`)

Uma coluna listada como invertida cujo valor explícito contradiz a inversão
é um override conflitante.

Invariantes:
    - `fail_on_overflow_for` é total sobre as colunas declaradas
    - Consultar coluna não declarada é erro de programação (`KeyError`)
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping

from ..config.source import ConfigurationSource
from ..exceptions import ConfigurationError, ConflictingOverrideError, raise_if_any
from ..schema.columns import ColumnSchema
from ._options import (
    FAIL_ON_OVERFLOW_KEY,
    INVERTED_COLUMNS_KEY,
    named_column_options,
    parse_bool,
    unknown_column,
)

DEFAULT_FAIL_ON_OVERFLOW = True


@dataclass(frozen=True)
class OverflowPolicy:
    default: bool
    per_column: Mapping[str, bool]

    def fail_on_overflow_for(self, column_name: str) -> bool:
        return self.per_column[column_name]

    def to_dict(self) -> Dict[str, object]:
        return {"default": self.default, "columns": dict(self.per_column)}


def resolve_overflow_policy(source: ConfigurationSource, columns: ColumnSchema) -> OverflowPolicy:
    errors: List[ConfigurationError] = []
    default = parse_bool(source, FAIL_ON_OVERFLOW_KEY, DEFAULT_FAIL_ON_OVERFLOW, errors)

    inverted = set()
    for name in source.get_list(INVERTED_COLUMNS_KEY):
        if name not in columns:
            errors.append(unknown_column(INVERTED_COLUMNS_KEY, name, columns))
            continue
        inverted.add(name)

    explicit: Dict[str, bool] = {}
    for key, name, _raw in named_column_options(source, "fail_on_overflow", columns, errors):
        before = len(errors)
        value = parse_bool(source, key, default, errors)
        if len(errors) == before:
            explicit[name] = value

    per_column: Dict[str, bool] = {}
    for column in columns:
        value = default
        if column.name in inverted:
            value = not default
        if column.name in explicit:
            if column.name in inverted and explicit[column.name] != value:
                errors.append(
                    ConflictingOverrideError(
                        message=(
                            f"Column '{column.name}' is listed in {INVERTED_COLUMNS_KEY} "
                            f"but ion.{column.name}.fail_on_overflow={str(explicit[column.name]).lower()} "
                            f"contradicts the inversion"
                        ),
                        details={
                            "column": column.name,
                            "inverted": value,
                            "explicit": explicit[column.name],
                        },
                    )
                )
            value = explicit[column.name]
        per_column[column.name] = value

    raise_if_any(errors)
    return OverflowPolicy(default=default, per_column=MappingProxyType(per_column))
