"""
Override do tipo Ion de serialização por coluna.

Chaves aceitas:
    - `ion.column[<índice>].serialize_as`
    - `ion.<coluna>.serialize_as`

Valores são nomes de `IonType` (case-insensitive). Só tipos de tabela com
mais de uma representação Ion legal aceitam override; o valor precisa
pertencer ao conjunto legal do tipo. Duas chaves para a mesma coluna só
são aceitas quando concordam.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

from amazon.ion.core import IonType

from ..config.source import ConfigurationSource
from ..exceptions import (
    ConfigurationError,
    ConflictingOverrideError,
    InvalidTypeOverrideError,
    raise_if_any,
)
from ..schema.columns import Column, ColumnSchema
from ..schema.types import canonical_ion_type, legal_ion_types
from ._options import indexed_column_options, named_column_options


@dataclass(frozen=True)
class SerializeAsPolicy:
    ion_types: Tuple[IonType, ...]
    overridden: FrozenSet[int]

    def serialization_ion_type_for(self, index: int) -> IonType:
        return self.ion_types[index]

    def to_dict(self) -> Dict[str, object]:
        return {
            "types": [t.name for t in self.ion_types],
            "overridden": sorted(self.overridden),
        }


def _legal_names(column: Column) -> List[str]:
    return [t.name.lower() for t in legal_ion_types(column.table_type)]


def _parse_override(key: str, raw: str, column: Column, errors: List[ConfigurationError]):
    legal = legal_ion_types(column.table_type)
    requested = (raw or "").strip()

    if len(legal) == 1:
        errors.append(
            InvalidTypeOverrideError(
                message=(
                    f"{key}: column '{column.name}' of type {column.table_type} has a single "
                    f"Ion mapping ({legal[0].name.lower()}) and does not accept serialize_as"
                ),
                details={
                    "column": column.name,
                    "requested": requested,
                    "allowed": _legal_names(column),
                },
            )
        )
        return None

    ion_type = IonType.__members__.get(requested.upper())
    if ion_type is None or ion_type not in legal:
        errors.append(
            InvalidTypeOverrideError(
                message=(
                    f"{key}: '{requested}' is not a legal Ion type for column '{column.name}' "
                    f"of type {column.table_type}; expected one of {_legal_names(column)}"
                ),
                details={
                    "column": column.name,
                    "requested": requested,
                    "allowed": _legal_names(column),
                },
            )
        )
        return None
    return ion_type


def resolve_serialize_as_policy(source: ConfigurationSource, columns: ColumnSchema) -> SerializeAsPolicy:
    errors: List[ConfigurationError] = []
    chosen: Dict[int, Tuple[str, IonType]] = {}

    candidates = list(indexed_column_options(source, "serialize_as", columns, errors))
    candidates += [
        (key, columns.get(name).index, raw)
        for key, name, raw in named_column_options(source, "serialize_as", columns, errors)
    ]

    for key, index, raw in candidates:
        column = columns[index]
        ion_type = _parse_override(key, raw, column, errors)
        if ion_type is None:
            continue
        if index in chosen and chosen[index][1] is not ion_type:
            previous_key, previous = chosen[index]
            errors.append(
                ConflictingOverrideError(
                    message=(
                        f"Conflicting serialize_as for column '{column.name}': "
                        f"{previous_key}={previous.name.lower()} vs {key}={ion_type.name.lower()}"
                    ),
                    details={
                        "column": column.name,
                        "keys": [previous_key, key],
                        "values": [previous.name.lower(), ion_type.name.lower()],
                    },
                )
            )
            continue
        chosen[index] = (key, ion_type)

    raise_if_any(errors)

    ion_types = tuple(
        chosen[c.index][1] if c.index in chosen else canonical_ion_type(c.table_type) for c in columns
    )
    return SerializeAsPolicy(ion_types=ion_types, overridden=frozenset(chosen))
