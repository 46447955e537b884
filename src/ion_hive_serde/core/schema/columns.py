"""
Schema de colunas de uma tabela.

O `ColumnSchema` é a visão imutável, emprestada do host, dos nomes e
tipos declarados. A ordem das colunas define o layout do buffer de linha.

Invariantes:
    - Nomes únicos e não vazios
    - `len(names) == len(types)`
    - `index` de cada coluna é sua posição no schema
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

from ..exceptions import SchemaError
from .types import TableType, parse_table_type


@dataclass(frozen=True)
class Column:
    index: int
    name: str
    table_type: TableType


class ColumnSchema:
    """Sequência ordenada e imutável de colunas."""

    def __init__(self, columns: Sequence[Column]) -> None:
        self._columns: Tuple[Column, ...] = tuple(columns)
        self._by_name: Dict[str, Column] = {c.name: c for c in self._columns}

    @classmethod
    def from_lists(
        cls,
        names: Sequence[str],
        types: Sequence[Union[str, TableType]],
    ) -> "ColumnSchema":
        """Constrói o schema a partir das listas paralelas fornecidas pelo host.

        Raises:
            SchemaError: listas de tamanhos diferentes, nomes vazios/duplicados
                ou tipos malformados.
        """
        names = list(names)
        types = list(types)
        if len(names) != len(types):
            raise SchemaError(
                message=f"Column names and types differ in length: {len(names)} vs {len(types)}",
                details={"names": names, "types": [str(t) for t in types]},
            )

        seen = set()
        columns = []
        for index, (name, declared) in enumerate(zip(names, types)):
            if not isinstance(name, str) or not name.strip():
                raise SchemaError(
                    message=f"Column {index} has an empty name",
                    details={"index": index},
                )
            if name in seen:
                raise SchemaError(
                    message=f"Duplicate column name: {name}",
                    details={"column": name},
                )
            seen.add(name)

            table_type = declared if isinstance(declared, TableType) else parse_table_type(declared)
            columns.append(Column(index=index, name=name, table_type=table_type))

        return cls(columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __getitem__(self, index: int) -> Column:
        return self._columns[index]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Optional[Column]:
        return self._by_name.get(name)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self._columns)

    @property
    def types(self) -> Tuple[TableType, ...]:
        return tuple(c.table_type for c in self._columns)

    def __repr__(self) -> str:
        inner = ", ".join(f"{c.name}:{c.table_type}" for c in self._columns)
        return f"ColumnSchema({inner})"
