"""
Pipeline de leitura: documento Ion → linhas da tabela.

Responsabilidades:
  - avaliar o plano de extração da configuração sobre cada documento
  - coagir cada coluna de cada linha ao tipo declarado
  - rotular falhas por documento sem interromper o lote

Política de erros:
  - `StructuralMismatchError` anula a coluna quando `ion.ignore_malformed=true`;
    caso contrário aborta o documento
  - `ColumnOverflowError` segue a política de overflow da coluna
"""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple, Union

import pandas as pd
from amazon.ion import simpleion

from ion_hive_serde.core.exceptions import ColumnOverflowError, StructuralMismatchError
from ion_hive_serde.core.properties import SerDeConfiguration
from ion_hive_serde.core.trace import ResolutionTrace

from .coercion import CoercionContext, coerce_value
from .results import DocumentFailure, ReadResult


def decode(data: Union[bytes, str]) -> List[Any]:
    """Decodifica Ion texto ou binário em valores de topo."""
    return list(simpleion.loads(data, single_value=False))


class IonDeserializer:
    """Converte documentos em linhas usando uma `SerDeConfiguration`."""

    def __init__(self, configuration: SerDeConfiguration) -> None:
        self.configuration = configuration
        self.trace = ResolutionTrace(session_id=configuration.trace.session_id)
        self._contexts = tuple(
            CoercionContext(
                column=column.name,
                fail_on_overflow=configuration.fail_on_overflow_for(column.name),
                timestamp_offset_minutes=configuration.timestamp_offset_minutes,
            )
            for column in configuration.columns
        )

    def _coerce_row(self, row: Tuple[Any, ...]) -> Tuple[Any, ...]:
        out = []
        for column, ctx, value in zip(self.configuration.columns, self._contexts, row):
            try:
                out.append(coerce_value(value, column.table_type, ctx))
            except StructuralMismatchError as e:
                if not self.configuration.ignore_malformed:
                    raise
                self.trace.log(
                    component="read",
                    level="warning",
                    message="malformed value replaced by null",
                    column=column.name,
                    error=e.to_dict(),
                )
                out.append(None)
        return tuple(out)

    def deserialize(self, document: Any) -> List[Tuple[Any, ...]]:
        """Linhas produzidas por um documento (sempre ao menos uma).

        Raises:
            StructuralMismatchError: valor incompatível e `ignore_malformed` falso.
            ColumnOverflowError: overflow em coluna com política estrita.
        """
        outcome = self.configuration.build_extraction_plan(document)
        return [self._coerce_row(row) for row in outcome.rows]

    def read(self, documents: Iterable[Any]) -> ReadResult:
        rows: List[Tuple[Any, ...]] = []
        failures: List[DocumentFailure] = []
        count = 0
        for index, document in enumerate(documents):
            count += 1
            try:
                rows.extend(self.deserialize(document))
            except (StructuralMismatchError, ColumnOverflowError) as e:
                failures.append(DocumentFailure(index=index, error=e))
                self.trace.log(
                    component="read",
                    level="error",
                    message=e.message,
                    document_index=index,
                    error=e.to_dict(),
                )
        return ReadResult(rows=rows, failures=failures, documents=count)

    def read_bytes(self, data: Union[bytes, str]) -> ReadResult:
        return self.read(decode(data))

    def read_frame(self, documents: Iterable[Any], strict: bool = True) -> pd.DataFrame:
        """Lê documentos para um DataFrame com as colunas na ordem da tabela.

        Com `strict=True` a primeira falha é relançada; caso contrário as
        falhas ficam registradas na trilha do deserializer.
        """
        result = self.read(documents)
        if strict and result.failures:
            raise result.failures[0].error
        return pd.DataFrame.from_records(result.rows, columns=list(self.configuration.columns.names))
