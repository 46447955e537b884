"""
Pipeline de escrita: linha da tabela → struct Ion.

Para cada coluna a fachada é consultada:
  - estratégia de null (OMIT / UNTYPED / TYPED)
  - tipo Ion de serialização (`serialize_as`)
  - política de overflow
  - destino no struct (plano de composição)

Nulls aninhados:
  - elementos de list/sexp nulos são sempre `null` sem tipo (omitir
    deslocaria as posições)
  - campos de map/struct seguem a estratégia da tabela
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from amazon.ion import simpleion
from amazon.ion.core import IonType, Timestamp, TimestampPrecision
from amazon.ion.simple_types import IonPyBytes, IonPyList, IonPyNull, IonPySymbol

from ion_hive_serde.core.exceptions import ColumnOverflowError, StructuralMismatchError
from ion_hive_serde.core.policies.nulls import SerializeNullStrategy
from ion_hive_serde.core.properties import SerDeConfiguration
from ion_hive_serde.core.schema.types import TableCategory, TableType, canonical_ion_type
from ion_hive_serde.core.trace import ResolutionTrace

from .coercion import CoercionContext, coerce_value, is_null
from .results import DocumentFailure, WriteResult

_OMITTED = object()


class IonSerializer:
    """Compõe structs Ion a partir de linhas usando uma `SerDeConfiguration`."""

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

    # -----------------------------
    # Nulls
    # -----------------------------

    def _null(self, ion_type: IonType) -> Any:
        strategy = self.configuration.serialize_null
        if strategy is SerializeNullStrategy.OMIT:
            return _OMITTED
        if strategy is SerializeNullStrategy.UNTYPED:
            return None
        return IonPyNull.from_value(ion_type, None)

    # -----------------------------
    # Renderização
    # -----------------------------

    def _render_fields(self, items, value_type_for) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for name, value in items:
            value_type = value_type_for(name)
            rendered = self._render(value, value_type, canonical_ion_type(value_type))
            if rendered is not _OMITTED:
                out[name] = rendered
        return out

    def _render(self, value: Any, table_type: TableType, ion_type: IonType) -> Any:
        if value is None:
            return self._null(ion_type)

        category = table_type.category

        if category is TableCategory.ARRAY:
            element_type = table_type.element_type
            elements = [
                None if v is None else self._render(v, element_type, canonical_ion_type(element_type))
                for v in value
            ]
            if ion_type is IonType.SEXP:
                return IonPyList.from_value(IonType.SEXP, elements)
            return elements

        if category is TableCategory.MAP:
            return self._render_fields(value.items(), lambda _name: table_type.value_type)

        if category is TableCategory.STRUCT:
            field_types = dict(table_type.fields)
            return self._render_fields(value.items(), field_types.__getitem__)

        if ion_type is IonType.SYMBOL:
            return IonPySymbol.from_value(IonType.SYMBOL, value)

        if ion_type is IonType.CLOB:
            return IonPyBytes.from_value(IonType.CLOB, value)

        if category is TableCategory.DATE and not isinstance(value, datetime) and isinstance(value, date):
            return Timestamp(value.year, value.month, value.day, precision=TimestampPrecision.DAY)

        return value

    # -----------------------------
    # API
    # -----------------------------

    def serialize(self, row: Sequence[Any]) -> Dict[str, Any]:
        """Compõe o struct de uma linha (sequência indexada por coluna).

        Raises:
            StructuralMismatchError: linha com aridade errada ou valor incompatível.
            ColumnOverflowError: overflow em coluna com política estrita.
        """
        columns = self.configuration.columns
        if len(row) != len(columns):
            raise StructuralMismatchError(
                message=f"Row has {len(row)} values, table has {len(columns)} columns",
                details={"expected": len(columns), "actual": len(row)},
            )

        plan = self.configuration.composition_plan
        struct: Dict[str, Any] = {}
        for column, ctx in zip(columns, self._contexts):
            ion_type = self.configuration.serialization_ion_type_for(column.index)
            value = row[column.index]
            if is_null(value):
                rendered = self._null(ion_type)
            else:
                coerced = coerce_value(value, column.table_type, ctx)
                rendered = self._render(coerced, column.table_type, ion_type)
            if rendered is _OMITTED:
                continue
            plan.place(struct, column.index, rendered)
        return struct

    def encode(self, structs: Iterable[Dict[str, Any]], encoding: Optional[Any] = None) -> Union[bytes, str]:
        """Codifica structs como stream Ion na codificação configurada."""
        encoding = encoding or self.configuration.encoding
        return simpleion.dumps(list(structs), binary=encoding.is_binary, sequence_as_stream=True)

    def write(self, rows: Iterable[Sequence[Any]]) -> WriteResult:
        structs: List[Dict[str, Any]] = []
        failures: List[DocumentFailure] = []
        for index, row in enumerate(rows):
            try:
                structs.append(self.serialize(row))
            except (StructuralMismatchError, ColumnOverflowError) as e:
                failures.append(DocumentFailure(index=index, error=e))
                self.trace.log(
                    component="write",
                    level="error",
                    message=e.message,
                    row_index=index,
                    error=e.to_dict(),
                )
        return WriteResult(structs=structs, payload=self.encode(structs), failures=failures)
