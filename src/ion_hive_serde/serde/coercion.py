"""
Coerções de valor entre documento Ion e tipos de tabela.

Responsabilidades:
  - converter valores extraídos para o tipo declarado da coluna
  - aplicar a política de overflow da coluna (estrita → erro, relaxada →
    valor aproximado: clamp numérico, truncamento de texto)
  - normalizar timestamps sem fuso com o offset configurado
  - sinalizar incompatibilidades estruturais (`StructuralMismatchError`)

Regras:
  - null (`None` ou `IonPyNull`) vira `None`, sempre
  - `bool` nunca é aceito como inteiro
  - containers são coagidos elemento a elemento com a política da coluna
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

import numpy as np
from amazon.ion.core import IonType
from amazon.ion.simple_types import IonPyNull
from amazon.ion.symbols import SymbolToken

from ion_hive_serde.core.exceptions import ColumnOverflowError, StructuralMismatchError
from ion_hive_serde.core.schema.types import MAX_DECIMAL_PRECISION, TableCategory, TableType

_INTEGER_DTYPES = {
    TableCategory.TINYINT: np.int8,
    TableCategory.SMALLINT: np.int16,
    TableCategory.INT: np.int32,
    TableCategory.BIGINT: np.int64,
}

_FLOAT32_MAX = float(np.finfo(np.float32).max)
_FLOAT64_MAX = float(np.finfo(np.float64).max)
_DECIMAL_CONTEXT = Context(prec=MAX_DECIMAL_PRECISION + 2)


def is_null(value: Any) -> bool:
    return value is None or isinstance(value, IonPyNull)


def describe(value: Any) -> str:
    """Nome do tipo Ion (quando disponível) ou Python do valor."""
    ion_type = getattr(value, "ion_type", None)
    if ion_type is not None:
        return ion_type.name.lower()
    return type(value).__name__


@dataclass(frozen=True)
class CoercionContext:
    """Política aplicada a todos os valores de uma coluna."""

    column: str
    fail_on_overflow: bool = True
    timestamp_offset_minutes: int = 0

    @property
    def tzinfo(self) -> timezone:
        return timezone(timedelta(minutes=self.timestamp_offset_minutes))

    def overflow(self, table_type: TableType, value: Any, reason: str) -> ColumnOverflowError:
        return ColumnOverflowError(
            message=f"Value for column '{self.column}' overflows {table_type}: {reason}",
            details={"column": self.column, "type": table_type.type_name(), "value": repr(value)},
            hint=f"Set ion.{self.column}.fail_on_overflow=false to accept a best-effort value.",
        )

    def mismatch(self, table_type: TableType, value: Any) -> StructuralMismatchError:
        return StructuralMismatchError(
            message=f"Column '{self.column}' expects {table_type}, got {describe(value)}",
            details={"column": self.column, "expected": table_type.type_name(), "actual": describe(value)},
        )


# -----------------------------
# Escalares
# -----------------------------

def is_boolean(value: Any) -> bool:
    # IonPyBool é subclasse de int; o tipo real está em `ion_type`
    return isinstance(value, bool) or getattr(value, "ion_type", None) is IonType.BOOL


def is_symbol(value: Any) -> bool:
    return isinstance(value, SymbolToken)


def _coerce_integer(value: Any, table_type: TableType, ctx: CoercionContext) -> int:
    if is_boolean(value):
        raise ctx.mismatch(table_type, value)
    if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        value = int(value)
    if not isinstance(value, int):
        raise ctx.mismatch(table_type, value)

    info = np.iinfo(_INTEGER_DTYPES[table_type.category])
    if info.min <= value <= info.max:
        return int(value)
    if ctx.fail_on_overflow:
        raise ctx.overflow(table_type, value, f"outside [{info.min}, {info.max}]")
    return int(info.max) if value > info.max else int(info.min)


def _real(value: Any, table_type: TableType, ctx: CoercionContext) -> Any:
    if is_boolean(value) or not isinstance(value, (int, float, Decimal)):
        raise ctx.mismatch(table_type, value)
    return value


def _is_finite_input(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return np.isfinite(value)
    return True


def _coerce_float(value: Any, table_type: TableType, ctx: CoercionContext) -> float:
    raw = _real(value, table_type, ctx)
    is_double = table_type.category is TableCategory.DOUBLE
    limit = _FLOAT64_MAX if is_double else _FLOAT32_MAX

    try:
        number = float(raw)
    except OverflowError:
        # int Ion de precisão arbitrária além do maior float64
        number = None

    # inf/nan do próprio documento passam; overflow só de valores finitos
    if number is not None and (abs(number) <= limit or not _is_finite_input(raw)):
        return number if is_double else float(np.float32(number))

    if ctx.fail_on_overflow:
        raise ctx.overflow(table_type, value, f"outside {'float64' if is_double else 'float32'} range")
    return limit if raw > 0 else -limit


def _coerce_decimal(value: Any, table_type: TableType, ctx: CoercionContext) -> Decimal:
    raw = _real(value, table_type, ctx)
    number = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    if not number.is_finite():
        raise ctx.mismatch(table_type, value)

    quantum = Decimal(1).scaleb(-table_type.scale)
    limit = Decimal(10) ** (table_type.precision - table_type.scale)
    # arredondamento de escala pode levar o valor ao limite (99.995 → 100.00)
    if abs(number) < limit:
        quantized = number.quantize(quantum, rounding=ROUND_HALF_UP, context=_DECIMAL_CONTEXT)
        if abs(quantized) < limit:
            return quantized

    if ctx.fail_on_overflow:
        raise ctx.overflow(
            table_type, value, f"more than {table_type.precision - table_type.scale} integer digits"
        )
    largest = limit - quantum
    return largest if number > 0 else -largest


def _coerce_text(value: Any, table_type: TableType, ctx: CoercionContext) -> str:
    if is_symbol(value):
        value = value.text
    if not isinstance(value, str):
        raise ctx.mismatch(table_type, value)
    text = str(value)
    if table_type.category is TableCategory.STRING or len(text) <= table_type.max_length:
        return text
    if ctx.fail_on_overflow:
        raise ctx.overflow(table_type, value, f"length {len(text)} exceeds {table_type.max_length}")
    return text[: table_type.max_length]


def _coerce_timestamp(value: Any, table_type: TableType, ctx: CoercionContext) -> Any:
    if table_type.category is TableCategory.DATE:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        raise ctx.mismatch(table_type, value)

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=ctx.tzinfo)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=ctx.tzinfo)
    raise ctx.mismatch(table_type, value)


# -----------------------------
# Entrada pública
# -----------------------------

def coerce_value(value: Any, table_type: TableType, ctx: CoercionContext) -> Any:
    """Coage um valor para `table_type`.

    Raises:
        ColumnOverflowError: conversão com perda e política estrita.
        StructuralMismatchError: valor incompatível com o tipo.
    """
    if is_null(value):
        return None

    category = table_type.category

    if category is TableCategory.BOOLEAN:
        if is_boolean(value):
            return bool(value)
        raise ctx.mismatch(table_type, value)

    if category in _INTEGER_DTYPES:
        return _coerce_integer(value, table_type, ctx)

    if category in (TableCategory.FLOAT, TableCategory.DOUBLE):
        return _coerce_float(value, table_type, ctx)

    if category is TableCategory.DECIMAL:
        return _coerce_decimal(value, table_type, ctx)

    if category in (TableCategory.STRING, TableCategory.CHAR, TableCategory.VARCHAR):
        return _coerce_text(value, table_type, ctx)

    if category is TableCategory.BINARY:
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        raise ctx.mismatch(table_type, value)

    if category in (TableCategory.TIMESTAMP, TableCategory.DATE):
        return _coerce_timestamp(value, table_type, ctx)

    if category is TableCategory.ARRAY:
        if isinstance(value, (list, tuple)) and not is_symbol(value):
            return [coerce_value(v, table_type.element_type, ctx) for v in value]
        raise ctx.mismatch(table_type, value)

    if category is TableCategory.MAP:
        if isinstance(value, Mapping):
            return {
                str(k): coerce_value(v, table_type.value_type, ctx) for k, v in value.items()
            }
        raise ctx.mismatch(table_type, value)

    if category is TableCategory.STRUCT:
        if isinstance(value, Mapping):
            return {name: coerce_value(value.get(name), t, ctx) for name, t in table_type.fields}
        raise ctx.mismatch(table_type, value)

    raise ctx.mismatch(table_type, value)
