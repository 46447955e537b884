# tests/serde/test_coercion.py
"""
Testes das coerções de valor com política de overflow.

Valida:
- o mesmo valor sob política estrita (erro) e relaxada (valor aproximado)
- inteiros, float, decimal e texto com tamanho máximo
- timestamps sem fuso recebem o offset configurado
- incompatibilidades estruturais
- containers coagidos elemento a elemento
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import numpy as np
import pytest
from amazon.ion.core import IonType
from amazon.ion.simple_types import IonPyNull
from amazon.ion.symbols import SymbolToken

from ion_hive_serde.core.exceptions import ColumnOverflowError, StructuralMismatchError
from ion_hive_serde.core.schema import parse_table_type
from ion_hive_serde.serde import CoercionContext, coerce_value

STRICT = CoercionContext(column="c", fail_on_overflow=True)
RELAXED = CoercionContext(column="c", fail_on_overflow=False)


def _coerce(value, type_text, ctx=STRICT):
    return coerce_value(value, parse_table_type(type_text), ctx)


@pytest.mark.parametrize(
    "value, type_text, relaxed",
    [
        (300, "tinyint", 127),
        (-40000, "smallint", -32768),
        (2**31, "int", 2**31 - 1),
        (2**63, "bigint", 2**63 - 1),
        ("abcdef", "varchar(3)", "abc"),
        ("abcd", "char(2)", "ab"),
        (Decimal("123.456"), "decimal(4,2)", Decimal("99.99")),
        (Decimal("-99.999"), "decimal(4,2)", Decimal("-99.99")),
    ],
)
def test_same_value_fails_or_approximates(value, type_text, relaxed):
    with pytest.raises(ColumnOverflowError) as exc:
        _coerce(value, type_text)

    assert exc.value.details["column"] == "c"
    assert _coerce(value, type_text, RELAXED) == relaxed


def test_float_overflow_clamps_to_float32_range():
    with pytest.raises(ColumnOverflowError):
        _coerce(1e300, "float")

    assert _coerce(1e300, "float", RELAXED) == pytest.approx(3.4028234663852886e38)
    assert _coerce(1e300, "double") == 1e300


@pytest.mark.parametrize(
    "type_text, limit",
    [
        ("float", float(np.finfo(np.float32).max)),
        ("double", float(np.finfo(np.float64).max)),
    ],
)
def test_integers_beyond_float64_overflow_real_columns(type_text, limit):
    huge = 10**400

    with pytest.raises(ColumnOverflowError) as exc:
        _coerce(huge, type_text)

    assert exc.value.details["type"] == type_text
    assert _coerce(huge, type_text, RELAXED) == limit
    assert _coerce(-huge, type_text, RELAXED) == -limit


def test_finite_decimal_beyond_double_overflows():
    with pytest.raises(ColumnOverflowError):
        _coerce(Decimal("1e400"), "double")

    assert _coerce(Decimal("-1e400"), "double", RELAXED) == -float(np.finfo(np.float64).max)


def test_document_infinity_is_not_an_overflow():
    assert _coerce(float("inf"), "double") == float("inf")
    assert _coerce(float("-inf"), "float") == float("-inf")


def test_values_in_range_are_preserved():
    assert _coerce(127, "tinyint") == 127
    assert _coerce(Decimal("5"), "int") == 5
    assert _coerce(Decimal("1.005"), "decimal(5,2)") == Decimal("1.01")
    assert _coerce("abc", "char(3)") == "abc"
    assert _coerce(1.5, "float") == 1.5
    assert _coerce(3, "double") == 3.0


def test_nulls_are_always_none():
    assert _coerce(None, "int") is None
    assert _coerce(IonPyNull.from_value(IonType.STRING, None), "string") is None


def test_booleans_are_not_integers():
    assert _coerce(True, "boolean") is True

    with pytest.raises(StructuralMismatchError):
        _coerce(True, "int")


def test_structural_mismatch_details():
    with pytest.raises(StructuralMismatchError) as exc:
        _coerce("seven", "int")

    assert exc.value.details == {"column": "c", "expected": "int", "actual": "str"}


def test_symbols_read_as_text():
    assert _coerce(SymbolToken("abc", None), "string") == "abc"


def test_naive_timestamp_gets_configured_offset():
    ctx = CoercionContext(column="t", timestamp_offset_minutes=90)

    value = coerce_value(datetime(2024, 1, 2, 3, 4), parse_table_type("timestamp"), ctx)

    assert value.utcoffset() == timedelta(minutes=90)


def test_aware_timestamp_is_kept():
    aware = datetime(2024, 1, 2, tzinfo=timezone.utc)

    assert _coerce(aware, "timestamp") is aware


def test_date_from_datetime():
    assert _coerce(datetime(2024, 5, 6, 7, 8), "date") == date(2024, 5, 6)
    assert _coerce(date(2024, 5, 6), "timestamp") == datetime(2024, 5, 6, tzinfo=timezone.utc)


def test_containers_are_coerced_recursively():
    assert _coerce([1, None, 300], "array<tinyint>", RELAXED) == [1, None, 127]
    assert _coerce({"k": 5}, "map<string,bigint>") == {"k": 5}
    assert _coerce({"x": 1}, "struct<x:int,y:string>") == {"x": 1, "y": None}

    with pytest.raises(ColumnOverflowError):
        _coerce([1, 300], "array<tinyint>")


def test_binary():
    assert _coerce(bytearray(b"\x00\x01"), "binary") == b"\x00\x01"

    with pytest.raises(StructuralMismatchError):
        _coerce("text", "binary")
