# tests/serde/test_deserializer.py
"""
Testes do pipeline de leitura (documento Ion → linhas).

Valida:
- leitura de bytes Ion texto e binário
- wildcards produzindo várias linhas
- falhas por documento sem interromper o lote
- `ion.ignore_malformed` anulando valores incompatíveis
- política de overflow relaxada na leitura
- materialização em DataFrame
"""

import sys
from decimal import Decimal

import pytest
from amazon.ion import simpleion

from ion_hive_serde import ColumnOverflowError, IonDeserializer, StructuralMismatchError
from ion_hive_serde.serde import decode


def test_decode_text_and_binary():
    text = "{a: 1} {a: 2}"
    binary = simpleion.dumps([{"a": 1}, {"a": 2}], binary=True, sequence_as_stream=True)

    assert [v["a"] for v in decode(text)] == [1, 2]
    assert [v["a"] for v in decode(binary)] == [1, 2]


def test_read_bytes_with_default_paths(make_config, two_column_schema):
    names, types = two_column_schema
    reader = IonDeserializer(make_config({}, names, types))

    result = reader.read_bytes('{a: 1, b: "x"} {a: 2} {b: sym}')

    assert result.ok
    assert result.documents == 3
    assert result.rows == [(1, "x"), (2, None), (None, "sym")]


def test_wildcard_documents_expand_to_rows(make_config):
    reader = IonDeserializer(
        make_config(
            {
                "ion.order_id.path_extractor": "(id)",
                "ion.sku.path_extractor": "(items * sku)",
                "ion.qty.path_extractor": "(items * qty)",
            },
            ["order_id", "sku", "qty"],
            ["bigint", "string", "int"],
        )
    )

    rows = reader.deserialize(simpleion.loads('{id: 7, items: [{sku: "a", qty: 1}, {sku: "b", qty: 2}]}'))

    assert rows == [(7, "a", 1), (7, "b", 2)]


def test_failures_are_labelled_per_document(make_config, two_column_schema):
    names, types = two_column_schema
    reader = IonDeserializer(make_config({}, names, types))

    result = reader.read_bytes('{a: 1} {a: "x"} {a: 9999999999} {a: 3}')

    assert [f.index for f in result.failures] == [1, 2]
    assert isinstance(result.failures[0].error, StructuralMismatchError)
    assert isinstance(result.failures[1].error, ColumnOverflowError)
    assert result.rows == [(1, None), (3, None)]
    assert len(reader.trace.events_for("read")) == 2


def test_ignore_malformed_replaces_value_with_null(make_config, two_column_schema):
    names, types = two_column_schema
    reader = IonDeserializer(make_config({"ion.ignore_malformed": "true"}, names, types))

    result = reader.read_bytes('{a: "x", b: "kept"}')

    assert result.ok
    assert result.rows == [(None, "kept")]
    assert reader.trace.events_for("read")[0]["column"] == "a"


def test_relaxed_overflow_on_read(make_config):
    reader = IonDeserializer(
        make_config({"ion.fail_on_overflow.inverted_columns": "amount"}, ["amount"], ["decimal(4,2)"])
    )

    assert reader.read_bytes("{amount: 12345.678}").rows == [(Decimal("99.99"),)]


def test_read_frame(make_config, two_column_schema):
    names, types = two_column_schema
    reader = IonDeserializer(make_config({}, names, types))

    frame = reader.read_frame(decode('{a: 1, b: "x"} {a: 2, b: "y"}'))

    assert list(frame.columns) == ["a", "b"]
    assert frame["a"].tolist() == [1, 2]
    assert frame["b"].tolist() == ["x", "y"]


def test_read_frame_strict_and_lenient(make_config, two_column_schema):
    names, types = two_column_schema
    reader = IonDeserializer(make_config({}, names, types))
    documents = decode('{a: 1} {a: "x"}')

    with pytest.raises(StructuralMismatchError):
        reader.read_frame(documents)

    frame = reader.read_frame(documents, strict=False)
    assert len(frame) == 1


def test_integer_beyond_double_range_does_not_abort_the_batch(make_config):
    huge = "1" + "0" * 400
    payload = "{d: %s} {d: 1.5e0}" % huge

    strict = IonDeserializer(make_config({}, ["d"], ["double"])).read_bytes(payload)
    assert [f.index for f in strict.failures] == [0]
    assert isinstance(strict.failures[0].error, ColumnOverflowError)
    assert strict.rows == [(1.5,)]

    relaxed = IonDeserializer(
        make_config({"ion.fail_on_overflow.inverted_columns": "d"}, ["d"], ["double"])
    ).read_bytes(payload)
    assert relaxed.ok
    assert relaxed.rows == [(sys.float_info.max,), (1.5,)]
