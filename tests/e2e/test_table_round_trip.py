"""
Teste end-to-end do SerDe: arquivo de opções → configuração → escrita → leitura.

Cenário: tabela de pedidos com colunas aninhadas, override de
`serialize_as`, política de nulls e overflow relaxado em uma coluna.
Esperado: as linhas lidas de volta do payload codificado são as mesmas
escritas (após as coerções da escrita), em TEXT e em BINARY.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from ion_hive_serde import IonDeserializer, IonSerializer, SerDeConfiguration

NAMES = ["order_id", "customer", "city", "status", "amount", "placed_at", "ship_day", "tags", "note"]
TYPES = [
    "bigint",
    "string",
    "string",
    "string",
    "decimal(6,2)",
    "timestamp",
    "date",
    "array<string>",
    "varchar(4)",
]

ROWS = [
    [
        1,
        "ann",
        "Porto",
        "OPEN",
        Decimal("10.50"),
        datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        date(2024, 3, 2),
        ["a", "b"],
        "ok",
    ],
    [2, "bob", None, "DONE", Decimal("99999.999"), None, None, [], "too long"],
]


def _write_options(path, encoding):
    path.write_text(
        "\n".join(
            [
                "ion:",
                f"  encoding: {encoding}",
                "  serialize_null: OMIT",
                "  fail_on_overflow.inverted_columns: [amount, note]",
                "  status:",
                "    serialize_as: symbol",
                "  customer:",
                "    path_extractor: (customer name)",
                "  city:",
                "    path_extractor: (customer address city)",
                "",
            ]
        ),
        encoding="utf-8",
    )


@pytest.mark.parametrize("encoding", ["TEXT", "BINARY"])
def test_round_trip(tmp_path, encoding):
    options = tmp_path / "table.yaml"
    _write_options(options, encoding)
    config = SerDeConfiguration.from_files(str(options), NAMES, TYPES)

    written = IonSerializer(config).write(ROWS)
    assert written.ok
    assert written.structs[0]["customer"] == {"name": "ann", "address": {"city": "Porto"}}
    assert "placed_at" not in written.structs[1]

    result = IonDeserializer(config).read_bytes(written.payload)

    assert result.ok
    assert result.documents == 2
    first, second = result.rows
    assert first[:5] == (1, "ann", "Porto", "OPEN", Decimal("10.50"))
    assert first[5] == ROWS[0][5]
    assert first[6] == date(2024, 3, 2)
    assert first[7:] == (["a", "b"], "ok")
    assert second == (2, "bob", None, "DONE", Decimal("9999.99"), None, None, [], "too ")


def test_frame_from_nested_documents(tmp_path):
    options = tmp_path / "table.json"
    options.write_text(
        '{"ion": {"line_sku": {"path_extractor": "(lines * sku)"},'
        ' "line_qty": {"path_extractor": "(lines * qty)"}}}',
        encoding="utf-8",
    )
    config = SerDeConfiguration.from_files(
        str(options), ["order_id", "line_sku", "line_qty"], ["bigint", "string", "int"]
    )

    frame = IonDeserializer(config).read_frame(
        [
            {"order_id": 1, "lines": [{"sku": "a", "qty": 2}, {"sku": "b", "qty": 1}]},
            {"order_id": 2, "lines": []},
        ]
    )

    assert frame["order_id"].tolist() == [1, 1, 2]
    assert frame["line_sku"].tolist() == ["a", "b", None]


def test_typed_null_then_value_round_trip(make_config, two_column_schema):
    names, types = two_column_schema
    config = make_config({"ion.serialize_null": "TYPED"}, names, types)
    serializer = IonSerializer(config)
    reader = IonDeserializer(config)

    nulls = reader.read_bytes(serializer.encode([serializer.serialize([None, None])]))
    values = reader.read_bytes(serializer.encode([serializer.serialize([7, "seven"])]))

    assert nulls.rows == [(None, None)]
    assert values.rows == [(7, "seven")]
