"""
Descritores de tipo do modelo tabular (Hive) e seu mapeamento para Ion.

Responsabilidades:
    - Interpretar strings de tipo (`int`, `decimal(10,2)`, `array<string>`, ...)
    - Expor o tipo Ion canônico de cada tipo de tabela
    - Expor o conjunto legal de tipos Ion alternativos (`serialize_as`)

Invariantes:
    - `TableType` é imutável e comparável por valor
    - `type_name()` reproduz a forma canônica (minúscula) do tipo
    - Todo tipo de tabela possui exatamente um tipo Ion canônico

Limites explícitos:
    - Não converte valores (ver `serde.coercion`)
    - Não conhece colunas nem opções
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from amazon.ion.core import IonType

from ..exceptions import SchemaError


class TableCategory(str, Enum):
    BOOLEAN = "boolean"
    TINYINT = "tinyint"
    SMALLINT = "smallint"
    INT = "int"
    BIGINT = "bigint"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    STRING = "string"
    CHAR = "char"
    VARCHAR = "varchar"
    BINARY = "binary"
    TIMESTAMP = "timestamp"
    DATE = "date"
    ARRAY = "array"
    MAP = "map"
    STRUCT = "struct"


COMPLEX_CATEGORIES = frozenset({TableCategory.ARRAY, TableCategory.MAP, TableCategory.STRUCT})

DEFAULT_DECIMAL_PRECISION = 10
DEFAULT_DECIMAL_SCALE = 0
MAX_DECIMAL_PRECISION = 38


@dataclass(frozen=True)
class TableType:
    """Tipo declarado de uma coluna (ou de um elemento aninhado)."""

    category: TableCategory
    params: Tuple[int, ...] = ()
    children: Tuple["TableType", ...] = ()
    field_names: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "TableType":
        return parse_table_type(text)

    @property
    def is_complex(self) -> bool:
        return self.category in COMPLEX_CATEGORIES

    @property
    def precision(self) -> int:
        return self.params[0]

    @property
    def scale(self) -> int:
        return self.params[1]

    @property
    def max_length(self) -> int:
        return self.params[0]

    @property
    def element_type(self) -> "TableType":
        return self.children[0]

    @property
    def key_type(self) -> "TableType":
        return self.children[0]

    @property
    def value_type(self) -> "TableType":
        return self.children[1]

    @property
    def fields(self) -> Tuple[Tuple[str, "TableType"], ...]:
        return tuple(zip(self.field_names, self.children))

    def type_name(self) -> str:
        name = self.category.value
        if self.category is TableCategory.ARRAY:
            return f"array<{self.element_type.type_name()}>"
        if self.category is TableCategory.MAP:
            return f"map<{self.key_type.type_name()},{self.value_type.type_name()}>"
        if self.category is TableCategory.STRUCT:
            inner = ",".join(f"{n}:{t.type_name()}" for n, t in self.fields)
            return f"struct<{inner}>"
        if self.params:
            return f"{name}({','.join(str(p) for p in self.params)})"
        return name

    def __str__(self) -> str:
        return self.type_name()


# -----------------------------
# Parser
# -----------------------------

_TOKEN = re.compile(r"\s*(?:(<|>|,|:|\(|\))|(`[^`]+`|[A-Za-z_][A-Za-z0-9_]*)|(\d+))")
_FIELD_NAME = re.compile(r"^(?:`[^`]+`|[A-Za-z_][A-Za-z0-9_]*)$")


def _tokenize(text: str) -> List[str]:
    tokens: List[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        m = _TOKEN.match(stripped, pos)
        if m is None:
            raise SchemaError(
                message=f"Malformed column type '{text}' at position {pos}",
                details={"type": text, "position": pos},
            )
        tokens.append(m.group(m.lastindex))
        pos = m.end()
    return tokens


class _TypeParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def fail(self, reason: str) -> SchemaError:
        return SchemaError(
            message=f"Malformed column type '{self.text}': {reason}",
            details={"type": self.text, "reason": reason},
        )

    def peek(self) -> str:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else ""

    def take(self, expected: str = "") -> str:
        tok = self.peek()
        if not tok or (expected and tok != expected):
            raise self.fail(f"expected '{expected or 'token'}', got '{tok or 'end of input'}'")
        self.pos += 1
        return tok

    def number(self) -> int:
        tok = self.take()
        if not tok.isdigit():
            raise self.fail(f"expected a number, got '{tok}'")
        return int(tok)

    def parse(self) -> TableType:
        t = self.parse_type()
        if self.peek():
            raise self.fail(f"unexpected trailing '{self.peek()}'")
        return t

    def parse_type(self) -> TableType:
        word = self.take().lower()
        try:
            category = TableCategory(word)
        except ValueError:
            raise self.fail(f"unknown type '{word}'") from None

        if category is TableCategory.DECIMAL:
            precision, scale = DEFAULT_DECIMAL_PRECISION, DEFAULT_DECIMAL_SCALE
            if self.peek() == "(":
                self.take("(")
                precision = self.number()
                scale = 0
                if self.peek() == ",":
                    self.take(",")
                    scale = self.number()
                self.take(")")
            if not (1 <= precision <= MAX_DECIMAL_PRECISION) or scale > precision:
                raise self.fail(f"invalid decimal precision/scale ({precision},{scale})")
            return TableType(category, (precision, scale))

        if category in (TableCategory.CHAR, TableCategory.VARCHAR):
            self.take("(")
            length = self.number()
            self.take(")")
            if length < 1:
                raise self.fail(f"{category.value} length must be positive")
            return TableType(category, (length,))

        if category is TableCategory.ARRAY:
            self.take("<")
            element = self.parse_type()
            self.take(">")
            return TableType(category, children=(element,))

        if category is TableCategory.MAP:
            self.take("<")
            key = self.parse_type()
            self.take(",")
            value = self.parse_type()
            self.take(">")
            return TableType(category, children=(key, value))

        if category is TableCategory.STRUCT:
            self.take("<")
            names: List[str] = []
            children: List[TableType] = []
            while True:
                token = self.take()
                if not _FIELD_NAME.match(token):
                    raise self.fail(f"invalid struct field name '{token}'")
                name = token.strip("`")
                self.take(":")
                names.append(name)
                children.append(self.parse_type())
                if self.peek() == ",":
                    self.take(",")
                    continue
                break
            self.take(">")
            if len(set(names)) != len(names):
                raise self.fail("duplicate struct field name")
            return TableType(category, children=tuple(children), field_names=tuple(names))

        return TableType(category)


def parse_table_type(text: str) -> TableType:
    """Interpreta uma string de tipo Hive.

    Raises:
        SchemaError: se a string não for um tipo válido.
    """
    if not isinstance(text, str) or not text.strip():
        raise SchemaError(
            message=f"Column type must be a non-empty string, got: {text!r}",
            details={"type": repr(text)},
        )
    return _TypeParser(text).parse()


# -----------------------------
# Mapeamento tabela -> Ion
# -----------------------------

_CANONICAL_ION_TYPES = {
    TableCategory.BOOLEAN: IonType.BOOL,
    TableCategory.TINYINT: IonType.INT,
    TableCategory.SMALLINT: IonType.INT,
    TableCategory.INT: IonType.INT,
    TableCategory.BIGINT: IonType.INT,
    TableCategory.FLOAT: IonType.FLOAT,
    TableCategory.DOUBLE: IonType.FLOAT,
    TableCategory.DECIMAL: IonType.DECIMAL,
    TableCategory.STRING: IonType.STRING,
    TableCategory.CHAR: IonType.STRING,
    TableCategory.VARCHAR: IonType.STRING,
    TableCategory.BINARY: IonType.BLOB,
    TableCategory.TIMESTAMP: IonType.TIMESTAMP,
    TableCategory.DATE: IonType.TIMESTAMP,
    TableCategory.ARRAY: IonType.LIST,
    TableCategory.MAP: IonType.STRUCT,
    TableCategory.STRUCT: IonType.STRUCT,
}

# só tipos com mais de uma representação Ion aceitam `serialize_as`
_ALTERNATIVE_ION_TYPES = {
    TableCategory.STRING: (IonType.STRING, IonType.SYMBOL),
    TableCategory.CHAR: (IonType.STRING, IonType.SYMBOL),
    TableCategory.VARCHAR: (IonType.STRING, IonType.SYMBOL),
    TableCategory.BINARY: (IonType.BLOB, IonType.CLOB),
    TableCategory.ARRAY: (IonType.LIST, IonType.SEXP),
}


def canonical_ion_type(table_type: TableType) -> IonType:
    return _CANONICAL_ION_TYPES[table_type.category]


def legal_ion_types(table_type: TableType) -> Tuple[IonType, ...]:
    """Tipos Ion aceitos por `serialize_as` (canônico primeiro)."""
    return _ALTERNATIVE_ION_TYPES.get(table_type.category, (canonical_ion_type(table_type),))


def is_ambiguous(table_type: TableType) -> bool:
    return len(legal_ion_types(table_type)) > 1
