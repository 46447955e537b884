"""Modelo tabular: tipos declarados e schema de colunas."""

from .types import (
    TableCategory,
    TableType,
    parse_table_type,
    canonical_ion_type,
    legal_ion_types,
    is_ambiguous,
)
from .columns import Column, ColumnSchema

__all__ = [
    "TableCategory",
    "TableType",
    "parse_table_type",
    "canonical_ion_type",
    "legal_ion_types",
    "is_ambiguous",
    "Column",
    "ColumnSchema",
]
