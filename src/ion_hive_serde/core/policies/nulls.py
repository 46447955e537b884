"""
Estratégia de serialização de nulls da tabela (`ion.serialize_null`).

Para um null de tabela na coluna `c`, cujo tipo Ion de serialização é `T`:
    - OMIT    → nenhum campo é emitido para `c`
    - UNTYPED → `c: null`
    - TYPED   → `c: null.T`
"""

from __future__ import annotations

from enum import Enum
from typing import List

from ..config.source import ConfigurationSource
from ..exceptions import ConfigurationError, raise_if_any
from ._options import SERIALIZE_NULL_KEY, parse_enum


class SerializeNullStrategy(str, Enum):
    OMIT = "OMIT"
    UNTYPED = "UNTYPED"
    TYPED = "TYPED"


DEFAULT_NULL_STRATEGY = SerializeNullStrategy.UNTYPED


def resolve_null_strategy(source: ConfigurationSource) -> SerializeNullStrategy:
    """Casamento exato com `OMIT`, `UNTYPED` ou `TYPED`; default `UNTYPED`."""
    errors: List[ConfigurationError] = []
    strategy = parse_enum(source, SERIALIZE_NULL_KEY, SerializeNullStrategy, DEFAULT_NULL_STRATEGY, errors)
    raise_if_any(errors)
    return strategy
