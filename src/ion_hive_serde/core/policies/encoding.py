"""Codificação física do documento de saída (`ion.encoding`)."""

from __future__ import annotations

from enum import Enum
from typing import List

from ..config.source import ConfigurationSource
from ..exceptions import ConfigurationError, raise_if_any
from ._options import ENCODING_KEY, parse_enum


class IonEncoding(str, Enum):
    BINARY = "BINARY"
    TEXT = "TEXT"

    @property
    def is_binary(self) -> bool:
        return self is IonEncoding.BINARY


DEFAULT_ENCODING = IonEncoding.BINARY


def resolve_encoding(source: ConfigurationSource) -> IonEncoding:
    errors: List[ConfigurationError] = []
    encoding = parse_enum(source, ENCODING_KEY, IonEncoding, DEFAULT_ENCODING, errors)
    raise_if_any(errors)
    return encoding
