"""
Adapters de leitura e escrita que consomem a `SerDeConfiguration`.

    - coercion     → conversão de valores com política de overflow
    - deserializer → documento Ion → linhas (e DataFrame)
    - serializer   → linhas → structs Ion → bytes/texto
"""

from .coercion import CoercionContext, coerce_value, is_null
from .deserializer import IonDeserializer, decode
from .serializer import IonSerializer
from .results import DocumentFailure, ReadResult, WriteResult

__all__ = [
    "CoercionContext",
    "coerce_value",
    "is_null",
    "IonDeserializer",
    "decode",
    "IonSerializer",
    "DocumentFailure",
    "ReadResult",
    "WriteResult",
]
