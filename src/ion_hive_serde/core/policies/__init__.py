"""
Resolvers de política do SerDe.

Cada resolver consome o bag de opções (e, quando por coluna, o schema)
e devolve uma política imutável e validada, ou levanta
`ConfigurationError` com todos os problemas que encontrou.

Resolvers:
    - encoding         → IonEncoding (global)
    - nulls            → SerializeNullStrategy (global)
    - timestamp        → offset em minutos (global)
    - overflow         → OverflowPolicy (por coluna)
    - serialize_as     → SerializeAsPolicy (por coluna)
    - path_extraction  → PathExtractionPolicy (por coluna)
"""

from .encoding import IonEncoding, resolve_encoding
from .nulls import SerializeNullStrategy, resolve_null_strategy
from .timestamp import resolve_timestamp_offset
from .overflow import OverflowPolicy, resolve_overflow_policy
from .serialize_as import SerializeAsPolicy, resolve_serialize_as_policy
from .path_extraction import PathExtractionPolicy, resolve_path_extraction_policy

__all__ = [
    "IonEncoding",
    "resolve_encoding",
    "SerializeNullStrategy",
    "resolve_null_strategy",
    "resolve_timestamp_offset",
    "OverflowPolicy",
    "resolve_overflow_policy",
    "SerializeAsPolicy",
    "resolve_serialize_as_policy",
    "PathExtractionPolicy",
    "resolve_path_extraction_policy",
]
