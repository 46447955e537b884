"""
Camada de opções do SerDe.

Responsabilidades do pacote:
    - Abstrair a origem do bag de opções (`ConfigurationSource`)
    - Carregar opções de arquivos YAML/JSON (defaults + overrides locais)
    - Gerar fingerprint canônico da configuração resolvida

Limites explícitos:
    - Não interpreta opções de coluna (responsabilidade de `core.policies`)
"""

from .source import ConfigurationSource, MappingSource, as_source
from .loader import load_options, flatten_options
from .hashing import compute_fingerprint

__all__ = [
    "ConfigurationSource",
    "MappingSource",
    "as_source",
    "load_options",
    "flatten_options",
    "compute_fingerprint",
]
