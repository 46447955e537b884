"""
Fonte de configuração plana (chave/valor) do SerDe.

Este módulo abstrai a origem das opções da tabela (propriedades do
`CREATE TABLE`, configuração de job, arquivos locais) atrás de um contrato
uniforme de leitura.

Contrato:
    - get(key) -> Optional[str]
    - get_with_default(key, default) -> str
    - get_list(key, separator) -> List[str]
    - keys() -> chaves disponíveis

Invariantes:
    - Ausência de chave é `None`, nunca exceção
    - Nenhum efeito colateral além do acesso ao mapa subjacente

Limites explícitos:
    - Não interpreta valores (booleanos, enums, paths)
    - Não conhece colunas nem tipos
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class ConfigurationSource(Protocol):
    """Contrato mínimo de um bag de opções string → string."""

    def get(self, key: str) -> Optional[str]:
        ...

    def get_with_default(self, key: str, default: str) -> str:
        ...

    def get_list(self, key: str, separator: str = ",") -> List[str]:
        ...

    def keys(self) -> Iterable[str]:
        ...


class MappingSource:
    """
    Adapter de um `Mapping` qualquer para `ConfigurationSource`.

    Valores não-string são convertidos com `str()`; booleanos viram
    `"true"`/`"false"` para manter o mesmo formato das propriedades de tabela.
    O mapa é copiado na construção: mutações posteriores do chamador não
    alteram a fonte.
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None) -> None:
        copied = {}
        for key, value in (options or {}).items():
            if value is None:
                continue
            copied[str(key)] = _render(value)
        self._options = MappingProxyType(copied)

    def get(self, key: str) -> Optional[str]:
        return self._options.get(key)

    def get_with_default(self, key: str, default: str) -> str:
        value = self._options.get(key)
        return default if value is None else value

    def get_list(self, key: str, separator: str = ",") -> List[str]:
        value = self._options.get(key)
        if value is None:
            return []
        return [item.strip() for item in value.split(separator) if item.strip()]

    def keys(self) -> Iterable[str]:
        return tuple(self._options.keys())

    def __repr__(self) -> str:
        return f"MappingSource({len(self._options)} options)"


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def as_source(options: Any) -> ConfigurationSource:
    """Normaliza mapas e fontes já prontas para `ConfigurationSource`."""
    if isinstance(options, MappingSource):
        return options
    if options is None or isinstance(options, Mapping):
        return MappingSource(options)
    if isinstance(options, ConfigurationSource):
        return options
    raise TypeError(f"Unsupported configuration source: {type(options).__name__}")
