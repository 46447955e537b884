"""
Exceções da carga de opções a partir de arquivos.

Todas herdam de `ConfigurationError`: um arquivo de opções inválido
impede a criação da configuração da tabela da mesma forma que uma opção
inválida.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import ConfigurationError


@dataclass(frozen=True, eq=False)
class OptionsFileNotFoundError(ConfigurationError):
    """Arquivo de defaults obrigatório não existe."""


@dataclass(frozen=True, eq=False)
class UnsupportedOptionsFormatError(ConfigurationError):
    """Extensão não suportada (v1: YAML/JSON)."""


@dataclass(frozen=True, eq=False)
class InvalidOptionsRootError(ConfigurationError):
    """O conteúdo raiz do arquivo não é um mapa."""


@dataclass(frozen=True, eq=False)
class OptionsStructureConflictError(ConfigurationError):
    """Mesma chave é mapa em um arquivo e escalar no outro."""
