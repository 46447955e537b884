"""
Ion Hive SerDe: Exceções canônicas (v1)

Este módulo define a hierarquia de exceções tipadas do Ion Hive SerDe.

Objetivo:
- Permitir que resolvers, plano de extração e adapters de leitura/escrita
  levantem falhas semânticas tipadas
- Carregar dados estruturados (`details`) suficientes para diagnóstico
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Taxonomia:
- ConfigurationError      → sempre na construção da configuração, nunca por linha
- ColumnOverflowError     → por valor, durante conversão com política estrita
- StructuralMismatchError → por extração, valor incompatível com o tipo da coluna

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- Mensagem curta e humana; o diagnóstico fica em `details`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple


@dataclass(frozen=True, eq=False)
class SerDeException(Exception):
    """Base class para exceções internas do SerDe.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
            "hint": self.hint,
        }


# ---------------------------------------------------------------------------
# Configuração (tempo de construção)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ConfigurationError(SerDeException):
    """Configuração inválida ou inconsistente com o schema da tabela."""


@dataclass(frozen=True, eq=False)
class SchemaError(ConfigurationError):
    """Nomes/tipos de colunas fornecidos pelo host são inválidos."""


@dataclass(frozen=True, eq=False)
class UnknownColumnError(ConfigurationError):
    """Uma chave de configuração referencia coluna não declarada."""


@dataclass(frozen=True, eq=False)
class InvalidOptionValueError(ConfigurationError):
    """Valor literal não reconhecido para uma opção."""


@dataclass(frozen=True, eq=False)
class InvalidTypeOverrideError(ConfigurationError):
    """`serialize_as` fora do conjunto legal para o tipo da coluna."""


@dataclass(frozen=True, eq=False)
class ConflictingOverrideError(ConfigurationError):
    """Duas autoridades de override discordam para a mesma coluna."""


@dataclass(frozen=True, eq=False)
class MalformedPathError(ConfigurationError):
    """Expressão de path não pôde ser interpretada."""


@dataclass(frozen=True, eq=False)
class PathAliasingError(ConfigurationError):
    """Duas colunas resolvem para o mesmo PathSpec sem permissão explícita."""


@dataclass(frozen=True, eq=False)
class WriteTargetConflictError(ConfigurationError):
    """Destinos de escrita de duas colunas coincidem ou um contém o outro."""


@dataclass(frozen=True, eq=False)
class InvalidSerDeConfigurationError(ConfigurationError):
    """Agregado de todos os problemas encontrados durante a construção.

    `details["errors"]` contém as exceções individuais, na ordem em que os
    resolvers as reportaram.
    """

    @property
    def errors(self) -> Tuple[ConfigurationError, ...]:
        return tuple(self.details.get("errors", ()))

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["details"] = {"errors": [e.to_dict() for e in self.errors]}
        return out


def raise_if_any(errors: Sequence[ConfigurationError]) -> None:
    """Levanta um único erro quando há problemas acumulados.

    Um problema isolado é relançado como está; vários viram um
    `InvalidSerDeConfigurationError`.
    """
    flat = []
    for e in errors:
        if isinstance(e, InvalidSerDeConfigurationError):
            flat.extend(e.errors)
        else:
            flat.append(e)

    if not flat:
        return
    if len(flat) == 1:
        raise flat[0]

    raise InvalidSerDeConfigurationError(
        message=f"{len(flat)} configuration errors: " + "; ".join(e.message for e in flat),
        details={"errors": tuple(flat)},
        hint="Fix every listed option before recreating the table.",
    )


# ---------------------------------------------------------------------------
# Processamento por linha / documento
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ColumnOverflowError(SerDeException):
    """Conversão perderia informação e a política da coluna é estrita."""


@dataclass(frozen=True, eq=False)
class StructuralMismatchError(SerDeException):
    """Valor extraído não pode ser coagido ao tipo declarado da coluna."""
