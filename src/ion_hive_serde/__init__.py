# src/ion_hive_serde/__init__.py
"""
Ion Hive SerDe: configuração e binding de paths entre documentos Ion e tabelas.

Este pacote liga um formato de documento hierárquico, tipado e
autodescritivo (Amazon Ion) a um schema tabular fixo (colunas nomeadas e
tipadas de uma tabela Hive).

Princípios centrais:
    - Toda configuração é validada uma única vez, na criação da tabela
    - Erros de configuração nunca são adiados para o processamento de linhas
    - A configuração resolvida é imutável e segura para leitura concorrente

Arquitetura em alto nível:
    - core.config      → fonte de opções, carga de arquivos, fingerprint
    - core.schema      → tipos de tabela e mapeamento para tipos Ion
    - core.paths       → sintaxe de PathSpec e matching sobre documentos
    - core.policies    → resolvers de política (null, overflow, serialize_as, ...)
    - core.extraction  → planos de extração (leitura) e composição (escrita)
    - core.properties  → fachada `SerDeConfiguration`
    - serde            → adapters de leitura/escrita que consomem a fachada

Limites explícitos:
    - Não implementa o modelo de execução do motor de consulta
    - Não define layout físico em disco
"""
# src/ion_hive_serde/__init__.py
from .core.properties import SerDeConfiguration
from .core.policies import IonEncoding, SerializeNullStrategy
from .core.exceptions import (
    ColumnOverflowError,
    ConfigurationError,
    SerDeException,
    StructuralMismatchError,
)
from .serde import IonDeserializer, IonSerializer

__version__ = "1.0.0"

__all__ = [
    "SerDeConfiguration",
    "IonEncoding",
    "SerializeNullStrategy",
    "SerDeException",
    "ConfigurationError",
    "ColumnOverflowError",
    "StructuralMismatchError",
    "IonDeserializer",
    "IonSerializer",
]
