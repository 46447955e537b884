# tests/conftest.py
"""
Fixtures compartilhados para testes do Ion Hive SerDe.

Este módulo define fixtures reutilizáveis que fornecem:
- um schema de tabela mínimo e determinístico
- fábricas de configuração resolvida

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Nenhuma fixture realiza I/O (arquivos ficam em `tmp_path` nos testes)
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Limites explícitos:
    - Não validar semântica completa dos resolvers
    - Não conter lógica condicional complexa
"""

import pytest


@pytest.fixture
def two_column_schema():
    """Schema `[(0, "a", int), (1, "b", string)]`."""
    return ["a", "b"], ["int", "string"]


@pytest.fixture
def make_config():
    """
    Fixture factory que constrói uma `SerDeConfiguration`.

    Returns:
        Callable[[dict, list, list], SerDeConfiguration]
    """
    from ion_hive_serde.core.properties import SerDeConfiguration

    def _make(options, names, types):
        return SerDeConfiguration(options, names, types, session_id="pytest")

    return _make
