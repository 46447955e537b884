"""
Core do Ion Hive SerDe.

Este pacote contém a resolução de configuração e o binding de paths,
independentes de qualquer leitor/escritor concreto.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada
    - livre de estado global

Componentes principais:
    - config     → fonte de opções (`ConfigurationSource`), loader, fingerprint
    - schema     → `TableType`, `ColumnSchema`
    - paths      → `PathSpec`, `PathMatcher`
    - policies   → resolvers por eixo de configuração
    - extraction → `ExtractionPlan`, `CompositionPlan`
    - properties → `SerDeConfiguration`
    - trace      → `ResolutionTrace`
    - exceptions → hierarquia tipada de erros
"""
