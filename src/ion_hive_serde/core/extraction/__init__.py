"""Planos de extração (leitura) e composição (escrita) por tabela."""

from .plan import ColumnBinding, ExtractionOutcome, ExtractionPlan, build_extraction_plan
from .composition import CompositionPlan

__all__ = [
    "ColumnBinding",
    "ExtractionOutcome",
    "ExtractionPlan",
    "build_extraction_plan",
    "CompositionPlan",
]
