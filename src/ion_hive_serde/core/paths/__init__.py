"""Paths estruturais: sintaxe (`PathSpec`) e matching sobre documentos."""

from .spec import PathSpec, PathStep, StepKind, parse_path
from .matcher import PathMatcher, is_sequence, is_struct

__all__ = [
    "PathSpec",
    "PathStep",
    "StepKind",
    "parse_path",
    "PathMatcher",
    "is_sequence",
    "is_struct",
]
