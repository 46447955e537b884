"""
Capacidade de matching de paths sobre valores de documento.

O `PathMatcher` percorre um valor de documento (struct → `Mapping`,
list/sexp → sequência, demais → escalar) seguindo um `PathSpec` e invoca
um callback por ocorrência encontrada, em ordem de documento.

Cada ocorrência é entregue junto com sua localização concreta: a tupla de
nomes de campo e índices efetivamente percorridos.

Invariantes:
    - Função pura do documento e do path: nenhum estado entre chamadas
    - Paths sem ocorrência não são erro (zero callbacks)
    - Nulls tipados de container (`null.struct`, `null.list`) não têm filhos
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, List, Tuple

from amazon.ion.symbols import SymbolToken

from .spec import PathSpec, PathStep, StepKind

Location = Tuple[object, ...]
MatchCallback = Callable[[Any, Location], None]


def is_struct(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    # SymbolToken é namedtuple, mas é escalar no modelo Ion
    return isinstance(value, (list, tuple)) and not isinstance(value, SymbolToken)


class PathMatcher:
    """Percorre documentos para um PathSpec."""

    def __init__(self, case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive

    def match(self, path: PathSpec, root: Any, callback: MatchCallback) -> int:
        """Invoca `callback(value, location)` por ocorrência; retorna o total."""
        return self._walk(path.steps, 0, root, (), callback)

    def find(self, path: PathSpec, root: Any) -> List[Tuple[Any, Location]]:
        found: List[Tuple[Any, Location]] = []
        self.match(path, root, lambda value, location: found.append((value, location)))
        return found

    def _walk(
        self,
        steps: Tuple[PathStep, ...],
        depth: int,
        value: Any,
        location: Location,
        callback: MatchCallback,
    ) -> int:
        if depth == len(steps):
            callback(value, location)
            return 1

        count = 0
        for key, child in self._children(steps[depth], value):
            count += self._walk(steps, depth + 1, child, location + (key,), callback)
        return count

    def _children(self, step: PathStep, value: Any):
        if step.kind is StepKind.WILDCARD:
            if is_struct(value):
                yield from value.items()
            elif is_sequence(value):
                yield from enumerate(value)
            return

        if step.kind is StepKind.INDEX:
            if is_sequence(value) and step.index < len(value):
                yield step.index, value[step.index]
            return

        if not is_struct(value):
            return
        if self.case_sensitive:
            for key, child in value.items():
                if key == step.name:
                    yield key, child
        else:
            wanted = step.name.casefold()
            for key, child in value.items():
                if isinstance(key, str) and key.casefold() == wanted:
                    yield key, child
