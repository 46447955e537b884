"""
Plano de composição (inverso da extração) usado na escrita.

Cada coluna é escrita no seu PathSpec quando ele é composto apenas de
campos (structs aninhados são criados sob demanda). Paths com wildcard,
índice ou vazios não têm inverso único: a coluna é escrita no campo de
topo com o nome da coluna.

Invariantes:
    - Nenhum destino é prefixo de outro: `(a)` e `(a x)` se sobrescreveriam
    - Destinos idênticos só com aliasing permitido; a última coluna
      escrita (ordem da tabela) prevalece
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Any, List, MutableMapping, Sequence, Tuple

from ..exceptions import ConfigurationError, WriteTargetConflictError, raise_if_any
from ..paths.spec import PathSpec

Target = Tuple[str, ...]


def _render(target: Target) -> str:
    return "(" + " ".join(target) + ")"


def _overlap(left: Target, right: Target) -> bool:
    shorter = min(len(left), len(right))
    return left[:shorter] == right[:shorter]


@dataclass(frozen=True)
class CompositionPlan:
    targets: Tuple[Target, ...]
    fallbacks: Tuple[int, ...]

    @classmethod
    def build(
        cls,
        names: Sequence[str],
        paths: Sequence[PathSpec],
        allow_aliasing: bool = False,
    ) -> "CompositionPlan":
        """Resolve o destino de escrita de cada coluna.

        Raises:
            WriteTargetConflictError: destinos sobrepostos (ou idênticos sem
                aliasing permitido).
        """
        targets = []
        fallbacks = []
        for index, (name, path) in enumerate(zip(names, paths)):
            if path.is_field_only:
                targets.append(tuple(step.name for step in path.steps))
            else:
                targets.append((name,))
                fallbacks.append(index)

        errors: List[ConfigurationError] = []
        for i, j in combinations(range(len(targets)), 2):
            left, right = targets[i], targets[j]
            if not _overlap(left, right):
                continue
            if left == right and allow_aliasing:
                continue
            errors.append(
                WriteTargetConflictError(
                    message=(
                        f"Columns '{names[i]}' and '{names[j]}' write to overlapping fields "
                        f"{_render(left)} and {_render(right)}"
                    ),
                    details={
                        "columns": [names[i], names[j]],
                        "targets": [_render(left), _render(right)],
                    },
                    hint="Bind each column to its own field path; wildcard and index paths are written at the column name.",
                )
            )
        raise_if_any(errors)

        return cls(targets=tuple(targets), fallbacks=tuple(fallbacks))

    def target_for(self, index: int) -> Target:
        return self.targets[index]

    def place(self, struct: MutableMapping[str, Any], index: int, value: Any) -> None:
        """Escreve `value` no destino da coluna, criando structs intermediários."""
        *parents, leaf = self.targets[index]
        current: MutableMapping[str, Any] = struct
        for name in parents:
            child = current.get(name)
            if not isinstance(child, dict):
                child = {}
                current[name] = child
            current = child
        current[leaf] = value
