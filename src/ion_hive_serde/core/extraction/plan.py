"""
Plano de extração: documento hierárquico → uma ou mais linhas planas.

O plano liga cada índice de coluna ao seu PathSpec e define a política de
materialização de linhas. O percurso em si é delegado ao `PathMatcher`;
o plano registra um callback por path e consome as ocorrências.

Política de materialização:
    - Colunas sem wildcard são independentes: suas ocorrências formam um eixo.
    - Colunas cujos paths compartilham o mesmo prefixo terminado em wildcard
      são correlacionadas: o prefixo é casado uma vez e, para cada ocorrência,
      o restante de cada path é casado abaixo dela. Coluna sem ocorrência
      naquela posição fica nula.
    - As linhas são o produto cartesiano dos eixos, em ordem de documento.
    - Eixo sem nenhuma ocorrência contribui uma única entrada nula: todo
      documento produz ao menos uma linha e nunca falha por ausência.
    - Colunas com PathSpec idêntico (aliasing permitido) leem o mesmo valor.

Invariantes:
    - O plano é imutável e não guarda estado entre documentos
    - `evaluate` é função pura do documento e do plano
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..paths.matcher import PathMatcher
from ..paths.spec import PathSpec

Entry = Dict[int, Any]


@dataclass(frozen=True)
class ColumnBinding:
    index: int
    name: str
    path: PathSpec


@dataclass(frozen=True)
class _Target:
    """Um path concreto e as colunas (aliases) que leem dele."""

    path: PathSpec
    columns: Tuple[int, ...]


@dataclass(frozen=True)
class _Axis:
    """Eixo de iteração: independente (`anchor is None`) ou correlacionado."""

    anchor: Optional[PathSpec]
    targets: Tuple[_Target, ...]


@dataclass(frozen=True)
class ExtractionOutcome:
    """Resultado de avaliar o plano sobre um documento."""

    rows: Tuple[Tuple[Any, ...], ...]
    match_counts: Tuple[int, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.rows)


class ExtractionPlan:
    """Plano compilado por tabela: índice de coluna → PathSpec + política."""

    def __init__(self, bindings: Sequence[ColumnBinding], case_sensitive: bool = False) -> None:
        self.bindings: Tuple[ColumnBinding, ...] = tuple(bindings)
        self.case_sensitive = case_sensitive
        self._matcher = PathMatcher(case_sensitive=case_sensitive)
        self._axes: Tuple[_Axis, ...] = self._compile()

    @property
    def column_count(self) -> int:
        return len(self.bindings)

    def path_for(self, index: int) -> PathSpec:
        return self.bindings[index].path

    def _key(self, path: PathSpec) -> tuple:
        return path.structural_key(self.case_sensitive)

    def _compile(self) -> Tuple[_Axis, ...]:
        independent: Dict[tuple, List[ColumnBinding]] = {}
        correlated: Dict[tuple, Dict[tuple, List[ColumnBinding]]] = {}
        anchors: Dict[tuple, PathSpec] = {}
        order: List[Tuple[str, tuple]] = []

        for binding in self.bindings:
            if not binding.path.has_wildcard:
                key = self._key(binding.path)
                if key not in independent:
                    independent[key] = []
                    order.append(("independent", key))
                independent[key].append(binding)
                continue

            anchor, rest = binding.path.split_at_last_wildcard()
            anchor_key = self._key(anchor)
            if anchor_key not in correlated:
                correlated[anchor_key] = {}
                anchors[anchor_key] = anchor
                order.append(("correlated", anchor_key))
            correlated[anchor_key].setdefault(self._key(rest), []).append(binding)

        axes: List[_Axis] = []
        for kind, key in order:
            if kind == "independent":
                group = independent[key]
                target = _Target(group[0].path, tuple(b.index for b in group))
                axes.append(_Axis(anchor=None, targets=(target,)))
            else:
                targets = []
                for group in correlated[key].values():
                    _, rest = group[0].path.split_at_last_wildcard()
                    targets.append(_Target(rest, tuple(b.index for b in group)))
                axes.append(_Axis(anchor=anchors[key], targets=tuple(targets)))
        return tuple(axes)

    # -----------------------------
    # Avaliação
    # -----------------------------

    def _target_entries(self, target: _Target, root: Any, counts: List[int]) -> List[Entry]:
        entries: List[Entry] = []

        def on_match(value: Any, _location: tuple) -> None:
            entries.append({index: value for index in target.columns})
            for index in target.columns:
                counts[index] += 1

        self._matcher.match(target.path, root, on_match)
        return entries

    def _axis_entries(self, axis: _Axis, root: Any, counts: List[int]) -> List[Entry]:
        if axis.anchor is None:
            return self._target_entries(axis.targets[0], root, counts) or [{}]

        anchored: List[Any] = []
        self._matcher.match(axis.anchor, root, lambda value, _location: anchored.append(value))

        entries: List[Entry] = []
        for value in anchored:
            per_target = [self._target_entries(t, value, counts) or [{}] for t in axis.targets]
            for combination in product(*per_target):
                merged: Entry = {}
                for part in combination:
                    merged.update(part)
                entries.append(merged)
        return entries or [{}]

    def evaluate(self, root: Any) -> ExtractionOutcome:
        """Avalia o plano sobre um documento de topo."""
        counts = [0] * self.column_count
        axes = [self._axis_entries(axis, root, counts) for axis in self._axes]

        rows = []
        for combination in product(*axes):
            row: List[Any] = [None] * self.column_count
            for part in combination:
                for index, value in part.items():
                    row[index] = value
            rows.append(tuple(row))

        return ExtractionOutcome(rows=tuple(rows), match_counts=tuple(counts))


def build_extraction_plan(
    names: Sequence[str],
    paths: Sequence[PathSpec],
    case_sensitive: bool = False,
) -> ExtractionPlan:
    """Liga cada coluna (por posição) ao seu PathSpec resolvido."""
    bindings = [
        ColumnBinding(index=i, name=name, path=path) for i, (name, path) in enumerate(zip(names, paths))
    ]
    return ExtractionPlan(bindings, case_sensitive=case_sensitive)
