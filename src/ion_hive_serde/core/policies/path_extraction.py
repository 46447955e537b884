"""
Binding de PathSpec por coluna.

Resolução:
    - `ion.<coluna>.path_extractor` presente → expressão interpretada
    - ausente → path default `(<coluna>)`

Opções globais:
    - `ion.path_extractor.case_sensitive` (default `false`)
    - `ion.path_extractor.allow_aliasing` (default `false`): quando falso,
      duas colunas com PathSpecs estruturalmente idênticos são erro de
      configuração; quando verdadeiro, ambas leem o mesmo valor extraído.

Invariantes:
    - Toda coluna possui exatamente um PathSpec resolvido
    - Identidade estrutural respeita a regra de case da extração
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple

from ..config.source import ConfigurationSource
from ..exceptions import ConfigurationError, MalformedPathError, PathAliasingError, raise_if_any
from ..paths.spec import PathSpec, parse_path
from ..schema.columns import ColumnSchema
from ._options import ALLOW_ALIASING_KEY, CASE_SENSITIVE_KEY, named_column_options, parse_bool


@dataclass(frozen=True)
class PathExtractionPolicy:
    paths: Tuple[PathSpec, ...]
    explicit: FrozenSet[int]
    case_sensitive: bool = False
    allow_aliasing: bool = False

    def path_for(self, index: int) -> PathSpec:
        return self.paths[index]

    def aliases(self) -> List[Tuple[int, ...]]:
        """Grupos de colunas (por índice) que compartilham o mesmo PathSpec."""
        groups: Dict[tuple, List[int]] = {}
        for index, path in enumerate(self.paths):
            groups.setdefault(path.structural_key(self.case_sensitive), []).append(index)
        return [tuple(g) for g in groups.values() if len(g) > 1]

    def to_dict(self) -> Dict[str, object]:
        return {
            "paths": [p.render() for p in self.paths],
            "explicit": sorted(self.explicit),
            "case_sensitive": self.case_sensitive,
            "allow_aliasing": self.allow_aliasing,
        }


def resolve_path_extraction_policy(source: ConfigurationSource, columns: ColumnSchema) -> PathExtractionPolicy:
    errors: List[ConfigurationError] = []
    case_sensitive = parse_bool(source, CASE_SENSITIVE_KEY, False, errors)
    allow_aliasing = parse_bool(source, ALLOW_ALIASING_KEY, False, errors)

    explicit: Dict[int, PathSpec] = {}
    for _key, name, raw in named_column_options(source, "path_extractor", columns, errors):
        try:
            explicit[columns.get(name).index] = parse_path(raw, column=name)
        except MalformedPathError as e:
            errors.append(e)

    paths = tuple(explicit.get(c.index, PathSpec.for_column(c.name)) for c in columns)
    policy = PathExtractionPolicy(
        paths=paths,
        explicit=frozenset(explicit),
        case_sensitive=case_sensitive,
        allow_aliasing=allow_aliasing,
    )

    if not allow_aliasing:
        for group in policy.aliases():
            names = [columns[i].name for i in group]
            errors.append(
                PathAliasingError(
                    message=(
                        f"Columns {names} resolve to the same path {paths[group[0]].render()}; "
                        f"set {ALLOW_ALIASING_KEY}=true to allow it"
                    ),
                    details={"columns": names, "path": paths[group[0]].render()},
                )
            )

    raise_if_any(errors)
    return policy
