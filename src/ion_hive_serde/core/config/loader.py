"""
Loader de opções de tabela a partir de arquivos.

As opções são resolvidas a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

Política de resolução:
    - YAML (.yaml, .yml) ou JSON (.json)
    - mapas aninhados são achatados com `.` (`ion: {encoding: TEXT}` → `ion.encoding`)
    - escalares viram string; listas viram lista separada por vírgula
    - o arquivo local sobrescreve chave a chave
    - uma chave que é mapa em um arquivo e escalar no outro é erro

Invariantes:
    - O resultado é sempre um `MappingSource`
    - Arquivos vazios equivalem a nenhuma opção

Limites explícitos:
    - Não interpreta valores das opções
    - Não valida colunas
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # PyYAML

from .errors import (
    InvalidOptionsRootError,
    OptionsFileNotFoundError,
    OptionsStructureConflictError,
    UnsupportedOptionsFormatError,
)
from .source import MappingSource


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise OptionsFileNotFoundError(
            message=f"Options file not found: {path}",
            details={"path": str(path)},
        )

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedOptionsFormatError(
            message=f"Unsupported options format: {path.suffix}",
            details={"path": str(path), "suffix": path.suffix},
            hint="Use .yaml, .yml or .json",
        )

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidOptionsRootError(
            message=f"Options root must be a mapping, got: {type(data).__name__}",
            details={"path": str(path)},
        )

    return data


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_scalar(v) for v in value)
    return str(value)


def flatten_options(data: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """Achata um mapa aninhado em chaves pontilhadas.

    Returns:
        Dict[str, str]: `{"ion.encoding": "TEXT", ...}`; valores `None` são omitidos.
    """
    flat: Dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten_options(value, prefix=f"{full_key}."))
        elif value is not None:
            flat[full_key] = _scalar(value)
    return flat


def _branch_keys(data: Dict[str, Any], prefix: str = "") -> set:
    out = set()
    for key, value in data.items():
        if isinstance(value, dict):
            out.add(f"{prefix}{key}")
            out |= _branch_keys(value, prefix=f"{prefix}{key}.")
    return out


def load_options(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> MappingSource:
    """
    Carrega e resolve o bag de opções de uma tabela.

    Args:
        defaults_path (str): arquivo base obrigatório.
        local_path (Optional[str]): overrides locais; ignorado se não existir.

    Returns:
        MappingSource: fonte imutável com as opções resolvidas.

    Raises:
        OptionsFileNotFoundError: se o arquivo de defaults não existir.
        UnsupportedOptionsFormatError: se o formato não for suportado.
        InvalidOptionsRootError: se o conteúdo raiz não for um mapa.
        OptionsStructureConflictError: se mapa e escalar colidirem na mesma chave.
    """
    defaults = _load_file(Path(defaults_path))
    effective = flatten_options(defaults)

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            local = _load_file(local_file)
            local_flat = flatten_options(local)

            # mapa de um lado, escalar do outro
            conflicts = sorted(
                (_branch_keys(defaults) & set(local_flat))
                | (_branch_keys(local) & set(effective))
            )
            if conflicts:
                raise OptionsStructureConflictError(
                    message=f"Options key is a mapping in one file and a scalar in the other: {conflicts[0]}",
                    details={"keys": conflicts},
                )

            effective.update(local_flat)

    return MappingSource(effective)
