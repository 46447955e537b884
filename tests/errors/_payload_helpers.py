"""
Helpers para payloads de erro padronizados do SerDe.

Objetivo: validar o *mínimo canônico* de `SerDeException.to_dict()` sem
acoplar os testes a mensagens completas.

Features:
- Normalização determinística (chaves ordenadas, tuplas como listas)
- **Subset matching**: o payload esperado é um contrato mínimo; campos
  extras no payload real são permitidos
"""

from __future__ import annotations

from typing import Any, Dict


def _normalize(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _normalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [_normalize(v) for v in obj]
    return obj


def _is_subset(expected: Any, actual: Any, path: str = "$") -> None:
    if isinstance(expected, dict):
        assert isinstance(actual, dict), f"{path}: expected dict, got {type(actual).__name__}"
        for k, v in expected.items():
            assert k in actual, f"{path}: missing key '{k}'"
            _is_subset(v, actual[k], f"{path}.{k}")
        return
    if isinstance(expected, list):
        assert isinstance(actual, list), f"{path}: expected list, got {type(actual).__name__}"
        assert len(actual) == len(expected), f"{path}: expected {len(expected)} items, got {len(actual)}"
        for i, (e, a) in enumerate(zip(expected, actual)):
            _is_subset(e, a, f"{path}[{i}]")
        return
    assert actual == expected, f"{path}: expected {expected!r}, got {actual!r}"


def assert_error_payload(error: Any, expected: Dict[str, Any]) -> None:
    """Valida `error.to_dict()` contra o contrato mínimo `expected`."""
    _is_subset(_normalize(expected), _normalize(error.to_dict()))
