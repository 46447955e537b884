"""
Fingerprint determinístico de uma configuração resolvida.

O snapshot de políticas (`SerDeConfiguration.to_dict()`) é embrulhado num
envelope com a versão do formato do snapshot antes do hash: se o formato
do snapshot mudar, fingerprints antigos deixam de coincidir em vez de
colidir por acaso.

Política de hashing (v1):
    - envelope `{"schema": ..., "policies": snapshot}`
    - JSON canônico (chaves ordenadas, separadores compactos, UTF-8)
    - enums pelo valor, decimais como texto
    - SHA-256 hexadecimal

O fingerprint identifica o conjunto de políticas efetivas, não o bag
bruto de opções: duas sessões com opções diferentes mas políticas
equivalentes produzem o mesmo valor.
"""

import hashlib
import json
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

SNAPSHOT_SCHEMA = "ion-hive-serde.policies/v1"


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Valor não serializável no snapshot: {type(value).__name__}")


def compute_fingerprint(snapshot: Dict[str, Any], *, schema: str = SNAPSHOT_SCHEMA) -> str:
    """
    SHA-256 (64 caracteres hex) do snapshot de políticas sob `schema`.

    Raises:
        TypeError: se o snapshot não for um dicionário ou tiver valores
            sem forma JSON.
    """
    if not isinstance(snapshot, dict):
        raise TypeError(
            f"Snapshot para fingerprint deve ser dict, recebido: {type(snapshot).__name__}"
        )

    envelope = {"schema": schema, "policies": snapshot}
    payload = json.dumps(envelope, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=_jsonable)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
