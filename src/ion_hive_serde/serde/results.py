"""
Resultados canônicos de leitura e escrita em lote.

Falhas por documento/linha nunca são descartadas em silêncio: cada uma
vira um `DocumentFailure` rotulado com a posição de origem, e o lote
segue com os demais itens.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from ion_hive_serde.core.exceptions import SerDeException


@dataclass(frozen=True)
class DocumentFailure:
    index: int
    error: SerDeException

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "error": self.error.to_dict()}


@dataclass(frozen=True)
class ReadResult:
    """
    Campos:
        - rows: linhas produzidas, em ordem de documento
        - failures: documentos que falharam (nenhuma linha deles em `rows`)
        - documents: total de documentos processados
    """

    rows: List[Tuple[Any, ...]] = field(default_factory=list)
    failures: List[DocumentFailure] = field(default_factory=list)
    documents: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class WriteResult:
    """
    Campos:
        - structs: structs compostos, na ordem das linhas aceitas
        - payload: `structs` codificados (bytes em BINARY, str em TEXT)
        - failures: linhas que falharam
    """

    structs: List[Dict[str, Any]] = field(default_factory=list)
    payload: Union[bytes, str] = b""
    failures: List[DocumentFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
