"""
Trilha estruturada de resolução do SerDe.

Este módulo define o `ResolutionTrace`, o registro canônico de eventos e
warnings produzidos durante a resolução de configuração e o processamento
de documentos.

Princípios fundamentais:
    - Isolamento por sessão de tabela (cada configuração possui sua trilha)
    - Eventos estruturados, nunca texto livre concatenado
    - Ausência de estado global (nenhum logger compartilhado)

Invariantes:
    - Todo evento inclui `component`, `level`, `message` e `timestamp`
    - Warnings são agrupados por `component`

Limites explícitos:
    - Não persiste eventos
    - Não decide políticas
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List


@dataclass
class ResolutionTrace:
    """
    Registro de eventos de uma sessão de tabela.

    A trilha é preenchida durante a construção da configuração e pelos
    adapters de leitura/escrita; as políticas resolvidas nunca dependem
    do seu conteúdo.
    """

    session_id: str = "default"
    events: List[Dict[str, Any]] = field(default_factory=list)
    warnings: Dict[str, List[str]] = field(default_factory=dict)

    def log(self, *, component: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "session_id": self.session_id,
            "component": component,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, component: str, message: str) -> None:
        if component not in self.warnings:
            self.warnings[component] = []
        self.warnings[component].append(message)
        self.log(component=component, level="warning", message=message)

    def events_for(self, component: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["component"] == component]
