# src/configflow/core/configuration/context.py
"""
DeployContext — contexto canônico de uma execução de deploy.

Cada execução de deploy possui seu próprio DeployContext, que concentra:
- identificação da execução (run_id, created_at)
- configuração efetiva e seu hash canônico
- log estruturado de eventos por configuração
- warnings não fatais agrupados por configuração

Princípios fundamentais:
- Isolamento por execução (um contexto por run)
- Eventos e warnings são apenas acumulados, nunca reescritos
- Mutações protegidas por lock (deploy concorrente de componentes)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from configflow.core.config.hashing import compute_config_hash
from configflow.core.configuration.coordinate import Coordinate


@dataclass
class DeployContext:
    """
    Contexto de execução compartilhado de um deploy.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva (defaults + local deep-merge)
    - meta: metadados livres do chamador (ex.: projeto, usuário)
    - warnings: warnings por coordinate (string)
    - events: log estruturado de eventos
    """

    run_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    warnings: Dict[str, List[str]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    @property
    def config_hash(self) -> str:
        return compute_config_hash(self.config)

    def log(
        self,
        *,
        level: str,
        message: str,
        coordinate: Optional[Coordinate] = None,
        **extra: Any,
    ) -> None:
        event = {
            "run_id": self.run_id,
            "coordinate": str(coordinate) if coordinate is not None else None,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        with self._lock:
            self.events.append(event)

    def add_warning(self, *, coordinate: Coordinate, message: str) -> None:
        with self._lock:
            self.warnings.setdefault(str(coordinate), []).append(message)

    def events_for(self, coordinate: Coordinate) -> List[Dict[str, Any]]:
        key = str(coordinate)
        with self._lock:
            return [e for e in self.events if e.get("coordinate") == key]
