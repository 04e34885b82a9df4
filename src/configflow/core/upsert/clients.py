# src/configflow/core/upsert/clients.py
"""
Contrato de cliente de deploy e cliente em memória.

O orquestrador e a cadeia de upsert dependem apenas do formato mínimo
`DeploymentClient` (create / update / list). Clientes HTTP concretos ficam
fora deste pacote.

Toda chamada recebe `timeout` (segundos): cada chamada remota tem um teto
fixo e um cliente travado não paralisa o deploy inteiro.

Falhas remotas são sinalizadas com RemoteCallError; somente o status 404
é tratado como "não encontrado" pela cadeia de upsert.
"""

from __future__ import annotations

import copy
import itertools
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

from configflow.core.exceptions import RemoteCallError


@dataclass(frozen=True)
class RemoteResponse:
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)


class DeploymentClient(Protocol):
    def create(self, payload: Dict[str, Any], *, timeout: float) -> RemoteResponse:
        ...

    def update(self, object_id: str, payload: Dict[str, Any], *, timeout: float) -> RemoteResponse:
        ...

    def list(self, *, timeout: float) -> List[Dict[str, Any]]:
        ...


class DummyClient:
    """
    Cliente em memória com IDs sintéticos e estáveis.

    Usado automaticamente em dry-run: nenhuma chamada de rede acontece, mas
    configurações dependentes ainda recebem um ID resolvível. Também serve
    como remoto falso em testes, pois registra criações e atualizações e
    suporta listagem por external ID.
    """

    def __init__(self, kind: str, *, id_key: str = "id"):
        self.kind = kind
        self.id_key = id_key
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._objects: Dict[str, Dict[str, Any]] = {}
        self.created: List[str] = []
        self.updated: List[str] = []

    def create(self, payload: Dict[str, Any], *, timeout: float) -> RemoteResponse:
        with self._lock:
            object_id = f"{self.kind}-{next(self._counter)}"
            stored = copy.deepcopy(payload)
            stored[self.id_key] = object_id
            self._objects[object_id] = stored
            self.created.append(object_id)
            return RemoteResponse(201, copy.deepcopy(stored))

    def update(self, object_id: str, payload: Dict[str, Any], *, timeout: float) -> RemoteResponse:
        with self._lock:
            if object_id not in self._objects:
                raise RemoteCallError(f"{self.kind} object {object_id} not found", status_code=404)
            stored = copy.deepcopy(payload)
            stored[self.id_key] = object_id
            self._objects[object_id] = stored
            self.updated.append(object_id)
            return RemoteResponse(200, copy.deepcopy(stored))

    def list(self, *, timeout: float) -> List[Dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(o) for o in self._objects.values()]

    def objects(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return copy.deepcopy(self._objects)
