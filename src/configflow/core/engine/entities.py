# src/configflow/core/engine/entities.py
"""
Store de entidades resolvidas de uma execução de deploy.

Cada configuração implantada (ou marcada como skip) gera um
`ResolvedEntity`, guardado pela sua Coordinate. Configurações implantadas
depois, na ordem topológica, leem esse store para resolver parâmetros de
referência.

Decisões arquiteturais:
    - Acesso protegido por lock de leitura/escrita: leituras concorrentes
      não se bloqueiam e escritas são mutuamente exclusivas
    - `put` é upsert (última escrita vence); o store não impõe escrita única
    - Propriedades são copiadas em profundidade na entrada e na saída:
      nem o chamador de `put` nem quem lê o store alcança o estado interno
    - Caminhos pontilhados navegam mapas aninhados sem regra de escape

Invariantes:
    - Um store novo por execução de deploy
    - Entidades nunca são removidas durante a execução
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from configflow.core.configuration.coordinate import Coordinate
from configflow.core.configuration.parameters import Properties, resolve_property_path


@dataclass(frozen=True)
class ResolvedEntity:
    coordinate: Coordinate
    entity_name: str
    properties: Properties = field(default_factory=dict)
    skip: bool = False

    @classmethod
    def skipped(cls, coordinate: Coordinate) -> "ResolvedEntity":
        return cls(coordinate=coordinate, entity_name=coordinate.config_id, properties={}, skip=True)


class ReadWriteLock:
    """Lock com múltiplos leitores e escritor exclusivo (preferência ao escritor)."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class EntityStore:
    """Mapa Coordinate → ResolvedEntity seguro para uso concorrente."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._entities: Dict[Coordinate, ResolvedEntity] = {}

    @staticmethod
    def _copy(entity: ResolvedEntity) -> ResolvedEntity:
        return ResolvedEntity(
            coordinate=entity.coordinate,
            entity_name=entity.entity_name,
            properties=copy.deepcopy(entity.properties),
            skip=entity.skip,
        )

    def put(self, entity: ResolvedEntity) -> None:
        stored = self._copy(entity)
        with self._lock.write():
            self._entities[entity.coordinate] = stored

    def get(self, coordinate: Coordinate) -> Optional[ResolvedEntity]:
        with self._lock.read():
            entity = self._entities.get(coordinate)
            return self._copy(entity) if entity is not None else None

    def get_all(self) -> Dict[Coordinate, ResolvedEntity]:
        with self._lock.read():
            return {c: self._copy(e) for c, e in self._entities.items()}

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entities)

    def __contains__(self, coordinate: object) -> bool:
        with self._lock.read():
            return coordinate in self._entities

    def resolve_property(self, coordinate: Coordinate, path: str) -> Tuple[Any, bool]:
        """
        Resolve `path` (ex.: `a.b.c`) nas propriedades da entidade.

        Returns:
            Tuple[Any, bool]: (valor, encontrado); não encontrado quando a
            entidade não existe ou algum segmento não é navegável.
        """
        with self._lock.read():
            entity = self._entities.get(coordinate)
            if entity is None:
                return None, False
            value, found = resolve_property_path(path, entity.properties)
            return copy.deepcopy(value), found

    def get_resolved_property(self, coordinate: Coordinate, property_name: str) -> Tuple[Any, bool]:
        return self.resolve_property(coordinate, property_name)
