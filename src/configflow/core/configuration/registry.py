# src/configflow/core/configuration/registry.py
"""
Registro de configurações agrupadas por ambiente.

O `ConfigRegistry` é a fonte de configurações consumida pelo grafo e pelo
orquestrador. Ele recebe as configurações já carregadas (o parsing de
manifestos e projetos fica fora deste pacote) e as agrupa por ambiente,
preservando a ordem de registro.

Decisões arquiteturais:
    - Uma Coordinate só pode ser registrada uma vez por ambiente
    - A ordem de registro é preservada; ela define os IDs de nó do grafo
      e, portanto, o desempate da ordenação topológica

Invariantes:
    - `for_environment(env)` sempre retorna uma nova lista
    - Ambientes são listados na ordem em que apareceram pela primeira vez

Limites explícitos:
    - Não valida referências entre configurações
    - Não ordena configurações
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from configflow.core.configuration.coordinate import Coordinate
from configflow.core.configuration.types import Configuration
from configflow.core.exceptions import DuplicateCoordinateError


@dataclass
class ConfigRegistry:
    _by_env: Dict[str, Dict[Coordinate, Configuration]] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def of(cls, configurations: Iterable[Configuration]) -> "ConfigRegistry":
        registry = cls()
        for c in configurations:
            registry.add(c)
        return registry

    def add(self, configuration: Configuration) -> None:
        env = configuration.environment
        if not isinstance(env, str) or not env.strip():
            raise ValueError("configuration.environment must be a non-empty string")
        bucket = self._by_env.setdefault(env, {})
        if configuration.coordinate in bucket:
            raise DuplicateCoordinateError(
                "duplicated configuration coordinate",
                **configuration.location(),
            )
        bucket[configuration.coordinate] = configuration

    def environments(self) -> List[str]:
        return list(self._by_env)

    def for_environment(self, environment: str) -> List[Configuration]:
        return list(self._by_env.get(environment, {}).values())

    def get(self, environment: str, coordinate: Coordinate) -> Configuration:
        return self._by_env[environment][coordinate]
