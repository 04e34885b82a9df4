# src/configflow/core/config/options.py
"""
Opções de deploy materializadas a partir dos settings efetivos.

Chaves reconhecidas (todas opcionais):

    deploy:
      continue_on_error: false
      dry_run: false
      sort_strategy: graph        # graph | legacy
      parallel_components: false
      max_workers: 4
      call_timeout_seconds: 60
    graph:
      include_skipped: false

Decisões arquiteturais:
    - A estratégia de ordenação é um valor explícito entregue ao
      orquestrador, nunca um estado global
    - Valores inválidos são rejeitados na construção (InvalidDeployOptionsError)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

from .errors import InvalidDeployOptionsError


class SortStrategy(str, Enum):
    GRAPH = "graph"
    LEGACY = "legacy"


DEFAULT_MAX_WORKERS = 4
DEFAULT_CALL_TIMEOUT_SECONDS = 60.0


def _section(config: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = config.get(key) or {}
    if not isinstance(value, Mapping):
        raise InvalidDeployOptionsError(f"'{key}' deve ser um mapa, recebido: {type(value).__name__}")
    return value


def _flag(section: Mapping[str, Any], name: str, key: str) -> bool:
    value = section.get(key, False)
    if not isinstance(value, bool):
        raise InvalidDeployOptionsError(f"'{name}.{key}' deve ser bool, recebido: {value!r}")
    return value


@dataclass(frozen=True)
class DeployOptions:
    continue_on_error: bool = False
    dry_run: bool = False
    sort_strategy: SortStrategy = SortStrategy.GRAPH
    parallel_components: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS
    call_timeout_seconds: float = DEFAULT_CALL_TIMEOUT_SECONDS
    include_skipped: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.sort_strategy, SortStrategy):
            raise InvalidDeployOptionsError(f"sort_strategy inválida: {self.sort_strategy!r}")
        if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise InvalidDeployOptionsError(f"max_workers deve ser inteiro >= 1, recebido: {self.max_workers!r}")
        if (
            isinstance(self.call_timeout_seconds, bool)
            or not isinstance(self.call_timeout_seconds, (int, float))
            or self.call_timeout_seconds <= 0
        ):
            raise InvalidDeployOptionsError(
                f"call_timeout_seconds deve ser > 0, recebido: {self.call_timeout_seconds!r}"
            )

    @property
    def halt_on_error(self) -> bool:
        """O deploy para na primeira falha, salvo continue_on_error ou dry_run."""
        return not (self.continue_on_error or self.dry_run)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "DeployOptions":
        deploy = _section(config, "deploy")
        graph = _section(config, "graph")

        raw_strategy = deploy.get("sort_strategy", SortStrategy.GRAPH.value)
        try:
            strategy = SortStrategy(raw_strategy)
        except ValueError as e:
            raise InvalidDeployOptionsError(
                f"'deploy.sort_strategy' inválida: {raw_strategy!r} (esperado: graph | legacy)"
            ) from e

        return cls(
            continue_on_error=_flag(deploy, "deploy", "continue_on_error"),
            dry_run=_flag(deploy, "deploy", "dry_run"),
            sort_strategy=strategy,
            parallel_components=_flag(deploy, "deploy", "parallel_components"),
            max_workers=deploy.get("max_workers", DEFAULT_MAX_WORKERS),
            call_timeout_seconds=deploy.get("call_timeout_seconds", DEFAULT_CALL_TIMEOUT_SECONDS),
            include_skipped=_flag(graph, "graph", "include_skipped"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "continue_on_error": self.continue_on_error,
            "dry_run": self.dry_run,
            "sort_strategy": self.sort_strategy.value,
            "parallel_components": self.parallel_components,
            "max_workers": self.max_workers,
            "call_timeout_seconds": self.call_timeout_seconds,
            "include_skipped": self.include_skipped,
        }
