# src/configflow/core/graph/graphs.py
"""
Conjunto de grafos de dependência, um por ambiente.

`ConfigGraphs` constrói e guarda o grafo de cada ambiente de um
ConfigRegistry e expõe as operações de ordenação e export por ambiente.
Pedir um ambiente sem grafo construído levanta MissingDependencyGraphError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import networkx as nx

from configflow.core.configuration.context import DeployContext
from configflow.core.configuration.registry import ConfigRegistry
from configflow.core.configuration.types import Configuration
from configflow.core.exceptions import MissingDependencyGraphError
from configflow.core.graph.builder import ConfigNode, build_dependency_graph
from configflow.core.graph.dot import encode_to_dot
from configflow.core.graph.sort import (
    SortedComponent,
    roots,
    sort_configurations,
    sort_independent_components,
)


@dataclass
class ConfigGraphs:
    graphs: Dict[str, nx.DiGraph] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        registry: ConfigRegistry,
        environments: Optional[Iterable[str]] = None,
        *,
        include_skipped: bool = False,
        ctx: Optional[DeployContext] = None,
    ) -> "ConfigGraphs":
        envs = list(environments) if environments is not None else registry.environments()
        return cls(
            graphs={
                env: build_dependency_graph(
                    registry.for_environment(env),
                    env,
                    include_skipped=include_skipped,
                    ctx=ctx,
                )
                for env in envs
            }
        )

    def environments(self) -> List[str]:
        return list(self.graphs)

    def graph(self, environment: str) -> nx.DiGraph:
        if environment not in self.graphs:
            raise MissingDependencyGraphError(
                message=f"no dependency graph exists for environment {environment}",
                details={"environment": environment},
                environment=environment,
            )
        return self.graphs[environment]

    def sort_configs(self, environment: str) -> List[Configuration]:
        return sort_configurations(self.graph(environment))

    def independently_sorted(self, environment: str) -> List[SortedComponent]:
        return sort_independent_components(self.graph(environment))

    def roots(self, environment: str) -> List[ConfigNode]:
        return roots(self.graph(environment))

    def encode_to_dot(self, environment: str) -> str:
        return encode_to_dot(self.graph(environment))
