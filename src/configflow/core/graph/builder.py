# src/configflow/core/graph/builder.py
"""
Construtor do grafo de dependências de um ambiente.

Este módulo transforma as configurações de um ambiente em um grafo
dirigido (networkx.DiGraph) no qual:
    - cada nó embrulha exatamente uma Configuration (ConfigNode)
    - cada aresta aponta da dependência para o dependente, de modo que a
      ordenação topológica produza dependências antes dos dependentes

Decisões arquiteturais:
    - IDs de nó são inteiros densos atribuídos na ordem de entrada
      (arena + índice); não são persistidos nem comparados entre construções
    - Configurações com `skip` ficam fora do grafo, exceto sob o flag de
      compatibilidade `include_skipped`
    - Referências repetidas para a mesma configuração geram uma única aresta
    - Autorreferências não geram aresta (resolvem-se no mapa em andamento)
    - Referências para coordinates fora do ambiente geram warning e são
      ignoradas; o erro real aparece na resolução do parâmetro

Invariantes:
    - Toda aresta liga dois nós existentes no grafo
    - As configurações de entrada nunca são mutadas

Limites explícitos:
    - Não ordena (ver `graph.sort`)
    - Não levanta erros de referência
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import networkx as nx

from configflow.core.configuration.context import DeployContext
from configflow.core.configuration.coordinate import Coordinate
from configflow.core.configuration.types import Configuration

logger = logging.getLogger(__name__)

NODE_ATTR = "node"


@dataclass(frozen=True)
class ConfigNode:
    node_id: int
    configuration: Configuration

    @property
    def coordinate(self) -> Coordinate:
        return self.configuration.coordinate

    def dot_id(self) -> str:
        return str(self.configuration.coordinate)


def node_of(graph: nx.DiGraph, node_id: int) -> ConfigNode:
    return graph.nodes[node_id][NODE_ATTR]


def build_dependency_graph(
    configurations: Sequence[Configuration],
    environment: str,
    *,
    include_skipped: bool = False,
    ctx: Optional[DeployContext] = None,
) -> nx.DiGraph:
    """
    Constrói o grafo de dependências de um ambiente.

    Args:
        configurations: Configurações do ambiente (já filtradas).
        environment: Nome do ambiente (guardado em `graph.graph["environment"]`).
        include_skipped: Inclui configurações com `skip` como nós.
        ctx: Contexto opcional; referências desconhecidas viram warnings nele.

    Returns:
        nx.DiGraph: Grafo com nós inteiros e atributo `node` (ConfigNode).
    """
    graph = nx.DiGraph(environment=environment)
    ids: Dict[Coordinate, int] = {}

    for c in configurations:
        if c.skip and not include_skipped:
            continue
        node_id = len(ids)
        ids[c.coordinate] = node_id
        graph.add_node(node_id, **{NODE_ATTR: ConfigNode(node_id, c)})

    for c in configurations:
        if c.coordinate not in ids:
            continue
        dependent = ids[c.coordinate]

        seen = set()
        for ref in c.references():
            target = ref.coordinate
            if target == c.coordinate or target in seen:
                continue
            seen.add(target)

            if target not in ids:
                message = f"Configuration {str(c.coordinate)!r} references unknown configuration {str(target)!r}"
                logger.warning(message)
                if ctx is not None:
                    ctx.add_warning(coordinate=c.coordinate, message=message)
                continue

            logger.debug("%s: dependency edge %s -> %s", environment, target, c.coordinate)
            graph.add_edge(ids[target], dependent)

    return graph
