# src/configflow/core/graph/sort.py
"""
Ordenação topológica, detecção de ciclos e componentes independentes.

Este módulo produz a ordem de deploy de um ambiente a partir do grafo de
dependências construído por `graph.builder`.

Decisões arquiteturais:
    - Ordenação por Kahn com desempate pelo menor ID de nó; como IDs seguem
      a ordem de entrada, a saída é estável e reprodutível
    - Quando não existe ordem, todos os ciclos elementares entre os nós
      que participam da falha são reportados juntos
    - Componentes fracamente conexos são ordenados de forma independente;
      a falha de um componente não impede a ordenação dos demais

Invariantes:
    - Para toda aresta (u → v), u aparece antes de v na ordem produzida
    - Cada ciclo reportado fecha em si mesmo: entradas consecutivas são
      arestas e a última aponta para a primeira
    - A união dos componentes cobre todos os nós exatamente uma vez

Limites explícitos:
    - Não quebra ciclos automaticamente
    - Não executa deploy
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import networkx as nx

from configflow.core.configuration.types import Configuration
from configflow.core.exceptions import (
    CycleEntry,
    CyclicDependencyError,
    DependencyCycle,
    SortingErrors,
)
from configflow.core.graph.builder import ConfigNode, node_of

logger = logging.getLogger(__name__)


def _environment(graph: nx.DiGraph) -> str:
    return graph.graph.get("environment", "")


def _kahn(graph: nx.DiGraph) -> Tuple[List[int], List[int]]:
    """Retorna (ordenados, restantes). Restantes não vazios indicam ciclo."""
    in_degree: Dict[int, int] = {n: graph.in_degree(n) for n in graph.nodes}
    ready = [n for n, d in in_degree.items() if d == 0]
    heapq.heapify(ready)

    order: List[int] = []
    while ready:
        n = heapq.heappop(ready)
        order.append(n)
        for child in graph.successors(n):
            in_degree[child] -= 1
            if in_degree[child] == 0:
                heapq.heappush(ready, child)

    done = set(order)
    remaining = sorted(n for n in graph.nodes if n not in done)
    return order, remaining


def _rotate_to_min(nodes: List[int]) -> List[int]:
    pivot = nodes.index(min(nodes))
    return nodes[pivot:] + nodes[:pivot]


def cycle_rings(graph: nx.DiGraph, candidates: Iterable[int]) -> List[List[int]]:
    """
    Todos os ciclos elementares entre `candidates`, como listas de nós.

    Cada anel segue o sentido das arestas e começa no seu menor nó; a
    lista é ordenada para saída determinística. Todo nó de uma componente
    fortemente conexa cíclica aparece em pelo menos um anel.
    """
    sub = graph.subgraph(candidates)
    rings: List[List[int]] = []
    for scc in nx.strongly_connected_components(sub):
        component = sub.subgraph(scc)
        if len(scc) == 1 and not component.number_of_edges():
            continue
        rings.extend(_rotate_to_min(list(ring)) for ring in nx.simple_cycles(component))
    rings.sort()
    return rings


def find_cycles(graph: nx.DiGraph, candidates: List[int]) -> List[DependencyCycle]:
    """
    Extrai os ciclos que impedem a ordenação dos nós `candidates`.

    Um ciclo é reportado por ciclo elementar do grafo, de modo que nenhum
    participante de uma componente cíclica fica de fora do relatório.
    """
    cycles: List[DependencyCycle] = []
    for ring in cycle_rings(graph, candidates):
        entries = []
        for n in ring:
            c = node_of(graph, n).configuration
            entries.append(CycleEntry(coordinate=c.coordinate, filepath=c.template.name or None))
        cycles.append(DependencyCycle(entries=tuple(entries)))
    return cycles


def topological_order(graph: nx.DiGraph) -> List[ConfigNode]:
    """
    Ordena os nós do grafo (dependências antes de dependentes).

    Raises:
        CyclicDependencyError: com todos os ciclos que impedem a ordenação.
    """
    order, remaining = _kahn(graph)
    if remaining:
        cycles = find_cycles(graph, remaining)
        logger.error("%s: %d dependency cycle(s) detected", _environment(graph), len(cycles))
        raise CyclicDependencyError(_environment(graph), cycles)
    return [node_of(graph, n) for n in order]


def sort_configurations(graph: nx.DiGraph) -> List[Configuration]:
    return [n.configuration for n in topological_order(graph)]


@dataclass(frozen=True)
class SortedComponent:
    """Componente fracamente conexo, com seu subgrafo e nós já ordenados."""

    graph: nx.DiGraph
    sorted_nodes: Tuple[ConfigNode, ...]

    @property
    def configurations(self) -> List[Configuration]:
        return [n.configuration for n in self.sorted_nodes]


def sort_independent_components(graph: nx.DiGraph) -> List[SortedComponent]:
    """
    Particiona o grafo em componentes fracamente conexos e ordena cada um.

    Componentes são retornados pelo menor ID de nó. Todos os componentes
    são processados antes de qualquer erro ser levantado.

    Raises:
        SortingErrors: agregando um CyclicDependencyError por componente que
            falhou; `sorted_components` contém os componentes ordenados.
    """
    components = sorted((sorted(c) for c in nx.weakly_connected_components(graph)), key=lambda c: c[0])

    sorted_components: List[SortedComponent] = []
    errors: List[Exception] = []
    for nodes in components:
        sub = graph.subgraph(nodes).copy()
        try:
            ordered = topological_order(sub)
        except CyclicDependencyError as e:
            errors.append(e)
            continue
        sorted_components.append(SortedComponent(graph=sub, sorted_nodes=tuple(ordered)))

    logger.debug(
        "%s: %d independent component(s), %d unsortable",
        _environment(graph),
        len(components),
        len(errors),
    )
    if errors:
        raise SortingErrors(errors, sorted_components)
    return sorted_components


def roots(graph: nx.DiGraph) -> List[ConfigNode]:
    """Nós sem arestas de entrada (nenhuma dependência)."""
    return [node_of(graph, n) for n in sorted(graph.nodes) if graph.in_degree(n) == 0]
