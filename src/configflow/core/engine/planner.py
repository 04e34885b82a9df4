# src/configflow/core/engine/planner.py
"""
Planejadores em lista: parâmetros de uma configuração e ordenação legada.

Este módulo contém as duas ordenações que não dependem do grafo por
ambiente:

    - `sort_parameters`: ordena os parâmetros de uma única configuração,
      já que um parâmetro pode depender de outro da mesma configuração
      (ex.: um compound que usa um value)
    - `legacy_sort_configurations`: ordenação de configurações em lista,
      mantida como estratégia alternativa explícita (SortStrategy.LEGACY)

Decisões arquiteturais:
    - Ambas usam Kahn determinístico; empates são resolvidos pela ordem
      lexicográfica (nome do parâmetro / config_id da coordinate)
    - Ciclos são erros estruturais: nenhuma ordem parcial é retornada
    - Na ordenação legada, uma configuração com `skip` não gera arestas
      de dependência, e referências para fora da lista são ignoradas

Invariantes:
    - Todo item aparece exatamente uma vez na ordem final
    - Nenhum item aparece antes de suas dependências
    - A mesma entrada sempre produz a mesma ordem

Limites explícitos:
    - Não resolve valores de parâmetros
    - Não valida se referências apontam para configurações existentes
"""

from __future__ import annotations

import heapq
import logging
from typing import Dict, List, Sequence, Set, Tuple

import networkx as nx

from configflow.core.configuration.parameters import Parameter, ParameterReference
from configflow.core.configuration.types import Configuration
from configflow.core.exceptions import (
    CircularParameterDependencyError,
    CycleEntry,
    CyclicDependencyError,
    DependencyCycle,
)
from configflow.core.graph.sort import cycle_rings

logger = logging.getLogger(__name__)


def _references_parameter(ref: ParameterReference, name: str) -> bool:
    return ref.property == name or ref.property.split(".", 1)[0] == name


def sort_parameters(configuration: Configuration) -> List[Tuple[str, Parameter]]:
    """
    Ordena os parâmetros de uma configuração respeitando dependências internas.

    Um parâmetro depende de outro quando referencia a própria configuração
    com a propriedade igual ao nome do outro parâmetro (ou com caminho
    pontilhado iniciado por ele). Autorreferências não geram aresta; elas
    são rejeitadas na validação de referências.

    Returns:
        List[Tuple[str, Parameter]]: Pares (nome, parâmetro) em ordem de resolução.

    Raises:
        CircularParameterDependencyError: Se os parâmetros formarem ciclo.
    """
    params = configuration.parameters
    names = sorted(params)
    own = configuration.coordinate

    depends_on: Dict[str, Set[str]] = {n: set() for n in names}
    for name in names:
        for ref in params[name].get_references():
            if ref.coordinate != own:
                continue
            for other in names:
                if other != name and _references_parameter(ref, other):
                    logger.debug("Config parameter: %s has dependency on %s", name, other)
                    depends_on[name].add(other)

    incoming = {n: len(d) for n, d in depends_on.items()}
    dependents: Dict[str, List[str]] = {n: [] for n in names}
    for n, deps in depends_on.items():
        for d in deps:
            dependents[d].append(n)

    ready = [n for n in names if incoming[n] == 0]
    heapq.heapify(ready)
    order: List[str] = []
    while ready:
        n = heapq.heappop(ready)
        order.append(n)
        for child in dependents[n]:
            incoming[child] -= 1
            if incoming[child] == 0:
                heapq.heappush(ready, child)

    if len(order) != len(names):
        stuck = [n for n in names if n not in set(order)]
        refs: List[ParameterReference] = []
        for n in stuck:
            refs.extend(r for r in params[n].get_references() if r not in refs)
        raise CircularParameterDependencyError(stuck, refs, **configuration.location())

    return [(n, params[n]) for n in order]


def legacy_sort_configurations(
    configurations: Sequence[Configuration],
    environment: str = "",
) -> List[Configuration]:
    """
    Ordena configurações em lista (estratégia legada).

    A lista é primeiro ordenada por `config_id` (estável) e esse índice
    resolve empates.

    Raises:
        CyclicDependencyError: com todos os ciclos elementares entre as
            configurações travadas; `details["depends_on"]` lista, por
            configuração travada, as dependências pendentes.
    """
    ordered = sorted(configurations, key=lambda c: c.coordinate.config_id)
    index = {c.coordinate: i for i, c in enumerate(ordered)}

    depends_on: Dict[int, List[int]] = {i: [] for i in range(len(ordered))}
    for i, c in enumerate(ordered):
        if c.skip:
            continue
        for target in sorted({r.coordinate for r in c.references()}):
            j = index.get(target)
            if j is None or j == i:
                continue
            logger.debug("Configuration: %s has dependency on %s", c.coordinate, target)
            depends_on[i].append(j)

    incoming = {i: len(d) for i, d in depends_on.items()}
    dependents: Dict[int, List[int]] = {i: [] for i in depends_on}
    for i, deps in depends_on.items():
        for d in deps:
            dependents[d].append(i)

    ready = [i for i, n in incoming.items() if n == 0]
    heapq.heapify(ready)
    order: List[int] = []
    while ready:
        i = heapq.heappop(ready)
        order.append(i)
        for child in dependents[i]:
            incoming[child] -= 1
            if incoming[child] == 0:
                heapq.heappush(ready, child)

    if len(order) == len(ordered):
        return [ordered[i] for i in order]

    remaining = set(depends_on) - set(order)
    env = environment or (ordered[0].environment if ordered else "")

    pending = nx.DiGraph()
    pending.add_nodes_from(remaining)
    pending.add_edges_from((d, i) for i in remaining for d in depends_on[i] if d in remaining)

    cycles: List[DependencyCycle] = []
    for ring in cycle_rings(pending, remaining):
        cycles.append(
            DependencyCycle(
                entries=tuple(
                    CycleEntry(ordered[i].coordinate, ordered[i].template.name or None) for i in ring
                )
            )
        )

    error = CyclicDependencyError(env, cycles)
    error.details["depends_on"] = {
        str(ordered[i].coordinate): [str(ordered[d].coordinate) for d in depends_on[i] if d in remaining]
        for i in sorted(remaining)
    }
    raise error
