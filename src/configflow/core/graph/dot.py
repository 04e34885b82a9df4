# src/configflow/core/graph/dot.py
"""
Export DOT (graphviz) do grafo de dependências.

Serialização pura para ferramentas externas de visualização: um nó por
configuração (identificado pela Coordinate) e uma aresta por dependência.
Não tem papel semântico no deploy.

Nós e arestas são emitidos em ordem de ID, de modo que o mesmo grafo
produz sempre o mesmo texto.
"""

from __future__ import annotations

import networkx as nx
import pydot

from configflow.core.graph.builder import node_of


def _quoted(value: str) -> str:
    # Coordinates contêm ':', que o DOT interpretaria como porta.
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def graph_name(environment: str) -> str:
    return f"{environment}_dependency_graph"


def to_pydot(graph: nx.DiGraph) -> pydot.Dot:
    env = graph.graph.get("environment", "")
    dot = pydot.Dot(_quoted(graph_name(env)), graph_type="digraph")

    for n in sorted(graph.nodes):
        node = node_of(graph, n)
        dot.add_node(pydot.Node(_quoted(node.dot_id())))

    for src, dst in sorted(graph.edges):
        dot.add_edge(
            pydot.Edge(
                _quoted(node_of(graph, src).dot_id()),
                _quoted(node_of(graph, dst).dot_id()),
            )
        )
    return dot


def encode_to_dot(graph: nx.DiGraph) -> str:
    return to_pydot(graph).to_string()
