# tests/core/graph/test_graph_dot.py
"""
Testes do export DOT.
"""

from configflow.core.graph.builder import build_dependency_graph
from configflow.core.graph.dot import encode_to_dot, graph_name, to_pydot


def test_graph_is_named_after_environment(make_config):
    graph = build_dependency_graph([make_config("a")], "prod")
    assert graph_name("prod") == "prod_dependency_graph"
    assert to_pydot(graph).get_name().strip('"') == "prod_dependency_graph"


def test_nodes_and_edges_use_coordinates(make_config):
    graph = build_dependency_graph([make_config("a", refs=["b"]), make_config("b")], "prod")
    text = encode_to_dot(graph)

    assert text.startswith("digraph")
    assert '"proj:dashboard:a"' in text
    assert '"proj:dashboard:b" -> "proj:dashboard:a"' in text


def test_encoding_is_deterministic(make_config):
    configs = [make_config("a", refs=["b", "c"]), make_config("b"), make_config("c", refs=["b"])]
    first = encode_to_dot(build_dependency_graph(configs, "prod"))
    second = encode_to_dot(build_dependency_graph(configs, "prod"))
    assert first == second
