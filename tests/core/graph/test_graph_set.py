# tests/core/graph/test_graph_set.py
"""
Testes do ConfigGraphs (um grafo por ambiente).
"""

import pytest

from configflow.core.configuration.registry import ConfigRegistry
from configflow.core.exceptions import MissingDependencyGraphError
from configflow.core.graph.graphs import ConfigGraphs


@pytest.fixture
def registry(make_config):
    return ConfigRegistry.of(
        [
            make_config("a", refs=["b"], environment="prod"),
            make_config("b", environment="prod"),
            make_config("a", environment="dev"),
        ]
    )


def test_builds_one_graph_per_environment(registry):
    graphs = ConfigGraphs.build(registry)
    assert graphs.environments() == ["prod", "dev"]
    assert [c.coordinate.config_id for c in graphs.sort_configs("prod")] == ["b", "a"]
    assert [n.coordinate.config_id for n in graphs.roots("dev")] == ["a"]
    assert len(graphs.independently_sorted("prod")) == 1


def test_environment_subset(registry):
    graphs = ConfigGraphs.build(registry, ["dev"])
    assert graphs.environments() == ["dev"]


def test_missing_environment_raises(registry):
    graphs = ConfigGraphs.build(registry, ["dev"])
    with pytest.raises(MissingDependencyGraphError) as exc:
        graphs.sort_configs("prod")
    assert str(exc.value) == "no dependency graph exists for environment prod"
    assert exc.value.environment == "prod"
    assert exc.value.details == {"environment": "prod"}
    with pytest.raises(MissingDependencyGraphError):
        graphs.encode_to_dot("prod")
