# tests/core/engine/test_planner_legacy.py
"""
Testes da ordenação legada (em lista) de configurações.
"""

import pytest

try:
    from configflow.core.engine.planner import legacy_sort_configurations
    from configflow.core.exceptions import CyclicDependencyError
except Exception as e:  # noqa: BLE001
    legacy_sort_configurations = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing legacy planner. Implement:
- src/configflow/core/engine/planner.py (legacy_sort_configurations)
Import error: {_IMPORT_ERR}
""")


def _ids(configs):
    return [c.coordinate.config_id for c in configs]


def test_ties_follow_config_id(make_config):
    _require_imports()
    configs = [make_config("c", refs=["a"]), make_config("b"), make_config("a")]
    assert _ids(legacy_sort_configurations(configs, "prod")) == ["a", "b", "c"]


def test_dependency_before_dependent(make_config):
    _require_imports()
    configs = [make_config("a", refs=["z"]), make_config("z")]
    assert _ids(legacy_sort_configurations(configs, "prod")) == ["z", "a"]


def test_skipped_config_adds_no_dependency(make_config):
    _require_imports()
    configs = [make_config("s", refs=["t"], skip=True), make_config("t", refs=["s"])]
    assert _ids(legacy_sort_configurations(configs, "prod")) == ["s", "t"]


def test_references_outside_the_list_are_ignored(make_config):
    _require_imports()
    configs = [make_config("a", refs=["ghost"]), make_config("b")]
    assert _ids(legacy_sort_configurations(configs, "prod")) == ["a", "b"]


def test_cycle_reports_pending_dependencies(make_config):
    _require_imports()
    configs = [
        make_config("a", refs=["b"]),
        make_config("b", refs=["a"]),
        make_config("c", refs=["a"]),
        make_config("free"),
    ]

    with pytest.raises(CyclicDependencyError) as exc:
        legacy_sort_configurations(configs, "prod")

    err = exc.value
    assert err.environment == "prod"
    assert [[c.config_id for c in cycle.coordinates] for cycle in err.cycles] == [["a", "b"]]
    assert err.details["depends_on"] == {
        "proj:dashboard:a": ["proj:dashboard:b"],
        "proj:dashboard:b": ["proj:dashboard:a"],
        "proj:dashboard:c": ["proj:dashboard:a"],
    }


def test_cycles_sharing_a_node_are_all_reported(make_config):
    _require_imports()
    configs = [
        make_config("a", refs=["b"]),
        make_config("b", refs=["a", "c"]),
        make_config("c", refs=["b"]),
    ]

    with pytest.raises(CyclicDependencyError) as exc:
        legacy_sort_configurations(configs, "prod")

    rings = [[c.config_id for c in cycle.coordinates] for cycle in exc.value.cycles]
    assert rings == [["a", "b"], ["b", "c"]]
