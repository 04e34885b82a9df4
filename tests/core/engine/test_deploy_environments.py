# tests/core/engine/test_deploy_environments.py
"""
Testes do ponto de entrada por ambiente e do relatório de deploy.

Cobre:
- estratégia de ordenação explícita (GRAPH vs LEGACY)
- ciclo aborta o ambiente e aparece no relatório
- parada entre ambientes e isolamento de store/nomes por ambiente
- serialização do DeployReport
"""

import pytest

from configflow.core.config.options import DeployOptions, SortStrategy
from configflow.core.configuration.registry import ConfigRegistry
from configflow.core.engine.engine import deploy_environments


def _created_names(client):
    objects = client.objects()
    return [objects[i]["name"] for i in client.created]


@pytest.fixture
def deploy(kinds, deploy_ctx):
    def _deploy(configs, clients, **options):
        return deploy_environments(
            ConfigRegistry.of(configs),
            kinds=kinds,
            clients=clients,
            options=DeployOptions(**options),
            ctx=deploy_ctx,
        )

    return _deploy


def test_graph_strategy_keeps_registration_order(deploy, make_config, FakeClient):
    client = FakeClient()
    deploy([make_config("z"), make_config("a")], {"prod": {"dashboard": client}})
    assert _created_names(client) == ["z", "a"]


def test_legacy_strategy_orders_by_config_id(deploy, make_config, FakeClient):
    client = FakeClient()
    deploy(
        [make_config("z"), make_config("a")],
        {"prod": {"dashboard": client}},
        sort_strategy=SortStrategy.LEGACY,
    )
    assert _created_names(client) == ["a", "z"]


def test_cycle_aborts_environment(deploy, make_config, FakeClient):
    client = FakeClient()
    report = deploy(
        [make_config("a", refs=["b"]), make_config("b", refs=["a"]), make_config("c")],
        {"prod": {"dashboard": client}},
    )

    assert not report.ok
    assert client.calls == []
    [payload] = report.to_dict()["environments"]["prod"]["errors"]
    assert payload["type"] == "GRAPH_CYCLE_DETECTED"
    assert payload["details"]["cycles"] == [
        [
            {"coordinate": "proj:dashboard:a", "filepath": "proj/dashboard/a.json"},
            {"coordinate": "proj:dashboard:b", "filepath": "proj/dashboard/b.json"},
        ]
    ]


def test_legacy_cycle_is_reported(deploy, make_config, FakeClient):
    report = deploy(
        [make_config("a", refs=["b"]), make_config("b", refs=["a"])],
        {"prod": {"dashboard": FakeClient()}},
        sort_strategy=SortStrategy.LEGACY,
    )
    [err] = report.errors
    assert "depends_on" in err.details


def test_failing_environment_stops_the_next(deploy, make_config, FakeClient):
    configs = [
        make_config("a", refs=["ghost"], environment="prod"),
        make_config("a", environment="dev"),
    ]
    clients = {"prod": {"dashboard": FakeClient()}, "dev": {"dashboard": FakeClient()}}

    halted = deploy(configs, clients)
    assert list(halted.environments) == ["prod"]

    resumed = deploy(configs, clients, continue_on_error=True)
    assert list(resumed.environments) == ["prod", "dev"]
    assert resumed.environments["dev"].ok


def test_environments_use_their_own_clients_and_names(deploy, make_config, FakeClient):
    prod, dev = FakeClient(), FakeClient()
    report = deploy(
        [make_config("a", environment="prod"), make_config("a", environment="dev")],
        {"prod": {"dashboard": prod}, "dev": {"dashboard": dev}},
    )

    assert report.ok
    assert prod.created == ["dashboard-1"]
    assert dev.created == ["dashboard-1"]


def test_environment_subset(kinds, deploy_ctx, make_config, FakeClient):
    registry = ConfigRegistry.of([make_config("a", environment="prod"), make_config("a", environment="dev")])
    report = deploy_environments(
        registry,
        ["dev"],
        kinds=kinds,
        clients={"dev": {"dashboard": FakeClient()}},
        options=DeployOptions(),
        ctx=deploy_ctx,
    )
    assert list(report.environments) == ["dev"]


def test_report_to_dict(deploy, make_config, FakeClient, deploy_ctx):
    report = deploy(
        [make_config("a"), make_config("s", skip=True)],
        {"prod": {"dashboard": FakeClient()}},
    )

    data = report.to_dict()

    assert data["run_id"] == deploy_ctx.run_id
    assert data["ok"] is True
    assert data["options"]["sort_strategy"] == "graph"
    assert data["environments"]["prod"] == {
        "environment": "prod",
        "ok": True,
        "deployed": ["proj:dashboard:a"],
        "skipped": ["proj:dashboard:s"],
        "errors": [],
    }
    messages = [e["message"] for e in deploy_ctx.events]
    assert "environment started" in messages
    assert "environment finished" in messages
