# tests/conftest.py
"""
Fixtures compartilhados para testes do ConfigFlow.

Este módulo define fixtures reutilizáveis que fornecem:
- settings mínimos e determinísticos (YAML como string)
- contexto de deploy controlado (DeployContext com run_id e data fixos)
- fábrica de Configuration com referências declarativas
- tipos de recurso e clientes remotos falsos (em memória)

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Clientes falsos são classes retornadas por fixtures (não instâncias),
      permitindo que cada teste monte o cenário remoto que precisa
    - Nenhuma fixture realiza I/O de rede

Limites explícitos:
    - Não substituir testes de integração com uma API real
    - Não conter lógica de domínio
"""

from datetime import datetime, timezone

import pytest


# =====================================================
# Settings fixtures
# =====================================================

@pytest.fixture
def settings_defaults_yaml() -> str:
    """
    YAML de settings padrão (defaults), semelhante ao uso real.

    Representa o conteúdo típico de `configflow.defaults.yaml`, base sobre a
    qual o override local é aplicado via deep-merge.
    """
    return """\
deploy:
  continue_on_error: false
  dry_run: false
  sort_strategy: graph
  max_workers: 4
graph:
  include_skipped: false
"""


@pytest.fixture
def settings_local_yaml() -> str:
    """YAML de override local: liga continue_on_error e troca a estratégia."""
    return """\
deploy:
  continue_on_error: true
  sort_strategy: legacy
"""


# =====================================================
# Deploy fixtures (Configuration + DeployContext)
# =====================================================

@pytest.fixture
def deploy_ctx():
    """
    DeployContext determinístico para testes.

    run_id e created_at fixos permitem comparar eventos e relatórios.
    """
    from configflow.core.configuration.context import DeployContext

    return DeployContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        config={"deploy": {"continue_on_error": False}},
    )


@pytest.fixture
def coord():
    """Fábrica de Coordinate com projeto e tipo padrão."""
    from configflow.core.configuration.coordinate import Coordinate

    def _coord(config_id: str, *, type: str = "dashboard", project: str = "proj"):
        return Coordinate(project, type, config_id)

    return _coord


@pytest.fixture
def make_config(coord):
    """
    Fábrica de Configuration.

    - `refs`: config_ids (ou Coordinates) referenciados pela propriedade `id`
      (um parâmetro ReferenceParameter por referência, `ref_<n>`)
    - `name`: valor do parâmetro `name` (default: o próprio config_id);
      `name=None` explícito remove o parâmetro
    - `template`: conteúdo do template; o default usa `name` e as referências
    """
    from configflow.core.configuration.coordinate import Coordinate
    from configflow.core.configuration.parameters import ReferenceParameter, ValueParameter
    from configflow.core.configuration.template import JsonTemplate
    from configflow.core.configuration.types import Configuration

    _unset = object()

    def _make(
        config_id,
        *,
        refs=(),
        ref_property="id",
        type="dashboard",
        project="proj",
        environment="prod",
        name=_unset,
        skip=False,
        origin_object_id=None,
        parameters=None,
        template=None,
    ):
        coordinate = coord(config_id, type=type, project=project)
        params = {}
        if name is _unset:
            params["name"] = ValueParameter(config_id)
        elif name is not None:
            params["name"] = ValueParameter(name)

        fields = ['"name": "{{ .name }}"'] if "name" in params else []
        for i, ref in enumerate(refs):
            target = ref if isinstance(ref, Coordinate) else coord(ref, type=type, project=project)
            params[f"ref_{i}"] = ReferenceParameter.to(target, ref_property)
            fields.append(f'"ref_{i}": "{{{{ .ref_{i} }}}}"')

        params.update(parameters or {})
        content = template if template is not None else "{" + ", ".join(fields) + "}"

        return Configuration(
            coordinate=coordinate,
            template=JsonTemplate(name=f"{project}/{type}/{config_id}.json", content=content),
            environment=environment,
            parameters=params,
            group="default",
            origin_object_id=origin_object_id,
            skip=skip,
        )

    return _make


@pytest.fixture
def kinds():
    """Tipos de recurso usados nos cenários de deploy."""
    from configflow.core.configuration.types import ResourceKind

    return {
        "dashboard": ResourceKind("dashboard"),
        "alerting": ResourceKind("alerting", external_id_key="externalId"),
        "notebook": ResourceKind("notebook", non_unique_name=True),
        "segment": ResourceKind("segment", match_by_external_id=False, id_key="uid"),
    }


@pytest.fixture
def FakeClient():
    """
    Classe de cliente remoto falso (em memória) com falhas programáveis.

    Baseado no DummyClient do pacote, acrescenta:
    - `fail_update_with`: status devolvido em toda atualização (ex.: 404, 500)
    - `fail_list_with` / `fail_create_with`: idem para listagem e criação
    - `calls`: sequência de chamadas ("create", "update:<id>", "list")
    """
    from configflow.core.exceptions import RemoteCallError
    from configflow.core.upsert.clients import DummyClient

    class _FakeClient(DummyClient):
        def __init__(self, kind="dashboard", *, id_key="id", fail_update_with=None,
                     fail_list_with=None, fail_create_with=None):
            super().__init__(kind, id_key=id_key)
            self.fail_update_with = fail_update_with
            self.fail_list_with = fail_list_with
            self.fail_create_with = fail_create_with
            self.calls = []
            self.timeouts = []

        def create(self, payload, *, timeout):
            self.calls.append("create")
            self.timeouts.append(timeout)
            if self.fail_create_with is not None:
                raise RemoteCallError("create failed", status_code=self.fail_create_with)
            return super().create(payload, timeout=timeout)

        def update(self, object_id, payload, *, timeout):
            self.calls.append(f"update:{object_id}")
            self.timeouts.append(timeout)
            if self.fail_update_with is not None:
                raise RemoteCallError("update failed", status_code=self.fail_update_with)
            return super().update(object_id, payload, timeout=timeout)

        def list(self, *, timeout):
            self.calls.append("list")
            self.timeouts.append(timeout)
            if self.fail_list_with is not None:
                raise RemoteCallError("list failed", status_code=self.fail_list_with)
            return super().list(timeout=timeout)

    return _FakeClient
