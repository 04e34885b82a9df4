# src/configflow/core/engine/engine.py
"""
Orquestrador de deploy do ConfigFlow.

O Deployer percorre as configurações já ordenadas de um ambiente e, para
cada uma:

    1. registra uma entidade skip quando a configuração está marcada `skip`
    2. ordena e resolve os parâmetros contra o store de entidades
    3. valida as referências para outras configurações
    4. checa o nome (por tipo de recurso) e renderiza o payload
    5. executa a cadeia de upsert do tipo de recurso
    6. registra o nome e guarda a ResolvedEntity para as configurações
       seguintes

Políticas de execução (DeployOptions, nunca estado global):
    - continue_on_error / dry_run → segue após falhas; senão para na primeira
    - dry_run → cliente em memória por tipo; nenhuma chamada de rede
    - sort_strategy → GRAPH (grafo por ambiente) ou LEGACY (lista)
    - parallel_components → componentes independentes em paralelo
      (ThreadPoolExecutor); dentro de um componente, ordem estrita

Decisões arquiteturais:
    - Erros de configuração nunca derrubam o processo: são coletados
    - O nome só é registrado depois do upsert bem-sucedido: uma
      configuração que falha nunca ocupa o nome. Em paralelo, dois
      componentes com o mesmo nome podem ambos chegar ao upsert; o
      segundo a registrar recebe DuplicateNameError
    - Nomes duplicados são detectados por tipo de recurso dentro de um
      ambiente; ambientes diferentes não compartilham o índice
    - Resultados parciais ficam disponíveis no store mesmo com erros

Limites explícitos:
    - Não faz parsing de projetos
    - Não implementa clientes HTTP
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from configflow.core.config.options import DeployOptions, SortStrategy
from configflow.core.configuration.context import DeployContext
from configflow.core.configuration.coordinate import Coordinate
from configflow.core.configuration.parameters import NAME_PROPERTY
from configflow.core.configuration.registry import ConfigRegistry
from configflow.core.configuration.template import TemplateRenderer, render_configuration_payload
from configflow.core.configuration.types import Configuration, ResourceKind
from configflow.core.engine.entities import EntityStore, ResolvedEntity
from configflow.core.engine.planner import legacy_sort_configurations
from configflow.core.engine.resolve import resolve_properties
from configflow.core.errors import payloads
from configflow.core.exceptions import (
    ConfigDeployError,
    ConfigFlowException,
    CyclicDependencyError,
    DuplicateNameError,
    SortingErrors,
    UnknownResourceKindError,
)
from configflow.core.graph.builder import build_dependency_graph
from configflow.core.graph.sort import SortedComponent, sort_configurations, sort_independent_components
from configflow.core.upsert.chain import UpsertChain
from configflow.core.upsert.clients import DeploymentClient, DummyClient

logger = logging.getLogger(__name__)


class KnownNames:
    """Índice de nomes já implantados, por tipo de recurso (append-only, com lock)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._names: Dict[str, Set[str]] = {}

    def add(self, kind: str, name: str) -> bool:
        with self._lock:
            names = self._names.setdefault(kind, set())
            if name in names:
                return False
            names.add(name)
            return True

    def contains(self, kind: str, name: str) -> bool:
        with self._lock:
            return name in self._names.get(kind, set())


class Deployer:
    """Deploy sequencial (ou por componentes) de um ambiente."""

    def __init__(
        self,
        *,
        kinds: Mapping[str, ResourceKind],
        clients: Mapping[str, DeploymentClient],
        options: DeployOptions,
        ctx: DeployContext,
        renderer: Optional[TemplateRenderer] = None,
        chains: Optional[Mapping[str, UpsertChain]] = None,
    ):
        self.kinds = dict(kinds)
        self.clients = dict(clients)
        self.options = options
        self.ctx = ctx
        self.renderer = renderer
        self.chains = dict(chains or {})
        self.entities = EntityStore()
        self.known_names = KnownNames()
        self._dry_run_clients: Dict[str, DummyClient] = {}
        self._clients_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Colaboradores por tipo
    # ------------------------------------------------------------------

    def _client_for(self, configuration: Configuration, kind: ResourceKind) -> DeploymentClient:
        if self.options.dry_run:
            with self._clients_lock:
                if kind.id not in self._dry_run_clients:
                    self._dry_run_clients[kind.id] = DummyClient(kind.id, id_key=kind.id_key)
                return self._dry_run_clients[kind.id]

        client = self.clients.get(kind.id)
        if client is None:
            raise ConfigDeployError(
                f"no deployment client registered for kind `{kind.id}`",
                **configuration.location(),
            )
        return client

    def _chain_for(self, kind: ResourceKind) -> UpsertChain:
        return self.chains.get(kind.id) or UpsertChain.for_kind(kind)

    # ------------------------------------------------------------------
    # Uma configuração
    # ------------------------------------------------------------------

    def deploy_configuration(self, configuration: Configuration) -> ResolvedEntity:
        coordinate = configuration.coordinate
        location = configuration.location()

        if configuration.skip:
            entity = ResolvedEntity.skipped(coordinate)
            self.entities.put(entity)
            self.ctx.log(coordinate=coordinate, level="INFO", message="skipped")
            logger.info("%s: skipping deployment", coordinate)
            return entity

        kind = self.kinds.get(coordinate.type)
        if kind is None:
            raise UnknownResourceKindError(coordinate.type, **location)
        if kind.deprecated_by:
            self.ctx.add_warning(
                coordinate=coordinate,
                message=f"kind `{kind.id}` is deprecated, use `{kind.deprecated_by}` instead",
            )

        properties = resolve_properties(configuration, self.entities)

        name: Optional[str] = None
        if not kind.non_unique_name:
            if NAME_PROPERTY not in properties:
                raise ConfigDeployError("missing `name` for config", **location)
            name = properties[NAME_PROPERTY]
            if self.known_names.contains(kind.id, name):
                raise DuplicateNameError(name, kind.id, **location)

        rendered = render_configuration_payload(
            configuration.template,
            properties,
            renderer=self.renderer,
            location=location,
        )
        client = self._client_for(configuration, kind)
        entity = self._chain_for(kind).upsert(
            configuration,
            properties,
            rendered,
            client,
            timeout=self.options.call_timeout_seconds,
        )

        if name is not None and not self.known_names.add(kind.id, name):
            raise DuplicateNameError(name, kind.id, **location)
        self.entities.put(entity)
        self.ctx.log(
            coordinate=coordinate,
            level="INFO",
            message="deployed",
            entity_name=entity.entity_name,
            object_id=entity.properties.get("id"),
            dry_run=self.options.dry_run,
        )
        logger.info("%s: deployed as %s", coordinate, entity.properties.get("id"))
        return entity

    # ------------------------------------------------------------------
    # Listas e componentes
    # ------------------------------------------------------------------

    def _as_error(self, configuration: Configuration, exc: Exception) -> Exception:
        if isinstance(exc, ConfigFlowException):
            return exc
        return ConfigDeployError(
            f"failed to deploy config {configuration.coordinate}",
            cause=exc,
            **configuration.location(),
        )

    def deploy(self, configurations: Iterable[Configuration]) -> List[Exception]:
        """
        Implanta configurações já ordenadas, na ordem recebida.

        Returns:
            List[Exception]: Erros acumulados (vazio em caso de sucesso).
        """
        errors: List[Exception] = []
        for configuration in configurations:
            try:
                self.deploy_configuration(configuration)
            except Exception as e:
                error = self._as_error(configuration, e)
                errors.append(error)
                logger.error("%s: deployment failed: %s", configuration.coordinate, error)
                self.ctx.log(
                    coordinate=configuration.coordinate,
                    level="ERROR",
                    message=str(error),
                    error_class=error.__class__.__name__,
                )
                if self.options.halt_on_error:
                    break
        return errors

    def deploy_components(self, components: Sequence[SortedComponent]) -> List[Exception]:
        """
        Implanta componentes independentes.

        Com `parallel_components`, cada componente roda em uma thread do
        pool; dentro do componente a ordem é estritamente sequencial e cada
        componente aplica a política de parada isoladamente. Os erros são
        coletados pela thread chamadora e devolvidos na ordem dos componentes.
        """
        if not self.options.parallel_components or len(components) <= 1:
            errors: List[Exception] = []
            for component in components:
                errors.extend(self.deploy(component.configurations))
                if errors and self.options.halt_on_error:
                    break
            return errors

        by_index: Dict[int, List[Exception]] = {}
        with ThreadPoolExecutor(max_workers=self.options.max_workers) as pool:
            futures = {
                pool.submit(self.deploy, component.configurations): i
                for i, component in enumerate(components)
            }
            for future in as_completed(futures):
                by_index[futures[future]] = future.result()

        return [e for i in sorted(by_index) for e in by_index[i]]


# ---------------------------------------------------------------------------
# Relatório
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnvironmentReport:
    environment: str
    errors: List[Exception] = field(default_factory=list)
    entities: Dict[Coordinate, ResolvedEntity] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def deployed(self) -> List[Coordinate]:
        return sorted(c for c, e in self.entities.items() if not e.skip)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "ok": self.ok,
            "deployed": [str(c) for c in self.deployed],
            "skipped": sorted(str(c) for c, e in self.entities.items() if e.skip),
            "errors": payloads(self.errors),
        }


@dataclass
class DeployReport:
    run_id: str
    options: DeployOptions
    environments: Dict[str, EnvironmentReport] = field(default_factory=dict)

    @property
    def errors(self) -> List[Exception]:
        return [e for r in self.environments.values() for e in r.errors]

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "ok": self.ok,
            "options": self.options.to_dict(),
            "environments": {env: r.to_dict() for env, r in self.environments.items()},
        }


# ---------------------------------------------------------------------------
# Ponto de entrada por ambiente
# ---------------------------------------------------------------------------


def _deploy_environment(
    deployer: Deployer,
    configurations: List[Configuration],
    environment: str,
    options: DeployOptions,
) -> List[Exception]:
    if options.sort_strategy is SortStrategy.LEGACY:
        try:
            ordered = legacy_sort_configurations(configurations, environment)
        except CyclicDependencyError as e:
            return [e]
        return deployer.deploy(ordered)

    graph = build_dependency_graph(
        configurations,
        environment,
        include_skipped=options.include_skipped,
        ctx=deployer.ctx,
    )

    errors: List[Exception] = []
    if not options.include_skipped:
        # skipped ficam fora do grafo, mas precisam estar no store
        errors.extend(deployer.deploy(c for c in configurations if c.skip))

    if options.parallel_components:
        try:
            components = sort_independent_components(graph)
        except SortingErrors as e:
            errors.extend(e.errors)
            components = e.sorted_components
        errors.extend(deployer.deploy_components(components))
        return errors

    try:
        ordered = sort_configurations(graph)
    except CyclicDependencyError as e:
        errors.append(e)
        return errors
    errors.extend(deployer.deploy(ordered))
    return errors


def deploy_environments(
    registry: ConfigRegistry,
    environments: Optional[Iterable[str]] = None,
    *,
    kinds: Mapping[str, ResourceKind],
    clients: Mapping[str, Mapping[str, DeploymentClient]],
    options: DeployOptions,
    ctx: DeployContext,
    renderer: Optional[TemplateRenderer] = None,
) -> DeployReport:
    """
    Implanta cada ambiente com um Deployer (e um store) próprio.

    `clients` é indexado por ambiente e, dentro dele, por tipo de recurso:
    cada ambiente aponta para o seu próprio sistema remoto. Sem
    continue_on_error/dry_run, o primeiro ambiente com erro interrompe os
    ambientes seguintes.
    """
    envs = list(environments) if environments is not None else registry.environments()
    report = DeployReport(run_id=ctx.run_id, options=options)

    for env in envs:
        logger.info("deploying environment %s", env)
        ctx.log(level="INFO", message="environment started", environment=env)
        deployer = Deployer(
            kinds=kinds,
            clients=clients.get(env, {}),
            options=options,
            ctx=ctx,
            renderer=renderer,
        )
        errors = _deploy_environment(deployer, registry.for_environment(env), env, options)

        report.environments[env] = EnvironmentReport(
            environment=env,
            errors=errors,
            entities=deployer.entities.get_all(),
        )
        ctx.log(level="INFO", message="environment finished", environment=env, errors=len(errors))

        if errors and options.halt_on_error:
            logger.error("environment %s failed with %d error(s), stopping", env, len(errors))
            break

    return report
