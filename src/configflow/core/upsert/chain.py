# src/configflow/core/upsert/chain.py
"""
Cadeia de estratégias de upsert.

O sistema remoto não oferece "upsert pela nossa identidade". Para que o
deploy seja idempotente, cada configuração passa por uma lista ordenada de
estratégias, executadas em laço explícito até que uma resolva:

    1. ORIGIN_OBJECT_ID  → atualiza o objeto cujo ID foi declarado na
                           configuração; 404 segue adiante, demais erros falham
    2. MATCH_EXTERNAL_ID → lista objetos do tipo, procura o external ID
                           gerado e atualiza o objeto encontrado
    3. CREATE            → cria um objeto novo (estratégia terminal)

Antes do laço, o external ID é gerado a partir da Coordinate e injetado no
payload no campo reservado do tipo de recurso.

Decisões arquiteturais:
    - A cadeia é um valor imutável (tupla de Strategy) validado na
      construção: vazia, sem CREATE no fim ou com repetições é
      InvalidStrategyChainError
    - A cadeia é montada por ResourceKind; tipos sem busca por external ID
      vão direto de ORIGIN_OBJECT_ID para CREATE
    - Somente "não encontrado" (404) faz uma estratégia ceder a vez

Invariantes:
    - Toda entidade resolvida carrega o ID remoto em `properties["id"]`
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from configflow.core.configuration.parameters import ID_PROPERTY, NAME_PROPERTY
from configflow.core.configuration.types import Configuration, ResourceKind
from configflow.core.engine.entities import ResolvedEntity
from configflow.core.exceptions import ConfigDeployError, InvalidStrategyChainError, RemoteCallError
from configflow.core.upsert.clients import DeploymentClient
from configflow.core.upsert.external_id import generate_external_id

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    ORIGIN_OBJECT_ID = "origin_object_id"
    MATCH_EXTERNAL_ID = "match_external_id"
    CREATE = "create"


@dataclass(frozen=True)
class UpsertRequest:
    """Contexto compartilhado pelas estratégias; imutável após a preparação."""

    configuration: Configuration
    properties: Mapping[str, Any]
    payload: Dict[str, Any]
    external_id: str
    client: DeploymentClient
    timeout: float

    def fail(self, reason: str, cause: Optional[BaseException] = None) -> ConfigDeployError:
        return ConfigDeployError(reason, cause=cause, **self.configuration.location())


def _try_origin_object_id(chain: "UpsertChain", request: UpsertRequest) -> Optional[ResolvedEntity]:
    origin_id = request.configuration.origin_object_id
    if not origin_id:
        return None
    try:
        response = request.client.update(origin_id, request.payload, timeout=request.timeout)
    except RemoteCallError as e:
        if e.is_not_found:
            logger.info(
                "%s: origin object %s not found, trying next strategy",
                request.configuration.coordinate,
                origin_id,
            )
            return None
        raise request.fail(f"failed to update object with origin id {origin_id}", e) from e
    return chain.resolved(request, str(response.data.get(chain.id_key) or origin_id))


def _try_match_external_id(chain: "UpsertChain", request: UpsertRequest) -> Optional[ResolvedEntity]:
    try:
        objects = request.client.list(timeout=request.timeout)
    except RemoteCallError as e:
        raise request.fail("failed to list existing objects", e) from e

    match = next((o for o in objects if o.get(chain.external_id_key) == request.external_id), None)
    if match is None:
        return None

    object_id = match.get(chain.id_key)
    if object_id is None:
        raise request.fail(f"matched object has no `{chain.id_key}`")
    try:
        response = request.client.update(str(object_id), request.payload, timeout=request.timeout)
    except RemoteCallError as e:
        raise request.fail(f"failed to update object {object_id} matched by external id", e) from e
    return chain.resolved(request, str(response.data.get(chain.id_key) or object_id))


def _create(chain: "UpsertChain", request: UpsertRequest) -> Optional[ResolvedEntity]:
    try:
        response = request.client.create(request.payload, timeout=request.timeout)
    except RemoteCallError as e:
        raise request.fail("failed to create object", e) from e

    object_id = response.data.get(chain.id_key)
    if object_id is None:
        raise request.fail(f"create response does not contain `{chain.id_key}`")
    return chain.resolved(request, str(object_id))


_HANDLERS: Dict[Strategy, Callable[["UpsertChain", UpsertRequest], Optional[ResolvedEntity]]] = {
    Strategy.ORIGIN_OBJECT_ID: _try_origin_object_id,
    Strategy.MATCH_EXTERNAL_ID: _try_match_external_id,
    Strategy.CREATE: _create,
}

FULL_CHAIN = (Strategy.ORIGIN_OBJECT_ID, Strategy.MATCH_EXTERNAL_ID, Strategy.CREATE)
NO_MATCH_CHAIN = (Strategy.ORIGIN_OBJECT_ID, Strategy.CREATE)


@dataclass(frozen=True)
class UpsertChain:
    strategies: Tuple[Strategy, ...] = FULL_CHAIN
    id_key: str = "id"
    external_id_key: str = "externalId"

    def __post_init__(self) -> None:
        strategies = tuple(self.strategies)
        object.__setattr__(self, "strategies", strategies)
        if not strategies:
            raise InvalidStrategyChainError(message="strategy chain is empty")
        if strategies[-1] is not Strategy.CREATE:
            raise InvalidStrategyChainError(
                message="no next handler found: strategy chain must end with CREATE",
                details={"strategies": [s.value for s in strategies]},
            )
        if len(set(strategies)) != len(strategies):
            raise InvalidStrategyChainError(
                message="strategy chain contains repeated strategies",
                details={"strategies": [s.value for s in strategies]},
            )

    @classmethod
    def for_kind(cls, kind: ResourceKind) -> "UpsertChain":
        return cls(
            strategies=FULL_CHAIN if kind.match_by_external_id else NO_MATCH_CHAIN,
            id_key=kind.id_key,
            external_id_key=kind.external_id_key,
        )

    @classmethod
    def of(cls, strategies: Sequence[Strategy], **keys: str) -> "UpsertChain":
        return cls(strategies=tuple(strategies), **keys)

    def prepare(
        self,
        configuration: Configuration,
        properties: Mapping[str, Any],
        rendered: str,
        client: DeploymentClient,
        *,
        timeout: float,
    ) -> UpsertRequest:
        location = configuration.location()
        try:
            payload = json.loads(rendered)
        except json.JSONDecodeError as e:
            raise ConfigDeployError("rendered payload is not valid JSON", cause=e, **location) from e
        if not isinstance(payload, dict):
            raise ConfigDeployError(
                f"payload must be a JSON object to carry `{self.external_id_key}`",
                **location,
            )

        external_id = generate_external_id(configuration.coordinate)
        payload[self.external_id_key] = external_id
        return UpsertRequest(
            configuration=configuration,
            properties=dict(properties),
            payload=payload,
            external_id=external_id,
            client=client,
            timeout=timeout,
        )

    def upsert(
        self,
        configuration: Configuration,
        properties: Mapping[str, Any],
        rendered: str,
        client: DeploymentClient,
        *,
        timeout: float,
    ) -> ResolvedEntity:
        request = self.prepare(configuration, properties, rendered, client, timeout=timeout)
        for strategy in self.strategies:
            entity = _HANDLERS[strategy](self, request)
            if entity is not None:
                logger.debug("%s: resolved by %s", configuration.coordinate, strategy.value)
                return entity
        raise InvalidStrategyChainError(message="no next handler found")

    def resolved(self, request: UpsertRequest, object_id: str) -> ResolvedEntity:
        properties = dict(request.properties)
        properties[ID_PROPERTY] = object_id
        name = properties.get(NAME_PROPERTY)
        entity_name = str(name) if name is not None else request.external_id
        properties[NAME_PROPERTY] = entity_name
        return ResolvedEntity(
            coordinate=request.configuration.coordinate,
            entity_name=entity_name,
            properties=properties,
        )
