# src/configflow/core/engine/resolve.py
"""
Validação de referências e resolução de parâmetros de uma configuração.

Fluxo por configuração:
    1. ordenar os parâmetros da configuração (`planner.sort_parameters`)
    2. para cada parâmetro, validar suas referências para outras configurações
    3. resolver o valor com um ResolveContext que enxerga o store de
       entidades e os valores já resolvidos da própria configuração

Condições de erro nomeadas (ParameterReferenceError):
    - "referenced config not found": alvo ausente do store
    - "referencing skipped config": alvo registrado com skip
    - "parameter referencing itself": referência à própria configuração
      com propriedade igual ao nome do parâmetro

Decisões arquiteturais:
    - Todos os erros de uma configuração são coletados antes de falhar
    - A propriedade `name`, quando existe, é convertida para string
"""

from __future__ import annotations

from typing import Any, List

from configflow.core.configuration.parameters import (
    NAME_PROPERTY,
    Parameter,
    Properties,
    ResolveContext,
)
from configflow.core.configuration.types import Configuration
from configflow.core.engine.entities import EntityStore
from configflow.core.engine.planner import sort_parameters
from configflow.core.exceptions import (
    PARAMETER_REFERENCING_ITSELF,
    REFERENCED_CONFIG_NOT_FOUND,
    REFERENCING_SKIPPED_CONFIG,
    CircularParameterDependencyError,
    ConfigFlowException,
    ParameterReferenceError,
    ResolutionErrors,
)


def validate_parameter_references(
    configuration: Configuration,
    entities: EntityStore,
    parameter_name: str,
    parameter: Parameter,
) -> List[ParameterReferenceError]:
    errors: List[ParameterReferenceError] = []
    location = configuration.location()

    for ref in parameter.get_references():
        if ref.coordinate == configuration.coordinate:
            if ref.property == parameter_name:
                errors.append(ParameterReferenceError(parameter_name, ref, PARAMETER_REFERENCING_ITSELF, **location))
            continue

        entity = entities.get(ref.coordinate)
        if entity is None:
            errors.append(ParameterReferenceError(parameter_name, ref, REFERENCED_CONFIG_NOT_FOUND, **location))
            continue

        if entity.skip:
            errors.append(ParameterReferenceError(parameter_name, ref, REFERENCING_SKIPPED_CONFIG, **location))

    return errors


def resolve_properties(configuration: Configuration, entities: EntityStore) -> Properties:
    """
    Resolve todos os parâmetros de uma configuração.

    Returns:
        Properties: Valores resolvidos por nome de parâmetro.

    Raises:
        ResolutionErrors: agregando todos os erros de ordenação, validação
            e resolução encontrados.
    """
    try:
        ordered = sort_parameters(configuration)
    except CircularParameterDependencyError as e:
        raise ResolutionErrors(f"{configuration.coordinate}: failed to resolve parameters", [e]) from e

    errors: List[Exception] = []
    properties: Properties = {}

    for name, parameter in ordered:
        ref_errors = validate_parameter_references(configuration, entities, name, parameter)
        if ref_errors:
            errors.extend(ref_errors)
            continue

        ctx = ResolveContext(
            property_resolver=entities,
            coordinate=configuration.coordinate,
            environment=configuration.environment,
            group=configuration.group,
            parameter_name=name,
            resolved_parameter_values=properties,
        )
        try:
            value: Any = parameter.resolve_value(ctx)
        except ConfigFlowException as e:
            errors.append(e)
            continue

        properties[name] = str(value) if name == NAME_PROPERTY else value

    if errors:
        raise ResolutionErrors(f"{configuration.coordinate}: failed to resolve parameters", errors)
    return properties
