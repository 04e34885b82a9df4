# src/configflow/core/configuration/parameters.py
"""
Parâmetros de configuração e referências entre configurações.

Cada parâmetro de uma Configuration produz um valor durante o deploy e
pode declarar referências (`ParameterReference`) para propriedades de
outras configurações ou da própria configuração. Essas referências são o
dado bruto a partir do qual o grafo de dependências é construído.

Tipos de parâmetro suportados:
    - ValueParameter       → valor constante, sem referências
    - EnvironmentParameter → variável de ambiente (com default opcional)
    - ReferenceParameter   → propriedade de outra configuração (ou da própria)
    - CompoundParameter    → string formatada a partir de outros parâmetros
    - ListParameter        → lista de parâmetros resolvidos em ordem

Decisões arquiteturais:
    - Parâmetros são objetos imutáveis; o estado da resolução vive no
      ResolveContext, nunca no parâmetro
    - Referências para a própria configuração são resolvidas a partir dos
      valores já resolvidos da mesma configuração (mapa em andamento)
    - Caminhos de propriedade são segmentados por ponto, sem escape

Limites explícitos:
    - Não faz parsing de arquivos de configuração
    - Não valida se a configuração referenciada existe (ver engine.resolve)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from configflow.core.configuration.coordinate import Coordinate
from configflow.core.exceptions import ParameterResolveError, UnresolvedReferenceError


Properties = Dict[str, Any]

# Nomes de propriedade reservados
ID_PROPERTY = "id"
NAME_PROPERTY = "name"


@dataclass(frozen=True, order=True)
class ParameterReference:
    """Referência para a propriedade `property` da configuração `coordinate`."""

    coordinate: Coordinate
    property: str

    def __str__(self) -> str:
        return f"{self.coordinate}:{self.property}"


def resolve_property_path(path: str, properties: Mapping[str, Any]) -> Tuple[Any, bool]:
    """
    Resolve um caminho pontilhado (`a.b.c`) dentro de mapas aninhados.

    Cada segmento é procurado no nível atual; a busca falha quando um
    segmento não existe ou quando o valor intermediário não é um mapa.
    Nomes de propriedade que contêm ponto literal não são endereçáveis.

    Returns:
        Tuple[Any, bool]: (valor, encontrado).
    """
    current: Any = properties
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return None, False
        current = current[segment]
    return current, True


class PropertyResolver(Protocol):
    def get_resolved_property(self, coordinate: Coordinate, property_name: str) -> Tuple[Any, bool]:
        ...


@dataclass(frozen=True)
class ResolveContext:
    """
    Contexto entregue a um parâmetro no momento da resolução.

    Campos:
    - property_resolver: acesso às entidades já implantadas (store do run)
    - coordinate: configuração dona do parâmetro
    - group / environment: localização para mensagens de erro
    - parameter_name: nome do parâmetro em resolução
    - resolved_parameter_values: valores já resolvidos da mesma configuração
    """

    property_resolver: Optional[PropertyResolver]
    coordinate: Coordinate
    environment: str
    parameter_name: str
    resolved_parameter_values: Properties = field(default_factory=dict)
    group: str = ""

    def location(self) -> Dict[str, Any]:
        return {"coordinate": self.coordinate, "environment": self.environment, "group": self.group}


class Parameter(Protocol):
    def get_references(self) -> List[ParameterReference]:
        ...

    def resolve_value(self, ctx: ResolveContext) -> Any:
        ...


@dataclass(frozen=True)
class ValueParameter:
    value: Any

    def get_references(self) -> List[ParameterReference]:
        return []

    def resolve_value(self, ctx: ResolveContext) -> Any:
        return self.value


@dataclass(frozen=True)
class EnvironmentParameter:
    """Lê o valor de uma variável de ambiente; sem default, a ausência é erro."""

    name: str
    default: Optional[str] = None

    def get_references(self) -> List[ParameterReference]:
        return []

    def resolve_value(self, ctx: ResolveContext) -> Any:
        value = os.environ.get(self.name)
        if value is not None:
            return value
        if self.default is not None:
            return self.default
        raise ParameterResolveError(
            ctx.parameter_name,
            f"environment variable `{self.name}` not set",
            **ctx.location(),
        )


@dataclass(frozen=True)
class ReferenceParameter:
    """
    Valor de uma propriedade de outra configuração (ou da própria).

    Quando a referência aponta para a própria configuração, o valor é lido
    dos parâmetros já resolvidos; caso contrário, do PropertyResolver.
    """

    reference: ParameterReference

    @classmethod
    def to(cls, coordinate: Coordinate, property_name: str) -> "ReferenceParameter":
        return cls(ParameterReference(coordinate, property_name))

    def get_references(self) -> List[ParameterReference]:
        return [self.reference]

    def resolve_value(self, ctx: ResolveContext) -> Any:
        ref = self.reference
        if ref.coordinate == ctx.coordinate:
            value, found = resolve_property_path(ref.property, ctx.resolved_parameter_values)
            if found:
                return value
            raise UnresolvedReferenceError(
                ctx.parameter_name,
                ref,
                "property has not been resolved yet or does not exist",
                **ctx.location(),
            )

        if ctx.property_resolver is None:
            raise UnresolvedReferenceError(
                ctx.parameter_name, ref, "no property resolver is defined", **ctx.location()
            )

        value, found = ctx.property_resolver.get_resolved_property(ref.coordinate, ref.property)
        if found:
            return value
        raise UnresolvedReferenceError(
            ctx.parameter_name,
            ref,
            "config has not been resolved yet or does not exist",
            **ctx.location(),
        )


_FORMAT_PLACEHOLDER = re.compile(r"\{\{\s*\.([A-Za-z_][\w]*)\s*\}\}")


@dataclass(frozen=True)
class CompoundParameter:
    """
    String montada a partir de outros parâmetros da mesma configuração.

    O formato usa placeholders `{{ .nome }}`; cada placeholder precisa
    estar listado em `references`.
    """

    format: str
    references: Tuple[ParameterReference, ...] = ()

    def get_references(self) -> List[ParameterReference]:
        return list(self.references)

    def resolve_value(self, ctx: ResolveContext) -> Any:
        data = {ref.property: ctx.resolved_parameter_values.get(ref.property) for ref in self.references}

        def _substitute(match: "re.Match[str]") -> str:
            key = match.group(1)
            if key not in data:
                raise ParameterResolveError(
                    ctx.parameter_name,
                    f"error resolving compound value: `{key}` is not a declared reference",
                    **ctx.location(),
                )
            value = data[key]
            return "" if value is None else str(value)

        return _FORMAT_PLACEHOLDER.sub(_substitute, self.format)


@dataclass(frozen=True)
class ListParameter:
    values: Tuple[Any, ...] = ()

    def get_references(self) -> List[ParameterReference]:
        refs: List[ParameterReference] = []
        for v in self.values:
            refs.extend(v.get_references())
        return refs

    def resolve_value(self, ctx: ResolveContext) -> Any:
        return [v.resolve_value(ctx) for v in self.values]
