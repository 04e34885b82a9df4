# src/configflow/core/configuration/types.py
"""
Tipos centrais: Configuration e ResourceKind.

Configuration é a unidade de intenção implantável. É criada uma única vez
pelo carregamento de projetos (fora deste pacote) e consumida somente
para leitura pelo grafo e pelo orquestrador.

ResourceKind descreve as características de deploy de um tipo de recurso
remoto: qual campo contém o ID remoto, qual campo guarda o external ID,
se a busca por external ID faz sentido e se nomes precisam ser únicos.

Invariantes:
    - Configuration e ResourceKind são imutáveis
    - `references()` retorna referências deduplicadas, percorrendo os
      parâmetros em ordem de nome
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from configflow.core.configuration.coordinate import Coordinate
from configflow.core.configuration.parameters import Parameter, ParameterReference
from configflow.core.configuration.template import JsonTemplate


@dataclass(frozen=True)
class ResourceKind:
    """
    Características de deploy de um tipo de recurso remoto.

    Campos:
    - id: nome do tipo (igual a `Coordinate.type`)
    - non_unique_name: nomes repetidos são permitidos (sem checagem de duplicidade)
    - id_key: campo da resposta remota que contém o ID do objeto
    - external_id_key: campo do payload que guarda o external ID
    - match_by_external_id: a cadeia tenta localizar o objeto pelo external ID
    - deprecated_by: tipo substituto, quando o tipo está depreciado
    """

    id: str
    non_unique_name: bool = False
    id_key: str = "id"
    external_id_key: str = "externalId"
    match_by_external_id: bool = True
    deprecated_by: Optional[str] = None


@dataclass(frozen=True)
class Configuration:
    coordinate: Coordinate
    template: JsonTemplate
    environment: str
    parameters: Mapping[str, Parameter] = field(default_factory=dict)
    group: str = ""
    origin_object_id: Optional[str] = None
    skip: bool = False

    def references(self) -> List[ParameterReference]:
        """Todas as referências declaradas pelos parâmetros, sem repetição."""
        seen: Dict[ParameterReference, None] = {}
        for name in sorted(self.parameters):
            for ref in self.parameters[name].get_references():
                seen.setdefault(ref, None)
        return list(seen)

    def location(self) -> Dict[str, Any]:
        return {"coordinate": self.coordinate, "environment": self.environment, "group": self.group}
