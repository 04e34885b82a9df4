# src/configflow/core/configuration/coordinate.py
"""
Coordinate — identidade canônica de uma configuração.

Uma Coordinate é a tripla imutável (project, type, config_id) que identifica
uma configuração de forma única dentro de um ambiente. É usada como chave de
mapas, chave de nós do grafo e referência entre parâmetros.

Invariantes:
    - Imutável após a construção
    - Igualdade e hash por valor
    - Ordenação total (project, type, config_id) para saídas determinísticas
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Coordinate:
    project: str
    type: str
    config_id: str

    def __str__(self) -> str:
        return f"{self.project}:{self.type}:{self.config_id}"
