# src/configflow/core/upsert/external_id.py
"""
External ID determinístico de uma configuração.

O external ID permite reencontrar no sistema remoto um objeto criado por
um deploy anterior da mesma configuração lógica, mesmo que o ID remoto do
objeto tenha mudado.

Formato:
    "<prefixo>:" + base64("project$type$config_id")

    - o segmento de projeto é omitido quando vazio
    - quando o resultado ultrapassaria 500 caracteres, o conteúdo bruto é
      substituído pelo seu SHA-256 (hex), mantendo unicidade e o limite
"""

from __future__ import annotations

import base64
import hashlib

from configflow.core.configuration.coordinate import Coordinate
from configflow.core.exceptions import ExternalIdError

EXTERNAL_ID_PREFIX = "configflow:"
MAX_EXTERNAL_ID_LENGTH = 500


def _raw_id(coordinate: Coordinate) -> str:
    parts = [coordinate.type, coordinate.config_id]
    if coordinate.project:
        parts.insert(0, coordinate.project)
    return "$".join(parts)


def generate_external_id(coordinate: Coordinate) -> str:
    if not coordinate.type or not coordinate.config_id:
        raise ExternalIdError(
            message=f"cannot generate external id for {coordinate}: type and config id must be set",
            details={"coordinate": str(coordinate)},
        )

    raw = _raw_id(coordinate)
    external_id = EXTERNAL_ID_PREFIX + base64.b64encode(raw.encode("utf-8")).decode("ascii")
    if len(external_id) <= MAX_EXTERNAL_ID_LENGTH:
        return external_id

    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return EXTERNAL_ID_PREFIX + digest
