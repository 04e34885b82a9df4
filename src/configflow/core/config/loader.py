# src/configflow/core/config/loader.py
"""
Loader de settings do ConfigFlow.

Os settings efetivos de uma execução de deploy são resolvidos a partir de:
    - um arquivo de defaults (obrigatório)
    - um arquivo local de overrides (opcional)

Formatos suportados:
    - YAML (.yaml, .yml) via PyYAML `safe_load`
    - JSON (.json)

Decisões arquiteturais:
    - Arquivo vazio equivale a um mapa vazio
    - O override local, quando existe, tem precedência total via deep-merge
    - Um override local inexistente é ignorado (não é erro)

Limites explícitos:
    - Não interpreta as chaves (ver `options.DeployOptions`)
    - Não carrega configurações implantáveis
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash
from .merge import deep_merge

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def _read_settings_file(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo de settings e garante que a raiz seja um dicionário.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se a extensão não for suportada.
        InvalidConfigRootTypeError: Se a raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de settings não encontrado: {path}")

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix in _YAML_SUFFIXES:
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Raiz dos settings deve ser dict, recebido: {type(data).__name__}"
        )
    return data


def load_config(
    *,
    defaults_path: str,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega os settings efetivos (defaults + override local opcional).

    Args:
        defaults_path (str): Caminho do arquivo de defaults.
        local_path (Optional[str]): Caminho opcional de overrides locais.

    Returns:
        Dict[str, Any]: Settings efetivos.

    Raises:
        DefaultsNotFoundError: Se o arquivo de defaults não existir.
        UnsupportedConfigFormatError: Se algum arquivo tiver extensão não suportada.
        InvalidConfigRootTypeError: Se a raiz de algum arquivo não for dict.
        ConfigTypeConflictError: Se o merge encontrar tipos incompatíveis.
    """
    effective = _read_settings_file(Path(defaults_path))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _read_settings_file(local_file))
        else:
            logger.debug("local settings file %s not found, using defaults only", local_file)

    logger.debug("settings resolved (hash=%s)", compute_config_hash(effective))
    return effective
