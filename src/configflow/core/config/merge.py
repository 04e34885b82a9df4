# src/configflow/core/config/merge.py
"""
Deep-merge determinístico de settings.

Política de merge:
    - dict + dict → merge recursivo por chave
    - list        → substituição total pelo override
    - escalar     → substituição direta pelo override
    - tipos diferentes na mesma chave → ConfigTypeConflictError

Invariantes:
    - Nenhum input é mutado
    - Chaves ausentes no override são preservadas
"""

from copy import deepcopy
from typing import Any, Dict, Tuple

from .errors import ConfigTypeConflictError


def _merge_value(path: Tuple[str, ...], current: Any, incoming: Any) -> Any:
    if isinstance(current, dict) and isinstance(incoming, dict):
        merged = deepcopy(current)
        for key, value in incoming.items():
            if key in merged:
                merged[key] = _merge_value(path + (key,), merged[key], value)
            else:
                merged[key] = deepcopy(value)
        return merged

    if isinstance(incoming, list):
        return deepcopy(incoming)

    if type(current) is not type(incoming):
        where = ".".join(path) or "<root>"
        raise ConfigTypeConflictError(
            f"Conflito de tipo na chave '{where}': "
            f"{type(current).__name__} vs {type(incoming).__name__}"
        )

    return deepcopy(incoming)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combina defaults (`base`) com overrides explícitos, sem mutar os inputs.

    Raises:
        ConfigTypeConflictError: Se algum dos lados não for dict no nível raiz,
            ou se a mesma chave tiver tipos incompatíveis.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )
    return _merge_value((), base, override)
