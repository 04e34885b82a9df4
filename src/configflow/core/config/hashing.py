# src/configflow/core/config/hashing.py
"""
Hash canônico dos settings efetivos.

O hash identifica estruturalmente os settings usados em uma execução de
deploy e é exposto pelo DeployContext para rastreabilidade.

Política de hashing:
    - JSON canônico (chaves ordenadas, separadores compactos, UTF-8)
    - SHA-256 em hexadecimal (64 caracteres)
"""

import hashlib
import json
from typing import Any, Dict


def canonical_json(settings: Dict[str, Any]) -> str:
    return json.dumps(settings, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_config_hash(settings: Dict[str, Any]) -> str:
    """
    Calcula o SHA-256 da serialização canônica dos settings.

    Settings estruturalmente equivalentes (mesmo conteúdo, ordem de chaves
    diferente) produzem o mesmo hash.

    Raises:
        TypeError: Se `settings` não for um dicionário.
    """
    if not isinstance(settings, dict):
        raise TypeError(f"settings para hashing devem ser dict, recebido: {type(settings).__name__}")
    return hashlib.sha256(canonical_json(settings).encode("utf-8")).hexdigest()
