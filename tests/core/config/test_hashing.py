# tests/core/config/test_hashing.py
"""
Testes do hash canônico de settings.

O hash identifica estruturalmente os settings de uma execução e precisa
ser determinístico e independente da ordem das chaves.
"""

import hashlib
import json

import pytest

try:
    from configflow.core.config.hashing import compute_config_hash
except Exception as e:  # noqa: BLE001
    compute_config_hash = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing settings hashing. Implement:
- src/configflow/core/config/hashing.py (compute_config_hash)
Import error: {_IMPORT_ERR}
""")


def test_hash_ignores_key_order():
    _require_imports()
    a = {"deploy": {"dry_run": True, "max_workers": 2}, "graph": {}}
    b = {"graph": {}, "deploy": {"max_workers": 2, "dry_run": True}}
    assert compute_config_hash(a) == compute_config_hash(b)


def test_hash_matches_sha256_of_canonical_json():
    _require_imports()
    settings = {"deploy": {"sort_strategy": "graph"}}
    canonical = json.dumps(settings, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    assert compute_config_hash(settings) == hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def test_hash_changes_when_value_changes():
    _require_imports()
    assert compute_config_hash({"deploy": {"dry_run": True}}) != compute_config_hash({"deploy": {"dry_run": False}})


def test_non_dict_is_rejected():
    _require_imports()
    with pytest.raises(TypeError):
        compute_config_hash(["deploy"])
