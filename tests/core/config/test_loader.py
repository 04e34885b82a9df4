# tests/core/config/test_loader.py
"""
Testes do loader de settings do ConfigFlow.

Os testes asseguram que:
- o arquivo de defaults é obrigatório
- o override local é opcional e, quando existe, tem precedência
- YAML e JSON são aceitos; outras extensões são rejeitadas
- a raiz dos settings precisa ser um mapa
"""

import json
from pathlib import Path

import pytest

try:
    from configflow.core.config.loader import load_config
    from configflow.core.config.errors import (
        ConfigTypeConflictError,
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha de forma explícita quando o loader de settings não pode ser importado."""
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing settings loader. Implement:
- src/configflow/core/config/loader.py (load_config)
- src/configflow/core/config/errors.py (ConfigError hierarchy)
Import error: {_IMPORT_ERR}
""")


def test_missing_defaults_raises(tmp_path: Path):
    """Sem defaults não existem settings efetivos: o loader falha explicitamente."""
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(tmp_path / "defaults.yaml"), local_path=None)


def test_missing_local_is_ok(tmp_path: Path, settings_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(settings_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))

    assert out["deploy"]["continue_on_error"] is False
    assert out["deploy"]["sort_strategy"] == "graph"


def test_load_defaults_and_local(tmp_path: Path, settings_defaults_yaml, settings_local_yaml):
    """
    Verifica o merge defaults + local.

    Valores sobrescritos vêm do local; os demais são preservados dos defaults.
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yml"
    defaults.write_text(settings_defaults_yaml, encoding="utf-8")
    local.write_text(settings_local_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))

    assert out["deploy"]["continue_on_error"] is True
    assert out["deploy"]["sort_strategy"] == "legacy"
    assert out["deploy"]["max_workers"] == 4
    assert out["graph"]["include_skipped"] is False


def test_load_json_defaults(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.json"
    defaults.write_text(json.dumps({"deploy": {"dry_run": True}}), encoding="utf-8")

    out = load_config(defaults_path=str(defaults))

    assert out == {"deploy": {"dry_run": True}}


def test_empty_file_is_empty_mapping(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("", encoding="utf-8")

    assert load_config(defaults_path=str(defaults)) == {}


def test_invalid_root_type_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- just\n- a\n- list\n", encoding="utf-8")

    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults), local_path=None)


def test_unsupported_extension_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("deploy = { dry_run = true }\n", encoding="utf-8")

    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults), local_path=None)


def test_type_conflict_between_files_raises(tmp_path: Path, settings_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(settings_defaults_yaml, encoding="utf-8")
    local.write_text("deploy: dry\n", encoding="utf-8")

    with pytest.raises(ConfigTypeConflictError):
        load_config(defaults_path=str(defaults), local_path=str(local))
