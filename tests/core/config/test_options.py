# tests/core/config/test_options.py
"""
Testes de DeployOptions.

As opções de deploy são um valor explícito entregue ao orquestrador.
Os testes garantem defaults, leitura das chaves reconhecidas e rejeição
de valores inválidos.
"""

import pytest

try:
    from configflow.core.config.errors import ConfigError, InvalidDeployOptionsError
    from configflow.core.config.options import DeployOptions, SortStrategy
except Exception as e:  # noqa: BLE001
    DeployOptions = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"""Missing deploy options. Implement:
- src/configflow/core/config/options.py (DeployOptions, SortStrategy)
Import error: {_IMPORT_ERR}
""")


def test_defaults_from_empty_settings():
    _require_imports()
    opts = DeployOptions.from_config({})

    assert opts == DeployOptions()
    assert opts.sort_strategy is SortStrategy.GRAPH
    assert opts.max_workers == 4
    assert opts.call_timeout_seconds == 60
    assert opts.halt_on_error is True


def test_reads_recognised_keys():
    _require_imports()
    opts = DeployOptions.from_config(
        {
            "deploy": {
                "continue_on_error": True,
                "sort_strategy": "legacy",
                "parallel_components": True,
                "max_workers": 2,
                "call_timeout_seconds": 5,
            },
            "graph": {"include_skipped": True},
        }
    )

    assert opts.continue_on_error is True
    assert opts.sort_strategy is SortStrategy.LEGACY
    assert opts.parallel_components is True
    assert opts.max_workers == 2
    assert opts.call_timeout_seconds == 5
    assert opts.include_skipped is True
    assert opts.halt_on_error is False


def test_dry_run_never_halts():
    _require_imports()
    assert DeployOptions(dry_run=True).halt_on_error is False


@pytest.mark.parametrize(
    "settings",
    [
        {"deploy": {"sort_strategy": "random"}},
        {"deploy": {"max_workers": 0}},
        {"deploy": {"max_workers": True}},
        {"deploy": {"call_timeout_seconds": -1}},
        {"deploy": {"dry_run": "yes"}},
        {"deploy": ["dry_run"]},
    ],
)
def test_invalid_values_are_rejected(settings):
    _require_imports()
    with pytest.raises(InvalidDeployOptionsError):
        DeployOptions.from_config(settings)


def test_invalid_options_are_config_errors():
    _require_imports()
    assert issubclass(InvalidDeployOptionsError, ConfigError)


def test_to_dict_is_serialisable():
    _require_imports()
    assert DeployOptions().to_dict()["sort_strategy"] == "graph"
