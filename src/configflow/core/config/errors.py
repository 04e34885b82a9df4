# src/configflow/core/config/errors.py
"""
Exceções da camada de settings do ConfigFlow.

Invariantes:
    - Todas as exceções de settings herdam de `ConfigError`
    - Nenhuma exceção aqui representa falha de deploy de uma configuração
"""


class ConfigError(Exception):
    """Base para erros de carregamento, merge ou interpretação de settings."""


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de defaults ausente.

    O arquivo de defaults é obrigatório: sem ele não existe conjunto de
    settings efetivo, e nenhum default é inventado em seu lugar.
    """


class UnsupportedConfigFormatError(ConfigError):
    """Extensão de arquivo fora de `.yaml`, `.yml` e `.json`."""


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz do arquivo não é um mapa chave-valor."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos entre defaults e override na mesma chave.

    Exemplo de conflito:
        - defaults: {"deploy": {"dry_run": false}}
        - override: {"deploy": "dry"}
    """


class InvalidDeployOptionsError(ConfigError):
    """Valor inválido em uma chave reconhecida de `deploy` ou `graph`."""
