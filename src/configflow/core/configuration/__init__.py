# src/configflow/core/configuration/__init__.py
"""
Modelo de configurações do ConfigFlow.

Componentes principais:
    - coordinate → identidade imutável (project, type, config_id)
    - parameters → parâmetros e suas referências para outras configurações
    - template   → renderização e validação do payload enviado
    - types      → Configuration e ResourceKind
    - registry   → configurações agrupadas por ambiente
    - context    → contexto de uma execução de deploy (eventos e warnings)
"""
