# src/configflow/core/engine/__init__.py
"""
Engine de deploy do ConfigFlow.

Componentes principais:
    - planner  → ordenação de parâmetros e ordenação legada em lista
    - entities → store concorrente de entidades resolvidas
    - resolve  → validação de referências e resolução de parâmetros
    - engine   → orquestrador (Deployer) e relatório por ambiente

Invariantes:
    - Cada configuração é implantada no máximo uma vez por execução
    - Nenhuma configuração é implantada antes de suas dependências
"""
