# src/configflow/core/graph/__init__.py
"""
Grafo de dependências entre configurações.

Componentes principais:
    - builder → constrói um grafo dirigido por ambiente (dependência → dependente)
    - sort    → ordenação topológica, detecção de ciclos e componentes independentes
    - dot     → export DOT para ferramentas de visualização
    - graphs  → conjunto de grafos por ambiente

Invariantes:
    - Cada nó embrulha exatamente uma Configuration do ambiente
    - IDs de nó são densos e válidos apenas dentro de uma construção
"""
