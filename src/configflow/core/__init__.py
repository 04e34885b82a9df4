# src/configflow/core/__init__.py
"""
Core do ConfigFlow.

Este pacote reúne a implementação canônica do grafo de dependências,
da ordenação topológica e da orquestração de deploy.

Princípios fundamentais:
    - Nenhuma decisão silenciosa: erros são coletados e reportados
    - Ordenação determinística para a mesma entrada
    - Estado compartilhado apenas através de acessores com lock
"""
