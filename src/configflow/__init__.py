# src/configflow/__init__.py
"""
ConfigFlow — grafo de dependências e deploy ordenado de configurações.

Este pacote raiz define o namespace público do ConfigFlow, uma biblioteca
que recebe configurações declaradas por projeto e ambiente, resolve
referências entre elas, detecta ciclos e conduz o deploy idempotente
contra uma API remota.

Arquitetura em alto nível:
    - core.configuration → Coordinate, parâmetros, templates e registro
    - core.graph         → grafo de dependências, ordenação e export DOT
    - core.engine        → ordenação legada, store de entidades e orquestrador
    - core.upsert        → external ID, contrato de cliente e cadeia de upsert
    - core.config        → carregamento, merge, hashing e opções de deploy

Limites explícitos:
    - Não faz parsing de manifestos ou arquivos de projeto
    - Não implementa clientes HTTP concretos
    - Não expõe CLI
"""

__version__ = "0.1.0"
