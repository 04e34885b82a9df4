# src/configflow/core/config/__init__.py
"""
Camada de configuração (settings) do ConfigFlow.

Responsabilidades do pacote:
    - Carregar arquivos de settings (defaults obrigatórios + override local)
    - Resolver os settings efetivos via deep-merge determinístico
    - Gerar hash canônico dos settings para rastreabilidade
    - Materializar DeployOptions imutáveis a partir dos settings

Limites explícitos:
    - Não carrega configurações implantáveis (Configuration)
    - Não interage com o orquestrador diretamente
"""
