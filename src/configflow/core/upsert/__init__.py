# src/configflow/core/upsert/__init__.py
"""
Upsert idempotente contra a API remota.

Componentes principais:
    - external_id → identificador estável derivado da Coordinate
    - clients     → contrato de cliente de deploy e cliente em memória (dry-run)
    - chain       → cadeia de estratégias (origin id → external id → create)
"""
