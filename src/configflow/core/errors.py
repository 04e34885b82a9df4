"""
ConfigFlow — Canonical Error Payloads (v1)

Este módulo define o formato serializável dos erros coletados durante um
deploy. Erros de configuração nunca derrubam o processo: são coletados
por configuração e reportados ao final, e este payload é a forma com que
chegam ao chamador (relatórios, JSON, logs).

Erros devem ser:

- explícitos
- serializáveis
- rastreáveis até a Coordinate afetada
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from configflow.core.exceptions import (
    AggregateError,
    CircularParameterDependencyError,
    ConfigDeployError,
    ConfigFlowException,
    CyclicDependencyError,
    DuplicateNameError,
    ExternalIdError,
    InvalidPayloadError,
    InvalidStrategyChainError,
    MissingDependencyGraphError,
    ParameterReferenceError,
    ResolutionErrors,
    RemoteCallError,
    SortingErrors,
    TemplateRenderError,
    UnknownResourceKindError,
    UnresolvedReferenceError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do ConfigFlow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta e humana
    - details: dados estruturados (coordinate, ambiente, ciclos, ...)
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Grafo / Ordenação
GRAPH_CYCLE_DETECTED = "GRAPH_CYCLE_DETECTED"
GRAPH_NOT_FOUND = "GRAPH_NOT_FOUND"
PARAMETER_CYCLE_DETECTED = "PARAMETER_CYCLE_DETECTED"

# Resolução
PARAMETER_INVALID_REFERENCE = "PARAMETER_INVALID_REFERENCE"
PARAMETER_UNRESOLVED_REFERENCE = "PARAMETER_UNRESOLVED_REFERENCE"
PARAMETER_RESOLUTION_FAILED = "PARAMETER_RESOLUTION_FAILED"

# Payload
TEMPLATE_RENDER_FAILED = "TEMPLATE_RENDER_FAILED"
PAYLOAD_INVALID = "PAYLOAD_INVALID"

# Deploy
DEPLOY_DUPLICATE_NAME = "DEPLOY_DUPLICATE_NAME"
DEPLOY_UNKNOWN_KIND = "DEPLOY_UNKNOWN_KIND"
DEPLOY_FAILED = "DEPLOY_FAILED"
DEPLOY_CONFIGURATION_ERROR = "DEPLOY_CONFIGURATION_ERROR"
REMOTE_CALL_FAILED = "REMOTE_CALL_FAILED"
EXTERNAL_ID_INVALID = "EXTERNAL_ID_INVALID"

# Fallback
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


# Ordem importa: subclasses antes das bases.
_TYPE_BY_EXCEPTION = (
    (CyclicDependencyError, GRAPH_CYCLE_DETECTED),
    (SortingErrors, GRAPH_CYCLE_DETECTED),
    (ResolutionErrors, PARAMETER_RESOLUTION_FAILED),
    (MissingDependencyGraphError, GRAPH_NOT_FOUND),
    (CircularParameterDependencyError, PARAMETER_CYCLE_DETECTED),
    (ParameterReferenceError, PARAMETER_INVALID_REFERENCE),
    (UnresolvedReferenceError, PARAMETER_UNRESOLVED_REFERENCE),
    (TemplateRenderError, TEMPLATE_RENDER_FAILED),
    (InvalidPayloadError, PAYLOAD_INVALID),
    (DuplicateNameError, DEPLOY_DUPLICATE_NAME),
    (UnknownResourceKindError, DEPLOY_UNKNOWN_KIND),
    (InvalidStrategyChainError, DEPLOY_CONFIGURATION_ERROR),
    (ExternalIdError, EXTERNAL_ID_INVALID),
    (RemoteCallError, REMOTE_CALL_FAILED),
    (ConfigDeployError, DEPLOY_FAILED),
)


def error_type_for(exc: BaseException) -> str:
    for cls, code in _TYPE_BY_EXCEPTION:
        if isinstance(exc, cls):
            return code
    if isinstance(exc, AggregateError):
        return PARAMETER_RESOLUTION_FAILED
    if isinstance(exc, ConfigFlowException):
        return DEPLOY_FAILED
    return UNEXPECTED_ERROR


def exception_to_payload(exc: BaseException) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, sem stack trace).

    Regras:
    - ConfigFlowException: já carrega details/hint; o tipo vem do catálogo.
    - AggregateError: cada erro agregado vira um payload em details["errors"].
    - Outras exceções: UNEXPECTED_ERROR com o nome da classe.
    """
    if isinstance(exc, AggregateError):
        return ErrorPayload(
            type=error_type_for(exc),
            message=exc.message,
            details={"errors": [exception_to_payload(e).to_dict() for e in exc.errors]},
            hint=exc.hint,
        )

    if isinstance(exc, ConfigFlowException):
        return ErrorPayload(
            type=error_type_for(exc),
            message=str(exc) or exc.__class__.__name__,
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return ErrorPayload(
        type=UNEXPECTED_ERROR,
        message=str(exc) or "Erro inesperado durante o deploy",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log técnico e as opções de deploy",
    )


def payloads(errors: List[BaseException]) -> List[Dict[str, Any]]:
    return [exception_to_payload(e).to_dict() for e in errors]
