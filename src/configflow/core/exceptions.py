"""
ConfigFlow — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do ConfigFlow.

Objetivo:
- Permitir que grafo, resolução e deploy levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Evitar ValueError/RuntimeError genéricos nos pontos críticos do deploy

Regras:
- Toda exceção carrega dados estruturados (serializáveis) em `details`
- Erros de configuração sempre identificam a Coordinate afetada
- Mensagens são curtas e humanas; o diagnóstico vive em `details`
- Exceções de campos simples são dataclasses da base; as que montam a
  mensagem a partir do domínio (localização, ciclos, agregados) têm
  `__init__` próprio
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from configflow.core.configuration.coordinate import Coordinate


@dataclass(eq=False)
class ConfigFlowException(Exception):
    """Base class para exceções internas do ConfigFlow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    - Não é frozen: erros com localização anexam coordinate e ambiente
      depois da construção
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class AggregateError(ConfigFlowException):
    """Agrega múltiplos erros sem perder nenhum (nunca fail-fast)."""

    def __init__(self, message: str, errors: Sequence[Exception]):
        super().__init__(
            message=message,
            details={"errors": [str(e) for e in errors]},
        )
        self.errors: List[Exception] = list(errors)

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  - {e}" for e in self.errors)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Erros com localização (Coordinate + ambiente)
# ---------------------------------------------------------------------------


class DetailedConfigError(ConfigFlowException):
    """Erro associado a uma configuração específica de um ambiente."""

    def __init__(
        self,
        reason: str,
        *,
        coordinate: Optional[Coordinate] = None,
        environment: str = "",
        group: str = "",
        hint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        merged = {
            "coordinate": str(coordinate) if coordinate is not None else None,
            "environment": environment,
            "group": group,
        }
        merged.update(details or {})
        super().__init__(message=reason, details=merged, hint=hint)
        self.coordinate = coordinate
        self.environment = environment
        self.group = group

    def __str__(self) -> str:
        if self.coordinate is None:
            return self.message
        return f"{self.coordinate}: {self.message}"


class ParameterResolveError(DetailedConfigError):
    """Parâmetro não pôde ter seu valor resolvido."""

    def __init__(self, parameter: str, reason: str, **location: Any):
        super().__init__(
            f"{parameter}: cannot resolve parameter: {reason}",
            details={"parameter": parameter, "reason": reason},
            **location,
        )
        self.parameter = parameter
        self.reason = reason


class UnresolvedReferenceError(ParameterResolveError):
    """Referência de parâmetro aponta para valor inexistente ou ainda não resolvido."""

    def __init__(self, parameter: str, reference: Any, reason: str, **location: Any):
        DetailedConfigError.__init__(
            self,
            f"{parameter}: cannot resolve reference {reference}: {reason}",
            details={"parameter": parameter, "reference": str(reference), "reason": reason},
            **location,
        )
        self.parameter = parameter
        self.reference = reference
        self.reason = reason


REFERENCED_CONFIG_NOT_FOUND = "referenced config not found"
REFERENCING_SKIPPED_CONFIG = "referencing skipped config"
PARAMETER_REFERENCING_ITSELF = "parameter referencing itself"


class ParameterReferenceError(DetailedConfigError):
    """Referência inválida para outra configuração (ou para o próprio parâmetro)."""

    def __init__(self, parameter: str, reference: Any, reason: str, **location: Any):
        super().__init__(
            f"parameter `{parameter}` cannot reference `{reference}`: {reason}",
            details={"parameter": parameter, "reference": str(reference), "reason": reason},
            **location,
        )
        self.parameter = parameter
        self.reference = reference
        self.reason = reason


class CircularParameterDependencyError(DetailedConfigError):
    """Parâmetros de uma mesma configuração formam um ciclo."""

    def __init__(self, parameters: Sequence[str], depends_on: Sequence[Any], **location: Any):
        joined = ", ".join(str(r) for r in depends_on)
        super().__init__(
            f"{', '.join(parameters)}: circular dependency detected. check parameter dependencies: {joined}",
            details={"parameters": list(parameters), "depends_on": [str(r) for r in depends_on]},
            **location,
        )
        self.parameters = list(parameters)
        self.depends_on = list(depends_on)


class ResolutionErrors(AggregateError):
    """Todos os erros de resolução de parâmetros de uma configuração."""


class TemplateRenderError(DetailedConfigError):
    """Template não pôde ser renderizado com as propriedades resolvidas."""

    def __init__(self, template_name: str, reason: str, **location: Any):
        super().__init__(
            f"failed to render template {template_name!r}: {reason}",
            details={"template": template_name, "reason": reason},
            **location,
        )
        self.template_name = template_name
        self.reason = reason


class InvalidPayloadError(DetailedConfigError):
    """Payload renderizado não é sintaticamente válido para o formato de envio."""

    def __init__(self, template_name: str, line: int, column: int, reason: str, **location: Any):
        super().__init__(
            f"{template_name}:{line}:{column}: invalid payload: {reason}",
            details={"template": template_name, "line": line, "column": column, "reason": reason},
            hint="Corrija o template ou os valores de parâmetro que geram JSON inválido.",
            **location,
        )
        self.template_name = template_name
        self.line = line
        self.column = column
        self.reason = reason


class ConfigDeployError(DetailedConfigError):
    """Falha terminal no deploy de uma configuração."""

    def __init__(self, reason: str, *, cause: Optional[BaseException] = None, **location: Any):
        details = {"cause": str(cause)} if cause is not None else {}
        super().__init__(reason, details=details, **location)
        self.cause = cause

    def __str__(self) -> str:
        base = super().__str__()
        if self.cause is None:
            return base
        return f"{base}: {self.cause}"


class DuplicateNameError(ConfigDeployError):
    """Duas configurações do mesmo tipo resolvem para o mesmo nome no ambiente."""

    def __init__(self, name: str, kind: str, **location: Any):
        super().__init__(f"duplicated config name `{name}`", **location)
        self.details.update({"name": name, "kind": kind})
        self.name = name
        self.kind = kind


class UnknownResourceKindError(DetailedConfigError):
    """Tipo de recurso sem definição registrada."""

    def __init__(self, kind: str, **location: Any):
        super().__init__(
            f"unknown resource kind `{kind}`",
            details={"kind": kind},
            hint="Registre o ResourceKind correspondente antes do deploy.",
            **location,
        )
        self.kind = kind


class DuplicateCoordinateError(DetailedConfigError):
    """Mesma Coordinate declarada duas vezes no mesmo ambiente."""


# ---------------------------------------------------------------------------
# Grafo / Ordenação
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleEntry:
    """Participante de um ciclo: coordinate + arquivo de origem (quando conhecido)."""

    coordinate: Coordinate
    filepath: Optional[str] = None

    def __str__(self) -> str:
        if self.filepath:
            return f"{self.coordinate} ({self.filepath})"
        return str(self.coordinate)


@dataclass(frozen=True)
class DependencyCycle:
    """Ciclo ordenado: cada entrada depende da anterior; a última fecha no início."""

    entries: tuple

    @property
    def coordinates(self) -> List[Coordinate]:
        return [e.coordinate for e in self.entries]

    def __str__(self) -> str:
        parts = [str(e) for e in self.entries]
        if parts:
            parts.append(str(self.entries[0]))
        return " -> ".join(parts)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [{"coordinate": str(e.coordinate), "filepath": e.filepath} for e in self.entries]


class CyclicDependencyError(ConfigFlowException):
    """Grafo de um ambiente (ou componente) não possui ordem topológica."""

    def __init__(self, environment: str, cycles: Sequence[DependencyCycle]):
        super().__init__(
            message=f"{environment}: {len(cycles)} circular dependency cycle(s) detected",
            details={"environment": environment, "cycles": [c.to_dict() for c in cycles]},
            hint="Remova uma das referências de cada ciclo para desacoplar as configurações.",
        )
        self.environment = environment
        self.cycles: List[DependencyCycle] = list(cycles)

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  cycle: {c}" for c in self.cycles)
        return "\n".join(lines)


class SortingErrors(AggregateError):
    """Falhas de ordenação por componente; componentes ordenados ficam disponíveis."""

    def __init__(self, errors: Sequence[Exception], sorted_components: Sequence[Any] = ()):
        super().__init__("failed to sort dependency graph", errors)
        self.sorted_components = list(sorted_components)


@dataclass(eq=False)
class MissingDependencyGraphError(ConfigFlowException):
    """Ambiente sem grafo construído no conjunto de grafos."""

    environment: str = ""


# ---------------------------------------------------------------------------
# Upsert / Remoto
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class ExternalIdError(ConfigFlowException):
    """External ID não pôde ser derivado da Coordinate."""


@dataclass(eq=False)
class RemoteCallError(ConfigFlowException):
    """Falha de chamada à API remota. Apenas 404 é tratado como "não encontrado"."""

    status_code: Optional[int] = None
    body: Any = None

    def __post_init__(self) -> None:
        self.details = {**self.details, "status_code": self.status_code, "body": self.body}

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


@dataclass(eq=False)
class InvalidStrategyChainError(ConfigFlowException):
    """Cadeia de estratégias montada sem handler terminal de criação."""
