# src/configflow/core/configuration/template.py
"""
Templates de payload e validação do conteúdo renderizado.

Um template é o texto que, combinado às propriedades resolvidas de uma
configuração, produz o payload enviado à API remota. Placeholders seguem
a forma `{{ .propriedade }}` (ou `{{ .a.b }}` para propriedades aninhadas).

Política de formatação de valores:
    - str          → inserida sem aspas (o template decide as aspas)
    - bool         → `true` / `false`
    - None         → `null`
    - dict / list  → JSON compacto
    - demais       → `str(valor)`

Decisões arquiteturais:
    - Placeholder sem propriedade correspondente é erro de renderização
    - O payload renderizado é validado como JSON antes de qualquer chamada
      remota, com linha e coluna do primeiro erro

Limites explícitos:
    - Não implementa lógica de template (condicionais, laços)
    - Não escapa caracteres especiais dos valores
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from configflow.core.configuration.parameters import resolve_property_path
from configflow.core.exceptions import InvalidPayloadError, TemplateRenderError


_PLACEHOLDER = re.compile(r"\{\{\s*\.([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)\s*\}\}")


@dataclass(frozen=True)
class JsonTemplate:
    """Template identificado por `name` (tipicamente o arquivo de origem)."""

    name: str
    content: str


class TemplateRenderer(Protocol):
    def render(self, template: JsonTemplate, properties: Mapping[str, Any]) -> str:
        ...


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


class PlaceholderRenderer:
    """Renderer padrão: substitui `{{ .prop }}` pelas propriedades resolvidas."""

    def render(self, template: JsonTemplate, properties: Mapping[str, Any]) -> str:
        def _substitute(match: "re.Match[str]") -> str:
            path = match.group(1)
            value, found = resolve_property_path(path, properties)
            if not found:
                raise TemplateRenderError(template.name, f"no value for placeholder `{path}`")
            return _format_value(value)

        return _PLACEHOLDER.sub(_substitute, template.content)


def validate_json_payload(template_name: str, payload: str, **location: Any) -> Any:
    """
    Valida o payload renderizado como JSON e retorna o documento decodificado.

    Raises:
        InvalidPayloadError: com linha e coluna do primeiro erro de sintaxe.
    """
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise InvalidPayloadError(template_name, e.lineno, e.colno, e.msg, **location) from e


def render_configuration_payload(
    template: JsonTemplate,
    properties: Mapping[str, Any],
    *,
    renderer: Optional[TemplateRenderer] = None,
    location: Optional[Mapping[str, Any]] = None,
) -> str:
    """Renderiza e valida o payload de uma configuração.

    `location` (coordinate, environment, group) é anexado aos erros.
    """
    where = dict(location or {})
    active = renderer or PlaceholderRenderer()
    try:
        rendered = active.render(template, properties)
    except TemplateRenderError as e:
        if e.coordinate is not None or not where:
            raise
        raise TemplateRenderError(e.template_name, e.reason, **where) from e
    validate_json_payload(template.name, rendered, **where)
    return rendered
