# tests/core/configuration/test_template.py
"""
Testes de renderização e validação de payloads.
"""

import pytest

from configflow.core.configuration.coordinate import Coordinate
from configflow.core.configuration.template import (
    JsonTemplate,
    PlaceholderRenderer,
    render_configuration_payload,
    validate_json_payload,
)
from configflow.core.exceptions import InvalidPayloadError, TemplateRenderError


def test_renders_values_by_type():
    tpl = JsonTemplate(
        "t.json",
        '{"name": "{{ .name }}", "enabled": {{ .enabled }}, "limit": {{ .limit }}, '
        '"tags": {{ .tags }}, "owner": {{ .owner }}, "nested": "{{ .meta.team }}"}',
    )
    out = PlaceholderRenderer().render(
        tpl,
        {"name": "alerts", "enabled": True, "limit": 3, "tags": ["a"], "owner": None, "meta": {"team": "sre"}},
    )
    assert out == (
        '{"name": "alerts", "enabled": true, "limit": 3, '
        '"tags": ["a"], "owner": null, "nested": "sre"}'
    )


def test_missing_property_is_render_error():
    tpl = JsonTemplate("t.json", '{"name": "{{ .missing }}"}')
    with pytest.raises(TemplateRenderError):
        PlaceholderRenderer().render(tpl, {})


def test_invalid_payload_reports_line_and_column():
    with pytest.raises(InvalidPayloadError) as exc:
        validate_json_payload("t.json", '{\n  "name": "x",\n  oops\n}')
    assert exc.value.line == 3
    assert exc.value.column == 3
    assert "t.json:3:3" in str(exc.value)


def test_render_errors_carry_configuration_location():
    coordinate = Coordinate("proj", "dashboard", "main")
    tpl = JsonTemplate("t.json", '{"name": "{{ .missing }}"}')

    with pytest.raises(TemplateRenderError) as exc:
        render_configuration_payload(tpl, {}, location={"coordinate": coordinate, "environment": "prod"})

    assert exc.value.coordinate == coordinate
    assert exc.value.environment == "prod"


def test_render_configuration_payload_validates():
    tpl = JsonTemplate("t.json", '{"name": {{ .name }}}')
    with pytest.raises(InvalidPayloadError):
        render_configuration_payload(tpl, {"name": "not quoted"})
