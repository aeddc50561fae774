"""Tests for mandatory section enforcement."""

from app.core.content_sanitizer import ALTERNATIVE_FLOWS_MARKER, MAIN_FLOW_MARKER, present_markers
from app.core.schemas_use_cases import UseCaseType
from app.core.section_enforcer import CANONICAL_API_SECTIONS, ensure_required_sections

BOTH = {MAIN_FLOW_MARKER, ALTERNATIVE_FLOWS_MARKER}


class TestEnsureRequiredSections:
    def test_appends_both_sections_to_api_content(self):
        result = ensure_required_sections("<h1>CONSULTAR SALDO</h1>", UseCaseType.API)
        assert result.startswith("<h1>CONSULTAR SALDO</h1>")
        assert result.endswith(CANONICAL_API_SECTIONS)
        assert present_markers(result) == BOTH

    def test_appends_when_one_section_is_missing(self):
        content = f"<h2>{MAIN_FLOW_MARKER}</h2><ol><li>a</li></ol>"
        assert present_markers(ensure_required_sections(content, "api")) == BOTH

    def test_complete_content_unchanged(self):
        content = f"<h2>{MAIN_FLOW_MARKER}</h2><h2>{ALTERNATIVE_FLOWS_MARKER}</h2>"
        assert ensure_required_sections(content, UseCaseType.API) == content

    def test_markers_match_case_insensitively(self):
        content = "<h2>Flujo Principal de Eventos</h2><h2>Flujos Alternativos</h2>"
        assert ensure_required_sections(content, UseCaseType.API) == content

    def test_other_types_unchanged(self):
        assert ensure_required_sections("<p>x</p>", UseCaseType.ENTITY) == "<p>x</p>"
        assert ensure_required_sections("<p>x</p>", UseCaseType.SERVICE) == "<p>x</p>"

    def test_idempotent(self):
        once = ensure_required_sections("<p>x</p>", UseCaseType.API)
        assert ensure_required_sections(once, UseCaseType.API) == once
