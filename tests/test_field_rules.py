"""Tests for the field rules table."""

from app.core.field_rules import (
    COMPLIANCE_LINE,
    DEFAULT_TYPE_RULES,
    USE_CASE_TYPE_RULES,
    find_field_rule,
    render_field_rules,
    type_rules_for,
)


class TestFindFieldRule:
    def test_matches_by_name(self):
        assert find_field_rule("Nombre del Cliente").name == "client_name"
        assert find_field_rule("Nombre del Proyecto").name == "project_name"
        assert find_field_rule("Nombre del Caso de Uso").name == "use_case_name"
        assert find_field_rule("Nombre del Archivo").name == "file_name"

    def test_matches_by_type(self):
        assert find_field_rule("filtro", "searchFilter").name == "search_filter"
        assert find_field_rule("columna", "resultColumn").name == "result_column"
        assert find_field_rule("campo", "entityField").name == "entity_field"

    def test_test_objective_by_name_or_type(self):
        assert find_field_rule("objetivo de prueba").name == "test_objective"
        assert find_field_rule("objetivo", "testCaseObjective").name == "test_objective"

    def test_request_response_fields(self):
        assert find_field_rule("requestFormat").name == "request_response"

    def test_falls_back_to_default(self):
        assert find_field_rule("algo desconocido").name == "default"
        assert find_field_rule("").name == "default"


class TestTypeRules:
    def test_known_types(self):
        assert type_rules_for("api") == USE_CASE_TYPE_RULES["api"]
        assert type_rules_for(None) == USE_CASE_TYPE_RULES["entity"]

    def test_spanish_aliases(self):
        assert type_rules_for("entidad") == USE_CASE_TYPE_RULES["entity"]
        assert type_rules_for("proceso") == USE_CASE_TYPE_RULES["service"]

    def test_unknown_type(self):
        assert type_rules_for("batch") == DEFAULT_TYPE_RULES


class TestRenderFieldRules:
    def test_starts_with_compliance_line(self):
        rendered = render_field_rules("reglas de negocio")
        assert rendered.startswith(COMPLIANCE_LINE)
        assert "BULLETS" in rendered

    def test_type_rules_are_inserted(self):
        rendered = render_field_rules("descripcion", use_case_type="api")
        assert "Para APIs" in rendered
        assert "{type_rules}" not in rendered
