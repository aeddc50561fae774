"""Tests for meeting-minute analysis."""

import json

import pytest

from app.chains.analyze_minute import (
    analyze_minute,
    build_minute_prompt,
    infer_project_name,
    repair_minute_record,
)
from app.core.schemas_generation import TaskKind
from app.core.schemas_use_cases import EntityFieldType, UseCaseType
from tests.fakes.fake_providers import answering, build_fake_orchestrator, failing, total_calls


def _minute_json(**fields) -> str:
    record = {
        "clientName": "Banco Provincia",
        "projectName": "Portal de Proveedores",
        "useCaseCode": "PV003",
        "useCaseName": "Gestionar Proveedores",
        "fileName": "PV003GestionarProveedores",
        "description": "Alta y consulta de proveedores",
    }
    record.update(fields)
    return json.dumps(record)


class TestBuildMinutePrompt:
    def test_shape_follows_type(self):
        assert '"entityFields"' in build_minute_prompt(UseCaseType.ENTITY)
        assert '"apiEndpoint"' in build_minute_prompt(UseCaseType.API)
        assert '"serviceFrequency"' in build_minute_prompt(UseCaseType.SERVICE)

    def test_file_name_rule_always_present(self):
        for use_case_type in UseCaseType:
            assert "NUNCA debe incluir extensiones" in build_minute_prompt(use_case_type)


class TestRepairMinuteRecord:
    def test_file_extension_removed(self):
        record = repair_minute_record({"fileName": "PV003GestionarProveedores.docx"}, UseCaseType.ENTITY)
        assert record["fileName"] == "PV003GestionarProveedores"

    def test_name_in_client_field_is_swapped(self):
        record = repair_minute_record(
            {"clientName": "Gestionar proveedores", "useCaseName": "Banco Provincia"},
            UseCaseType.ENTITY,
        )
        assert record["clientName"] == "Banco Provincia"
        assert record["useCaseName"] == "Gestionar proveedores"

    def test_any_infinitive_in_client_field_is_swapped(self):
        record = repair_minute_record(
            {"clientName": "Registrar Pagos", "useCaseName": "Banco Galicia"},
            UseCaseType.ENTITY,
        )
        assert record["clientName"] == "Banco Galicia"
        assert record["useCaseName"] == "Registrar Pagos"

    def test_no_swap_when_name_is_already_a_verb(self):
        record = repair_minute_record(
            {"clientName": "Registrar Pagos", "useCaseName": "Consultar saldos"},
            UseCaseType.ENTITY,
        )
        assert record["clientName"] == "Registrar Pagos"
        assert record["useCaseName"] == "Consultar saldos"

    def test_mostrar_description_becomes_name(self):
        record = repair_minute_record(
            {"useCaseName": "Proveedores", "description": "Mostrar proveedores activos"},
            UseCaseType.ENTITY,
        )
        assert record["useCaseName"] == "Mostrar proveedores activos"

    def test_project_inferred_from_name(self):
        record = repair_minute_record({"useCaseName": "Gestionar clientes"}, UseCaseType.ENTITY)
        assert record["projectName"] == "Sistema de Gestión de Clientes"

    def test_service_fields_never_missing(self):
        record = repair_minute_record({"serviceFrequency": None}, UseCaseType.SERVICE)
        assert record["serviceFrequency"] == ""
        assert record["executionTime"] == ""
        assert record["configurationPaths"] == ""
        assert record["webServiceCredentials"] == ""

    def test_unknown_field_type_becomes_text(self):
        record = repair_minute_record(
            {"entityFields": [{"name": "monto", "type": "currency"}, "basura"]},
            UseCaseType.ENTITY,
        )
        assert record["entityFields"] == [{"name": "monto", "type": EntityFieldType.TEXT.value}]

    def test_marks_record(self):
        record = repair_minute_record({}, UseCaseType.API)
        assert record["useCaseType"] == "api"
        assert record["isAIGenerated"] is True


class TestInferProjectName:
    def test_keywords(self):
        assert infer_project_name("Gestionar Proveedores") == "Sistema de Gestión de Proveedores"
        assert infer_project_name("Consultar saldo") == "Sistema de Gestión"


class TestAnalyzeMinute:
    @pytest.mark.asyncio
    async def test_offline_returns_canned_draft(self):
        providers = [answering("copilot", _minute_json())]
        orchestrator = build_fake_orchestrator(providers)

        draft = await analyze_minute("minuta", "service", "demo", orchestrator)

        assert total_calls(providers) == 0
        assert draft.use_case_type == UseCaseType.SERVICE
        assert draft.use_case_name == "Procesar cierre diario"
        assert draft.is_ai_generated is True

    @pytest.mark.asyncio
    async def test_provider_output_is_repaired(self):
        answer = "```json\n" + _minute_json(
            fileName="PV003GestionarProveedores.json",
            entityFields=[{"name": "cuit", "type": "cuit", "mandatory": True}],
        ) + "\n```"
        providers = [answering("claude", answer)]
        orchestrator = build_fake_orchestrator(providers)

        draft = await analyze_minute("texto de minuta", UseCaseType.ENTITY, "claude", orchestrator)

        assert draft.file_name == "PV003GestionarProveedores"
        assert draft.entity_fields[0].type == EntityFieldType.TEXT
        assert draft.client_name == "Banco Provincia"
        task = providers[0].tasks[0]
        assert task.kind == TaskKind.EXTRACTION
        assert task.payload == "texto de minuta"
        assert '"entityFields"' in task.system_prompt

    @pytest.mark.asyncio
    async def test_malformed_json_returns_canned_draft(self):
        orchestrator = build_fake_orchestrator([answering("openai", "no pude leer la minuta")])

        draft = await analyze_minute("texto", "api", "openai", orchestrator)

        assert draft.api_endpoint == "/api/v1/consulta-saldo"

    @pytest.mark.asyncio
    async def test_every_provider_failing_returns_canned_draft(self):
        providers = [failing(p) for p in ("copilot", "gemini", "openai", "claude", "grok")]
        orchestrator = build_fake_orchestrator(providers)

        draft = await analyze_minute("texto", "entity", "gemini", orchestrator)

        assert total_calls(providers) == 5
        assert draft.search_filters[0] == "DNI/CUIT"
