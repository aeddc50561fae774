"""Tests for QA test plan generation."""

import json

import pytest

from app.chains.generate_test_cases import (
    TestGenerationError,
    build_test_context,
    build_test_prompt,
    format_preconditions,
    generate_test_cases,
    normalize_test_steps,
)
from app.core.schemas_generation import TaskKind
from app.core.schemas_use_cases import TestStepStatus, UseCaseForm, UseCaseType
from tests.fakes.fake_providers import answering, build_fake_orchestrator, failing, total_calls
from tests.fixtures_use_cases import API_FORM, ENTITY_FORM, SERVICE_FORM


@pytest.fixture
def entity_form():
    return UseCaseForm.model_validate(ENTITY_FORM)


class TestBuildTestPrompt:
    def test_coverage_follows_type(self):
        assert "Paginación" in build_test_prompt(UseCaseType.ENTITY)
        assert "Rate limiting" in build_test_prompt(UseCaseType.API)
        assert "Conciliación de cuentas" in build_test_prompt(UseCaseType.SERVICE)

    def test_suggestions_appended(self):
        prompt = build_test_prompt(UseCaseType.ENTITY, "  Agregar pruebas de CUIT duplicado ")
        assert "REGENERACIÓN CON SUGERENCIAS" in prompt
        assert "Agregar pruebas de CUIT duplicado" in prompt

    def test_blank_suggestions_ignored(self):
        assert "SUGERENCIAS" not in build_test_prompt(UseCaseType.API, "   ")


class TestBuildTestContext:
    def test_entity_context(self, entity_form):
        context = build_test_context(entity_form)
        assert "CASO DE USO: Gestionar Proveedores" in context
        assert "- CUIT" in context
        assert "- cuit (text, longitud: 11, obligatorio)" in context
        assert "- activo (boolean, opcional)" in context
        assert "REGLAS DE NEGOCIO" in context

    def test_api_context(self):
        context = build_test_context(UseCaseForm.model_validate(API_FORM))
        assert "- Endpoint: /api/v1/cuentas/saldo" in context
        assert "- Método HTTP: GET" in context

    def test_service_context(self):
        context = build_test_context(UseCaseForm.model_validate(SERVICE_FORM))
        assert "- Frecuencia: Diariamente" in context
        assert "- Rutas de Configuración: /data/cotizaciones" in context


class TestFormatPreconditions:
    def test_numbered_string_kept(self, entity_form):
        value = "1. Usuarios\n   a. Operador"
        assert format_preconditions(f"  {value}\n", entity_form) == value

    def test_object_sections(self, entity_form):
        result = format_preconditions(
            {"datos": ["Proveedor activo"], "usuarios": ["QA_OPERADOR", "QA_ADMIN"], "otros": "VPN"},
            entity_form,
        )
        assert result.splitlines() == [
            "1. Usuarios de prueba",
            "   a. QA_OPERADOR",
            "   b. QA_ADMIN",
            "2. Datos de prueba",
            "   a. Proveedor activo",
            "3. Otros",
            "   a. VPN",
        ]

    def test_bullet_string(self, entity_form):
        result = format_preconditions("• Usuarios de prueba:\n  - Operador\n  - Supervisor", entity_form)
        assert result.splitlines() == ["1. Usuarios de prueba", "   a. Operador", "   b. Supervisor"]

    def test_items_without_heading(self, entity_form):
        result = format_preconditions("- Base cargada", entity_form)
        assert result.splitlines() == ["1. Precondiciones generales", "   a. Base cargada"]

    def test_empty_uses_defaults(self):
        form = UseCaseForm.model_validate(API_FORM)
        result = format_preconditions(None, form)
        assert result.startswith("1. Usuarios de prueba")
        assert "Endpoint API configurado y accesible: /api/v1/cuentas/saldo" in result


class TestNormalizeTestSteps:
    def test_defaults_and_numbering(self, entity_form):
        steps = normalize_test_steps([{"action": "Buscar"}, "basura"], entity_form)
        assert [s.number for s in steps] == [1, 2]
        assert steps[0].input_data == "Datos de entrada"
        assert steps[1].action == "Acción 2"
        assert all(s.status == TestStepStatus.PENDING for s in steps)

    def test_no_steps_uses_fallback(self, entity_form):
        steps = normalize_test_steps([], entity_form)
        assert len(steps) == 5
        assert steps[1].action == "Navegar a la funcionalidad Gestionar Proveedores"
        assert steps[2].input_data == "Razón social, CUIT, Estado"


class TestGenerateTestCases:
    @pytest.mark.asyncio
    async def test_offline_plan(self, entity_form):
        providers = [answering("copilot", "{}")]

        result = await generate_test_cases(entity_form, "demo", build_fake_orchestrator(providers))

        assert total_calls(providers) == 0
        assert result.objective == (
            "Verificar el funcionamiento completo de la gestión de entidades: Gestionar Proveedores"
        )
        assert len(result.test_steps) == 6
        assert [s.number for s in result.test_steps] == list(range(1, 7))

    @pytest.mark.asyncio
    async def test_provider_plan(self, entity_form):
        answer = json.dumps(
            {
                "objective": "Validar ABM de proveedores",
                "preconditions": {"usuarios": ["QA_OPERADOR"]},
                "testSteps": [
                    {"number": 7, "action": "Buscar por CUIT", "inputData": "20-1", "expectedResult": "Ok"},
                    {"number": 9, "action": "Eliminar", "inputData": "ID 1", "expectedResult": "Baja"},
                ],
            }
        )
        providers = [answering("gemini", answer)]

        result = await generate_test_cases(
            entity_form, "gemini", build_fake_orchestrator(providers), suggestions="Más casos de error"
        )

        assert result.objective == "Validar ABM de proveedores"
        assert result.preconditions == "1. Usuarios de prueba\n   a. QA_OPERADOR"
        assert [s.number for s in result.test_steps] == [1, 2]
        assert result.analysis_notes.startswith("Análisis generado automáticamente")
        task = providers[0].tasks[0]
        assert task.kind == TaskKind.TEST_GENERATION
        assert "Más casos de error" in task.system_prompt

    @pytest.mark.asyncio
    async def test_unparseable_answer_raises(self, entity_form):
        orchestrator = build_fake_orchestrator([answering("openai", "lo siento")])

        with pytest.raises(TestGenerationError):
            await generate_test_cases(entity_form, "openai", orchestrator)

    @pytest.mark.asyncio
    async def test_all_providers_failing_raises(self, entity_form):
        providers = [failing(p) for p in ("copilot", "gemini", "openai", "claude", "grok")]

        with pytest.raises(TestGenerationError, match="Error al generar casos de prueba"):
            await generate_test_cases(entity_form, "claude", build_fake_orchestrator(providers))

        assert total_calls(providers) == 5
