"""Generate a QA test plan from the complete use case form."""

import logging
import re
from typing import Any

from app.core.llm import ParseError, parse_json_object
from app.core.logging import get_logger, log_with_context
from app.core.offline_content import (
    default_test_preconditions,
    demo_test_cases,
    fallback_test_steps,
)
from app.core.orchestrator import AggregatedGenerationError, Orchestrator
from app.core.schemas_generation import GenerationTask, TaskKind
from app.core.schemas_use_cases import (
    TestCasesResult,
    TestStep,
    UseCaseForm,
    UseCaseType,
)

logger = get_logger(__name__)


class TestGenerationError(Exception):
    """The test plan could not be generated by any provider or parsed."""

    __test__ = False


TEST_BASE_PROMPT = """Eres un analista de QA experto especializado en generar casos de prueba completos y profesionales siguiendo estándares bancarios ING.

INSTRUCCIONES CRÍTICAS:
1. Analiza TODO el caso de uso proporcionado incluyendo reglas de negocio, flujos alternativos y requerimientos especiales
2. Genera casos de prueba COMPLETOS que cubran: flujo principal, validaciones, errores, seguridad y rendimiento
3. Responde ÚNICAMENTE con JSON válido sin explicaciones adicionales
4. Cada paso debe ser específico, accionable y verificable
5. DEBES incluir mínimo 5-10 pasos de prueba para cubrir todos los escenarios

ESTRUCTURA REQUERIDA:
{
  "objective": "Objetivo claro y específico del caso de prueba",
  "preconditions": "1. Usuarios de prueba\\n   a. Usuario con perfil autorizado\\n   b. Usuario sin permisos\\n\\n2. Datos de prueba\\n   a. Datos válidos\\n   b. Datos inválidos\\n\\n3. Infraestructura y configuración\\n   a. Sistema de pruebas configurado y accesible",
  "testSteps": [
    {
      "number": 1,
      "action": "Acción específica a realizar",
      "inputData": "Datos de entrada exactos",
      "expectedResult": "Resultado esperado específico",
      "observations": "Observaciones técnicas importantes"
    }
  ],
  "analysisNotes": "Análisis del contexto y cobertura de pruebas"
}

FORMATO DE PRECONDICIONES:
Las precondiciones DEBEN seguir el formato jerárquico (1/a/b) similar a los flujos principales:
1. Categoría principal
   a. Subcategoría o elemento específico
2. Segunda categoría principal
   a. Elementos de esta categoría

NO uses bullets (•) ni guiones (-). Usa numeración jerárquica.

TIPOS DE PRUEBAS A INCLUIR:
"""

_TYPE_COVERAGE = {
    UseCaseType.ENTITY: """- Búsqueda con diferentes filtros (válidos e inválidos)
- Validación de campos obligatorios y opcionales
- Límites de longitud de campos
- Formatos de datos (emails, fechas, números)
- Paginación y ordenamiento de resultados
- Creación, modificación y eliminación de registros
- Auditoría de cambios (fechaAlta, usuarioAlta, etc.)
- Validaciones de seguridad y permisos

CONTEXTO BANCARIO ING:
- Validaciones estrictas de DNI/CUIT
- Cumplimiento de normativas bancarias
- Auditoría completa de operaciones
""",
    UseCaseType.API: """- Llamadas con diferentes métodos HTTP
- Validación de formato de petición JSON
- Validación de parámetros obligatorios y opcionales
- Códigos de respuesta HTTP (200, 400, 401, 500, etc.)
- Validación de tokens de autenticación
- Rate limiting y throttling
- Timeouts y manejo de errores de red

CONTEXTO BANCARIO ING:
- Encriptación de datos sensibles
- Logs de auditoría de transacciones
- Cumplimiento PCI DSS
""",
    UseCaseType.SERVICE: """- Ejecución programada según frecuencia configurada
- Validación de parámetros de configuración
- Procesamiento de diferentes volúmenes de datos
- Manejo de errores y reintentos durante la ejecución
- Generación de logs detallados y notificaciones
- Backup y rollback de datos

CONTEXTO BANCARIO ING:
- Procesos de cierre contable
- Conciliación de cuentas
- Generación de reportes regulatorios
""",
}

_SUGGESTIONS_BLOCK = """
REGENERACIÓN CON SUGERENCIAS DEL USUARIO:
{suggestions}

DEBES incorporar TODAS las sugerencias anteriores manteniendo la estructura JSON.
"""

_NUMBERED_RE = re.compile(r"^\d+\.")

# Precondition sections recognized in object-shaped answers
_PRECONDITION_SECTIONS = (
    ("Usuarios de prueba", ("usuarios", "usuariosDePrueba", "usuarios_de_prueba", "users")),
    ("Datos de prueba", ("datos", "datosDePrueba", "datos_de_prueba", "data")),
    ("Infraestructura y configuración", ("infraestructura", "infrastructure", "sistema")),
)


def build_test_prompt(use_case_type: UseCaseType, suggestions: str | None = None) -> str:
    prompt = TEST_BASE_PROMPT + _TYPE_COVERAGE[use_case_type]
    if suggestions and suggestions.strip():
        prompt += _SUGGESTIONS_BLOCK.format(suggestions=suggestions.strip())
    return prompt


def build_test_context(form: UseCaseForm) -> str:
    """Everything the form knows, as labelled plain-text sections."""
    sections = [
        f"CASO DE USO: {form.use_case_name}",
        f"CLIENTE: {form.client_name}",
        f"PROYECTO: {form.project_name}",
        f"TIPO: {form.use_case_type.value.upper()}",
        f"CÓDIGO: {form.use_case_code}",
        f"DESCRIPCIÓN: {form.description}",
    ]

    if form.use_case_type == UseCaseType.ENTITY:
        if form.search_filters:
            sections.append("\nFILTROS DE BÚSQUEDA:")
            sections += [f"- {f}" for f in form.search_filters]
        if form.result_columns:
            sections.append("\nCOLUMNAS DE RESULTADO:")
            sections += [f"- {c}" for c in form.result_columns]
        if form.entity_fields:
            sections.append("\nCAMPOS DE ENTIDAD:")
            for f in form.entity_fields:
                length = f", longitud: {f.length}" if f.length else ""
                required = "obligatorio" if f.mandatory else "opcional"
                sections.append(f"- {f.name} ({f.type.value}{length}, {required})")
    elif form.use_case_type == UseCaseType.API:
        sections.append("\nCONFIGURACIÓN API:")
        sections.append(f"- Endpoint: {form.api_endpoint}")
        sections.append(f"- Método HTTP: {form.http_method or 'POST'}")
        if form.request_format:
            sections.append(f"- Formato de Petición: {form.request_format}")
        if form.response_format:
            sections.append(f"- Formato de Respuesta: {form.response_format}")
    else:
        sections.append("\nCONFIGURACIÓN DEL SERVICIO:")
        sections.append(f"- Frecuencia: {form.service_frequency}")
        sections.append(f"- Tiempo de Ejecución: {form.execution_time}")
        if form.configuration_paths:
            sections.append(f"- Rutas de Configuración: {form.configuration_paths}")

    if form.business_rules:
        sections.append(f"\nREGLAS DE NEGOCIO:\n{form.business_rules}")
    if form.special_requirements:
        sections.append(f"\nREQUERIMIENTOS ESPECIALES:\n{form.special_requirements}")
    if form.wireframe_descriptions:
        sections.append("\nWIREFRAMES/PANTALLAS:")
        sections += [f"- {w}" for w in form.wireframe_descriptions]

    return "\n".join(sections)


def _format_section(index: int, title: str, items: Any) -> list[str]:
    if not isinstance(items, list):
        items = [items]
    lines = [f"{index}. {title}"]
    lines += [f"   {chr(ord('a') + i)}. {item}" for i, item in enumerate(items[:26])]
    return lines


def format_preconditions(value: Any, form: UseCaseForm) -> str:
    """
    Normalize preconditions to hierarchical "1." / "   a." lines.

    Accepts an already-numbered string, an object keyed by section, or a bullet
    string ("• Section:" headings with "-" items). Empty results fall back to the
    default preconditions for the form.
    """
    if isinstance(value, str) and _NUMBERED_RE.match(value.strip()):
        return value.strip()

    lines: list[str] = []
    if isinstance(value, dict):
        sections: list[tuple[str, Any]] = []
        used: set[str] = set()
        for title, keys in _PRECONDITION_SECTIONS:
            key = next((k for k in keys if value.get(k)), None)
            if key is not None:
                sections.append((title, value[key]))
                used.add(key)
        sections += [
            (key[:1].upper() + key[1:], items)
            for key, items in value.items()
            if key not in used and items
        ]
        for index, (title, items) in enumerate(sections, start=1):
            lines += _format_section(index, title, items)
    elif isinstance(value, str) and value.strip():
        section = 0
        item = 0
        for raw in value.splitlines():
            line = raw.strip()
            if not line:
                continue
            if line.startswith("•") and line.endswith(":"):
                section += 1
                item = 0
                lines.append(f"{section}. {line.lstrip('• ').rstrip(':').strip()}")
            elif line.startswith(("-", "•")):
                if section == 0:
                    section = 1
                    lines.append("1. Precondiciones generales")
                lines.append(f"   {chr(ord('a') + min(item, 25))}. {line.lstrip('-• ').strip()}")
                item += 1
            else:
                lines.append(line)

    return "\n".join(lines) if lines else default_test_preconditions(form)


def normalize_test_steps(raw_steps: Any, form: UseCaseForm) -> list[TestStep]:
    """Fill defaults and number steps 1..N; no steps at all means fallback steps."""
    if not isinstance(raw_steps, list) or not raw_steps:
        logger.info("No test steps in answer, using fallback steps")
        raw_steps = fallback_test_steps(form)

    steps = []
    for index, raw in enumerate(raw_steps, start=1):
        raw = raw if isinstance(raw, dict) else {}
        steps.append(
            TestStep(
                number=index,
                action=raw.get("action") or f"Acción {index}",
                input_data=raw.get("inputData") or "Datos de entrada",
                expected_result=raw.get("expectedResult") or "Resultado esperado",
                observations=raw.get("observations") or "",
            )
        )
    return steps


def build_test_result(payload: dict[str, Any], form: UseCaseForm) -> TestCasesResult:
    return TestCasesResult(
        objective=payload.get("objective")
        or f"Verificar el funcionamiento completo del caso de uso: {form.use_case_name}",
        preconditions=format_preconditions(payload.get("preconditions"), form),
        test_steps=normalize_test_steps(payload.get("testSteps"), form),
        analysis_notes=payload.get("analysisNotes")
        or "Análisis generado automáticamente basado en el caso de uso completo",
    )


async def generate_test_cases(
    form: UseCaseForm,
    provider_id: str,
    orchestrator: Orchestrator,
    suggestions: str | None = None,
) -> TestCasesResult:
    """
    Generate objective, preconditions and steps for the use case.

    Args:
        form: Use case form (identity fields need not be valid)
        provider_id: Selected provider
        orchestrator: Orchestrator holding the provider registry
        suggestions: Optional reviewer suggestions for a regeneration

    Returns:
        TestCasesResult with steps numbered 1..N

    Raises:
        TestGenerationError: If every provider failed or the payload is not JSON
    """
    if Orchestrator.is_offline(provider_id):
        return build_test_result(demo_test_cases(form), form)

    task = GenerationTask(
        provider_id=provider_id,
        kind=TaskKind.TEST_GENERATION,
        payload=build_test_context(form),
        system_prompt=build_test_prompt(form.use_case_type, suggestions),
    )
    try:
        result = await orchestrator.generate(task)
        payload = parse_json_object(result.content)
    except (AggregatedGenerationError, ParseError) as e:
        raise TestGenerationError(f"Error al generar casos de prueba inteligentes: {e}") from e

    test_result = build_test_result(payload, form)
    log_with_context(
        logger,
        logging.INFO,
        "Test cases generated",
        provider=result.provider,
        steps=len(test_result.test_steps),
    )
    return test_result
