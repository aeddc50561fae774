"""Extract a draft use case form from meeting-minute text.

The provider answers with a JSON object shaped for the selected use case type.
Whatever happens (provider failure, malformed JSON, schema mismatch) the caller
receives a usable draft: the canned example for the type replaces unusable output.
"""

import logging
from typing import Any

from pydantic import ValidationError

from app.core.llm import ParseError, parse_json_object
from app.core.logging import get_logger, log_with_context
from app.core.offline_content import demo_minute_analysis
from app.core.orchestrator import AggregatedGenerationError, Orchestrator
from app.core.schemas_generation import GenerationTask, TaskKind
from app.core.schemas_use_cases import (
    EntityFieldType,
    PartialFormRecord,
    UseCaseType,
    starts_with_infinitive,
    strip_file_extension,
)

logger = get_logger(__name__)

MINUTE_BASE_PROMPT = """Eres un analista de sistemas experto en casos de uso según estándares ING.
Analiza el texto de la minuta proporcionada y extrae la información relevante para completar automáticamente un formulario de caso de uso.

IMPORTANTE: Responde ÚNICAMENTE con un objeto JSON válido sin explicaciones adicionales.
"""

_FILE_NAME_RULE = """
REGLA CRÍTICA DE fileName:
- El fileName NUNCA debe incluir extensiones como .json, .docx, .xml, .txt
- Formato correcto: 2 letras + 3 números + descripción (ej: ST003GestionarTransferencias)
"""

_ENTITY_SHAPE = """
Para casos de uso tipo ENTIDAD, extrae y estructura la siguiente información:

INSTRUCCIONES CRÍTICAS DE EXTRACCIÓN:
1. clientName: nombre de la EMPRESA/BANCO/ORGANIZACIÓN cliente (NO el nombre del caso de uso)
2. projectName: nombre del PROYECTO o SISTEMA; inferirlo del contexto si no está explícito
3. useCaseCode: código alfanumérico (ej: PV003, BP005)
4. useCaseName: acción + entidad, DEBE empezar con verbo infinitivo
5. description: lo que dice la minuta, sin expandir
""" + _FILE_NAME_RULE + """
{
  "clientName": "Nombre de la empresa/banco cliente",
  "projectName": "Nombre del proyecto o sistema",
  "useCaseCode": "Código alfanumérico del caso de uso",
  "useCaseName": "Nombre del caso de uso con verbo infinitivo",
  "fileName": "Código + descripción sin extensión",
  "description": "Descripción del objetivo tal como viene en la minuta",
  "actorName": "Actor principal o 'Actor no identificado'",
  "searchFilters": ["usar SOLO filtros mencionados en la minuta"],
  "filtersDescription": "Descripción de los filtros de búsqueda",
  "resultColumns": ["usar SOLO columnas mencionadas en la minuta"],
  "columnsDescription": "Descripción de las columnas de resultado",
  "entityFields": [
    {"name": "campo", "type": "text", "mandatory": true, "length": 50,
     "description": "Propósito del campo", "validationRules": "Validaciones"}
  ],
  "fieldsDescription": "Descripción de los campos de la entidad",
  "wireframeDescriptions": ["usar SOLO pantallas mencionadas en la minuta"],
  "wireframesDescription": "Descripción de las pantallas necesarias",
  "alternativeFlows": ["usar SOLO flujos alternativos mencionados en la minuta"],
  "businessRules": "• Regla 1 • Regla 2",
  "specialRequirements": "• Requerimiento 1 • Requerimiento 2",
  "isAIGenerated": true
}

REGLAS ESPECÍFICAS:
- Tipos válidos de campo: "text", "number", "decimal", "date", "datetime", "boolean", "email"
- Incluir SIEMPRE los campos de auditoría fechaAlta, usuarioAlta, fechaModificacion, usuarioModificacion
- Extraer información específica del texto, NUNCA inventar datos genéricos
"""

_API_SHAPE = """
Para casos de uso tipo API/WEB SERVICE, extrae y estructura la siguiente información.
Si algún dato no está en la minuta, devuelve null o un array vacío.
""" + _FILE_NAME_RULE + """
{
  "clientName": "Nombre del cliente/organización",
  "projectName": "Nombre del proyecto o sistema",
  "useCaseCode": "Código del caso de uso",
  "useCaseName": "Nombre del servicio empezando con verbo infinitivo",
  "fileName": "Código + descripción sin extensión",
  "description": "Propósito del API",
  "actorName": "Actor principal o 'Actor no identificado'",
  "apiEndpoint": "URL del endpoint",
  "httpMethod": "GET, POST, PUT o DELETE",
  "requestFormat": "Formato de request con ejemplos",
  "responseFormat": "Formato de response con ejemplos",
  "alternativeFlows": ["Error de autenticación", "Timeout", "Datos no encontrados"],
  "businessRules": "• Regla extraída de la minuta",
  "specialRequirements": "• Requerimiento extraído de la minuta",
  "isAIGenerated": true
}
"""

_SERVICE_SHAPE = """
Para casos de uso tipo SERVICIO/PROCESO, extrae y estructura la siguiente información.
Busca frecuencia y horarios de ejecución, rutas configurables y credenciales de servicios externos.
""" + _FILE_NAME_RULE + """
{
  "clientName": "Nombre del cliente/organización",
  "projectName": "Nombre del proyecto o sistema",
  "useCaseCode": "Código del caso de uso",
  "useCaseName": "Nombre del proceso empezando con verbo infinitivo",
  "fileName": "Código + descripción sin extensión",
  "description": "Descripción del proceso automático y sus etapas",
  "serviceFrequency": "Diariamente, Cada hora, Semanalmente... separadas por comas",
  "executionTime": "02:00 AM, 14:30... separadas por comas",
  "configurationPaths": "Rutas configurables o cadena vacía",
  "webServiceCredentials": "Credenciales configurables o cadena vacía",
  "alternativeFlows": ["No se encuentran archivos", "Falla conexión con servicio externo"],
  "businessRules": "• Regla de validación • Horarios permitidos",
  "specialRequirements": "• Monitoreo • Notificaciones por email",
  "generateTestCase": true,
  "testCaseObjective": "Objetivo de la prueba",
  "testCasePreconditions": "Precondiciones de la prueba",
  "isAIGenerated": true
}
"""

_TYPE_SHAPES = {
    UseCaseType.ENTITY: _ENTITY_SHAPE,
    UseCaseType.API: _API_SHAPE,
    UseCaseType.SERVICE: _SERVICE_SHAPE,
}

_SERVICE_FIELDS = ("serviceFrequency", "executionTime", "configurationPaths", "webServiceCredentials")
_VALID_FIELD_TYPES = {t.value for t in EntityFieldType}


def build_minute_prompt(use_case_type: UseCaseType) -> str:
    return MINUTE_BASE_PROMPT + _TYPE_SHAPES[use_case_type]


def infer_project_name(use_case_name: str) -> str:
    lowered = (use_case_name or "").lower()
    if "proveedor" in lowered:
        return "Sistema de Gestión de Proveedores"
    if "cliente" in lowered:
        return "Sistema de Gestión de Clientes"
    return "Sistema de Gestión"


def repair_minute_record(record: dict[str, Any], use_case_type: UseCaseType) -> dict[str, Any]:
    """
    Fix the usual extraction mistakes in place and return the record.

    - fileName loses any document extension
    - a use case name that landed in clientName is swapped back
    - a description starting with "mostrar" becomes the name when the name is not a verb
    - an empty projectName is inferred from the use case name
    - service fields are never missing for service use cases
    """
    if record.get("fileName"):
        record["fileName"] = strip_file_extension(str(record["fileName"]))

    client = str(record.get("clientName") or "")
    name = str(record.get("useCaseName") or "")
    if starts_with_infinitive(client) and not starts_with_infinitive(name):
        logger.info("Swapping clientName and useCaseName in minute analysis")
        record["clientName"], record["useCaseName"] = name, client
        name = client

    description = str(record.get("description") or "")
    if description.lower().startswith("mostrar") and not starts_with_infinitive(name):
        record["useCaseName"] = description
        name = description

    if not str(record.get("projectName") or "").strip():
        record["projectName"] = infer_project_name(name)

    if use_case_type == UseCaseType.SERVICE:
        for key in _SERVICE_FIELDS:
            record[key] = record.get(key) or ""

    fields = record.get("entityFields")
    if isinstance(fields, list):
        record["entityFields"] = [_normalize_entity_field(f) for f in fields if isinstance(f, dict)]

    record["useCaseType"] = use_case_type.value
    record["isAIGenerated"] = True
    return record


def _normalize_entity_field(entry: dict[str, Any]) -> dict[str, Any]:
    entry = dict(entry)
    if str(entry.get("type") or "").lower() not in _VALID_FIELD_TYPES:
        entry["type"] = EntityFieldType.TEXT.value
    return entry


def _canned(use_case_type: UseCaseType) -> PartialFormRecord:
    return PartialFormRecord.model_validate(demo_minute_analysis(use_case_type))


async def analyze_minute(
    text: str,
    use_case_type: UseCaseType | str,
    provider_id: str,
    orchestrator: Orchestrator,
) -> PartialFormRecord:
    """
    Turn minute text into a draft form.

    Args:
        text: Minute text (already extracted from the uploaded file)
        use_case_type: Selects the JSON shape requested from the provider
        provider_id: Selected provider
        orchestrator: Orchestrator holding the provider registry

    Returns:
        PartialFormRecord; the canned example when the output was unusable
    """
    use_case_type = UseCaseType(use_case_type)
    if Orchestrator.is_offline(provider_id):
        return _canned(use_case_type)

    task = GenerationTask(
        provider_id=provider_id,
        kind=TaskKind.EXTRACTION,
        payload=text,
        system_prompt=build_minute_prompt(use_case_type),
    )
    try:
        result = await orchestrator.generate(task)
        record = repair_minute_record(parse_json_object(result.content), use_case_type)
        draft = PartialFormRecord.model_validate(record)
    except (AggregatedGenerationError, ParseError, ValidationError) as e:
        logger.warning(f"Minute analysis unusable, returning canned draft: {e}")
        return _canned(use_case_type)

    log_with_context(
        logger,
        logging.INFO,
        "Minute analyzed",
        provider=result.provider,
        use_case_type=use_case_type.value,
    )
    return draft
