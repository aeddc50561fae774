"""Deterministic content for the offline ("demo") provider and for degraded paths.

Nothing in this module talks to a provider. Chains use it when the offline id is
selected, and as the fallback when provider output is unusable.
"""

import html
import json
import re
from typing import Any

from app.core.schemas_use_cases import UseCaseForm, UseCaseType

_H2 = '<h2 style="color: rgb(0, 112, 192);">{}</h2>'


# =============================================================================
# Use case document
# =============================================================================


def _li(text: str, children: list[str] | None = None) -> str:
    if not children:
        return f"<li>{html.escape(text)}</li>"
    nested = "".join(f"<li>{html.escape(child)}</li>" for child in children)
    return f'<li>{html.escape(text)}<ol style="list-style-type: lower-alpha;">{nested}</ol></li>'


def _main_flow_items(form: UseCaseForm) -> list[str]:
    if form.use_case_type == UseCaseType.API:
        return [
            _li(
                "Recepción de la solicitud",
                [
                    f"Endpoint: {form.api_endpoint or '/api/endpoint'}",
                    f"Método HTTP: {form.http_method or 'POST'}",
                ],
            ),
            _li("Procesamiento de la solicitud", ["Se aplican las reglas de negocio definidas"]),
            _li("Respuesta", ["Se retorna el resultado en formato JSON"]),
        ]
    if form.use_case_type == UseCaseType.SERVICE:
        return [
            _li(
                "Programación de ejecución",
                [
                    f"Frecuencia: {form.service_frequency or 'Diaria'}",
                    f"Hora de ejecución: {form.execution_time or 'A definir'}",
                ],
            ),
            _li("Proceso de ejecución", ["Validación de configuraciones", "Ejecución del proceso"]),
            _li("Finalización", ["Registro de resultados en logs"]),
        ]
    fields = ", ".join(
        f"{f.name} ({f.type.value}{', obligatorio' if f.mandatory else ''})"
        for f in form.entity_fields
    )
    return [
        _li(
            "Buscar datos de la entidad",
            [
                "Filtros de búsqueda disponibles: "
                + (", ".join(form.search_filters) or "ID, Nombre, Estado"),
                "Columnas del resultado de búsqueda: "
                + (", ".join(form.result_columns) or "ID, Nombre, Fecha Creación, Estado"),
            ],
        ),
        _li(
            "Agregar una nueva entidad",
            [
                "Campos de la entidad: "
                + (fields or "Nombre (texto, obligatorio), Descripción (texto)"),
                "Al agregar se registra automáticamente la fecha y usuario de alta",
            ],
        ),
    ]


def _alternative_flow_items(form: UseCaseForm) -> list[str]:
    if form.use_case_type == UseCaseType.API:
        return [
            _li(f"Error {code}", ["Se retorna un mensaje descriptivo del error"])
            for code in (form.error_codes or ["400", "401", "500"])
        ]
    if form.use_case_type == UseCaseType.SERVICE:
        return [
            _li("Error de configuración", ["Se registra el error y se notifica al operador"]),
            _li("Error de conectividad", ["Se reintenta en la próxima ejecución programada"]),
        ]
    return [
        _li(
            "Modificar o actualizar una entidad",
            [
                "Se debe mostrar el identificador único",
                "Se muestra la fecha y usuario de alta",
                "Al modificar se registra la fecha y usuario de modificación",
            ],
        ),
        _li(
            "Eliminar una entidad",
            ["Se debe verificar que no tenga relaciones con otras entidades"],
        ),
    ]


def _bullets(text: str, defaults: list[str]) -> str:
    items = [line.strip() for line in text.splitlines() if line.strip()] or defaults
    return "<ul>" + "".join(f"<li>{html.escape(item)}</li>" for item in items) + "</ul>"


def demo_document(form: UseCaseForm) -> str:
    """Canned HTML use case built only from the form."""
    identity = [
        ("Nombre del Cliente", form.client_name or "Cliente Demo"),
        ("Nombre del Proyecto", form.project_name or "Proyecto Demo"),
        ("Código del Caso de Uso", form.use_case_code or "UC001"),
        ("Nombre del Caso de Uso", form.use_case_name or "Gestionar Entidad Demo"),
        ("Nombre del Archivo", form.file_name or "AB123Demo"),
    ]
    parts = [
        '<div style="font-family: \'Segoe UI Semilight\', sans-serif;">',
        f'<h1 style="color: rgb(0, 112, 192);">'
        f"{html.escape((form.use_case_name or 'CASO DE USO DEMO').upper())}</h1>",
        *(f"<p><strong>{label}:</strong> {html.escape(value)}</p>" for label, value in identity),
        _H2.format("DESCRIPCIÓN"),
        "<p>"
        + html.escape(
            form.description
            or "Este es un caso de uso generado en modo demo para probar la funcionalidad del sistema."
        )
        + "</p>",
        _H2.format("FLUJO PRINCIPAL DE EVENTOS"),
        "<ol>" + "".join(_main_flow_items(form)) + "</ol>",
        _H2.format("FLUJOS ALTERNATIVOS"),
        "<ol>" + "".join(_alternative_flow_items(form)) + "</ol>",
        _H2.format("REGLAS DE NEGOCIO"),
        _bullets(
            form.business_rules,
            [
                "Los datos obligatorios deben ser validados antes de guardar",
                "Se debe mantener un log de auditoría de todas las operaciones",
            ],
        ),
        _H2.format("REQUERIMIENTOS ESPECIALES"),
        _bullets(
            form.special_requirements,
            [
                "El sistema debe responder en menos de 3 segundos",
                "Se debe implementar paginación para resultados mayores a 50 registros",
            ],
        ),
        _H2.format("PRECONDICIONES"),
        _bullets(
            form.preconditions,
            [
                "El usuario debe estar autenticado en el sistema",
                "El usuario debe tener permisos para gestionar la entidad",
            ],
        ),
        _H2.format("POSTCONDICIONES"),
        _bullets(
            form.postconditions,
            [
                "Los cambios se reflejan inmediatamente en la base de datos",
                "Se genera una entrada en el log de auditoría",
            ],
        ),
        "</div>",
    ]
    return "\n".join(parts)


def demo_edit(content: str, instructions: str) -> str:
    """Offline edit: the content is kept and a note records the requested change."""
    note = (
        '<div style="background-color: #e6ffe6; border-left: 4px solid #28a745;">'
        f'<strong>Modo Demo:</strong> Se aplicarían los cambios: "{html.escape(instructions)}"</div>'
    )
    return f"{content}\n\n{note}"


# =============================================================================
# Field improvement
# =============================================================================

EXAMPLE_DESCRIPTION = (
    "Este caso de uso permite al operador del área de atención gestionar los datos de "
    "clientes del segmento Premium. Incluye funcionalidades de búsqueda, alta, "
    "modificación y eliminación de clientes, validando condiciones específicas según "
    "políticas del banco."
)

EXAMPLE_PRECONDITIONS = """• Usuarios de prueba:
  - Usuario QA_OPERADOR con perfil de operador autorizado
  - Usuario QA_SUPERVISOR con perfil de supervisor para validaciones
  - Usuario QA_ADMIN con permisos administrativos

• Datos de prueba:
  - Base de datos con datos de prueba precargados
  - Cliente de prueba con DNI 25123456 en estado activo
  - Registros históricos para validar consultas y reportes

• Infraestructura:
  - Sistema desplegado en ambiente de pruebas
  - Servicios externos configurados (validación DNI, servicios bancarios)
  - Conexión estable a base de datos y servicios"""

CASE_NAME_VERBS = ("gestionar", "crear", "consultar", "administrar", "configurar", "procesar")
_PLACEHOLDERS = ("completar", "algo relevante", "rellenar", "escribir aqui", "ejemplo")
_USE_CASE_CODE_RE = re.compile(r"^[A-Z]{2}\d{3}$")


def _capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def _example_for_empty(name: str, field_type: str) -> str:
    if "nombre" in name and "cliente" in name:
        return "Banco Provincia"
    if "proyecto" in name:
        return "Gestión Integral de Clientes"
    if "codigo" in name:
        return "CL005"
    if "nombre" in name and "caso" in name:
        return "Gestionar Clientes Premium"
    if "archivo" in name:
        return "BP005GestionarClientesPremium"
    if "descripcion" in name:
        return EXAMPLE_DESCRIPTION
    if field_type == "searchFilter":
        return "Número de cliente"
    if field_type == "resultColumn":
        return "ID Cliente"
    if field_type == "entityField":
        return "numeroCliente"
    if field_type == "apiEndpoint":
        return "https://api.banco.com/v1/clientes"
    if "request" in name:
        return '{\n  "numeroCliente": "string",\n  "nombre": "string",\n  "email": "string"\n}'
    if "response" in name:
        return (
            '{\n  "success": "boolean",\n  "data": {\n    "id": "number",\n'
            '    "cliente": "object"\n  },\n  "status": 200\n}'
        )
    if field_type == "filtersFromText":
        return smart_filters("")
    if field_type == "columnsFromText":
        return smart_columns("")
    if field_type == "fieldsFromText":
        return json.dumps(DEFAULT_ENTITY_FIELDS, ensure_ascii=False, indent=2)
    if field_type == "testCasePreconditions":
        return EXAMPLE_PRECONDITIONS
    return "Ejemplo generado automáticamente según reglas ING"


def _phrases_after(text: str, markers: tuple[str, ...]) -> list[str]:
    """Title-cased items listed after the first marker found ("filtrar por a, b y c")."""
    for marker in markers:
        if marker not in text:
            continue
        tail = text.split(marker, 1)[1]
        items = []
        for chunk in re.split(r",|\sy\s", tail):
            chunk = re.sub(r"^(el|la|los|las|de|del|para|con)\s+", "", chunk.strip())
            if chunk:
                items.append(" ".join(_capitalize_first(word) for word in chunk.split()))
        return items
    return []


def format_test_preconditions(value: str) -> str:
    """Shape free-text test preconditions as bullet sections with dashed items."""
    lines = [line.strip() for line in value.splitlines() if line.strip()]
    lowered = [line.lower() for line in lines]
    has_users = any("usuario" in line for line in lowered)
    has_data = any("dato" in line for line in lowered)
    has_infra = any("infraestructura" in line or "sistema" in line for line in lowered)

    if not (has_users or has_data or has_infra):
        return (
            "• Usuarios de prueba:\n  - Usuario con permisos necesarios para ejecutar las pruebas\n\n"
            "• Datos de prueba:\n  - Datos necesarios precargados en el sistema\n\n"
            "• Infraestructura:\n  - Sistema disponible y accesible"
        )

    formatted = []
    for line in lines:
        lower = line.lower()
        is_section = line.endswith(":") and (
            "usuario" in lower or "dato" in lower or "infraestructura" in lower or "sistema" in lower
        )
        if is_section:
            formatted.append(f"• {line.lstrip('• ').strip()}")
        elif line.startswith(("-", "•")):
            formatted.append("  - " + re.sub(r"^[-•]\s*", "", line))
        else:
            formatted.append(f"  - {line}")
    return "\n".join(formatted)


def demo_field_improvement(field_name: str, field_value: str | None, field_type: str | None) -> str:
    """
    Improve a field without a provider.

    Empty values get a canned example for the field; non-empty values get light
    deterministic fixes (verb prefix, code normalization, file-name compaction...).
    """
    name = (field_name or "").lower()
    field_type = field_type or ""
    value = field_value or ""

    if not value.strip():
        return _example_for_empty(name, field_type)

    if "nombre" in name and "caso" in name:
        if not value.lower().startswith(CASE_NAME_VERBS):
            return f"Gestionar {value}"
        return _capitalize_first(value)
    if "codigo" in name and not _USE_CASE_CODE_RE.match(value):
        return "CL005"
    if "archivo" in name:
        return re.sub(r"[^a-zA-Z0-9]", "", value)
    if field_type == "filtersFromText":
        filters = _phrases_after(value.lower(), ("filtrar por",))
        return "\n".join(filters) if filters else "Nombre\nFecha de registro\nEstado\nTipo"
    if field_type == "testCasePreconditions":
        return format_test_preconditions(value)
    if field_type == "columnsFromText":
        columns = _phrases_after(
            value.lower(), ("mostrar", "columnas de", "tener columnas de", "incluir", "campos de")
        )
        return "\n".join(columns) if columns else "ID\nNombre\nEmail\nEstado\nFecha Registro"
    if field_type == "fieldsFromText":
        return json.dumps(enhanced_entity_fields(value), ensure_ascii=False, indent=2)
    if "descripcion" in name or name == "description":
        if any(p in value.lower() for p in _PLACEHOLDERS) or len(value) < 20:
            return EXAMPLE_DESCRIPTION
        improved = _capitalize_first(value)
        return improved if improved.endswith(".") else improved + "."
    if "cliente" in name or "proyecto" in name:
        if "ejemplo" in value.lower() or "test" in value.lower():
            return "Banco Provincia" if "cliente" in name else "Gestión Integral de Clientes"
        return _capitalize_first(value)
    return _capitalize_first(value)


# =============================================================================
# List and entity field extraction
# =============================================================================

_FILTER_KEYWORDS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("cliente", "usuario"), ("Número de cliente", "Nombre completo", "Email", "Estado del cliente")),
    (("cuenta", "banking"), ("Número de cuenta", "Tipo de cuenta", "Estado de cuenta")),
    (("producto", "servicio"), ("Código de producto", "Nombre del producto", "Categoría")),
    (("fecha", "periodo", "tiempo"), ("Fecha desde", "Fecha hasta")),
    (("estado", "status"), ("Estado", "Estado operativo")),
    (("transaccion", "movimiento"), ("Tipo de transacción", "Monto desde", "Monto hasta")),
)


def smart_filters(description: str) -> str:
    """Keyword-driven filter suggestions, one per line (at most 6)."""
    keywords = (description or "").lower()
    filters: list[str] = []
    for triggers, suggestions in _FILTER_KEYWORDS:
        if any(trigger in keywords for trigger in triggers):
            filters.extend(suggestions)
    if not filters:
        filters = ["Código", "Nombre", "Estado", "Fecha de creación desde", "Fecha de creación hasta"]
    return "\n".join(filters[:6])


def smart_columns(description: str) -> str:
    """Keyword-driven result columns, one per line (at most 8)."""
    keywords = (description or "").lower()
    columns = ["ID"]
    if "cliente" in keywords or "usuario" in keywords:
        columns += ["Nombre Completo", "Email", "Teléfono", "Estado", "Fecha de Registro"]
    elif "cuenta" in keywords:
        columns += ["Número de Cuenta", "Tipo", "Saldo", "Estado", "Fecha de Apertura"]
    elif "producto" in keywords:
        columns += ["Código", "Nombre del Producto", "Categoría", "Estado", "Precio"]
    elif "transaccion" in keywords or "movimiento" in keywords:
        columns += ["Fecha", "Tipo", "Monto", "Cuenta Origen", "Cuenta Destino", "Estado"]
    else:
        columns += ["Nombre", "Descripción", "Estado", "Fecha de Creación", "Último Modificado"]
    return "\n".join(columns[:8])


AUDIT_FIELDS: list[dict[str, Any]] = [
    {
        "name": "fechaAlta",
        "type": "date",
        "mandatory": True,
        "description": "Fecha de creación del registro",
        "validationRules": "Formato ISO 8601",
    },
    {
        "name": "usuarioAlta",
        "type": "text",
        "mandatory": True,
        "length": 50,
        "description": "Usuario que creó el registro",
        "validationRules": "Debe existir en el sistema de usuarios",
    },
    {
        "name": "fechaModificacion",
        "type": "date",
        "mandatory": False,
        "description": "Fecha de última modificación",
        "validationRules": "Fecha posterior a fechaAlta",
    },
    {
        "name": "usuarioModificacion",
        "type": "text",
        "mandatory": False,
        "length": 50,
        "description": "Usuario que modificó el registro",
        "validationRules": "Debe existir en el sistema de usuarios",
    },
]

DEFAULT_ENTITY_FIELDS: list[dict[str, Any]] = [
    {
        "name": "numeroCliente",
        "type": "text",
        "mandatory": True,
        "length": 20,
        "description": "Número único del cliente",
        "validationRules": "Formato alfanumérico",
    },
    {
        "name": "nombreCompleto",
        "type": "text",
        "mandatory": True,
        "length": 100,
        "description": "Nombre completo del cliente",
        "validationRules": "Solo letras y espacios",
    },
    {
        "name": "email",
        "type": "email",
        "mandatory": True,
        "description": "Correo electrónico",
        "validationRules": "Formato email válido",
    },
    {
        "name": "telefono",
        "type": "text",
        "mandatory": False,
        "length": 15,
        "description": "Número de teléfono",
        "validationRules": "Solo números y símbolos telefónicos",
    },
    *AUDIT_FIELDS,
]

# (patterns, field name, type); first listed pattern family wins per field name
_FIELD_PATTERNS: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("nombre completo", "nombre"), "nombreCompleto", "text"),
    (("apellido",), "apellido", "text"),
    (("email", "correo electronico", "correo"), "email", "email"),
    (("telefono", "teléfono", "celular"), "telefono", "text"),
    (("fecha de nacimiento", "nacimiento"), "fechaNacimiento", "date"),
    (("numero de cliente", "numero cliente"), "numeroCliente", "text"),
    (("dni", "documento"), "dni", "text"),
    (("cuit", "cuil"), "cuit", "text"),
    (("estado", "estatus"), "estado", "boolean"),
    (("activo",), "activo", "boolean"),
    (("direccion", "dirección"), "direccion", "text"),
    (("ciudad",), "ciudad", "text"),
    (("provincia",), "provincia", "text"),
    (("codigo postal",), "codigoPostal", "text"),
    (("edad",), "edad", "number"),
    (("sueldo", "salario", "monto", "importe"), "monto", "decimal"),
)


def enhanced_entity_fields(description: str) -> list[dict[str, Any]]:
    """Entity fields recognized in a free-text description, plus the audit fields."""
    text = (description or "").lower()
    if not text.strip():
        return [dict(field) for field in DEFAULT_ENTITY_FIELDS]

    fields: list[dict[str, Any]] = []
    for patterns, name, field_type in _FIELD_PATTERNS:
        for pattern in patterns:
            if pattern not in text:
                continue
            field: dict[str, Any] = {"name": name, "type": field_type, "mandatory": True}
            length = re.search(
                rf"{re.escape(pattern)}[^,]*?m[aá]ximo\s+(\d+)\s+caracteres", text
            )
            if length:
                field["length"] = int(length.group(1))
            if re.search(rf"{re.escape(pattern)}[^,]*?opcional", text):
                field["mandatory"] = False
            fields.append(field)
            break

    if not fields:
        return [
            {"name": "nombre", "type": "text", "mandatory": True},
            {"name": "email", "type": "email", "mandatory": True},
            {"name": "telefono", "type": "text", "mandatory": False},
        ]
    return fields + [dict(field) for field in AUDIT_FIELDS]


# =============================================================================
# Minute analysis
# =============================================================================

_MINUTE_BASE: dict[str, Any] = {
    "clientName": "Banco Provincia",
    "projectName": "Sistema de Gestión Integral",
    "useCaseCode": "BP001",
    "useCaseName": "Gestionar información del cliente",
    "fileName": "BP001GestionarInformacionCliente",
    "description": (
        "Permite gestionar la información completa de los clientes del banco incluyendo "
        "consulta, actualización y seguimiento de la relación comercial."
    ),
}

_MINUTE_BY_TYPE: dict[UseCaseType, dict[str, Any]] = {
    UseCaseType.ENTITY: {
        "searchFilters": ["DNI/CUIT", "Apellido", "Email", "Número de Cliente"],
        "filtersDescription": "Filtros de búsqueda para localizar clientes por diferentes criterios",
        "resultColumns": ["ID Cliente", "Apellido y Nombres", "Documento", "Email", "Estado"],
        "columnsDescription": "Columnas principales para mostrar en la grilla de resultados",
        "entityFields": [
            {"name": "clienteId", "type": "number", "mandatory": True, "length": 10,
             "description": "Identificador único del cliente",
             "validationRules": "Número entero positivo"},
            {"name": "tipoDocumento", "type": "text", "mandatory": True, "length": 10,
             "description": "Tipo de documento de identidad",
             "validationRules": "DNI, CUIT, CUIL"},
            {"name": "numeroDocumento", "type": "text", "mandatory": True, "length": 20,
             "description": "Número del documento de identidad",
             "validationRules": "Solo números, sin puntos ni guiones"},
            {"name": "apellido", "type": "text", "mandatory": True, "length": 100,
             "description": "Apellido del cliente", "validationRules": "Solo letras y espacios"},
            {"name": "nombres", "type": "text", "mandatory": True, "length": 100,
             "description": "Nombres del cliente", "validationRules": "Solo letras y espacios"},
            {"name": "email", "type": "text", "mandatory": False, "length": 150,
             "description": "Correo electrónico del cliente",
             "validationRules": "Formato email válido"},
            {"name": "fechaAlta", "type": "date", "mandatory": True,
             "description": "Fecha de creación del registro", "validationRules": "Formato ISO 8601"},
            {"name": "usuarioAlta", "type": "text", "mandatory": True, "length": 50,
             "description": "Usuario que creó el registro",
             "validationRules": "Debe existir en el sistema"},
        ],
        "fieldsDescription": (
            "Campos principales de la entidad cliente con información personal y de auditoría"
        ),
        "wireframeDescriptions": [
            "Pantalla de búsqueda con filtros",
            "Grilla de resultados paginada",
            "Detalle del cliente",
        ],
        "wireframesDescription": "Pantallas necesarias para la gestión completa de clientes",
        "businessRules": (
            "1. Solo usuarios autorizados pueden acceder\n"
            "2. Validar documento con organismos oficiales"
        ),
        "specialRequirements": (
            "1. Auditoría completa de cambios\n2. Integración con servicios externos"
        ),
    },
    UseCaseType.API: {
        "useCaseName": "Consultar saldo de cuenta",
        "fileName": "BP001ConsultarSaldoCuenta",
        "apiEndpoint": "/api/v1/consulta-saldo",
        "httpMethod": "POST",
        "requestFormat": (
            '{\n  "numeroCliente": "12345678",\n  "numeroCuenta": "001-234567-8",\n'
            '  "tipoConsulta": "SALDO_ACTUAL"\n}'
        ),
        "responseFormat": (
            '{\n  "success": true,\n  "data": {\n    "saldo": 15000.50,\n    "moneda": "ARS",\n'
            '    "fechaConsulta": "2025-01-27T10:30:00Z"\n  }\n}'
        ),
        "businessRules": "1. Autenticación obligatoria\n2. Rate limiting por cliente",
        "specialRequirements": "1. Encriptación SSL\n2. Logs de auditoría",
    },
    UseCaseType.SERVICE: {
        "useCaseName": "Procesar cierre diario",
        "fileName": "BP001ProcesarCierreDiario",
        "serviceFrequency": "Diariamente, Fin de mes",
        "executionTime": "23:00, 00:30",
        "configurationPaths": "/batch/input/, /batch/output/, /batch/logs/",
        "webServiceCredentials": (
            "Usuario: srv_batch, URL: https://api.banco.com/v1/cierre, Método: OAuth 2.0"
        ),
        "businessRules": (
            "1. Ejecutar solo en días hábiles\n2. Generar backup antes del proceso\n"
            "3. Validar integridad de datos antes de procesar"
        ),
        "specialRequirements": (
            "1. Logging detallado\n2. Alertas por email\n3. Mecanismo de rollback\n"
            "4. Integración con sistema de monitoreo"
        ),
    },
}


def demo_minute_analysis(use_case_type: UseCaseType | str) -> dict[str, Any]:
    """Canned extraction result for the type (camelCase keys, like provider output)."""
    use_case_type = UseCaseType(use_case_type)
    record = json.loads(json.dumps({**_MINUTE_BASE, **_MINUTE_BY_TYPE[use_case_type]}))
    record["useCaseType"] = use_case_type.value
    record["isAIGenerated"] = True
    return record


# =============================================================================
# Test cases
# =============================================================================


def default_test_preconditions(form: UseCaseForm) -> str:
    """Hierarchical preconditions used when the provider gives none usable."""
    project = form.project_name or "Sistema"
    lines = [
        "1. Usuarios de prueba",
        "   a. Usuario con perfil autorizado con permisos completos para ejecutar las operaciones del caso de uso",
        "   b. Usuario sin permisos válido pero sin acceso a esta funcionalidad específica",
        "2. Datos de prueba",
        "   a. Datos válidos de prueba que cumplen con todas las validaciones y reglas de negocio",
        "   b. Datos inválidos diseñados para probar validaciones y manejo de errores",
        "3. Infraestructura y configuración",
        f"   a. Sistema {project} desplegado en ambiente de pruebas (UAT)",
        "   b. Base de datos con datos de prueba precargados",
        "   c. Servicios externos simulados o disponibles según requerimientos",
    ]
    if form.use_case_type == UseCaseType.API:
        lines.append(
            f"   d. Endpoint API configurado y accesible: {form.api_endpoint or '/api/endpoint'}"
        )
    elif form.use_case_type == UseCaseType.SERVICE:
        lines.append(
            "   d. Servicio programado configurado con frecuencia: "
            f"{form.service_frequency or 'Diaria'}"
        )
    return "\n".join(lines)


def _step(action: str, input_data: str, expected: str, observations: str) -> dict[str, str]:
    return {
        "action": action,
        "inputData": input_data,
        "expectedResult": expected,
        "observations": observations,
    }


def fallback_test_steps(form: UseCaseForm) -> list[dict[str, str]]:
    """Generic steps for a provider answer that carried no test steps."""
    steps = [
        _step(
            "Acceder al sistema con credenciales válidas",
            "Usuario y contraseña correctos",
            "Acceso exitoso al sistema",
            "Verificar logs de auditoría",
        ),
        _step(
            f"Navegar a la funcionalidad {form.use_case_name}",
            "Menú principal o acceso directo",
            "Pantalla de la funcionalidad desplegada correctamente",
            "Verificar tiempo de carga",
        ),
    ]
    if form.use_case_type == UseCaseType.ENTITY:
        steps += [
            _step(
                "Realizar búsqueda con filtros válidos",
                ", ".join(form.search_filters) or "Filtros de búsqueda",
                "Resultados mostrados correctamente",
                "Verificar paginación",
            ),
            _step(
                "Validar campos obligatorios",
                "Dejar campos obligatorios vacíos",
                "Mensaje de error correspondiente",
                "Verificar mensajes de validación",
            ),
            _step(
                "Crear nuevo registro",
                "Datos válidos en todos los campos",
                "Registro creado exitosamente",
                "Verificar auditoría",
            ),
        ]
    elif form.use_case_type == UseCaseType.API:
        steps += [
            _step(
                "Enviar petición con datos válidos",
                "JSON con estructura correcta",
                "Respuesta HTTP 200/201",
                "Verificar headers y body",
            ),
            _step(
                "Enviar petición con datos inválidos",
                "JSON con campos faltantes",
                "Respuesta HTTP 400 con mensaje de error",
                "Verificar estructura del error",
            ),
        ]
    else:
        steps += [
            _step(
                "Ejecutar servicio manualmente",
                "Parámetros de configuración",
                "Servicio ejecutado correctamente",
                "Verificar logs de ejecución",
            ),
            _step(
                "Verificar procesamiento de datos",
                "Volumen de datos de prueba",
                "Datos procesados correctamente",
                "Verificar integridad de datos",
            ),
        ]
    return steps


_DEMO_TEST_STEPS: dict[UseCaseType, list[dict[str, str]]] = {
    UseCaseType.ENTITY: [
        _step("Realizar búsqueda con filtros válidos", 'DNI: 12345678, Apellido: "González"',
              "Lista de resultados filtrados correctamente", "Verificar paginación y ordenamiento"),
        _step("Intentar búsqueda con filtros inválidos", 'DNI: "abc123", Email: formato_inválido',
              "Mensajes de validación específicos mostrados",
              "No permitir búsqueda con datos inválidos"),
        _step("Crear nuevo registro con datos completos",
              "Todos los campos obligatorios con datos válidos",
              "Registro creado exitosamente, ID asignado",
              "Verificar auditoría (fechaAlta, usuarioAlta)"),
        _step("Intentar crear registro con campos obligatorios vacíos",
              "Dejar campos requeridos sin completar", "Validaciones impiden el guardado",
              "Mensajes de error claros para cada campo"),
    ],
    UseCaseType.API: [
        _step("Realizar petición con datos válidos", "JSON con estructura y datos correctos",
              "Respuesta HTTP 200 con datos esperados",
              "Verificar estructura del JSON de respuesta"),
        _step("Enviar petición con JSON malformado", "JSON con sintaxis incorrecta",
              "Error HTTP 400 - Bad Request", "Mensaje de error descriptivo"),
        _step("Probar autenticación inválida", "Token expirado o inválido",
              "Error HTTP 401 - Unauthorized", "No revelar información sensible"),
        _step("Verificar rate limiting", "Múltiples peticiones rápidas consecutivas",
              "Error HTTP 429 después del límite", "Implementación correcta de throttling"),
    ],
    UseCaseType.SERVICE: [
        _step("Ejecutar servicio manualmente", "Trigger manual del proceso programado",
              "Ejecución exitosa con logs generados", "Verificar todas las etapas del proceso"),
        _step("Simular error durante ejecución", "Condición de error controlada",
              "Manejo de error y rollback automático", "Verificar mecanismos de recuperación"),
        _step("Verificar ejecución programada", "Configuración de schedule activa",
              "Servicio se ejecuta según programación", "Monitorear logs de ejecución automática"),
        _step("Probar con volumen de datos alto", "Dataset de gran tamaño",
              "Procesamiento exitoso sin timeouts", "Verificar rendimiento y uso de recursos"),
    ],
}

_DEMO_TEST_SUBJECT = {
    UseCaseType.ENTITY: ("la gestión de entidades",
                         "Cobertura completa: CRUD, validaciones, auditoría, filtros, paginación"),
    UseCaseType.API: ("la API", "Cobertura completa: endpoints, validaciones, autenticación, "
                                "rate limiting, manejo de errores"),
    UseCaseType.SERVICE: ("del servicio", "Cobertura completa: ejecución manual/automática, "
                                          "manejo de errores, rendimiento, logs"),
}


def demo_test_cases(form: UseCaseForm) -> dict[str, Any]:
    """Canned test plan for the form's type (camelCase keys)."""
    subject, notes = _DEMO_TEST_SUBJECT[form.use_case_type]
    connector = "" if subject.startswith("del ") else "de "
    base = [
        _step("Acceder al sistema con credenciales válidas",
              "Usuario: admin, Contraseña: validPassword123",
              "Login exitoso, redirección a página principal",
              "Verificar que el token de sesión se genere correctamente"),
        _step("Navegar a la funcionalidad del caso de uso",
              "Clic en módulo correspondiente del menú principal",
              "Pantalla del caso de uso se carga correctamente",
              "Verificar tiempos de carga < 3 segundos"),
    ]
    return {
        "objective": (
            f"Verificar el funcionamiento completo {connector}{subject}: {form.use_case_name}"
        ),
        "preconditions": default_test_preconditions(form),
        "testSteps": base + [dict(step) for step in _DEMO_TEST_STEPS[form.use_case_type]],
        "analysisNotes": notes,
    }
