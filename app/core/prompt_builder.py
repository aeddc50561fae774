"""Prompt construction for use case generation, editing and field assistance.

Everything here is a pure function of the form snapshot; nothing calls a provider.
"""

from datetime import date
from typing import Any

from app.core.field_rules import COMPLIANCE_LINE, render_field_rules
from app.core.schemas_use_cases import EntityFieldSpec, TestStep, UseCaseForm, UseCaseType

# Shared corporate rulebook, appended before the type-specific rules
USE_CASE_RULES = """
PARA CASOS DE USO DE TIPO "api": OBLIGATORIO INCLUIR ESTAS SECCIONES DESPUÉS DE "REQUERIMIENTOS ESPECIALES":
- FLUJO PRINCIPAL DE EVENTOS
- FLUJOS ALTERNATIVOS

REGLAS PARA CASOS DE USO CON IA - SEGUIR ESTRICTAMENTE:

ESTRUCTURA COMÚN PARA TODOS LOS TIPOS:
- Título: igual al nombre del caso de uso EN MAYÚSCULAS, color azul oscuro (red=0, green=112, blue=192)
- Nombre del Cliente
- Nombre del Proyecto
- Código del Caso de Uso
- Nombre del Caso de Uso
- Nombre del Archivo
- Descripción: explicación detallada del alcance y objetivo
- Flujo Principal de Eventos
- Flujos Alternativos
- Reglas de Negocio: detallar cada una
- Requerimientos Especiales: detallar cada uno
- Precondiciones
- Postcondiciones
- Historia de Revisiones y Aprobaciones (tabla final)

CASOS DE USO DE ENTIDAD:
Flujo Principal (lista numerada multinivel):
1. Buscar datos de la entidad
   a. Detallar los filtros de búsqueda de la entidad
   b. Detallar las columnas del resultado de búsqueda
2. Agregar una nueva entidad
   a. Detallar cada uno de los datos de la entidad
   b. Cuando se agrega se registra fecha y usuario de alta

Flujos Alternativos (lista numerada multinivel):
1. Modificar o actualizar una entidad
   a. Detallar cada uno de los datos de la entidad
   b. Mostrar el identificador
   c. Mostrar fecha y usuario de alta
   d. Al modificar se registra fecha y usuario de modificación
2. Eliminar una entidad
   a. Verificar que no tenga relaciones con otras entidades

CASOS DE USO DE API/WEB SERVICE - ESTRUCTURA OBLIGATORIA:
FLUJO PRINCIPAL DE EVENTOS (Heading 2, azul RGB(0,112,192))
   Identificación del servicio (endpoint, método HTTP, headers)
   Request (formato JSON con ejemplo completo)
   Response (formato JSON con ejemplo completo)
FLUJOS ALTERNATIVOS (Heading 2, azul RGB(0,112,192))
   Errores de validación (Código 400)
   Errores de autenticación (Código 401/403)
   Errores internos (Código 500)

CASOS DE USO DE SERVICIO/PROCESO AUTOMÁTICO:
Flujo Principal: incluir frecuencia y/o hora de ejecución
Flujos Alternativos: incluir respuestas de error
Si captura archivo: indicar que el path debe ser configurable
Si llama web service: indicar que usuario, clave y URL deben ser configurables

FORMATO Y ESTILO OBLIGATORIO:
- Font: Segoe UI Semilight para todo el documento
- Interlineado: simple
- Títulos: color azul oscuro (red=0, green=112, blue=192)
- Listas multinivel: 1º nivel números (1,2,3), 2º nivel letras (a,b,c) con sangría 0.2", 3º nivel romanos (i,ii,iii) con sangría 0.2"
- Nombre del caso de uso: debe comenzar con verbo en infinitivo

TABLA FINAL OBLIGATORIA - HISTORIA DE REVISIONES:
- Título: "HISTORIA DE REVISIONES Y APROBACIONES" (Heading 1, azul)
- Tabla: 2 filas, 4 columnas
- Columnas: Fecha, Acción, Responsable, Comentario
- Títulos en negrita y centrados, datos alineados a la izquierda
- Una fila de datos con fecha actual, "Creación", "Sistema", "Versión original"
"""

NOT_SPECIFIED = "No especificado"


def _today() -> str:
    today = date.today()
    return f"{today.day}/{today.month}/{today.year}"


def _describe_field_short(field: EntityFieldSpec) -> str:
    length = f", {field.length}" if field.length else ""
    mandatory = ", obligatorio" if field.mandatory else ", opcional"
    return f"{field.name} ({field.type.value}{length}{mandatory})"


def describe_entity_field(field: EntityFieldSpec) -> str:
    """Full one-line description of an entity field as it appears in prompts."""
    mandatory = ", obligatorio" if field.mandatory else ""
    length = field.length or "N/A"
    description = field.description or "sin descripción"
    validations = field.validation_rules or "ninguna"
    return (
        f"{field.name} ({field.type.value}{mandatory}, largo: {length}, "
        f"{description}, validaciones: {validations})"
    )


def _identity_block(form: UseCaseForm) -> list[str]:
    return [
        f"- Cliente: {form.client_name}",
        f"- Proyecto: {form.project_name}",
        f"- Código: {form.use_case_code}",
        f"- Nombre: {form.use_case_name}",
        f"- Archivo: {form.file_name}",
        f"- Descripción: {form.description}",
    ]


def _entity_rules(form: UseCaseForm) -> str:
    filters = ", ".join(form.search_filters) or NOT_SPECIFIED
    columns = ", ".join(form.result_columns) or NOT_SPECIFIED
    fields = ", ".join(_describe_field_short(f) for f in form.entity_fields) or NOT_SPECIFIED

    lines = [
        "INSTRUCCIONES CRÍTICAS PARA CASOS DE USO DE ENTIDAD - SIGUE EXACTAMENTE LA MINUTA ING:",
        "",
        "DATOS DEL FORMULARIO:",
        *_identity_block(form),
        f"- Filtros de búsqueda: {filters}",
        f"- Columnas de resultado: {columns}",
        f"- Campos de entidad: {fields}",
        f"- Reglas de negocio: {form.business_rules or NOT_SPECIFIED}",
        f"- Requerimientos especiales: {form.special_requirements or NOT_SPECIFIED}",
        f"- Generar wireframes: {'Sí' if form.generate_wireframes else 'No'}",
        "",
        "FLUJO PRINCIPAL DE EVENTOS (lista numerada con múltiples niveles - formato 1, a, i):",
        "   1. Buscar datos de la entidad",
        f"      a. Detallar los filtros de búsqueda: {filters}",
        f"      b. Detallar las columnas del resultado: {columns}",
        "   2. Agregar una nueva entidad",
        f"      a. Detallar cada uno de los datos de la entidad: {fields}",
        "      b. Cuando se agrega una entidad se debe registrar la fecha y el usuario de alta",
        "",
        "FLUJOS ALTERNATIVOS (lista numerada con múltiples niveles):",
        "   1. Modificar o actualizar una entidad",
        "   2. Eliminar una entidad",
        "",
        "PRECONDICIONES: Usuario autenticado con permisos correspondientes",
        "POSTCONDICIONES: Datos actualizados en base de datos con registro de auditoría",
    ]
    if form.generate_wireframes:
        lines += [
            "",
            "BOCETOS GRÁFICOS SIMPLIFICADOS DE INTERFAZ DE USUARIO:",
            "WIREFRAME 1: Buscador de Entidades (paginado, botones Buscar, Limpiar y Agregar; "
            "Editar y Eliminar en cada fila)",
            "WIREFRAME 2: Formulario para Agregar/Editar Entidad (botones Aceptar y Cancelar; "
            "fecha y usuario de alta y de modificación)",
        ]
    lines += [
        "",
        "HISTORIA DE REVISIONES Y APROBACIONES (OBLIGATORIA):",
        f"- Una fila de datos: fecha actual ({_today()}), \"Creación\", \"Sistema\", "
        "\"Versión original\"",
    ]
    return "\n".join(lines)


def _api_rules(form: UseCaseForm) -> str:
    lines = [
        "CRÍTICO: PARA API DEBES INCLUIR EXACTAMENTE ESTOS TÍTULOS H2",
        "FLUJO PRINCIPAL DE EVENTOS",
        "FLUJOS ALTERNATIVOS",
        "SI NO INCLUYES ESTAS DOS SECCIONES H2, EL DOCUMENTO SERÁ INVÁLIDO",
        "",
        "INSTRUCCIONES ESPECÍFICAS PARA CASOS DE USO DE API/WEB SERVICE:",
        "",
        "DATOS DEL FORMULARIO:",
        *_identity_block(form),
        f"- Endpoint: {form.api_endpoint or NOT_SPECIFIED}",
        f"- Método HTTP: {form.http_method or 'POST'}",
        f"- Formato Request: {form.request_format or NOT_SPECIFIED}",
        f"- Formato Response: {form.response_format or NOT_SPECIFIED}",
        f"- Códigos de error: {', '.join(form.error_codes) or NOT_SPECIFIED}",
        f"- Reglas de negocio: {form.business_rules or NOT_SPECIFIED}",
        f"- Requerimientos especiales: {form.special_requirements or NOT_SPECIFIED}",
        "",
        "ORDEN EXACTO DE SECCIONES DESPUÉS DE \"REQUERIMIENTOS ESPECIALES\":",
        "FLUJO PRINCIPAL DE EVENTOS, FLUJOS ALTERNATIVOS, PRECONDICIONES, POSTCONDICIONES",
        "",
        "INSTRUCCIONES CRÍTICAS PARA REQUEST Y RESPONSE:",
        "- SIEMPRE incluir ejemplos de JSON completos y realistas",
        "- Especificar tipos de datos (string, number, boolean, array, object)",
        "- Para códigos de error, incluir mensajes descriptivos en español",
    ]
    return "\n".join(lines)


def _service_rules(form: UseCaseForm) -> str:
    lines = [
        "INSTRUCCIONES ESPECÍFICAS PARA CASOS DE USO DE SERVICIO/PROCESO AUTOMÁTICO:",
        "",
        "DATOS DEL FORMULARIO:",
        *_identity_block(form),
        f"- Frecuencia: {form.service_frequency or NOT_SPECIFIED}",
        f"- Hora de ejecución: {form.execution_time or NOT_SPECIFIED}",
        f"- Rutas configurables: {form.configuration_paths or NOT_SPECIFIED}",
        f"- Credenciales de servicios: {form.web_service_credentials or NOT_SPECIFIED}",
        f"- Reglas de negocio: {form.business_rules or NOT_SPECIFIED}",
        f"- Requerimientos especiales: {form.special_requirements or NOT_SPECIFIED}",
        "",
        "FLUJO PRINCIPAL DE EVENTOS",
        "   1. Programación de ejecución",
        f"      a. Frecuencia: {form.service_frequency or 'Definir frecuencia apropiada'}",
        f"      b. Hora específica: {form.execution_time or 'Definir horario apropiado'}",
        "   2. Proceso de ejecución",
        "   3. Finalización y logging",
        "",
        "FLUJOS ALTERNATIVOS",
        "   1. Errores de configuración",
        "   2. Errores de conectividad",
    ]
    if form.configuration_paths:
        lines += [
            "",
            "CONFIGURACIONES REQUERIDAS",
            f"- Rutas de archivos: {form.configuration_paths}",
            "- Las rutas deben ser configurables vía archivo de configuración",
        ]
    if form.web_service_credentials:
        lines += [
            "",
            "CREDENCIALES DE SERVICIOS",
            f"- Configuración: {form.web_service_credentials}",
            "- Usuario, clave y URL deben ser configurables",
        ]
    return "\n".join(lines)


_SPECIFIC_RULES = {
    UseCaseType.ENTITY: _entity_rules,
    UseCaseType.API: _api_rules,
    UseCaseType.SERVICE: _service_rules,
}


def build_rules(form: UseCaseForm) -> str:
    """Shared rulebook followed by the rules for the form's use case type."""
    specific = _SPECIFIC_RULES[form.use_case_type](form)
    return f"{USE_CASE_RULES}\n\n{specific}"


_GROUP_LABELS = {
    "search_filters": "Filtros de búsqueda",
    "filters_description": "Descripción de filtros",
    "result_columns": "Columnas de resultado",
    "columns_description": "Descripción de columnas",
    "entity_fields": "Campos de entidad",
    "fields_description": "Descripción de campos",
    "api_endpoint": "Endpoint",
    "http_method": "Método HTTP",
    "request_format": "Formato Request",
    "response_format": "Formato Response",
    "error_codes": "Códigos de error",
    "service_frequency": "Frecuencia",
    "execution_time": "Hora de ejecución",
    "configuration_paths": "Rutas configurables",
    "web_service_credentials": "Credenciales de servicios",
}


def _group_value(form: UseCaseForm, attr: str) -> str:
    value = getattr(form, attr)
    if attr == "entity_fields":
        return "; ".join(describe_entity_field(f) for f in value)
    if isinstance(value, list):
        return ", ".join(value)
    return value or ""


def _describe_test_step(step: TestStep) -> str:
    parts = [f"{step.number}. {step.action}"]
    parts += [
        f"{label}: {value}"
        for label, value in (
            ("datos", step.input_data),
            ("resultado esperado", step.expected_result),
            ("observaciones", step.observations),
        )
        if value
    ]
    return " | ".join(parts)


def _form_data_block(form: UseCaseForm) -> list[str]:
    """Every non-empty field of the snapshot, verbatim."""
    lines = [
        f"- Tipo de caso de uso: {form.use_case_type.value}",
        f"- Cliente: {form.client_name}",
        f"- Proyecto: {form.project_name}",
        f"- Código: {form.use_case_code}",
        f"- Nombre: {form.use_case_name}",
        f"- Archivo: {form.file_name}",
        f"- Descripción: {form.description}",
    ]
    for attr in form.relevant_groups:
        value = _group_value(form, attr)
        if value:
            lines.append(f"- {_GROUP_LABELS[attr]}: {value}")

    lines += [
        f"- Reglas de negocio: {form.business_rules or 'Ninguna específica'}",
        f"- Requerimientos especiales: {form.special_requirements or 'Ninguno'}",
    ]
    if form.preconditions:
        lines.append(f"- Precondiciones: {form.preconditions}")
    if form.postconditions:
        lines.append(f"- Postcondiciones: {form.postconditions}")
    lines.append(f"- Generar wireframes: {'Sí' if form.generate_wireframes else 'No'}")

    wireframes = [w for w in form.wireframe_descriptions if w.strip()]
    if wireframes:
        lines.append(f"- Descripciones de wireframes: {'; '.join(wireframes)}")
    if form.wireframes_description:
        lines.append(f"- Descripción de wireframes: {form.wireframes_description}")

    if form.test_case_objective:
        lines.append(f"- Objetivo del caso de prueba: {form.test_case_objective}")
    if form.test_case_preconditions:
        lines.append(f"- Precondiciones de prueba: {form.test_case_preconditions}")
    if form.test_steps:
        lines.append("- Pasos de prueba:")
        lines += [f"  {_describe_test_step(step)}" for step in form.test_steps]
    return lines


def build_use_case_prompt(form: UseCaseForm, rules: str) -> str:
    """
    Build the document generation prompt.

    Args:
        form: Form snapshot (description already expanded when needed)
        rules: Output of build_rules() or a caller-provided rulebook

    Returns:
        Prompt text
    """
    form_data = "\n".join(_form_data_block(form))
    return f"""Eres un experto en documentación de casos de uso bancarios/empresariales. Tu tarea es generar un documento profesional estructurado que será convertido a DOCX.

IMPORTANTE: Este es un DOCUMENTO FORMAL DE CASO DE USO con secciones profesionales como: Metadatos, Descripción, Actores, Precondiciones, Flujo Básico, Flujos Alternativos, Postcondiciones, etc.

INSTRUCCIÓN CRÍTICA Y OBLIGATORIA PARA DESCRIPCIÓN
La sección de DESCRIPCIÓN debe contener EXACTAMENTE el texto de la descripción provista.
NO modifiques, resumas o cambies la descripción. USA LITERALMENTE el contenido tal como viene.

FORMATO ESTRUCTURADO REQUERIDO:
1. Organiza la información en secciones claras con títulos y subtítulos
2. Para flujos, usa numeración jerárquica profesional con indentación:
   1. Flujo Básico
     a. Menú principal
       i. Ingreso de filtros
       ii. Ejecución de búsqueda
   Indenta 0.2 pulgadas por nivel a la derecha.
3. Incluye una historia de revisiones con: Fecha actual, Acción (Creación), Responsable (Sistema), Comentario (Versión original)

{rules}

INSTRUCCIONES CRÍTICAS PARA PREVENIR ERRORES:
- NUNCA uses valores por defecto o genéricos como "Apellido", "DNI", "Segmento" - estos son SOLO ejemplos ilustrativos
- SIEMPRE usa EXACTAMENTE los datos provistos en el formulario
- Para filtros, columnas y campos de entidad: usa SOLO los valores exactos provistos
- Si no hay datos provistos, indica "No especificado" pero NO inventes valores
- Para el actor principal: Si no hay actor explícito, usar "Actor no identificado"

REGLA CRÍTICA DE NOMBRES DE ARCHIVO
- NUNCA agregues extensiones de archivo (.json, .docx, .xml, .txt, etc.) al nombre de archivo
- Ejemplo CORRECTO: "BP005GestionarClientes"
- Ejemplo INCORRECTO: "BP005GestionarClientes.json" o "BP005GestionarClientes.docx"

DATOS DEL FORMULARIO COMPLETOS:
{form_data}

INSTRUCCIONES FINALES:
- Genera un documento completo y profesional en HTML
- Mantén consistencia en la numeración y formato
- Incluye TODAS las secciones requeridas
- Incluye título en MAYÚSCULAS con color azul RGB(0,112,192) en la sección inicial
- Asegura indentación de 0.2 pulgadas en listas editadas (1-a-i para flujos)"""


def business_sector(client_name: str) -> str:
    return "bancario" if "Banco" in (client_name or "") else "empresarial"


def build_expansion_prompt(form: UseCaseForm) -> str:
    """Ask for exactly two professional paragraphs expanding the description."""
    return f"""Como experto en documentación bancaria/empresarial, expande la siguiente descripción de caso de uso a exactamente 2 párrafos profesionales:

Descripción original: "{form.description}"
Caso de uso: {form.use_case_name}
Cliente: {form.client_name}
Proyecto: {form.project_name}

INSTRUCCIONES OBLIGATORIAS:
1. Primer párrafo (75+ palabras): Explicar QUÉ hace el caso de uso, su propósito principal, qué procesos abarca y qué área del negocio atiende.
2. Segundo párrafo (75+ palabras): Detallar los BENEFICIOS clave para el negocio, valor agregado, mejoras operativas y problemas que resuelve.

IMPORTANTE: Genera SOLO los 2 párrafos de texto sin títulos, HTML o formato adicional. Usa contexto profesional relevante del sector {business_sector(form.client_name)}."""


def build_edit_prompt(content: str, instructions: str) -> str:
    return f"""Eres un experto en documentación de casos de uso. Tu tarea es modificar el documento existente aplicando los cambios solicitados mientras mantienes la estructura y formato profesional.

Modifica el siguiente documento de caso de uso aplicando estos cambios: "{instructions}"

Documento actual:
{content}

INSTRUCCIONES:
- Mantén la estructura y formato existente del documento
- Aplica SOLO los cambios solicitados
- Preserva toda la información no afectada por los cambios
- Asegura indentación 0.2 en listas editadas si se modifican flujos
- Mantén el estilo y formato corporativo ING"""


def build_context_block(context: dict[str, Any] | None) -> str:
    """Project context taken from the full form data, when the client sent it."""
    form_data = (context or {}).get("fullFormData")
    if not form_data:
        return "CONTEXTO: Información limitada disponible."

    labels = (
        ("clientName", "Cliente"),
        ("projectName", "Proyecto"),
        ("useCaseName", "Caso de Uso"),
        ("useCaseType", "Tipo"),
        ("description", "Descripción"),
    )
    lines = ["CONTEXTO DEL PROYECTO:"]
    lines += [f"- {label}: {form_data[key]}" for key, label in labels if form_data.get(key)]
    return "\n".join(lines)


def build_field_prompt(
    field_name: str,
    field_value: str | None,
    field_type: str | None = None,
    context: dict[str, Any] | None = None,
) -> str:
    """
    Build the prompt that improves a single form field.

    Args:
        field_name: Field label or key
        field_value: Current value (may be empty)
        field_type: Field type hint used by the rules table
        context: Client context; fullFormData supplies project details

    Returns:
        Prompt text
    """
    use_case_type = ((context or {}).get("fullFormData") or {}).get("useCaseType")
    rules = render_field_rules(field_name, field_type, use_case_type)
    return f"""{build_context_block(context)}

TAREA: Mejora el siguiente campo según las reglas especificadas.

CAMPO: {field_name}
VALOR ACTUAL: "{field_value or ''}"
REGLAS: {rules}

INSTRUCCIONES PASO A PASO:
1. Analiza el valor actual del campo
2. Aplica las reglas especificadas de ING
3. Mejora el contenido manteniendo el contexto profesional
4. Responde ÚNICAMENTE con el contenido mejorado
5. NO agregues explicaciones ni comentarios adicionales
6. NO uses formato markdown ni bloques de código

RESPUESTA:"""


_LIST_PROMPTS = {
    "filters": (
        "filtros de búsqueda profesionales para un sistema bancario",
        "filtros",
        "un filtro por línea",
        "fechas, usuarios, estados",
        "Número de cliente\nNombre completo\nEstado del cliente\n"
        "Fecha de registro desde\nFecha de registro hasta",
    ),
    "columns": (
        "columnas de resultado para una grilla de sistema bancario",
        "columnas",
        "una columna por línea",
        "ID, fechas, usuarios, estados",
        "ID Cliente\nNombre Completo\nEmail\nTeléfono\nEstado\nFecha Registro",
    ),
}


def build_list_extraction_prompt(kind: str, text: str) -> str:
    """Prompt turning a free-text description into filters or columns, one per line."""
    target, noun, per_line, standard, example = _LIST_PROMPTS[kind]
    return f"""CUMPLE MINUTA ING vr19: Convierte esta descripción en {target}.

Descripción: "{text}"

Reglas:
- Responde SOLO con los nombres de {noun}, uno por línea
- Usa nombres descriptivos en español para sistemas bancarios
- NO agregues explicaciones ni comentarios
- Formato: {per_line}
- Incluye {noun} estándar ING: {standard}

Ejemplo de respuesta:
{example}"""


def build_fields_extraction_prompt(text: str) -> str:
    """Prompt turning a free-text description into a JSON array of entity fields."""
    return f"""{COMPLIANCE_LINE}
Auto-incluir campos obligatorios para entidades, tipos estándar ING.

Convierte esta descripción de campos en JSON:

"{text}"

Formato requerido COMPLETO:
[
  {{
    "name": "nombreCampo",
    "type": "text",
    "mandatory": true,
    "length": 100,
    "description": "Descripción clara del propósito del campo",
    "validationRules": "Reglas de validación específicas"
  }}
]

Reglas ING:
- Auto-incluir SIEMPRE los campos de auditoría fechaAlta, usuarioAlta, fechaModificacion y usuarioModificacion
- Nombres en camelCase español
- Tipos válidos: "text", "email", "number", "decimal", "date", "datetime", "boolean"
- Para montos usar tipo "decimal"; para IDs usar tipo "number" con mandatory: true
- Responde SOLO el JSON sin explicaciones"""
