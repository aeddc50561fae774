"""Declarative rules for AI-assisted field improvement.

Each FieldRule pairs a matcher over (lower-cased field name, field type) with the rule
text sent to the provider. The table is evaluated top to bottom and the first match
wins; DEFAULT_RULE closes it.
"""

from collections.abc import Callable
from dataclasses import dataclass

COMPLIANCE_LINE = (
    "CUMPLE MINUTA ING vr19: Segoe UI Semilight, interlineado simple, "
    "títulos azul RGB(0,112,192), listas multi-nivel (1-a-i), formato profesional"
)

# Placeholder in a template replaced by the use-case-type rules
TYPE_RULES_SLOT = "{type_rules}"

FieldMatcher = Callable[[str, str], bool]


@dataclass(frozen=True)
class FieldRule:
    """One row of the field rules table."""

    name: str
    matcher: FieldMatcher
    template: str

    def matches(self, field_name: str, field_type: str) -> bool:
        return self.matcher(field_name.lower(), field_type or "")


def _name_has(*parts: str) -> FieldMatcher:
    return lambda name, _type: all(part in name for part in parts)


def _type_is(*types: str) -> FieldMatcher:
    return lambda _name, field_type: field_type in types


def _name_has_any_with(base: str, others: tuple[str, ...], field_type: str) -> FieldMatcher:
    return lambda name, ftype: base in name and (
        any(other in name for other in others) or ftype == field_type
    )


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        "client_name",
        _name_has("nombre", "cliente"),
        "- Debe ser un nombre de empresa real o banco\n"
        "- Primera letra mayúscula\n"
        "- Sin abreviaciones innecesarias",
    ),
    FieldRule(
        "project_name",
        _name_has("proyecto"),
        "- Debe describir un sistema o proyecto tecnológico\n"
        "- Formato profesional\n"
        "- Relacionado con el cliente",
    ),
    FieldRule(
        "use_case_code",
        _name_has("codigo"),
        "- Formato: 2 letras mayúsculas + 3 números (ej: CL005, AB123)\n"
        "- Las letras deben relacionarse con el módulo o área",
    ),
    FieldRule(
        "use_case_name",
        _name_has("nombre", "caso"),
        "- OBLIGATORIO: Debe comenzar con verbo en infinitivo (Gestionar, Crear, Consultar, etc.)\n"
        "- Prepara para título en mayúsculas RGB(0,112,192)\n"
        "- Describe claramente la funcionalidad\n"
        "- Sin artículos innecesarios" + TYPE_RULES_SLOT,
    ),
    FieldRule(
        "file_name",
        _name_has("archivo"),
        "- Formato exacto: 2 letras + 3 números + nombre descriptivo sin espacios\n"
        "- Ejemplo: BP005GestionarClientesPremium\n"
        "- Sin caracteres especiales",
    ),
    FieldRule(
        "description",
        _name_has("descripcion"),
        "EXPANSIÓN OBLIGATORIA\n"
        "- SIEMPRE expandir a 2 párrafos completos (MÍNIMO 150 palabras total)\n"
        "- Primer párrafo (75+ palabras): QUÉ hace el caso de uso, propósito principal, "
        "procesos que abarca, área de negocio que atiende\n"
        "- Segundo párrafo (75+ palabras): BENEFICIOS clave, valor agregado, "
        "mejoras operativas, problemas que resuelve\n"
        '- Si la descripción es corta (ej: "Mostrar proveedores"), EXPANDIRLA COMPLETAMENTE '
        "con contexto profesional\n"
        "- Incluir alcance/objetivo como en minuta ING\n"
        "- Tono profesional y claro\n"
        "- Contexto relevante del negocio bancario/empresarial" + TYPE_RULES_SLOT,
    ),
    FieldRule(
        "business_rules",
        _name_has("reglas", "negocio"),
        "FORMATO OBLIGATORIO: Usar BULLETS (•) exclusivamente, NO listas numeradas\n"
        "- Cada regla como bullet point separado: • Texto de la regla\n"
        "- Cada regla debe ser clara, específica y verificable\n"
        "- Incluye validaciones, restricciones y políticas\n"
        "- Considera aspectos regulatorios si aplica\n"
        "Ejemplo correcto:\n"
        "• El DNI debe ser único en el sistema y validar formato correcto\n"
        "• No se puede eliminar un cliente con productos activos\n"
        "• Solo usuarios con rol Supervisor pueden eliminar clientes",
    ),
    FieldRule(
        "special_requirements",
        _name_has("requerimientos"),
        "FORMATO OBLIGATORIO: Usar BULLETS (•) exclusivamente, NO listas numeradas\n"
        "- Cada requerimiento como bullet point separado: • Texto del requerimiento\n"
        "- Requerimientos no funcionales (rendimiento, seguridad, usabilidad)\n"
        "- Especifica métricas cuando sea posible\n"
        "- Considera integraciones con otros sistemas\n"
        "Ejemplo correcto:\n"
        "• Integración con servicio externo de validación\n"
        "• Tiempos de respuesta menores a 3 segundos\n"
        "• Validaciones de seguridad HTTPS obligatorias",
    ),
    FieldRule(
        "test_objective",
        _name_has_any_with("objetivo", ("prueba", "test"), "testCaseObjective"),
        "FORMATO OBLIGATORIO: Usar BULLETS (•) exclusivamente\n"
        "- Cada objetivo como bullet point separado: • Texto del objetivo\n"
        "- Enfocarse en validación de funcionalidades específicas\n"
        "- Incluir verificación de controles de seguridad\n"
        "- Mencionar integridad de datos\n"
        "- Ser específico del caso de uso",
    ),
    FieldRule(
        "test_preconditions",
        _name_has_any_with("precondiciones", ("prueba", "test"), "testCasePreconditions"),
        "FORMATO OBLIGATORIO: Usar BULLETS (•) exclusivamente\n"
        "- Cada precondición como bullet point separado: • Texto de la precondición\n"
        "- Incluir estado de usuarios y permisos necesarios\n"
        "- Mencionar datos de prueba requeridos\n"
        "- Especificar infraestructura y configuración\n"
        "- Listar dependencias del sistema",
    ),
    FieldRule(
        "search_filter",
        _type_is("searchFilter"),
        "- Nombre del campo de búsqueda\n"
        "- Debe ser un campo lógico de la entidad\n"
        "- Formato lista multi-nivel: 1. Filtro por [campo], a. Lógica [igual/mayor]",
    ),
    FieldRule(
        "result_column",
        _type_is("resultColumn"),
        "- Columnas para tabla de resultados\n"
        "- Información relevante para identificar registros\n"
        "- Formato multi-nivel con indent 0.2",
    ),
    FieldRule(
        "entity_field",
        _type_is("entityField"),
        "- Campo de entidad con tipo/longitud/obligatorio\n"
        "- Auto-incluir campos de auditoría:\n"
        "  • fechaAlta (date, mandatory)\n"
        "  • usuarioAlta (text, mandatory)\n"
        "  • fechaModificacion (date, optional)\n"
        "  • usuarioModificacion (text, optional)\n"
        "- Tipos válidos: text/email/number/date/boolean/decimal\n"
        '- Para montos usar tipo "decimal"\n'
        '- Para IDs usar tipo "number"\n'
        "- Incluir SIEMPRE description y validationRules",
    ),
    FieldRule(
        "api_endpoint",
        _type_is("apiEndpoint"),
        "- URL completa del endpoint con versión (ej: https://api.banco.com/v1/clientes)\n"
        "- Recursos en plural y minúsculas\n"
        "- Sin parámetros de consulta",
    ),
    FieldRule(
        "request_response",
        lambda name, _type: "request" in name or "response" in name,
        "- Estructura JSON válida e indentada\n"
        "- Tipos de dato explícitos para cada propiedad\n"
        "- Incluir códigos de estado en la respuesta",
    ),
)

DEFAULT_RULE = FieldRule(
    "default",
    lambda _name, _type: True,
    "- Seguir buenas prácticas de documentación técnica\n"
    "- Usar lenguaje claro y profesional\n"
    "- Mantener coherencia con el resto del formulario",
)

# Keyed by use case type; legacy Spanish type names are accepted as aliases
USE_CASE_TYPE_RULES: dict[str, str] = {
    "entity": (
        "\n- Para entidades: incluye filtros/columnas de búsqueda"
        "\n- Flujos CRUD (buscar, agregar, modificar, eliminar)"
        "\n- Wireframes con paginado y botones estándar"
    ),
    "api": (
        "\n- Para APIs: incluye request/response detallados"
        "\n- Códigos de error y manejo de excepciones"
        "\n- Documentación de endpoints"
    ),
    "service": (
        "\n- Para procesos: describe secuencia de pasos"
        "\n- Validaciones en cada etapa"
        "\n- Puntos de control y rollback"
    ),
}
_TYPE_ALIASES = {"entidad": "entity", "proceso": "service"}
DEFAULT_TYPE_RULES = "\n- Adapta según tipo de caso de uso especificado"


def type_rules_for(use_case_type: str | None) -> str:
    """Rules that depend on the use case type."""
    key = _TYPE_ALIASES.get(use_case_type or "", use_case_type or "entity")
    return USE_CASE_TYPE_RULES.get(key, DEFAULT_TYPE_RULES)


def find_field_rule(field_name: str, field_type: str | None = None) -> FieldRule:
    """First rule of the table matching the field, or DEFAULT_RULE."""
    for rule in FIELD_RULES:
        if rule.matches(field_name or "", field_type or ""):
            return rule
    return DEFAULT_RULE


def render_field_rules(
    field_name: str,
    field_type: str | None = None,
    use_case_type: str | None = None,
) -> str:
    """
    Render the rule text for a field, prefixed by the compliance line.

    Args:
        field_name: Form field label or key
        field_type: Form field type hint (searchFilter, entityField, ...)
        use_case_type: entity, api or service

    Returns:
        Rule text ready to embed in a prompt
    """
    rule = find_field_rule(field_name, field_type)
    body = rule.template.replace(TYPE_RULES_SLOT, type_rules_for(use_case_type))
    return f"{COMPLIANCE_LINE}\n{body}"
