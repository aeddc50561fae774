"""Guarantees the mandatory flow sections of API use case documents."""

from app.core.content_sanitizer import SECTION_MARKERS, present_markers
from app.core.logging import get_logger
from app.core.schemas_use_cases import UseCaseType

logger = get_logger(__name__)

_H2 = (
    '<h2 style="color: rgb(0, 112, 192); font-size: 16px; font-weight: 600; '
    "margin: 32px 0 12px 0; font-family: 'Segoe UI Semilight', sans-serif;\">{title}</h2>"
)


def _step(title: str, text: str, sub_steps: tuple[str, str]) -> str:
    items = "\n".join(f"      <li>{sub}</li>" for sub in sub_steps)
    return (
        f"  <li>\n    <strong>{title}:</strong> {text}\n"
        f'    <ol style="list-style-type: lower-alpha;">\n{items}\n    </ol>\n  </li>'
    )


_MAIN_FLOW_STEPS = (
    (
        "Identificación",
        "El cliente se autentica en el sistema utilizando sus credenciales válidas",
        (
            "El sistema valida las credenciales y genera un token de acceso",
            "Se establecen los permisos y límites asociados al perfil del cliente",
        ),
    ),
    (
        "Solicitud",
        "El cliente envía una petición HTTP al endpoint especificado",
        (
            "El sistema recibe y valida el formato de la solicitud",
            "Se verifican los parámetros obligatorios y opcionales",
        ),
    ),
    (
        "Procesamiento",
        "El sistema ejecuta la lógica de negocio correspondiente",
        (
            "Se aplican las reglas de negocio definidas",
            "Se actualiza la información en la base de datos",
        ),
    ),
    (
        "Respuesta",
        "El sistema retorna el resultado de la operación",
        (
            "Se genera la respuesta en formato JSON",
            "Se incluye el código de estado HTTP apropiado",
        ),
    ),
)

_ALTERNATIVE_STEPS = (
    (
        "Error 400 - Bad Request",
        "Cuando la solicitud contiene parámetros inválidos o faltantes",
        (
            "El sistema retorna código HTTP 400",
            "Se incluye un mensaje descriptivo del error en la respuesta JSON",
        ),
    ),
    (
        "Error 401/403 - No autorizado",
        "Cuando las credenciales son inválidas o el cliente no tiene permisos",
        (
            "El sistema retorna código HTTP 401 o 403 según corresponda",
            "Se registra el intento de acceso no autorizado",
        ),
    ),
    (
        "Error 500 - Error interno",
        "Cuando ocurre un error inesperado en el servidor",
        (
            "El sistema retorna código HTTP 500",
            "Se registra el error en los logs para su análisis",
        ),
    ),
)


def _ordered_list(steps) -> str:
    return "<ol>\n" + "\n".join(_step(*step) for step in steps) + "\n</ol>"


CANONICAL_API_SECTIONS = "\n\n".join(
    [
        _H2.format(title=SECTION_MARKERS[0]),
        _ordered_list(_MAIN_FLOW_STEPS),
        _H2.format(title=SECTION_MARKERS[1]),
        _ordered_list(_ALTERNATIVE_STEPS),
    ]
)


def ensure_required_sections(content: str, use_case_type: UseCaseType | str) -> str:
    """
    Append the canonical flow sections to API documents that lack either one.

    Args:
        content: Sanitized generated content
        use_case_type: Use case type of the form

    Returns:
        Content containing both flow sections (API only; other types unchanged)
    """
    if UseCaseType(use_case_type) != UseCaseType.API:
        return content

    if present_markers(content) == set(SECTION_MARKERS):
        return content

    logger.info("API content missing mandatory flow sections, appending canonical block")
    return f"{content}\n\n{CANONICAL_API_SECTIONS}"
