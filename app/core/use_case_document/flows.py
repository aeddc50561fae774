"""Event flows built from form data, one builder pair per use case type.

Builders return ListItem trees; free-text values from the form pass through the
accent corrector, engine-authored text does not.
"""

from app.core.schemas_use_cases import EntityFieldSpec, UseCaseForm, UseCaseType
from app.core.spell_corrector import correct_accents
from app.core.use_case_document.numbering import ListItem

DEFAULT_ERROR_CODES = ["400", "401", "403", "404", "500"]

ERROR_DESCRIPTIONS = {
    "400": "Solicitud incorrecta - datos de entrada inválidos",
    "401": "No autorizado - credenciales inválidas o expiradas",
    "403": "Prohibido - sin permisos suficientes para la operación",
    "404": "No encontrado - el recurso solicitado no existe",
    "500": "Error interno del servidor - problema en el procesamiento",
}


def describe_field(spec: EntityFieldSpec, *, with_description: bool = True) -> str:
    """"name (type, length, obligatorio|opcional) - description"."""
    length = f", {spec.length}" if spec.length else ""
    required = ", obligatorio" if spec.mandatory else ", opcional"
    text = f"{correct_accents(spec.name)} ({spec.type.value}{length}{required})"
    if with_description and spec.description:
        text += f" - {correct_accents(spec.description)}"
    return text


def _values(values: list[str]) -> list[ListItem]:
    return [ListItem(correct_accents(v)) for v in values if v and v.strip()]


# =============================================================================
# entity
# =============================================================================


def entity_main_flow(form: UseCaseForm) -> list[ListItem]:
    search = ListItem("Buscar datos de la entidad", bold=True)
    if form.search_filters:
        search.children.append(
            ListItem("Filtros de búsqueda disponibles:", _values(form.search_filters))
        )
    if form.result_columns:
        search.children.append(
            ListItem("Columnas del resultado de búsqueda:", _values(form.result_columns))
        )

    add = ListItem("Agregar una nueva entidad", bold=True)
    if form.entity_fields:
        add.children.append(
            ListItem(
                "Datos de la entidad:",
                [ListItem(describe_field(f)) for f in form.entity_fields],
            )
        )
    add.children.append(ListItem("Al agregar se registra automáticamente la fecha y usuario de alta"))
    return [search, add]


def entity_alternative_flows(form: UseCaseForm) -> list[ListItem]:
    modify = ListItem("Modificar o actualizar una entidad", bold=True)
    if form.entity_fields:
        modify.children.append(
            ListItem(
                "Datos de la entidad a modificar:",
                [ListItem(describe_field(f, with_description=False)) for f in form.entity_fields],
            )
        )
    modify.children += [
        ListItem("Mostrar el identificador único de la entidad"),
        ListItem("Mostrar la fecha y el usuario de alta originales"),
        ListItem("Al modificar se registra automáticamente la fecha y usuario de modificación"),
    ]
    delete = ListItem(
        "Eliminar una entidad",
        [
            ListItem(
                "Verificar que la entidad no tenga relaciones con otras entidades antes de eliminar"
            )
        ],
        bold=True,
    )
    return [modify, delete]


# =============================================================================
# api
# =============================================================================


def api_main_flow(form: UseCaseForm) -> list[ListItem]:
    method = form.http_method or "POST"
    endpoint = form.api_endpoint or "/api/endpoint"
    request_format = correct_accents(form.request_format) or "JSON con los parámetros requeridos"
    response_format = (
        correct_accents(form.response_format) or "JSON con el resultado de la operación"
    )
    return [
        ListItem(
            f"El cliente realiza una petición HTTP {method} al endpoint {endpoint}",
            [ListItem("Formato de solicitud:", [ListItem(request_format)])],
            bold=True,
        ),
        ListItem(
            "El sistema valida los datos de entrada",
            [
                ListItem("Validación de estructura del mensaje"),
                ListItem("Validación de datos obligatorios"),
            ],
            bold=True,
        ),
        ListItem(
            "El sistema procesa la solicitud",
            [
                ListItem("Ejecuta la lógica de negocio correspondiente"),
                ListItem("Registra la operación en el log de auditoría"),
            ],
            bold=True,
        ),
        ListItem(
            "El sistema retorna la respuesta",
            [ListItem("Formato de respuesta:", [ListItem(response_format)])],
            bold=True,
        ),
    ]


def api_alternative_flows(form: UseCaseForm) -> list[ListItem]:
    """One detect / log / return block per configured error code."""
    items = []
    for code in form.error_codes or DEFAULT_ERROR_CODES:
        description = ERROR_DESCRIPTIONS.get(code, f"Error {code} - error en la aplicación")
        items.append(
            ListItem(
                f"Error {code}: {description}",
                [
                    ListItem(f"El sistema detecta un error de tipo {code}"),
                    ListItem("Se registra el error en el log del sistema"),
                    ListItem(f"Se retorna el código de error {code} con el mensaje correspondiente"),
                ],
                bold=True,
            )
        )
    return items


# =============================================================================
# service
# =============================================================================


def service_main_flow(form: UseCaseForm) -> list[ListItem]:
    """Schedule, capture, processing and output; sub-steps only for filled fields."""
    schedule = ListItem("El servicio se ejecuta según la programación configurada", bold=True)
    if form.service_frequency:
        schedule.children.append(
            ListItem(f"Frecuencia de ejecución: {correct_accents(form.service_frequency)}")
        )
    if form.execution_time:
        schedule.children.append(
            ListItem(f"Hora programada: {correct_accents(form.execution_time)}")
        )

    start = ListItem("El proceso inicia automáticamente según la programación establecida", bold=True)
    if form.configuration_paths:
        start.children.append(
            ListItem(
                "Captura archivos desde rutas configurables:",
                [ListItem(correct_accents(form.configuration_paths))],
            )
        )
    if form.web_service_credentials:
        start.children.append(
            ListItem(
                "Conecta con web services externos:",
                [ListItem(correct_accents(form.web_service_credentials))],
            )
        )

    return [
        schedule,
        start,
        ListItem(
            "El sistema procesa los datos según las reglas de negocio",
            [
                ListItem("Valida la integridad de los datos"),
                ListItem("Aplica las transformaciones necesarias"),
                ListItem("Registra el progreso en el log de auditoría"),
            ],
            bold=True,
        ),
        ListItem(
            "El proceso genera los resultados y notificaciones",
            [
                ListItem("Genera archivos de salida o actualiza base de datos"),
                ListItem("Envía notificaciones de finalización"),
            ],
            bold=True,
        ),
    ]


def service_alternative_flows(form: UseCaseForm) -> list[ListItem]:
    return [
        ListItem(
            "Error en captura de archivos",
            [
                ListItem("El sistema no encuentra archivos en la ruta configurada"),
                ListItem("Se registra el error y se notifica al administrador"),
            ],
            bold=True,
        ),
        ListItem(
            "Error de conexión con web service",
            [
                ListItem("Falla la conexión con el servicio externo"),
                ListItem("Se intenta reconectar según política de reintentos"),
            ],
            bold=True,
        ),
        ListItem(
            "Error en procesamiento de datos",
            [
                ListItem("Se detecta inconsistencia en los datos"),
                ListItem("Se genera reporte de errores y se detiene el proceso"),
            ],
            bold=True,
        ),
    ]


def service_requirements(form: UseCaseForm) -> list[str]:
    """Automatic configurability requirements of a scheduled service."""
    requirements = []
    if form.configuration_paths:
        requirements.append("Las rutas de captura de archivos deben ser configurables")
    if form.web_service_credentials:
        requirements.append("El usuario, clave y URL del web service deben ser configurables")
    requirements.append("La frecuencia y hora de ejecución deben ser configurables")
    return requirements


FLOW_BUILDERS = {
    UseCaseType.ENTITY: (entity_main_flow, entity_alternative_flows),
    UseCaseType.API: (api_main_flow, api_alternative_flows),
    UseCaseType.SERVICE: (service_main_flow, service_alternative_flows),
}

DEFAULT_PRECONDITIONS = {
    UseCaseType.ENTITY: (
        "El usuario debe estar autenticado en el sistema y tener los permisos necesarios "
        "para acceder a este caso de uso."
    ),
    UseCaseType.API: (
        "El cliente debe tener credenciales válidas de autenticación API y los permisos "
        "necesarios para acceder al endpoint."
    ),
    UseCaseType.SERVICE: (
        "El servicio debe estar configurado correctamente con las credenciales y rutas "
        "necesarias para su ejecución automática."
    ),
}

DEFAULT_POSTCONDITIONS = {
    UseCaseType.ENTITY: (
        "Los datos de la entidad quedan actualizados en el sistema y se registra la "
        "auditoría correspondiente."
    ),
    UseCaseType.API: (
        "La operación se completa exitosamente y se registra en el log de auditoría del sistema."
    ),
    UseCaseType.SERVICE: (
        "El proceso se completa exitosamente y genera los archivos de salida o "
        "actualizaciones correspondientes, registrando toda la actividad en el log."
    ),
}
