"""Document sections rendered from form data, in their fixed order."""

import logging
import re
from datetime import date
from pathlib import Path

from docx.shared import Inches

from app.core.logging import get_logger, log_with_context
from app.core.schemas_use_cases import TestStep, TestStepStatus, UseCaseForm, UseCaseType
from app.core.spell_corrector import correct_accents
from app.core.use_case_document.assets import AssetError, load_image
from app.core.use_case_document.flows import (
    DEFAULT_POSTCONDITIONS,
    DEFAULT_PRECONDITIONS,
    FLOW_BUILDERS,
    service_requirements,
)
from app.core.use_case_document.numbering import ListItem
from app.core.use_case_document.styles import (
    add_heading,
    add_labeled,
    add_list,
    add_text,
    shade_cell,
    write_cell,
)

logger = get_logger(__name__)

MAIN_FLOW_HEADING = "FLUJO PRINCIPAL DE EVENTOS"
ALTERNATIVE_FLOWS_HEADING = "FLUJOS ALTERNATIVOS"
WIREFRAMES_HEADING = "BOCETOS GRÁFICOS DE INTERFAZ DE USUARIO"
TEST_CASES_HEADING = "CASOS DE PRUEBA"
REVISION_HEADING = "HISTORIA DE REVISIONES Y APROBACIONES"

REVISION_COLUMNS = ("Fecha", "Acción", "Responsable", "Comentario")
TEST_STEP_COLUMNS = (
    "#",
    "Acción",
    "Datos de Entrada",
    "Resultado Esperado",
    "Observaciones",
    "Estado",
)

TYPE_LABELS = {
    UseCaseType.ENTITY: "Gestión de Entidades",
    UseCaseType.API: "API / Web Service",
    UseCaseType.SERVICE: "Servicio / Proceso Automático",
}

STATUS_LABELS = {
    TestStepStatus.PENDING: "Pendiente",
    TestStepStatus.PASS: "Aprobado",
    TestStepStatus.FAIL: "Fallido",
}

_LIST_PREFIX_RE = re.compile(r"^\s*(?:[•\-*]|\d+[.)])\s*")
_LEVEL_ONE_RE = re.compile(r"^\d+\.")
_LEVEL_TWO_RE = re.compile(r"^[a-z]{1,3}\.")


def split_items(text: str) -> list[str]:
    """One item per non-empty line, without bullet or number prefixes."""
    items = []
    for line in (text or "").splitlines():
        item = _LIST_PREFIX_RE.sub("", line).strip()
        if item:
            items.append(item)
    return items


def today_label(today: date | None = None) -> str:
    today = today or date.today()
    return f"{today.day}/{today.month}/{today.year}"


def add_project_info(document, form: UseCaseForm):
    add_heading(document, "Información del Proyecto")
    add_labeled(document, "Cliente", form.client_name)
    add_labeled(document, "Proyecto", form.project_name)
    add_labeled(document, "Código", form.use_case_code)
    add_labeled(document, "Archivo", form.file_name)


def add_description(document, form: UseCaseForm, narrative: str | None = None):
    add_heading(document, "Descripción del Caso de Uso")
    add_labeled(document, "Nombre", correct_accents(form.use_case_name))
    add_labeled(document, "Tipo", TYPE_LABELS[form.use_case_type])
    add_labeled(document, "Descripción", correct_accents(form.description or narrative or ""))


def add_flows(document, form: UseCaseForm):
    main_flow, alternative_flows = FLOW_BUILDERS[form.use_case_type]
    add_heading(document, MAIN_FLOW_HEADING)
    add_list(document, main_flow(form))
    add_heading(document, ALTERNATIVE_FLOWS_HEADING)
    add_list(document, alternative_flows(form))


def _add_numbered_section(document, heading: str, items: list[str]):
    if not items:
        return
    add_heading(document, heading)
    add_list(document, [ListItem(correct_accents(item)) for item in items])


def add_rules_and_requirements(document, form: UseCaseForm):
    _add_numbered_section(document, "Reglas de Negocio", split_items(form.business_rules))
    requirements = split_items(form.special_requirements)
    if form.use_case_type == UseCaseType.SERVICE:
        requirements = service_requirements(form) + requirements
    _add_numbered_section(document, "Requerimientos Especiales", requirements)


def add_conditions(document, form: UseCaseForm):
    add_heading(document, "Precondiciones")
    add_text(document, correct_accents(form.preconditions)
             or DEFAULT_PRECONDITIONS[form.use_case_type])
    add_heading(document, "Postcondiciones")
    add_text(document, correct_accents(form.postconditions)
             or DEFAULT_POSTCONDITIONS[form.use_case_type])


def add_wireframes(document, form: UseCaseForm, asset_root: str | Path):
    """Wireframe images; an unreadable image drops only its own block."""
    wireframes = form.generated_wireframes
    if not form.generate_wireframes or wireframes is None:
        return
    blocks = [
        ("Wireframe 1: Interfaz de Búsqueda", wireframes.search_wireframe, Inches(6)),
        ("Wireframe 2: Formulario de Gestión", wireframes.form_wireframe, Inches(4.5)),
    ]
    blocks = [block for block in blocks if block[1]]
    if not blocks:
        return

    add_heading(document, WIREFRAMES_HEADING)
    for label, reference, width in blocks:
        try:
            image = load_image(reference, asset_root)
        except AssetError as e:
            log_with_context(
                logger,
                logging.WARNING,
                "Skipping wireframe image",
                wireframe=label,
                error=str(e),
            )
            continue
        add_text(document, label, bold=True)
        document.add_paragraph().add_run().add_picture(image, width=width)


def _precondition_level(line: str) -> int:
    stripped = line.strip()
    if _LEVEL_ONE_RE.match(stripped):
        return 1
    if len(line) - len(line.lstrip(" ")) >= 6:
        return 3
    if _LEVEL_TWO_RE.match(stripped):
        return 2
    return 1


def add_test_cases(document, form: UseCaseForm):
    """Objective, hierarchical preconditions and one table row per step."""
    if not form.generate_test_case or not form.test_steps:
        return
    add_heading(document, TEST_CASES_HEADING)

    if form.test_case_objective:
        add_text(document, "Objetivo:", bold=True)
        add_text(document, correct_accents(form.test_case_objective))

    if form.test_case_preconditions:
        add_text(document, "Precondiciones:", bold=True)
        for line in form.test_case_preconditions.splitlines():
            if line.strip():
                add_text(document, correct_accents(line.strip()), level=_precondition_level(line))

    add_test_step_table(document, form.test_steps)


def add_test_step_table(document, steps: list[TestStep]):
    table = document.add_table(rows=1 + len(steps), cols=len(TEST_STEP_COLUMNS))
    table.style = "Table Grid"
    for col, title in enumerate(TEST_STEP_COLUMNS):
        cell = table.cell(0, col)
        write_cell(cell, title, bold=True, size=9, center=True)
        shade_cell(cell)
    for row, step in enumerate(steps, start=1):
        values = (
            str(step.number),
            correct_accents(step.action),
            correct_accents(step.input_data),
            correct_accents(step.expected_result),
            correct_accents(step.observations),
            STATUS_LABELS[step.status],
        )
        for col, value in enumerate(values):
            write_cell(table.cell(row, col), value, size=9)
    return table


def add_revision_history(document, today: date | None = None):
    """Exactly one 2x4 table: shaded header row and the creation row."""
    add_heading(document, REVISION_HEADING)
    table = document.add_table(rows=2, cols=len(REVISION_COLUMNS))
    table.style = "Table Grid"
    for col, title in enumerate(REVISION_COLUMNS):
        cell = table.cell(0, col)
        write_cell(cell, title, bold=True, center=True)
        shade_cell(cell)
    for col, value in enumerate((today_label(today), "Creación", "Sistema", "Versión original")):
        write_cell(table.cell(1, col), value)
    return table
