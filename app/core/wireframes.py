"""Wireframe rasterization for the search screen and the entity form.

Screens are drawn with Pillow on a fixed canvas, then scaled down (never up) to the
target width and returned as a compressed PNG data URI.
"""

import base64
import io
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont

from app.core.schemas_use_cases import EntityFieldSpec

HEADER_BLUE = (0, 75, 141)
BACKGROUND = (244, 246, 249)
PANEL = (255, 255, 255)
BORDER = (204, 210, 219)
TEXT = (51, 51, 51)
MUTED = (120, 128, 140)
BUTTON_BLUE = (0, 112, 192)
BUTTON_RED = (200, 35, 51)
ROW_ALT = (248, 250, 252)


@dataclass(frozen=True)
class CanvasSpec:
    width: int
    height: int
    target_width: int


SEARCH_CANVAS = CanvasSpec(1000, 600, 800)
FORM_CANVAS = CanvasSpec(800, 800, 600)

MAX_FILTERS = 6
MAX_COLUMNS = 6
MAX_FIELDS = 12
SAMPLE_ROWS = 5


def _font(size: int):
    return ImageFont.load_default(size=size)


def _fit(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _header(draw: ImageDraw.ImageDraw, width: int, title: str):
    draw.rectangle((0, 0, width, 44), fill=HEADER_BLUE)
    draw.text((20, 12), _fit(title, 70), fill=(255, 255, 255), font=_font(18))


def _button(draw: ImageDraw.ImageDraw, x: int, y: int, label: str, color=BUTTON_BLUE) -> int:
    """Draw a button at (x, y); returns its right edge."""
    width = 16 + 8 * len(label)
    draw.rounded_rectangle((x, y, x + width, y + 30), radius=4, fill=color)
    draw.text((x + 8, y + 8), label, fill=(255, 255, 255), font=_font(13))
    return x + width


def _input(draw: ImageDraw.ImageDraw, box: tuple[int, int, int, int], placeholder: str = ""):
    draw.rectangle(box, fill=PANEL, outline=BORDER)
    if placeholder:
        draw.text((box[0] + 6, box[1] + 7), placeholder, fill=MUTED, font=_font(12))


def _to_data_uri(image: Image.Image, target_width: int) -> str:
    if image.width > target_width:
        height = round(image.height * target_width / image.width)
        image = image.resize((target_width, height), Image.Resampling.LANCZOS)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG", optimize=True, compress_level=9)
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def render_search_wireframe(
    title: str,
    filters: list[str],
    columns: list[str],
) -> str:
    """Search screen: filter panel, action buttons and a paginated result grid."""
    spec = SEARCH_CANVAS
    image = Image.new("RGB", (spec.width, spec.height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    _header(draw, spec.width, title or "Búsqueda")

    filters = (filters or ["Código", "Nombre", "Estado"])[:MAX_FILTERS]
    draw.rectangle((20, 60, spec.width - 20, 220), fill=PANEL, outline=BORDER)
    draw.text((32, 70), "Filtros de búsqueda", fill=TEXT, font=_font(15))
    col_width = (spec.width - 80) // 3
    for index, label in enumerate(filters):
        x = 32 + (index % 3) * col_width
        y = 100 + (index // 3) * 50
        draw.text((x, y), _fit(label, 28), fill=TEXT, font=_font(12))
        _input(draw, (x, y + 16, x + col_width - 24, y + 40))
    right = _button(draw, 32, 180, "Buscar")
    right = _button(draw, right + 10, 180, "Limpiar", BUTTON_RED)
    _button(draw, right + 10, 180, "Agregar")

    columns = (columns or ["ID", "Nombre", "Estado"])[:MAX_COLUMNS] + ["Acciones"]
    top = 240
    row_height = 34
    draw.rectangle((20, top, spec.width - 20, top + row_height), fill=HEADER_BLUE)
    cell_width = (spec.width - 40) // len(columns)
    for index, name in enumerate(columns):
        draw.text(
            (28 + index * cell_width, top + 10),
            _fit(name, 18),
            fill=(255, 255, 255),
            font=_font(12),
        )
    for row in range(SAMPLE_ROWS):
        y = top + row_height * (row + 1)
        draw.rectangle(
            (20, y, spec.width - 20, y + row_height),
            fill=ROW_ALT if row % 2 else PANEL,
            outline=BORDER,
        )
        for index in range(len(columns) - 1):
            draw.rectangle(
                (28 + index * cell_width, y + 13, 28 + index * cell_width + cell_width // 2, y + 21),
                fill=BORDER,
            )
        draw.text((28 + (len(columns) - 1) * cell_width, y + 10), "Editar | Eliminar",
                  fill=BUTTON_BLUE, font=_font(12))

    footer_y = top + row_height * (SAMPLE_ROWS + 1) + 16
    draw.text((20, footer_y), "Mostrando 1-5 de 50 registros", fill=MUTED, font=_font(12))
    draw.text((spec.width - 200, footer_y), "< Anterior  1 2 3  Siguiente >", fill=TEXT,
              font=_font(12))

    return _to_data_uri(image, spec.target_width)


def _field_label(field: EntityFieldSpec | str) -> tuple[str, str]:
    if isinstance(field, EntityFieldSpec):
        label = field.name + (" *" if field.mandatory else "")
        return label, field.type.value
    return str(field), "text"


def render_form_wireframe(title: str, fields: list[EntityFieldSpec | str]) -> str:
    """Entity form: one labelled input per field, audit block and action buttons."""
    spec = FORM_CANVAS
    image = Image.new("RGB", (spec.width, spec.height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    _header(draw, spec.width, title or "Formulario")

    fields = (fields or ["Código", "Nombre", "Descripción", "Estado"])[:MAX_FIELDS]
    draw.rectangle((20, 60, spec.width - 20, spec.height - 20), fill=PANEL, outline=BORDER)
    half = (spec.width - 80) // 2
    y = 80
    for index, field in enumerate(fields):
        label, kind = _field_label(field)
        x = 40 + (index % 2) * (half + 20)
        if index and index % 2 == 0:
            y += 56
        draw.text((x, y), _fit(label, 36), fill=TEXT, font=_font(12))
        if kind == "boolean":
            draw.rectangle((x, y + 18, x + 18, y + 36), fill=PANEL, outline=BORDER)
        else:
            _input(draw, (x, y + 18, x + half, y + 44), "dd/mm/aaaa" if kind.startswith("date") else "")

    y += 80
    draw.line((40, y, spec.width - 40, y), fill=BORDER)
    draw.text((40, y + 10), "Auditoría", fill=TEXT, font=_font(14))
    audit = (
        ("Fecha de alta:", "15/01/2025 10:30"),
        ("Usuario de alta:", "admin.sistema"),
        ("Fecha de modificación:", "15/01/2025 14:45"),
        ("Usuario de modificación:", "usuario.actual"),
    )
    for index, (label, value) in enumerate(audit):
        x = 40 + (index % 2) * (half + 20)
        line_y = y + 36 + (index // 2) * 24
        draw.text((x, line_y), f"{label} {value}", fill=MUTED, font=_font(12))

    button_y = min(y + 100, spec.height - 60)
    right = _button(draw, 40, button_y, "Cancelar", BUTTON_RED)
    right = _button(draw, right + 10, button_y, "Aplicar")
    right = _button(draw, right + 10, button_y, "Guardar")
    _button(draw, right + 10, button_y, "Guardar y Agregar Nuevo")

    return _to_data_uri(image, spec.target_width)


def render_wireframe(
    kind: str,
    title: str = "",
    filters: list[str] | None = None,
    columns: list[str] | None = None,
    fields: list[EntityFieldSpec | str] | None = None,
) -> str:
    """Render the wireframe of the given kind ("search" or "form") as a data URI.

    Raises:
        ValueError: If kind is not "search" or "form"
    """
    if kind == "search":
        return render_search_wireframe(title, filters or [], columns or [])
    if kind == "form":
        return render_form_wireframe(title, fields or [])
    raise ValueError(f"Unknown wireframe type: {kind}")
