"""Text extraction from uploaded minute files (Word, Excel, PowerPoint, plain text)."""

import io
import zipfile
from dataclasses import dataclass

from docx import Document
from docx.opc.exceptions import PackageNotFoundError as DocxPackageNotFoundError
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pptx import Presentation
from pptx.exc import PackageNotFoundError

from app.core.logging import get_logger

logger = get_logger(__name__)

# Allowed file extensions for text-based files
TEXT_EXTENSIONS = {".txt", ".md", ".json", ".csv", ".tsv"}

DOCX_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
XLSX_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
}
PPTX_TYPES = {"application/vnd.openxmlformats-officedocument.presentationml.presentation"}

PPT_HINT = (
    "El formato .ppt (PowerPoint 97-2003) no está soportado. Por favor, convierta el archivo "
    "a .pptx o copie y pegue el contenido manualmente."
)
EMPTY_PRESENTATION = (
    "No se pudo extraer texto del archivo PowerPoint. El archivo puede estar vacío."
)


class UnsupportedFileError(ValueError):
    """Upload kind the extractor does not read."""


class FileProcessingError(Exception):
    """A supported file that could not be parsed."""


@dataclass
class FileTextResult:
    """Result of text extraction from a file."""

    text: str
    kind: str
    detected_encoding: str | None = None


def _get_extension(filename: str) -> str:
    """Extract lowercase file extension from filename."""
    if "." in filename:
        return "." + filename.rsplit(".", 1)[-1].lower()
    return ""


def _decode_bytes(raw_bytes: bytes) -> tuple[str, str]:
    """
    Attempt to decode bytes using fallback chain.

    Returns:
        Tuple of (decoded_text, encoding_name)
    """
    # Check for UTF-8 BOM first
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        return raw_bytes.decode("utf-8-sig"), "utf-8-sig"
    try:
        return raw_bytes.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        # latin-1 maps every byte, so this never fails
        return raw_bytes.decode("latin-1"), "latin-1"


def extract_docx_text(raw_bytes: bytes) -> str:
    """Paragraph text followed by table rows (cells joined by " | ")."""
    document = Document(io.BytesIO(raw_bytes))
    lines = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                lines.append(" | ".join(cells))
    return "\n".join(lines)


def extract_workbook_text(raw_bytes: bytes) -> str:
    """One "=== Hoja: name ===" block per sheet, tab-separated rows."""
    workbook = load_workbook(io.BytesIO(raw_bytes), read_only=True, data_only=True)
    try:
        blocks = []
        for sheet in workbook.worksheets:
            rows = []
            for row in sheet.iter_rows(values_only=True):
                values = ["" if value is None else str(value) for value in row]
                if any(v.strip() for v in values):
                    rows.append("\t".join(values).rstrip())
            blocks.append(f"=== Hoja: {sheet.title} ===\n" + "\n".join(rows))
        return "\n\n".join(blocks)
    finally:
        workbook.close()


def extract_presentation_text(raw_bytes: bytes) -> str:
    """One "=== Diapositiva N ===" block per slide with text, speaker notes after "Notas:"."""
    presentation = Presentation(io.BytesIO(raw_bytes))
    blocks = []
    for number, slide in enumerate(presentation.slides, start=1):
        lines = [f"=== Diapositiva {number} ==="]
        for shape in slide.shapes:
            if shape.has_text_frame:
                lines += [p.text.strip() for p in shape.text_frame.paragraphs if p.text.strip()]
            if shape.has_table:
                for row in shape.table.rows:
                    cells = [cell.text.strip() for cell in row.cells]
                    if any(cells):
                        lines.append(" | ".join(cells))
        if slide.has_notes_slide:
            notes = slide.notes_slide.notes_text_frame
            note_lines = [p.text.strip() for p in notes.paragraphs if p.text.strip()] if notes else []
            if note_lines:
                lines.append("Notas:")
                lines += note_lines
        if len(lines) > 1:
            blocks.append("\n".join(lines))
    return "\n\n".join(blocks) or EMPTY_PRESENTATION


def _classify(extension: str, content_type: str | None) -> str:
    content_type = (content_type or "").lower()
    if extension == ".ppt":
        raise UnsupportedFileError(PPT_HINT)
    if extension == ".docx" or content_type in DOCX_TYPES:
        return "docx"
    if extension in (".xlsx", ".xls") or content_type in XLSX_TYPES:
        return "xlsx"
    if extension == ".pptx" or content_type in PPTX_TYPES:
        return "pptx"
    if extension in TEXT_EXTENSIONS or (not extension and content_type.startswith("text/")):
        return "text"
    raise UnsupportedFileError("Tipo de archivo no soportado")


_EXTRACTORS = {
    "docx": (extract_docx_text, "DOCX"),
    "xlsx": (extract_workbook_text, "Excel"),
    "pptx": (extract_presentation_text, "PowerPoint"),
}


def extract_text_from_upload(
    filename: str,
    content_type: str | None,
    raw_bytes: bytes,
) -> FileTextResult:
    """
    Extract text content from an uploaded file.

    Args:
        filename: Original filename
        content_type: MIME content type (may be None)
        raw_bytes: Raw file bytes

    Returns:
        FileTextResult with extracted text and the detected kind

    Raises:
        UnsupportedFileError: If the file kind is not supported (.ppt gets a conversion hint)
        FileProcessingError: If a supported file cannot be parsed
    """
    kind = _classify(_get_extension(filename), content_type)

    if kind == "text":
        text, encoding = _decode_bytes(raw_bytes)
        return FileTextResult(text=text, kind=kind, detected_encoding=encoding)

    extractor, label = _EXTRACTORS[kind]
    try:
        text = extractor(raw_bytes)
    except (
        zipfile.BadZipFile,
        InvalidFileException,
        PackageNotFoundError,
        DocxPackageNotFoundError,
        KeyError,
        ValueError,
        OSError,
    ) as e:
        logger.warning(f"Failed to extract {label} text from {filename}: {e}")
        raise FileProcessingError(f"Error procesando el archivo {label}") from e

    return FileTextResult(text=text, kind=kind)
