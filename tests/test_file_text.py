"""Tests for file text extraction."""

import io

import pytest
from docx import Document
from openpyxl import Workbook
from pptx import Presentation
from pptx.util import Inches

from app.core.file_text import (
    EMPTY_PRESENTATION,
    PPT_HINT,
    FileProcessingError,
    UnsupportedFileError,
    extract_text_from_upload,
)


def _docx_bytes() -> bytes:
    document = Document()
    document.add_paragraph("Minuta de reunión")
    document.add_paragraph("   ")
    document.add_paragraph("Cliente: Banco Provincia")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Filtro"
    table.cell(0, 1).text = "CUIT"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _xlsx_bytes() -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Campos"
    sheet.append(["nombre", "tipo"])
    sheet.append([None, None])
    sheet.append(["cuit", 11])
    workbook.create_sheet("Vacía")
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _pptx_bytes(with_slide: bool = True) -> bytes:
    presentation = Presentation()
    if with_slide:
        slide = presentation.slides.add_slide(presentation.slide_layouts[5])
        slide.shapes.title.text = "Alcance"
        box = slide.shapes.add_textbox(Inches(1), Inches(2), Inches(4), Inches(1))
        box.text_frame.text = "Alta de proveedores"
        slide.notes_slide.notes_text_frame.text = "Validar con el cliente"
    buffer = io.BytesIO()
    presentation.save(buffer)
    return buffer.getvalue()


def test_extract_text_txt_utf8():
    """Test extracting text from a UTF-8 .txt file."""
    content = "Reunión con el cliente: alta de proveedores."

    result = extract_text_from_upload(
        filename="minuta.txt",
        content_type="text/plain",
        raw_bytes=content.encode("utf-8"),
    )

    assert result.text == content
    assert result.kind == "text"
    assert result.detected_encoding == "utf-8"


def test_extract_text_utf8_bom():
    """Test that a UTF-8 BOM is stripped."""
    result = extract_text_from_upload("minuta.md", None, b"\xef\xbb\xbf# Minuta")

    assert result.text == "# Minuta"
    assert result.detected_encoding == "utf-8-sig"


def test_extract_text_latin1_fallback():
    """Test that non-UTF-8 text falls back to latin-1."""
    content = "Gestión de años"

    result = extract_text_from_upload("minuta.txt", "text/plain", content.encode("latin-1"))

    assert result.text == content
    assert result.detected_encoding == "latin-1"


def test_extract_text_without_extension_uses_content_type():
    """Test that text/* content types are read when the name has no extension."""
    result = extract_text_from_upload("minuta", "text/plain", b"hola")
    assert result.text == "hola"


def test_extract_docx():
    """Test paragraphs and table rows from a Word document."""
    result = extract_text_from_upload("minuta.docx", None, _docx_bytes())

    assert result.kind == "docx"
    assert result.text.splitlines() == [
        "Minuta de reunión",
        "Cliente: Banco Provincia",
        "Filtro | CUIT",
    ]


def test_extract_xlsx():
    """Test one block per sheet with tab-separated rows."""
    result = extract_text_from_upload("campos.xlsx", None, _xlsx_bytes())

    assert result.kind == "xlsx"
    assert result.text == "=== Hoja: Campos ===\nnombre\ttipo\ncuit\t11\n\n=== Hoja: Vacía ===\n"


def test_extract_pptx_with_notes():
    """Test slide text followed by speaker notes."""
    result = extract_text_from_upload("alcance.pptx", None, _pptx_bytes())

    assert result.kind == "pptx"
    assert result.text.splitlines() == [
        "=== Diapositiva 1 ===",
        "Alcance",
        "Alta de proveedores",
        "Notas:",
        "Validar con el cliente",
    ]


def test_extract_empty_pptx():
    """Test that a presentation without text gets the empty message."""
    result = extract_text_from_upload("vacia.pptx", None, _pptx_bytes(with_slide=False))
    assert result.text == EMPTY_PRESENTATION


def test_legacy_ppt_gets_conversion_hint():
    """Test that .ppt uploads are rejected with a conversion hint."""
    with pytest.raises(UnsupportedFileError) as exc_info:
        extract_text_from_upload("viejo.ppt", "application/vnd.ms-powerpoint", b"\xd0\xcf\x11\xe0")

    assert str(exc_info.value) == PPT_HINT


def test_unsupported_file_type():
    """Test that unsupported file types raise UnsupportedFileError."""
    with pytest.raises(UnsupportedFileError, match="no soportado"):
        extract_text_from_upload("imagen.png", "image/png", b"\x89PNG")


def test_corrupt_docx():
    """Test that an unreadable Word file raises FileProcessingError."""
    with pytest.raises(FileProcessingError, match="DOCX"):
        extract_text_from_upload("roto.docx", None, b"esto no es un zip")


def test_legacy_xls_binary():
    """Test that a pre-2007 Excel binary cannot be read."""
    with pytest.raises(FileProcessingError, match="Excel"):
        extract_text_from_upload("viejo.xls", "application/vnd.ms-excel", b"\xd0\xcf\x11\xe0\xa1\xb1")
