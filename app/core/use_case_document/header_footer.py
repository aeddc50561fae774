"""Page envelope: margins, header table with logo, "página X de Y" footer."""

import io

from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor, Twips

from app.core.use_case_document.styles import HEADING_COLOR, HEADING_FONT, style_run

DOCUMENT_TITLE = "Documento de Casos de Uso"
LOGO_PLACEHOLDER = "INGEMATICA"
BLACK = RGBColor(0, 0, 0)


def set_margins(section):
    section.top_margin = Inches(1)
    section.bottom_margin = Inches(1)
    section.left_margin = Inches(1)
    section.right_margin = Inches(1)
    section.header_distance = Twips(340)


def add_header(section, project_name: str, logo: io.BytesIO | None = None):
    """Two-row header table: logo (spanning both rows), document title, project name."""
    header = section.header
    header.is_linked_to_previous = False
    width = section.page_width - section.left_margin - section.right_margin

    table = header.add_table(rows=2, cols=2, width=width)
    table.style = "Table Grid"
    logo_cell = table.cell(0, 0).merge(table.cell(1, 0))
    logo_cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.CENTER
    logo_paragraph = logo_cell.paragraphs[0]
    logo_paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    if logo is not None:
        logo_paragraph.add_run().add_picture(logo, width=Inches(1.6))
    else:
        style_run(logo_paragraph.add_run(LOGO_PLACEHOLDER), font=HEADING_FONT, size=12,
                  bold=True, color=HEADING_COLOR)

    rows = (
        (0, DOCUMENT_TITLE, HEADING_FONT, 14),
        (1, project_name or "Proyecto", None, 13),
    )
    for row, text, font, size in rows:
        cell = table.cell(row, 1)
        cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.CENTER
        paragraph = cell.paragraphs[0]
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        kwargs = {"font": font} if font else {}
        style_run(paragraph.add_run(text), size=size, bold=True, color=BLACK, **kwargs)

    header.add_paragraph().paragraph_format.space_after = Pt(12)
    return table


def _add_field(paragraph, instruction: str):
    """Append a complex field (PAGE, NUMPAGES) to the paragraph."""
    run = style_run(paragraph.add_run(), size=9)
    begin = OxmlElement("w:fldChar")
    begin.set(qn("w:fldCharType"), "begin")
    instr = OxmlElement("w:instrText")
    instr.set(qn("xml:space"), "preserve")
    instr.text = instruction
    separate = OxmlElement("w:fldChar")
    separate.set(qn("w:fldCharType"), "separate")
    placeholder = OxmlElement("w:t")
    placeholder.text = "1"
    end = OxmlElement("w:fldChar")
    end.set(qn("w:fldCharType"), "end")
    for element in (begin, instr, separate, placeholder, end):
        run._r.append(element)
    return run


def add_footer(section, use_case_name: str):
    """"página X de Y" on the left, the use case name right-aligned."""
    footer = section.footer
    footer.is_linked_to_previous = False
    paragraph = footer.paragraphs[0]
    paragraph.paragraph_format.tab_stops.add_tab_stop(Twips(9360), WD_TAB_ALIGNMENT.RIGHT)

    style_run(paragraph.add_run("página "), size=9)
    _add_field(paragraph, "PAGE")
    style_run(paragraph.add_run(" de "), size=9)
    _add_field(paragraph, "NUMPAGES")
    style_run(paragraph.add_run(f"\t{use_case_name or 'CASO DE USO'}"), size=9)
    return paragraph
