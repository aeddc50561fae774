"""Corporate look of the document: fonts, colors, headings and table shading."""

from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor, Twips

from app.core.use_case_document.numbering import ListItem, flatten, indent_for

BODY_FONT = "Segoe UI Semilight"
HEADING_FONT = "Segoe UI"
TITLE_COLOR = RGBColor(0x00, 0x70, 0xC0)
HEADING_COLOR = RGBColor(0x00, 0x6B, 0xB6)
HEADING_HEX = "006BB6"
TABLE_HEADER_FILL = "DEEAF6"


def style_run(run, *, font=BODY_FONT, size=None, bold=False, color=None):
    run.font.name = font
    # East Asian font slot, otherwise Word falls back to its theme font
    run._element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:eastAsia"), font)
    run.bold = bold
    if size is not None:
        run.font.size = Pt(size)
    if color is not None:
        run.font.color.rgb = color
    return run


def configure_base_style(document):
    normal = document.styles["Normal"]
    normal.font.name = BODY_FONT
    normal.font.size = Pt(11)
    normal.paragraph_format.line_spacing = 1.0


def add_title(document, text: str):
    paragraph = document.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_after = Pt(20)
    style_run(paragraph.add_run(text.upper()), size=24, bold=True, color=TITLE_COLOR)
    return paragraph


def _bottom_border(paragraph, color_hex: str = HEADING_HEX):
    p_pr = paragraph._p.get_or_add_pPr()
    p_bdr = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "8")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), color_hex)
    p_bdr.append(bottom)
    p_pr.append(p_bdr)


def add_heading(document, text: str):
    """Section heading: upper-case, bold, 12pt, blue, bottom border."""
    paragraph = document.add_paragraph()
    fmt = paragraph.paragraph_format
    fmt.space_before = Pt(12)
    fmt.space_after = Pt(12)
    fmt.left_indent = Twips(120)
    fmt.keep_with_next = True
    style_run(paragraph.add_run(text.upper()), font=HEADING_FONT, size=12, bold=True,
              color=HEADING_COLOR)
    _bottom_border(paragraph)
    return paragraph


def add_text(document, text: str, *, bold: bool = False, level: int = 0):
    paragraph = document.add_paragraph()
    paragraph.paragraph_format.space_after = Pt(6)
    if level:
        paragraph.paragraph_format.left_indent = indent_for(level)
    style_run(paragraph.add_run(text), bold=bold)
    return paragraph


def add_labeled(document, label: str, value: str):
    """"• Label: value" line with a bold label."""
    paragraph = document.add_paragraph()
    paragraph.paragraph_format.space_after = Pt(6)
    style_run(paragraph.add_run(f"• {label}: "), bold=True)
    style_run(paragraph.add_run(value))
    return paragraph


def add_list(document, items: list[ListItem]):
    """Render a multi-level list; each level is indented one more step."""
    for level, mark, item in flatten(items):
        paragraph = document.add_paragraph()
        fmt = paragraph.paragraph_format
        fmt.left_indent = indent_for(level)
        fmt.space_after = Pt(4)
        style_run(paragraph.add_run(f"{mark} {item.text}"), bold=item.bold)


def shade_cell(cell, fill: str = TABLE_HEADER_FILL):
    tc_pr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    tc_pr.append(shd)


def write_cell(cell, text: str, *, bold: bool = False, size: float = 10, center: bool = False):
    paragraph = cell.paragraphs[0]
    if center:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    style_run(paragraph.add_run(text), size=size, bold=bold)
