"""
Export document builders.

Word files are produced with python-docx, PDFs with reportlab's platypus
layer. Both take a title plus a list of DocumentSection and return the
finished file as bytes; nothing is written to disk.
"""

import re
import html
from datetime import date
from io import BytesIO
from typing import Iterable, List, Optional

from docx import Document
from docx.shared import Pt
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from markdown_lite import BlockKind, parse_blocks
from models import DocumentSection, Message, Role

# **bold** | *italic* | `code`, tried in that order at each position
_INLINE_RE = re.compile(r'\*\*(.+?)\*\*|\*(.+?)\*|`(.+?)`')

# Characters XML 1.0 (and so python-docx) refuses to store
_XML_INVALID_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_DOCX_LIST_STYLE = {
    BlockKind.UNORDERED_LIST: "List Bullet",
    BlockKind.ORDERED_LIST: "List Number",
}
_MAX_DOCX_HEADING = 4


def generated_on_line(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"Generated on {day.strftime('%B')} {day.day}, {day.year}"


def transcript_sections(history: Iterable[Message], assistant_name: str) -> List[DocumentSection]:
    """One labelled section per message, in conversation order."""
    return [
        DocumentSection(
            body=m.content,
            label="You:" if m.role is Role.USER else f"{assistant_name}:",
        )
        for m in history
    ]


def summary_sections(summary: str) -> List[DocumentSection]:
    return [DocumentSection(body=summary)]


# ═══════════════════════════════════════════
# WORD (.docx)
# ═══════════════════════════════════════════

def _xml_safe(text: str) -> str:
    return _XML_INVALID_RE.sub(" ", text)


def _restart_numbering(doc, paragraphs) -> None:
    """Give an ordered list its own numbering instance so it counts from 1."""
    style_ppr = paragraphs[0].style.element.pPr
    if style_ppr is None or style_ppr.numPr is None or style_ppr.numPr.numId is None:
        return
    numbering = doc.part.numbering_part.element
    abstract_id = numbering.num_having_numId(style_ppr.numPr.numId.val).abstractNumId.val
    num = numbering.add_num(abstract_id)
    num.add_lvlOverride(ilvl=0).add_startOverride(1)
    for para in paragraphs:
        para._p.get_or_add_pPr().get_or_add_numPr().get_or_add_numId().val = num.numId


def _add_inline_runs(paragraph, text: str) -> None:
    text = _xml_safe(text)
    pos = 0
    for match in _INLINE_RE.finditer(text):
        if match.start() > pos:
            paragraph.add_run(text[pos:match.start()])
        bold, italic, code = match.groups()
        if bold is not None:
            paragraph.add_run(bold).bold = True
        elif italic is not None:
            paragraph.add_run(italic).italic = True
        else:
            paragraph.add_run(code).font.name = "Courier New"
        pos = match.end()
    if pos < len(text):
        paragraph.add_run(text[pos:])


def _add_docx_body(doc, text: str) -> None:
    for block in parse_blocks(text):
        if block.kind is BlockKind.HEADING:
            # Level 1 is reserved for the document title
            doc.add_heading(_xml_safe(block.lines[0]), level=min(block.level + 1, _MAX_DOCX_HEADING))
        elif block.kind is BlockKind.PARAGRAPH:
            para = doc.add_paragraph()
            para.paragraph_format.space_after = Pt(5)
            _add_inline_runs(para, block.lines[0])
        else:
            style = _DOCX_LIST_STYLE[block.kind]
            items = []
            for item in block.lines:
                para = doc.add_paragraph(style=style)
                _add_inline_runs(para, item)
                items.append(para)
            if block.kind is BlockKind.ORDERED_LIST:
                _restart_numbering(doc, items)


def build_word_document(
    title: str,
    sections: List[DocumentSection],
    generated_on: Optional[date] = None,
) -> bytes:
    doc = Document()
    doc.add_heading(_xml_safe(title), level=1)
    stamp = doc.add_paragraph(generated_on_line(generated_on))
    stamp.paragraph_format.space_after = Pt(20)

    for section in sections:
        if section.label:
            label = doc.add_paragraph()
            label.paragraph_format.space_before = Pt(10)
            label.add_run(_xml_safe(section.label)).bold = True
        _add_docx_body(doc, section.body)

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


# ═══════════════════════════════════════════
# PDF
# ═══════════════════════════════════════════

def _pdf_markup(text: str) -> str:
    """Escape text for reportlab's paragraph parser, then map inline markers."""
    escaped = html.escape(text, quote=False)

    def repl(match):
        bold, italic, code = match.groups()
        if bold is not None:
            return f"<b>{bold}</b>"
        if italic is not None:
            return f"<i>{italic}</i>"
        return f'<font face="Courier">{code}</font>'

    return _INLINE_RE.sub(repl, escaped)


def _pdf_styles():
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("ExportTitle", parent=base["Title"], fontName="Helvetica-Bold",
                                fontSize=20, leading=24, alignment=TA_CENTER),
        "stamp": ParagraphStyle("ExportStamp", parent=base["Normal"], fontName="Helvetica",
                                fontSize=10, alignment=TA_CENTER),
        "label": ParagraphStyle("ExportLabel", parent=base["Normal"], fontName="Helvetica-Bold",
                                fontSize=11, leading=14, spaceBefore=8),
        "body": ParagraphStyle("ExportBody", parent=base["Normal"], fontName="Helvetica",
                               fontSize=11, leading=14, spaceAfter=4),
        "heading": ParagraphStyle("ExportHeading", parent=base["Normal"], fontName="Helvetica-Bold",
                                  fontSize=12, leading=15, spaceBefore=6, spaceAfter=4),
    }


def _pdf_body(text: str, styles) -> list:
    flowables = []
    for block in parse_blocks(text):
        if block.kind is BlockKind.HEADING:
            flowables.append(Paragraph(html.escape(block.lines[0], quote=False), styles["heading"]))
        elif block.kind is BlockKind.PARAGRAPH:
            flowables.append(Paragraph(_pdf_markup(block.lines[0]), styles["body"]))
        else:
            items = [ListItem(Paragraph(_pdf_markup(item), styles["body"])) for item in block.lines]
            bullet_type = "bullet" if block.kind is BlockKind.UNORDERED_LIST else "1"
            flowables.append(ListFlowable(items, bulletType=bullet_type, leftIndent=18))
    return flowables


def build_pdf_document(
    title: str,
    sections: List[DocumentSection],
    generated_on: Optional[date] = None,
) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=letter, title=title,
        leftMargin=0.8 * inch, rightMargin=0.8 * inch,
        topMargin=0.8 * inch, bottomMargin=0.8 * inch,
    )
    styles = _pdf_styles()

    story = [
        Paragraph(html.escape(title, quote=False), styles["title"]),
        Spacer(1, 6),
        Paragraph(generated_on_line(generated_on), styles["stamp"]),
        Spacer(1, 24),
    ]
    for section in sections:
        if section.label:
            story.append(Paragraph(html.escape(section.label, quote=False), styles["label"]))
        story.extend(_pdf_body(section.body, styles))
        story.append(Spacer(1, 6))

    doc.build(story)
    return buffer.getvalue()
