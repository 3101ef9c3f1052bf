"""
Résumé → downloadable document.

Two backends behind one interface; callers pick one explicitly:

• HtmlPrintBackend   markdown → print-styled HTML (text/html, .html).
                     Open it in a browser and print to PDF.
• NativeDocxBackend  ResumeRecord (or markdown) → real .docx via python-docx.

There is no native PDF writer. Asking for "pdf" gives the print backend and
says so in the log; the blob is never mislabelled with a PDF MIME type.
"""

from __future__ import annotations
import io
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

import cssutils
import html5lib
from bs4 import BeautifulSoup
from docx import Document
from docx.shared import Inches, Pt
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup, escape

from errors import ExportError, ResumeError
from generator_rule import create_harvard_template
from schema_resume import ResumeRecord

logger = logging.getLogger(__name__)

_CSS_PATH = Path(__file__).parent / "static" / "print.css"
env = Environment(loader=FileSystemLoader(Path(__file__).parent / "templates"),
                  autoescape=True)

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_BULLET = re.compile(r"^[-*•]\s+")

# cssutils reports problems through a logger; route them to one we can tap
_css_log = logging.getLogger("resume_architect.css_check")
_css_log.propagate = False
_css_log.addHandler(logging.NullHandler())


class FileFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    HTML = "html"


@dataclass
class DocumentBlob:
    content: bytes
    mime_type: str
    extension: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class Block:
    """One rendered unit of a markdown résumé."""
    kind: str  # h1 | h2 | h3 | contact | p | ul
    lines: List[str] = field(default_factory=list)


# ───────────────────────────────────────── markdown ──
def parse_markdown(markdown: str) -> List[Block]:
    """
    Line-prefix markdown → blocks.
    `#`/`##`/`###` are headings, adjacent bullet lines share one list,
    other consecutive lines form a paragraph and the line right after
    the level-1 heading is the contact line.
    """
    blocks: List[Block] = []
    after_title = False
    for raw in (markdown or "").splitlines():
        line = raw.strip()
        if not line:
            after_title = False
            blocks.append(Block("break"))
            continue

        heading = re.match(r"^(#{1,3})\s+(.*)$", line)
        if heading:
            level = len(heading.group(1))
            blocks.append(Block(f"h{level}", [heading.group(2).strip()]))
            after_title = level == 1
            continue

        if after_title:
            blocks.append(Block("contact", [line]))
            after_title = False
        elif _BULLET.match(line):
            item = _BULLET.sub("", line)
            if blocks and blocks[-1].kind == "ul":
                blocks[-1].lines.append(item)
            else:
                blocks.append(Block("ul", [item]))
        elif blocks and blocks[-1].kind == "p":
            blocks[-1].lines.append(line)
        else:
            blocks.append(Block("p", [line]))

    return [b for b in blocks if b.kind != "break"]


def _inline(text: str) -> Markup:
    return Markup(_BOLD.sub(r"<strong>\1</strong>", str(escape(text))))


def _html_blocks(markdown: str) -> List[Block]:
    return [Block(b.kind, [_inline(x) for x in b.lines]) for b in parse_markdown(markdown)]


def markdown_to_html(markdown: str) -> str:
    """Body fragment only."""
    return env.get_template("_body.html").render(blocks=_html_blocks(markdown))


def render_print_document(markdown: str, title: str = "Resume") -> str:
    return env.get_template("print.html").render(
        title=title,
        inline_css=_CSS_PATH.read_text(encoding="utf-8"),
        blocks=_html_blocks(markdown),
    )


def validate_html(html_content: str) -> list[str]:
    """Validates HTML structure and inline CSS. Returns a list of error messages."""
    errors = []
    try:
        parser = html5lib.HTMLParser(strict=True)
        parser.parse(html_content)
    except html5lib.html5parser.ParseError as e:
        errors.append(f"HTML ParseError: {str(e)}")

    soup = BeautifulSoup(html_content, "html.parser")
    for style_tag in soup.find_all("style"):
        if not style_tag.string:
            continue

        class CaptureCSSLogHandler(logging.Handler):
            def emit(self, record):
                errors.append(f"CSS Error in <style> tag: {record.getMessage()}")

        capture_handler = CaptureCSSLogHandler(level=logging.WARNING)
        _css_log.addHandler(capture_handler)
        try:
            parser = cssutils.CSSParser(
                log=_css_log,
                loglevel=logging.INFO,
                raiseExceptions=False,
                validate=True,
            )
            parser.parseString(style_tag.string)
        finally:
            _css_log.removeHandler(capture_handler)

    return errors


# ───────────────────────────────────────── backends ──
class DocumentBackend(ABC):
    """Turns a résumé into the bytes of one document format."""

    format: FileFormat
    mime_type: str
    extension: str

    @abstractmethod
    def render(self, record: ResumeRecord, markdown: str = "") -> bytes:
        """Render `markdown` when given, otherwise the record itself."""


class HtmlPrintBackend(DocumentBackend):
    format = FileFormat.HTML
    mime_type = "text/html"
    extension = "html"

    def render(self, record: ResumeRecord, markdown: str = "") -> bytes:
        content = markdown or create_harvard_template(record)
        html = render_print_document(content, title=_document_title(record))
        for problem in validate_html(html):
            logger.warning("Print document check: %s", problem)
        return html.encode("utf-8")


class NativeDocxBackend(DocumentBackend):
    format = FileFormat.DOCX
    mime_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    extension = "docx"

    def render(self, record: ResumeRecord, markdown: str = "") -> bytes:
        doc = _new_document()
        if markdown:
            self._from_markdown(doc, markdown)
        else:
            self._from_record(doc, record)

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    def _from_record(self, doc, r: ResumeRecord) -> None:
        info = r.personal_info
        doc.add_heading(f"{info.first_name} {info.last_name}".strip() or "Your Name", level=0)
        contact = [x for x in (info.location, info.email, info.phone, info.linkedin, info.website) if x]
        doc.add_paragraph(" • ".join(contact) if contact else "Location • Email • Phone")

        if r.summary:
            doc.add_heading("Summary", level=1)
            doc.add_paragraph(r.summary)

        if r.education:
            doc.add_heading("Education", level=1)
            for e in (e for e in r.education if e.institution):
                doc.add_heading(e.institution, level=2)
                degree = " in ".join(x for x in (e.degree, e.field_of_study) if x)
                dates = " - ".join(x for x in (e.start_date, e.end_date) if x)
                if degree:
                    _title_pair(doc, degree, dates)
                if e.location:
                    doc.add_paragraph(e.location)
                if e.gpa:
                    doc.add_paragraph(f"GPA: {e.gpa}")
                _add_bullets(doc, e.achievements)

        if r.experience:
            doc.add_heading("Experience", level=1)
            for j in (j for j in r.experience if j.company):
                doc.add_heading(j.company, level=2)
                if j.title:
                    dates = f"{j.start_date} - {j.end_date}" if (j.start_date or j.end_date) else ""
                    _title_pair(doc, j.title, dates)
                if j.location:
                    doc.add_paragraph(j.location)
                if j.description:
                    doc.add_paragraph(j.description)
                _add_bullets(doc, j.achievements)

        if r.skills:
            doc.add_heading("Skills", level=1)
            doc.add_paragraph(", ".join(r.skills))

        if r.certifications:
            doc.add_heading("Certifications", level=1)
            _add_bullets(doc, [" | ".join(x for x in (c.name, c.issuer, c.date) if x)
                               for c in r.certifications if c.name])

        if r.languages:
            doc.add_heading("Languages", level=1)
            _add_bullets(doc, [f"{l.name}: {l.proficiency}" if l.proficiency else l.name
                               for l in r.languages if l.name])

        if r.projects:
            doc.add_heading("Projects", level=1)
            for p in (p for p in r.projects if p.name):
                doc.add_heading(p.name, level=2)
                if p.description:
                    doc.add_paragraph(p.description)
                if p.technologies:
                    doc.add_paragraph(f"Technologies: {', '.join(p.technologies)}")
                if p.url:
                    doc.add_paragraph(f"URL: {p.url}")

    def _from_markdown(self, doc, markdown: str) -> None:
        for b in parse_markdown(markdown):
            if b.kind == "h1":
                doc.add_heading(_plain(b.lines[0]), level=0)
            elif b.kind in ("h2", "h3"):
                doc.add_heading(_plain(b.lines[0]), level=int(b.kind[1]) - 1)
            elif b.kind == "ul":
                _add_bullets(doc, [_plain(x) for x in b.lines])
            else:
                for line in b.lines:
                    head, sep, tail = _plain(line).partition(" | ")
                    if sep:
                        _title_pair(doc, head, tail)
                    else:
                        doc.add_paragraph(head)


# ───────────────────────────────────────── helpers ──
def _new_document():
    doc = Document()
    normal = doc.styles["Normal"]
    normal.font.name = "Arial"
    normal.font.size = Pt(10.5)
    normal.paragraph_format.space_after = Pt(2)
    for section in doc.sections:
        section.top_margin = Inches(0.6)
        section.bottom_margin = Inches(0.6)
        section.left_margin = Inches(0.75)
        section.right_margin = Inches(0.75)
    return doc


def _title_pair(doc, title: str, dates: str) -> None:
    """Bold title, plain dates: "Engineer | 2019 - Present"."""
    p = doc.add_paragraph()
    p.add_run(title).bold = True
    if dates:
        p.add_run(f" | {dates}")


def _add_bullets(doc, items: List[str]) -> None:
    if not items or items[0] == "":
        return
    for item in items:
        if item:
            doc.add_paragraph(item, style="List Bullet")


def _plain(text: str) -> str:
    return _BOLD.sub(r"\1", text)


def _document_title(record: ResumeRecord) -> str:
    info = record.personal_info
    name = f"{info.first_name} {info.last_name}".strip()
    return f"{name} Resume" if name else "Resume"


# ───────────────────────────────────────── public ──
_BACKENDS = {
    FileFormat.HTML: HtmlPrintBackend,
    FileFormat.DOCX: NativeDocxBackend,
}


def backend_for(file_format: str | FileFormat) -> DocumentBackend:
    try:
        fmt = FileFormat(str(getattr(file_format, "value", file_format)).lower())
    except ValueError:
        raise ExportError(f"Unsupported export format: {file_format}") from None

    if fmt is FileFormat.PDF:
        logger.warning("No native PDF writer; exporting print-ready HTML instead")
        fmt = FileFormat.HTML
    return _BACKENDS[fmt]()


def export_resume(
    record: ResumeRecord,
    backend: DocumentBackend,
    template: str = "",
) -> DocumentBlob:
    """
    Produce the downloadable document.

    A non-blank `template` (e.g. the AI-improved markdown) is used as the
    content; otherwise the record is rendered directly.
    """
    markdown = template if template and template.strip() else ""
    try:
        content = backend.render(record, markdown)
    except ResumeError:
        raise
    except Exception as e:
        raise ExportError(f"Could not export résumé as {backend.extension}: {e}") from e

    logger.info("Exported %s document (%d bytes)", backend.extension, len(content))
    return DocumentBlob(content=content, mime_type=backend.mime_type, extension=backend.extension)


def download_filename(record: ResumeRecord, extension: str) -> str:
    info = record.personal_info
    first = info.first_name.strip().replace(" ", "_") or "Your"
    last = info.last_name.strip().replace(" ", "_") or "Name"
    return f"{first}_{last}_Resume.{extension}"
