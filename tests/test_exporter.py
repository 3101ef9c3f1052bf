"""
Tests for markdown parsing, HTML rendering and the document backends.
"""

import io

import docx
import pytest

from errors import ExportError
from exporter import (
    DocumentBackend,
    FileFormat,
    HtmlPrintBackend,
    NativeDocxBackend,
    backend_for,
    download_filename,
    export_resume,
    markdown_to_html,
    parse_markdown,
    render_print_document,
    validate_html,
)
from schema_resume import PersonalInfo, ResumeRecord, create_empty_resume

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _docx_texts(content: bytes):
    return [p.text for p in docx.Document(io.BytesIO(content)).paragraphs]


class TestParseMarkdown:
    def test_block_kinds(self):
        blocks = parse_markdown("# Jane\nj@x.com\n\n## Skills\n- a\n- b\n\nplain\nline2")
        assert [b.kind for b in blocks] == ["h1", "contact", "h2", "ul", "p"]
        assert blocks[3].lines == ["a", "b"]
        assert blocks[4].lines == ["plain", "line2"]

    def test_contact_only_directly_after_title(self):
        blocks = parse_markdown("# Jane\n\nnot contact")
        assert [b.kind for b in blocks] == ["h1", "p"]

    def test_empty_markdown(self):
        assert parse_markdown("") == []


class TestMarkdownToHtml:
    def test_adjacent_bullets_share_one_list(self):
        html = markdown_to_html("## Experience\n- one\n- two")
        assert html.count("<ul>") == 1
        assert html.count("<li>") == 2
        assert "<h2>Experience</h2>" in html

    def test_text_is_escaped(self):
        html = markdown_to_html("- <script>alert(1)</script>")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_bold_becomes_strong(self):
        assert "<strong>Engineer</strong> | 2020" in markdown_to_html("**Engineer** | 2020")

    def test_paragraph_lines_joined_with_breaks(self):
        assert "<p>first<br>second</p>" in markdown_to_html("first\nsecond")

    def test_contact_line(self):
        assert '<div class="contact-info">j@x.com</div>' in markdown_to_html("# Jane\nj@x.com")


class TestValidateHtml:
    def test_missing_doctype_is_reported(self):
        errors = validate_html("<p>no doctype</p>")
        assert any(e.startswith("HTML ParseError") for e in errors)

    def test_print_document_is_well_formed(self):
        html = render_print_document("# Jane Doe\nj@x.com\n\n## Skills\n- SQL", title="Jane Doe Resume")
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Jane Doe Resume</title>" in html
        assert not [e for e in validate_html(html) if e.startswith("HTML ParseError")]


class TestBackendFor:
    def test_docx(self):
        assert isinstance(backend_for("docx"), NativeDocxBackend)
        assert isinstance(backend_for(FileFormat.DOCX), NativeDocxBackend)

    def test_html(self):
        assert isinstance(backend_for("HTML"), HtmlPrintBackend)

    def test_pdf_falls_back_to_print_html(self):
        backend = backend_for("pdf")
        assert isinstance(backend, HtmlPrintBackend)
        assert backend.mime_type == "text/html"

    def test_unknown_format(self):
        with pytest.raises(ExportError):
            backend_for("rtf")


class TestExportResume:
    def test_empty_record_as_docx(self):
        blob = export_resume(ResumeRecord(), NativeDocxBackend())
        assert blob.size > 0
        assert blob.mime_type == DOCX_MIME
        assert blob.extension == "docx"
        assert blob.content.startswith(b"PK")
        assert "Your Name" in _docx_texts(blob.content)

    def test_record_as_docx(self, full_record):
        blob = export_resume(full_record, NativeDocxBackend())
        document = docx.Document(io.BytesIO(blob.content))
        texts = [p.text for p in document.paragraphs]

        assert "Jane Doe" in texts
        assert "Experience" in texts
        assert "Education" in texts

        title = next(p for p in document.paragraphs if p.text == "Senior Developer | 2019 - Present")
        assert title.runs[0].bold

        bullet = next(p for p in document.paragraphs if p.text == "Cut query latency by 40%")
        assert bullet.style.name == "List Bullet"

    def test_unnamed_entries_keep_docx_heading(self):
        texts = _docx_texts(export_resume(create_empty_resume(), NativeDocxBackend()).content)
        assert "Education" in texts
        assert "Experience" in texts

    def test_template_is_used_for_docx(self, full_record):
        template = "# Improved Jane\nx@y.z\n\n## Experience\n### Acme\n**Lead** | 2020 - Present\n- Shipped"
        texts = _docx_texts(export_resume(full_record, NativeDocxBackend(), template).content)

        assert "Improved Jane" in texts
        assert "Lead | 2020 - Present" in texts
        assert "Shipped" in texts
        assert "Tech Corp" not in texts

    def test_record_as_html(self, full_record):
        blob = export_resume(full_record, HtmlPrintBackend())
        assert blob.mime_type == "text/html"
        assert blob.extension == "html"
        html = blob.content.decode("utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "<h1>Jane Doe</h1>" in html
        assert "<title>Jane Doe Resume</title>" in html

    def test_blank_template_renders_record(self, full_record):
        blob = export_resume(full_record, HtmlPrintBackend(), template="   \n ")
        assert b"<h3>Tech Corp</h3>" in blob.content

    def test_backend_failure_becomes_export_error(self):
        class BrokenBackend(DocumentBackend):
            format = FileFormat.HTML
            mime_type = "text/html"
            extension = "html"

            def render(self, record, markdown=""):
                raise RuntimeError("disk full")

        with pytest.raises(ExportError, match="disk full"):
            export_resume(ResumeRecord(), BrokenBackend())


class TestDownloadFilename:
    def test_uses_name(self):
        record = ResumeRecord(personal_info=PersonalInfo(first_name="Jane", last_name="Doe"))
        assert download_filename(record, "docx") == "Jane_Doe_Resume.docx"

    def test_placeholders(self):
        assert download_filename(ResumeRecord(), "html") == "Your_Name_Resume.html"

    def test_spaces_become_underscores(self):
        record = ResumeRecord(personal_info=PersonalInfo(first_name="Mary Ann", last_name="Lee"))
        assert download_filename(record, "docx") == "Mary_Ann_Lee_Resume.docx"
