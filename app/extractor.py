"""
Uploaded file ➜ raw text
– PDF through pdfplumber, stripping `(cid:N)` glyph artifacts
– DOCX through python-docx (paragraphs, then table cells)
– plain text / markdown read as UTF-8
– suppresses verbose CropBox warnings from pdfplumber/pdfminer
"""
from __future__ import annotations
import logging, re, warnings
from pathlib import Path

import docx
import pdfplumber

from errors import FileReadError, ParseError
from parser_rule import parse_resume_rule
from schema_resume import ResumeRecord, create_empty_resume, merge_resume

logger = logging.getLogger(__name__)

# silence noisy PDF logging
logging.getLogger("pdfplumber").setLevel(logging.ERROR)
logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", category=UserWarning, module="pdfminer")

_CID_RE = re.compile(r"\(cid:\d+\)")
TEXT_SUFFIXES = {".txt", ".md", ".markdown"}


def pdf_to_text(pdf_path: str | Path) -> str:
    with pdfplumber.open(pdf_path) as pdf:
        pages = [p.extract_text() or "" for p in pdf.pages]
    # blank line between pages keeps paragraph blocks apart
    return _CID_RE.sub("", "\n\n".join(pages))


def docx_to_text(docx_path: str | Path) -> str:
    document = docx.Document(str(docx_path))
    parts = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            parts.extend(cell.text.strip() for cell in row.cells if cell.text.strip())
    return "\n".join(parts)


def read_upload(path: str | Path) -> str:
    """
    Read an uploaded résumé fully into memory as text.

    Raises:
        FileReadError: the file is missing or cannot be opened.
        ParseError: the file exists but cannot be decoded.
    """
    path = Path(path)
    if not path.is_file():
        raise FileReadError(f"Failed to read file: {path}")

    suffix = path.suffix.lower()
    logger.debug("Reading %s upload %s", suffix or "untyped", path)
    try:
        if suffix == ".pdf":
            return pdf_to_text(path)
        if suffix == ".docx":
            return docx_to_text(path)
        if suffix in TEXT_SUFFIXES:
            return path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileReadError(f"Failed to read file: {path}") from e
    except Exception as e:
        # pdfplumber / python-docx raise assorted errors on corrupt files
        raise ParseError(f"Could not decode {path.name}: {e}") from e

    raise ParseError(f"Unsupported file type: {suffix or path.name}")


def load_resume(path: str | Path) -> ResumeRecord:
    """Upload → text → extracted fields merged into a blank résumé."""
    text = read_upload(path)
    extracted = parse_resume_rule(text)
    logger.info("Extracted %s from %s", ", ".join(sorted(extracted.model_fields_set)) or "nothing", Path(path).name)
    return merge_resume(create_empty_resume(), extracted)
