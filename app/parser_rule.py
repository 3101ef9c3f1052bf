"""
Rule-based résumé parser.
Turns plain résumé text into a partial ResumeRecord by walking its
paragraph blocks with a small section state machine.

Best effort only: text that does not follow the "Section Header / content"
paragraph layout gets mis-segmented.
"""

from __future__ import annotations
import logging, re
from enum import Enum
from typing import Dict, List, Tuple

from schema_resume import EducationEntry, ExperienceEntry, PersonalInfo, ResumeRecord
from cleaner import (
    expand_username_url,
    is_bullet,
    normalise_text,
    split_list,
    squeeze,
    strip_bullet,
)

logger = logging.getLogger(__name__)

BLOCK_SEP = re.compile(r"\n\s*\n")
EMAIL = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE = re.compile(
    r"\+\d[\d\s().-]{7,}\d"
    r"|\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"
)
LINKEDIN = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/[^\s|•,]+", re.I)
NAME = re.compile(r"^[A-Za-zÀ-ÿ'.-]+(?: [A-Za-zÀ-ÿ'.-]+){1,3}$")
HEADER = re.compile(
    r"^(work experience|professional experience|work history|experience|education"
    r"|(?:technical |core )?skills)\s*(?::\s*(.*))?$",
    re.I,
)

DEGREES = ("Ph.D.", "MBA", "M.S.", "M.A.", "B.S.", "B.A.")
FIELDS = (
    "Computer Science",
    "Software Engineering",
    "Electrical Engineering",
    "Mechanical Engineering",
    "Information Technology",
    "Data Science",
    "Mathematics",
    "Physics",
    "Economics",
    "Business Administration",
)
DEFAULT_DEGREE = "Degree"
DEFAULT_FIELD = "Field of Study"
PRESENT = "Present"


class Section(Enum):
    NONE = "none"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"


# checked in this order
MARKERS = (
    (Section.EXPERIENCE, ("experience", "work")),
    (Section.EDUCATION, ("education",)),
    (Section.SKILLS, ("skills",)),
)

Delta = Dict[str, object]


def parse_resume_rule(raw: str) -> ResumeRecord:
    """
    Extract what we can from `raw`.

    The returned record is partial: only the fields listed in its
    `model_fields_set` were found in the text. Never raises.
    """
    fields: Delta = {}
    state = Section.NONE
    for block in split_blocks(raw):
        state, delta = reduce_block(state, block)
        _apply(fields, delta)

    logger.debug("Extracted fields: %s", sorted(fields) or "none")
    return ResumeRecord(**fields)


def split_blocks(raw: str) -> List[str]:
    text = normalise_text(raw)
    return [b.strip() for b in BLOCK_SEP.split(text) if b.strip()]


def reduce_block(state: Section, block: str) -> Tuple[Section, Delta]:
    """(state, block) -> (next state, fields contributed by this block)."""
    state, lines = _enter_section(state, block)

    if "@" in block and "." in block:
        if info := _contact(lines):
            return state, {"personal_info": info}

    if not lines:
        return state, {}
    if state is Section.SKILLS:
        return state, {"skills": split_list("\n".join(lines))}
    if state is Section.EXPERIENCE:
        return state, {"experience": [_job(lines)]}
    if state is Section.EDUCATION:
        return state, {"education": [_school(lines)]}
    return state, {}


# ───────────────────────────────────────── helpers ──
def _detect(text: str) -> Section | None:
    text = text.lower()
    for section, markers in MARKERS:
        if any(re.search(rf"\b{m}\b", text) for m in markers):
            return section
    return None


def _enter_section(state: Section, block: str) -> Tuple[Section, List[str]]:
    """A first line that is only a section header switches section; otherwise scan the block."""
    lines = [squeeze(ln) for ln in block.splitlines() if ln.strip()]
    if not lines:
        return state, lines
    if m := HEADER.match(lines[0]):
        # "Skills: Go, SQL" keeps what follows the colon
        inline = [m.group(2).strip()] if m.group(2) and m.group(2).strip() else []
        return _detect(m.group(1)), inline + lines[1:]
    return _detect(block) or state, lines


def _apply(fields: Delta, delta: Delta) -> None:
    for key, value in delta.items():
        if key == "personal_info":
            fields.setdefault(key, value)  # first contact block wins
        elif key == "skills":
            fields[key] = value
        else:
            fields.setdefault(key, []).extend(value)


def _contact(lines: List[str]) -> PersonalInfo | None:
    text = "\n".join(lines)
    email = EMAIL.search(text)
    phone = PHONE.search(text)
    if not (email or phone):
        return None

    info = PersonalInfo(
        email=email.group() if email else "",
        phone=phone.group().strip() if phone else "",
    )
    if m := LINKEDIN.search(text):
        info.linkedin = expand_username_url(m.group(), "linkedin.com")
    if lines and NAME.match(lines[0]):
        first, _, last = lines[0].partition(" ")
        info.first_name, info.last_name = first, last
    return info


def _job(lines: List[str]) -> ExperienceEntry:
    second = lines[1] if len(lines) > 1 else ""
    return ExperienceEntry(
        company=lines[0],
        title="" if is_bullet(second) else second,
        description="\n".join(lines),
        start_date="",
        end_date=PRESENT,
        achievements=[strip_bullet(ln) for ln in lines if is_bullet(ln)],
    )


def _school(lines: List[str]) -> EducationEntry:
    text = "\n".join(lines)
    degree = next((d for d in DEGREES if d in text), DEFAULT_DEGREE)
    field = next((f for f in FIELDS if f.lower() in text.lower()), DEFAULT_FIELD)
    return EducationEntry(
        institution=lines[0],
        degree=degree,
        field_of_study=field,
        achievements=[strip_bullet(ln) for ln in lines if is_bullet(ln)],
    )
