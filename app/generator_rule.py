"""
Harvard-format résumé renderer.

ResumeRecord → markdown, with a fixed section order:
header, Summary, Education, Experience, Skills, Certifications,
Languages, Projects. Pure and total: missing fields are simply left out.
"""

from __future__ import annotations
from typing import List

from schema_resume import EducationEntry, ExperienceEntry, ResumeRecord

DEFAULT_NAME = "Your Name"
DEFAULT_CONTACT = "Location • Email • Phone"


def create_harvard_template(r: ResumeRecord) -> str:
    parts: List[str] = [_header(r)]

    if r.summary:
        parts.append(f"## Summary\n{r.summary}\n\n")

    if r.education:
        parts.append("## Education\n")
        parts.extend(_school(e) for e in r.education if e.institution)

    if r.experience:
        parts.append("## Experience\n")
        parts.extend(_job(j) for j in r.experience if j.company)

    if r.skills:
        parts.append(f"## Skills\n{', '.join(r.skills)}\n\n")

    if r.certifications:
        lines = ["## Certifications\n"]
        for c in r.certifications:
            if not c.name:
                continue
            lines.append(" | ".join(x for x in (c.name, c.issuer, c.date) if x))
        parts.append(_section(lines))

    if r.languages:
        lines = ["## Languages\n"]
        for l in r.languages:
            if l.name:
                lines.append(f"{l.name}: {l.proficiency}" if l.proficiency else l.name)
        parts.append(_section(lines))

    if r.projects:
        parts.append("## Projects\n")
        for p in r.projects:
            if not p.name:
                continue
            block = f"### {p.name}\n"
            if p.description:
                block += f"{p.description}\n"
            if p.technologies:
                block += f"Technologies: {', '.join(p.technologies)}\n"
            if p.url:
                block += f"URL: {p.url}\n"
            parts.append(block + "\n")

    return "".join(parts).rstrip()


# ───────────────────────────────────────── helpers ──
def _header(r: ResumeRecord) -> str:
    info = r.personal_info
    full_name = f"{info.first_name} {info.last_name}".strip() or DEFAULT_NAME
    contact = [
        x for x in (info.location, info.email, info.phone, info.linkedin, info.website) if x
    ]
    contact_line = " • ".join(contact) if contact else DEFAULT_CONTACT
    return f"# {full_name}\n{contact_line}\n\n"


def _section(lines: List[str]) -> str:
    """Heading followed by one bullet per item."""
    heading, items = lines[0], lines[1:]
    return heading + "".join(f"- {item}\n" for item in items) + "\n"


def _bullets(achievements: List[str]) -> str:
    # a lone "" is the blank form's placeholder
    if not achievements or achievements[0] == "":
        return ""
    return "".join(f"- {a}\n" for a in achievements if a)


def _school(e: EducationEntry) -> str:
    out = f"### {e.institution}\n"

    degree = [x for x in (e.degree, f"in {e.field_of_study}" if e.field_of_study else "") if x]
    dates = [x for x in (e.start_date, e.end_date) if x]
    if degree:
        out += " ".join(degree)
        if dates:
            out += f" | {' - '.join(dates)}"
        out += "\n"

    if e.location:
        out += f"{e.location}\n"
    if e.gpa:
        out += f"GPA: {e.gpa}\n"
    return out + _bullets(e.achievements) + "\n"


def _job(j: ExperienceEntry) -> str:
    out = f"### {j.company}\n"
    if j.title:
        out += j.title
        if j.start_date or j.end_date:
            out += f" | {j.start_date} - {j.end_date}"
        out += "\n"

    if j.location:
        out += f"{j.location}\n"
    if j.description:
        out += f"{j.description}\n"
    return out + _bullets(j.achievements) + "\n"
