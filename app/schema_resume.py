"""
Canonical résumé schema.

Every field has a default so an empty ResumeRecord is valid; collections
default to empty lists (no placeholders) except in create_empty_resume(),
which mirrors the blank form a user starts from.
"""

from __future__ import annotations
import uuid
from typing import List

from pydantic import BaseModel, Field, field_validator


def _new_id() -> str:
    return str(uuid.uuid4())


class PersonalInfo(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    website: str = ""
    linkedin: str = ""


class ExperienceEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    company: str = ""
    title: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    achievements: List[str] = Field(default_factory=list)


class EducationEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    achievements: List[str] = Field(default_factory=list)


class CertificationEntry(BaseModel):
    name: str = ""
    issuer: str = ""
    date: str = ""


class LanguageEntry(BaseModel):
    name: str = ""
    proficiency: str = ""


class ProjectEntry(BaseModel):
    name: str = ""
    description: str = ""
    technologies: List[str] = Field(default_factory=list)
    url: str = ""


class ResumeRecord(BaseModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    certifications: List[CertificationEntry] = Field(default_factory=list)
    languages: List[LanguageEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)


# ───────────────────────────────────────── analysis ──
class KeywordFindings(BaseModel):
    missing: List[str] = Field(default_factory=list)
    found: List[str] = Field(default_factory=list)


class IssueList(BaseModel):
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class AnalysisSuggestions(BaseModel):
    keywords: KeywordFindings = Field(default_factory=KeywordFindings)
    structure: IssueList = Field(default_factory=IssueList)
    formatting: IssueList = Field(default_factory=IssueList)
    content: IssueList = Field(default_factory=IssueList)


class AnalysisResult(BaseModel):
    score: int = 0
    suggestions: AnalysisSuggestions = Field(default_factory=AnalysisSuggestions)

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        try:
            return max(0, min(100, int(round(float(value)))))
        except OverflowError as e:
            raise ValueError(f"score out of range: {value}") from e


# ───────────────────────────────────────── helpers ──
def create_empty_resume() -> ResumeRecord:
    """The blank form: one placeholder job and one placeholder school."""
    return ResumeRecord(
        experience=[ExperienceEntry(achievements=[""])],
        education=[EducationEntry()],
    )


def merge_resume(base: ResumeRecord, partial: ResumeRecord) -> ResumeRecord:
    """Overlay the fields the extractor actually set on `partial` onto `base`."""
    update = {name: getattr(partial, name) for name in partial.model_fields_set}
    return base.model_copy(update=update)


def is_resume_complete(record: ResumeRecord) -> bool:
    """True when the minimum fields needed for a useful resume are filled."""
    info = record.personal_info
    if not (info.first_name and info.last_name and info.email and info.phone):
        return False
    if not record.experience or not record.experience[0].company or not record.experience[0].title:
        return False
    if not record.education or not record.education[0].institution or not record.education[0].degree:
        return False
    return bool(record.skills)


def format_date_range(start_date: str, end_date: str) -> str:
    return f"{start_date} - {end_date}"


def score_band(score: int) -> str:
    if score >= 80:
        return "good"
    if score >= 60:
        return "fair"
    return "poor"
