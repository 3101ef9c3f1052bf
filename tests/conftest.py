import pytest

import config
from credentials import CredentialStore
from llm_client import LLMClient, LLMResponse
from schema_resume import (
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    LanguageEntry,
    PersonalInfo,
    ProjectEntry,
    ResumeRecord,
)


class MemoryCredentialStore(CredentialStore):
    def __init__(self, key: str = ""):
        self.key = key
        self.saved = []

    def load(self) -> str:
        return self.key

    def save(self, key: str) -> None:
        self.key = key
        self.saved.append(key)

    def clear(self) -> None:
        self.key = ""


class FakeClient(LLMClient):
    """Returns canned text (or raises) and records every prompt it was given."""

    def __init__(self, text: str = "", error: Exception | None = None):
        super().__init__("fake-model")
        self.text = text
        self.error = error
        self.calls = []

    def generate(self, prompt, max_tokens, temperature):
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return LLMResponse(self.text)


@pytest.fixture(autouse=True)
def cohere_provider(monkeypatch, tmp_path):
    """Tests never depend on the provider or key file configured in the developer's .env"""
    monkeypatch.setattr(config, "LLM_PROVIDER", "cohere")
    monkeypatch.setattr(config, "CREDENTIAL_FILE", tmp_path / "keys" / "api_key")


@pytest.fixture
def full_record():
    return ResumeRecord(
        personal_info=PersonalInfo(
            first_name="Jane",
            last_name="Doe",
            email="jane@example.com",
            phone="(555) 123-4567",
            location="Boston, MA",
            linkedin="https://linkedin.com/in/janedoe",
            website="https://janedoe.dev",
        ),
        summary="Backend engineer focused on data platforms.",
        education=[
            EducationEntry(
                institution="MIT",
                degree="B.S.",
                field_of_study="Computer Science",
                location="Cambridge, MA",
                start_date="2012",
                end_date="2016",
                gpa="3.9",
                achievements=["Dean's List"],
            )
        ],
        experience=[
            ExperienceEntry(
                company="Tech Corp",
                title="Senior Developer",
                start_date="2019",
                end_date="Present",
                description="Led the billing platform team.",
                achievements=["Cut query latency by 40%", "Mentored four engineers"],
            )
        ],
        skills=["Python", "SQL", "AWS"],
        certifications=[CertificationEntry(name="AWS Solutions Architect", issuer="Amazon", date="2023")],
        languages=[LanguageEntry(name="Spanish", proficiency="Fluent"), LanguageEntry(name="German")],
        projects=[
            ProjectEntry(
                name="Portfolio",
                description="Personal site",
                technologies=["Python", "Flask"],
                url="https://janedoe.dev",
            )
        ],
    )
