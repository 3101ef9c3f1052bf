"""
Tests for AI résumé improvement and its template fallback.
"""

import pytest

import config
from conftest import FakeClient, MemoryCredentialStore
from errors import NetworkError, ValidationError
from generator_llm import (
    DEFAULT_JOB,
    MIN_CONTENT_LENGTH,
    build_improve_prompt,
    check_generated_resume,
    generate_improved_resume,
    request_improved_resume,
)
from generator_rule import create_harvard_template

GOOD_OUTPUT = (
    "# Jane Doe\njane@example.com\n\n## Summary\n"
    "Backend engineer with eight years of experience building data platforms.\n\n"
    "## Experience\n### Tech Corp\n**Senior Developer** | 2019 - Present\n"
    "- Cut query latency by 40% across the billing platform\n"
    "- Mentored four engineers\n\n## Skills\nPython, SQL, AWS"
)


class TestCheckGeneratedResume:
    def test_short_output_rejected(self):
        with pytest.raises(ValidationError, match="too short"):
            check_generated_resume("## Experience\n" + "x" * 36)

    def test_output_without_sections_rejected(self):
        with pytest.raises(ValidationError, match="Missing required sections"):
            check_generated_resume("lorem ipsum " * 30)

    def test_one_section_is_enough(self):
        content = "## Skills\n" + "Python, " * 40
        assert check_generated_resume(content) == content

    def test_exact_minimum_length_passes(self):
        content = "skills" + "x" * (MIN_CONTENT_LENGTH - 6)
        assert len(content) == MIN_CONTENT_LENGTH
        assert check_generated_resume(content) == content


class TestPrompt:
    def test_contains_record_and_job(self, full_record):
        prompt = build_improve_prompt(full_record, "Data engineer at Acme")
        assert "Data engineer at Acme" in prompt
        assert '"company": "Tech Corp"' in prompt

    def test_blank_job_uses_general_position(self, full_record):
        assert DEFAULT_JOB in build_improve_prompt(full_record, "  ")


class TestRequestImprovedResume:
    def test_single_call_with_improve_params(self, full_record):
        client = FakeClient(GOOD_OUTPUT)
        assert request_improved_resume(full_record, "jd", client) == GOOD_OUTPUT
        assert len(client.calls) == 1
        assert client.calls[0]["max_tokens"] == 2000
        assert client.calls[0]["temperature"] == 0.3

    def test_code_fence_is_stripped(self, full_record):
        client = FakeClient("```markdown\n" + GOOD_OUTPUT + "\n```")
        assert request_improved_resume(full_record, "jd", client) == GOOD_OUTPUT

    def test_short_answer_raises(self, full_record):
        with pytest.raises(ValidationError):
            request_improved_resume(full_record, "jd", FakeClient("x" * 50))


class TestGenerateImprovedResume:
    def test_valid_answer_is_returned(self, full_record):
        assert generate_improved_resume(full_record, "jd", client=FakeClient(GOOD_OUTPUT)) == GOOD_OUTPUT

    def test_short_answer_falls_back_to_template(self, full_record):
        result = generate_improved_resume(full_record, "jd", client=FakeClient("x" * 50))
        assert result == create_harvard_template(full_record)

    def test_network_error_falls_back_once(self, full_record):
        client = FakeClient(error=NetworkError("Cohere API error: 500", 500))
        result = generate_improved_resume(full_record, "jd", client=client)
        assert result == create_harvard_template(full_record)
        assert len(client.calls) == 1

    def test_unexpected_error_falls_back(self, full_record):
        client = FakeClient(error=RuntimeError("boom"))
        result = generate_improved_resume(full_record, "jd", client=client)
        assert result == create_harvard_template(full_record)

    def test_unknown_provider_falls_back(self, full_record, monkeypatch):
        monkeypatch.setattr(config, "LLM_PROVIDER", "anthropic")
        result = generate_improved_resume(
            full_record, "jd", credentials=MemoryCredentialStore("key"), prompt=None
        )
        assert result == create_harvard_template(full_record)

    def test_missing_key_falls_back(self, full_record):
        result = generate_improved_resume(
            full_record, "jd", credentials=MemoryCredentialStore(), prompt=None
        )
        assert result == create_harvard_template(full_record)
