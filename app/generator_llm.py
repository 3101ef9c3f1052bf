"""
LLM-based résumé improvement.

• Sends the structured résumé and the job description to the configured
  provider exactly once per request (no retry loop).
• Rejects answers that are too short or lack the expected sections.
• Any failure falls back to the deterministic Harvard template, so the
  user always gets something usable.
"""

from __future__ import annotations
import logging
import textwrap
from typing import Callable

import config
from cleaner import strip_fences
from credentials import CredentialStore
from errors import ValidationError
from generator_rule import create_harvard_template
from llm_client import LLMClient, client_from_credentials
from schema_resume import ResumeRecord

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 200
REQUIRED_SECTIONS = ("experience", "education", "skills")
DEFAULT_JOB = "General professional position"

_PROMPT_IMPROVE = textwrap.dedent(
    """\
    Create a professional ATS-optimized resume using this data:

    {resume_json}

    Job Description:
    {job_description}

    Instructions:
    1. Format as a professional resume
    2. Use strong action verbs
    3. Include quantifiable achievements
    4. Incorporate relevant keywords
    5. Maintain chronological order
    6. Use clear section headers

    Format:
    # [Full Name]
    [Contact Info]

    ## Summary
    [Professional summary]

    ## Experience
    ### [Company Name]
    [Job Title] | [Dates]
    - [Achievement/Responsibility]

    ## Education
    ### [Institution]
    [Degree] | [Dates]

    ## Skills
    [Key skills and technologies]

    Ensure all content is professional and ATS-friendly."""
)


def build_improve_prompt(record: ResumeRecord, job_description: str) -> str:
    return _PROMPT_IMPROVE.format(
        resume_json=record.model_dump_json(indent=2),
        job_description=job_description.strip() or DEFAULT_JOB,
    )


def check_generated_resume(content: str) -> str:
    """Raise ValidationError unless `content` looks like a usable résumé."""
    if len(content) < MIN_CONTENT_LENGTH:
        raise ValidationError(
            f"Generated content too short ({len(content)} < {MIN_CONTENT_LENGTH} characters)"
        )
    lowered = content.lower()
    if not any(section in lowered for section in REQUIRED_SECTIONS):
        raise ValidationError("Missing required sections")
    return content


def request_improved_resume(
    record: ResumeRecord,
    job_description: str,
    client: LLMClient,
) -> str:
    """One call to the provider. Raises on any problem."""
    rsp = client.generate(
        build_improve_prompt(record, job_description),
        max_tokens=config.IMPROVE_PARAMS["max_tokens"],
        temperature=config.IMPROVE_PARAMS["temperature"],
    )
    return check_generated_resume(strip_fences(rsp.text))


def generate_improved_resume(
    record: ResumeRecord,
    job_description: str = "",
    client: LLMClient | None = None,
    credentials: CredentialStore | None = None,
    prompt: Callable[[str], str] | None = None,
) -> str:
    """
    Improved markdown résumé for `job_description`.

    Never raises: provider, credential, validation and any other failure
    is logged and the Harvard template rendering of `record` is returned
    instead.

    Args:
        record: The structured résumé.
        job_description: Target job posting; blank means a general position.
        client: Provider client; built from configuration when omitted.
        credentials: Where to look for (and remember) the API key.
        prompt: How to ask the user for a missing key; None never asks.
    """
    logger.info("Generating improved resume...")
    try:
        if client is None:
            client = client_from_credentials(credentials, prompt=prompt)
        return request_improved_resume(record, job_description, client)
    except Exception as e:
        logger.warning("Resume generation failed (%s); falling back to template", e)
        return create_harvard_template(record)
