"""
LLM-based ATS analysis.

Scores a résumé against a job description. The model is asked for JSON;
the first {...} span of its answer is validated into an AnalysisResult.
An answer we cannot parse yields a generic default analysis, while
network and credential failures are reported as AnalysisError.
"""

from __future__ import annotations
import json, logging, re, textwrap
from typing import Callable

from pydantic import ValidationError as SchemaError

import config
from credentials import CredentialStore
from errors import AnalysisError
from llm_client import LLMClient, client_from_credentials
from schema_resume import AnalysisResult

logger = logging.getLogger(__name__)

_JSON_FINDER = re.compile(r"\{.*\}", re.S)

_PROMPT_ANALYZE = textwrap.dedent(
    """\
    You are an expert ATS (Applicant Tracking System) analyzer and HR professional with extensive experience in resume optimization.

    Analyze this resume against the job description in extreme detail. Focus on:

    1. DETAILED KEYWORD ANALYSIS:
       - Extract ALL keywords from the job description
       - Check for exact matches, partial matches, and semantic matches
       - Consider industry-specific terminologies and variations

    2. SKILLS ASSESSMENT:
       - Technical skills alignment
       - Soft skills presence
       - Required certifications/qualifications
       - Experience level match

    3. EXPERIENCE EVALUATION:
       - Role responsibilities alignment
       - Industry relevance
       - Achievement metrics
       - Leadership/management requirements

    4. COMPREHENSIVE STRUCTURE ANALYSIS:
       - Section organization
       - Content hierarchy
       - Information flow
       - Professional formatting

    5. DETAILED RECOMMENDATIONS:
       - Specific phrasing improvements
       - Missing critical experiences
       - Quantifiable achievements
       - Technical proficiency demonstrations

    Resume:
    {resume_text}

    Job Description:
    {job_description}

    Return your analysis as a JSON object with this structure:
    {schema}"""
)

_SCHEMA_HINT = textwrap.dedent(
    """\
    {
      "score": [number between 1-100],
      "suggestions": {
        "keywords": {"missing": [...], "found": [...]},
        "structure": {"issues": [...], "recommendations": [...]},
        "formatting": {"issues": [...], "recommendations": [...]},
        "content": {"issues": [...], "recommendations": [...]}
      }
    }"""
)


def default_analysis() -> AnalysisResult:
    """Generic advice used when the model's answer cannot be parsed."""
    return AnalysisResult.model_validate(
        {
            "score": 75,
            "suggestions": {
                "keywords": {
                    "missing": ["key skills from job description"],
                    "found": ["existing skills from resume"],
                },
                "structure": {
                    "issues": ["Review resume structure"],
                    "recommendations": ["Add more achievements"],
                },
                "formatting": {
                    "issues": ["Check formatting"],
                    "recommendations": ["Ensure consistent format"],
                },
                "content": {
                    "issues": ["Review content"],
                    "recommendations": ["Add specific examples"],
                },
            },
        }
    )


def _extract_json(raw: str) -> dict:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        if m := _JSON_FINDER.search(raw):
            return json.loads(m.group())
        raise


def parse_analysis(raw: str) -> AnalysisResult:
    try:
        return AnalysisResult.model_validate(_extract_json(raw.strip()))
    except (json.JSONDecodeError, SchemaError, TypeError, ValueError) as e:
        logger.error("Error parsing AI response: %s", e)
        return default_analysis()


def analyze_resume(
    resume_text: str,
    job_description: str,
    client: LLMClient | None = None,
    credentials: CredentialStore | None = None,
    prompt: Callable[[str], str] | None = None,
) -> AnalysisResult:
    logger.info("Analyzing resume against job description...")
    prompt_text = _PROMPT_ANALYZE.format(
        resume_text=resume_text,
        job_description=job_description,
        schema=_SCHEMA_HINT,
    )
    try:
        if client is None:
            client = client_from_credentials(credentials, prompt=prompt)
        rsp = client.generate(
            prompt_text,
            max_tokens=config.ANALYZE_PARAMS["max_tokens"],
            temperature=config.ANALYZE_PARAMS["temperature"],
        )
    except Exception as e:
        logger.error("Error analyzing resume: %s", e)
        raise AnalysisError("Resume analysis failed. Please try again.") from e

    return parse_analysis(rsp.text)
