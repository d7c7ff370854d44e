# resumeforge/services/jobfit/job_spec_extractor.py
"""Job-spec extraction: one AI call, validated against JobSpec.

Any failure (provider down, bad JSON, schema mismatch) degrades to an empty job
spec so tailoring can still run without job-specific grounding.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from resumeforge.core.config import settings
from resumeforge.core.errors import SchemaValidationError
from resumeforge.schemas.job_spec import JobSpec, validate_job_spec
from resumeforge.services.common.llm_client import load_prompt

logger = logging.getLogger("jobfit.extractor")

JOB_SPEC_EXTRACTION_PROMPT = load_prompt("jobfit/job_spec_extraction.prompt.txt")


@dataclass
class JobSpecOutcome:
    job_spec: Optional[JobSpec] = None
    confidence: int = 0
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.job_spec is None


def calculate_extraction_confidence(spec: JobSpec) -> int:
    confidence = 0
    if len(spec.position_title) > 3:
        confidence += 25
    if spec.required_skills:
        confidence += 35
    if spec.years_experience is not None:
        confidence += 15
    if spec.responsibilities:
        confidence += 15
    if spec.company_values:
        confidence += 10
    return min(confidence, 95)


def extract_job_spec(text: str, llm) -> JobSpecOutcome:
    if not llm.enabled:
        logger.warning("Job spec extraction skipped: no AI provider configured")
        return JobSpecOutcome(error="llm_disabled")

    messages = [
        {"role": "system", "content": JOB_SPEC_EXTRACTION_PROMPT},
        {"role": "user", "content": f"Job Specification:\n{text}\n\nReturn JSON only."},
    ]
    resp = llm.chat_json(messages, timeout=settings.LLM_TIMEOUT_S, options={"temperature": 0.1})
    if resp.error:
        logger.warning("Job spec extraction failed (provider): %s; continuing without job spec", resp.error)
        return JobSpecOutcome(error=f"provider_error: {resp.error}")

    try:
        spec = validate_job_spec(resp.data)
    except SchemaValidationError as exc:
        logger.warning("Job spec extraction returned invalid data (%s); continuing without job spec", exc.details)
        return JobSpecOutcome(error=f"validation_failed: {', '.join(exc.fields)}")

    confidence = calculate_extraction_confidence(spec)
    logger.info("Job spec extracted: %r (%d skills, confidence %d%%)", spec.position_title, len(spec.required_skills), confidence)
    return JobSpecOutcome(job_spec=spec, confidence=confidence)
