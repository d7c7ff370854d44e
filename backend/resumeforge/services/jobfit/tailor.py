# resumeforge/services/jobfit/tailor.py
"""Tailoring caller: send the assembled prompt, validate the rewritten resume.

Unlike resume extraction there is no fallback here; an unusable answer is an
ADAPTATION_FAILED error for the caller.
"""
from __future__ import annotations

import logging
from typing import Optional

from resumeforge.core.config import settings
from resumeforge.core.errors import SchemaValidationError, TailoringFailedError, provider_error
from resumeforge.schemas.job_spec import JobSpec, Tone
from resumeforge.schemas.resume import ParsedResume, ResumeMetadata, validate_parsed_resume
from resumeforge.services.jobfit.prompt_builder import build_tailor_prompt

logger = logging.getLogger("jobfit.tailor")


def tailor_resume(
    resume: ParsedResume,
    job_spec: Optional[JobSpec],
    tone: Tone,
    extra_prompt: Optional[str],
    llm,
) -> ParsedResume:
    prompt = build_tailor_prompt(resume, job_spec, tone, extra_prompt)
    logger.info("Tailoring resume (tone=%s, job_spec=%s, prompt=%d chars)", tone.value, bool(job_spec), len(prompt))

    resp = llm.chat_json(
        [{"role": "user", "content": prompt}],
        timeout=settings.LLM_TIMEOUT_S,
        options={"temperature": 0.3},
    )
    if resp.error:
        logger.error("Tailoring call failed: %s", resp.error)
        raise provider_error(resp.error)

    data = dict(resp.data)
    raw_meta = data.pop("metadata", None)
    data.pop("profileImage", None)
    data.pop("customColors", None)
    commentary = raw_meta.get("aiTailorCommentary") if isinstance(raw_meta, dict) else None

    try:
        tailored = validate_parsed_resume(data)
    except SchemaValidationError as exc:
        logger.error("Tailored resume failed validation: %s", exc.fields)
        raise TailoringFailedError(
            "The tailored resume could not be generated. Please try again.",
            details=exc.details,
        ) from exc

    # Presentation choices belong to the user, not the model
    tailored.custom_colors = dict(resume.custom_colors)
    tailored.profile_image = resume.profile_image
    meta = resume.metadata.model_copy() if resume.metadata else ResumeMetadata()
    meta.ai_tailor_commentary = commentary if isinstance(commentary, str) else None
    tailored.metadata = meta
    return tailored
