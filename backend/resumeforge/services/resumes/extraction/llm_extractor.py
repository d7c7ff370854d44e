# resumeforge/services/resumes/extraction/llm_extractor.py
"""AI resume extraction: one JSON chat call, then schema validation. Never raises."""
from __future__ import annotations

import logging
from typing import Any, Dict

from resumeforge.core.config import settings
from resumeforge.core.errors import SchemaValidationError
from resumeforge.schemas.resume import validate_parsed_resume
from resumeforge.services.common.llm_client import load_prompt
from resumeforge.services.resumes.extraction.outcome import METHOD_AI, ExtractionOutcome

logger = logging.getLogger("resumes.extraction")

RESUME_EXTRACTION_PROMPT = load_prompt("resumes/resume_extraction.prompt.txt")
AI_CONFIDENCE = 90

# Presentation-only fields are owned by the client, never by the model.
CLIENT_OWNED_FIELDS = ("profileImage", "customColors", "metadata")


def _unwrap(data: Dict[str, Any]) -> Dict[str, Any]:
    """Some models nest the document under a single key like {"resume": {...}}."""
    if len(data) == 1:
        (only,) = data.values()
        if isinstance(only, dict) and ("experience" in only or "name" in only):
            return only
    return data


class AIResumeExtractor:
    method = METHOD_AI

    def __init__(self, llm):
        self.llm = llm

    def extract(self, text: str) -> ExtractionOutcome:
        if not self.llm.enabled:
            return ExtractionOutcome.failure(self.method, "llm_disabled")

        messages = [
            {"role": "system", "content": RESUME_EXTRACTION_PROMPT},
            {"role": "user", "content": f"Resume content to parse:\n---\n{text}\n---\nReturn JSON only."},
        ]
        resp = self.llm.chat_json(messages, timeout=settings.LLM_TIMEOUT_S)
        if resp.error:
            return ExtractionOutcome.failure(self.method, f"provider_error: {resp.error}")

        data = {k: v for k, v in _unwrap(resp.data).items() if k not in CLIENT_OWNED_FIELDS}
        try:
            resume = validate_parsed_resume(data)
        except SchemaValidationError as exc:
            return ExtractionOutcome.failure(self.method, f"validation_failed: {', '.join(exc.fields)}")

        if not (resume.name or resume.experience or resume.education or resume.skills):
            return ExtractionOutcome.failure(self.method, "empty_extraction")

        logger.info("AI extraction succeeded: %d roles, %d skills", len(resume.experience), len(resume.skills))
        return ExtractionOutcome.success(self.method, resume, AI_CONFIDENCE)
