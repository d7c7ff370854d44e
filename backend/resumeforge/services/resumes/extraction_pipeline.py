# resumeforge/services/resumes/extraction_pipeline.py
"""
Resume Extraction Pipeline - AI extraction first, deterministic regex extraction as the single fallback.

Each strategy returns an ExtractionOutcome; the pipeline picks the next strategy by
looking at the outcome instead of catching exceptions. There are no retries against
the AI provider here.
"""
from __future__ import annotations

import logging
from typing import Optional

from resumeforge.core.config import settings
from resumeforge.core.errors import SchemaValidationError
from resumeforge.schemas.resume import Contact, ParsedResume, validate_parsed_resume
from resumeforge.services.resumes.extraction.deterministic import EMAIL_RE, extract_with_regex
from resumeforge.services.resumes.extraction.llm_extractor import AIResumeExtractor
from resumeforge.services.resumes.extraction.outcome import METHOD_REGEX_FALLBACK, ExtractionOutcome
from resumeforge.services.resumes.validation import assess_quality

logger = logging.getLogger("resumes.extraction")


class RegexResumeExtractor:
    method = METHOD_REGEX_FALLBACK

    def extract(self, text: str) -> ExtractionOutcome:
        payload, confidence = extract_with_regex(text)
        try:
            resume = validate_parsed_resume(payload)
        except SchemaValidationError as exc:
            # Keep whatever is certain: the email address.
            logger.error("Regex extraction produced an invalid document (%s); keeping contacts only", exc.details)
            email = EMAIL_RE.search(text or "")
            resume = ParsedResume(contact=Contact(email=email.group(0)) if email else None)
            confidence = 15
        return ExtractionOutcome.success(self.method, resume, confidence)


def extract_resume(text: str, llm, *, use_ai: Optional[bool] = None) -> ExtractionOutcome:
    """Try the AI extractor once; on any failure run the regex extractor."""
    if use_ai is None:
        use_ai = settings.USE_LLM_EXTRACTION

    if use_ai:
        outcome = AIResumeExtractor(llm).extract(text)
        if outcome.ok:
            _log_quality(outcome)
            return outcome
        logger.warning("AI extraction failed (%s); falling back to regex extraction", outcome.error)
    else:
        logger.info("AI extraction disabled; using regex extraction")

    outcome = RegexResumeExtractor().extract(text)
    _log_quality(outcome)
    return outcome


def _log_quality(outcome: ExtractionOutcome) -> None:
    report = assess_quality(outcome.resume)
    if report.warnings or report.errors:
        logger.warning(
            "Extraction (%s) quality %.2f; errors=%s warnings=%s",
            outcome.method, report.quality_score, report.errors, report.warnings,
        )
