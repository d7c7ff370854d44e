# resumeforge/services/resumes/extraction/outcome.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from resumeforge.schemas.resume import ParsedResume

METHOD_AI = "ai"
METHOD_REGEX_FALLBACK = "regex_fallback"


@dataclass
class ExtractionOutcome:
    """Result of one extraction strategy: either a validated resume or the reason it failed."""
    method: str
    resume: Optional[ParsedResume] = None
    confidence: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.resume is not None and self.error is None

    @classmethod
    def success(cls, method: str, resume: ParsedResume, confidence: int) -> "ExtractionOutcome":
        return cls(method=method, resume=resume, confidence=confidence)

    @classmethod
    def failure(cls, method: str, error: str) -> "ExtractionOutcome":
        return cls(method=method, error=error)
