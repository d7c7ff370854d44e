# resumeforge/schemas/job_spec.py
"""JobSpec (transient job-posting extraction) and the tailoring context stored with a resume."""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import Field, ValidationError, field_validator

from resumeforge.core.config import settings
from resumeforge.core.errors import InvalidInputError, SchemaValidationError
from resumeforge.schemas.resume import CamelModel, error_paths


class Tone(str, Enum):
    FORMAL = "Formal"
    NEUTRAL = "Neutral"
    CREATIVE = "Creative"


class JobSpec(CamelModel):
    position_title: str = Field(..., min_length=1, max_length=100)
    required_skills: List[str] = Field(..., min_length=1, max_length=50)
    years_experience: Optional[int] = Field(default=None, ge=0, le=50)
    responsibilities: List[str] = Field(default_factory=list, max_length=20)
    company_values: List[str] = Field(default_factory=list, max_length=10)
    industry_type: Optional[str] = Field(default=None, max_length=50)
    team_size: Optional[Literal["small", "medium", "large", "enterprise"]] = None

    @field_validator("responsibilities", "company_values", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


class UserAdditionalContext(CamelModel):
    job_spec_source: Literal["upload", "pasted"]
    job_spec_text: Optional[str] = Field(default=None, max_length=settings.MAX_JOB_SPEC_CHARS)
    job_spec_file_name: Optional[str] = None
    tone: Tone = Tone.NEUTRAL
    extra_prompt: Optional[str] = Field(default=None, max_length=settings.MAX_EXTRA_PROMPT_CHARS)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def validate_job_spec(value: Any) -> JobSpec:
    """Validate an AI-produced value as a JobSpec; raises SchemaValidationError."""
    if not isinstance(value, dict):
        raise SchemaValidationError("Job spec must be a JSON object", fields=["<root>"])
    try:
        return JobSpec.model_validate(value)
    except ValidationError as exc:
        raise SchemaValidationError("Job spec does not match the expected schema", fields=error_paths(exc)) from exc


def parse_tone(raw: Optional[str]) -> Tone:
    """Case-insensitive tone lookup; blank means Neutral."""
    if raw is None or not raw.strip():
        return Tone.NEUTRAL
    for tone in Tone:
        if tone.value.lower() == raw.strip().lower():
            return tone
    allowed = ", ".join(t.value for t in Tone)
    raise InvalidInputError(f"Unknown tone '{raw}'. Allowed: {allowed}")
