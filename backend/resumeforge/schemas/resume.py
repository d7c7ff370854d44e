# resumeforge/schemas/resume.py
"""Pydantic models for the canonical ParsedResume document and the library API.

Wire format is camelCase (``profileImage``, ``customColors``); Python code uses
snake_case attributes. ``validate_parsed_resume`` is the single gate every AI
response and every client payload goes through before being persisted or rendered.
"""
from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from resumeforge.core.errors import SchemaValidationError

PROFILE_IMAGE_OMITTED = "omitted"

# CSS custom properties a resume may override; anything else is rejected.
DEFAULT_COLORS: Dict[str, str] = {
    "--mint-light": "#d8b08c",
    "--teal-dark": "#1f3736",
    "--charcoal": "#565854",
    "--mint-background": "#c4f0dc",
    "--bronze-dark": "#a67244",
    "--peach": "#f9b87f",
    "--coffee": "#3e2f22",
    "--teal-main": "#116964",
    "--light-grey-background": "#f5f5f5",
    "--off-white": "#faf4ec",
    "--light-brown-border": "#a49990c7",
    "--light-grey-border": "#cecac6",
}
COLOR_KEYS = frozenset(DEFAULT_COLORS)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class Contact(CamelModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    website: Optional[str] = None


class ExperienceItem(CamelModel):
    id: Optional[str] = None
    title: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None
    duration: Optional[str] = None
    details: List[str] = Field(default_factory=list)

    @field_validator("details", mode="before")
    @classmethod
    def _details_none_to_list(cls, value: Any) -> Any:
        return _none_to_list(value)

    @property
    def display_title(self) -> Optional[str]:
        return self.title or self.role


class EducationItem(CamelModel):
    id: Optional[str] = None
    degree: str
    institution: str
    duration: Optional[str] = None
    note: Optional[str] = None


class CertificationItem(CamelModel):
    id: Optional[str] = None
    name: str
    issuer: str
    date: Optional[str] = None


class ResumeMetadata(CamelModel):
    last_updated: Optional[str] = None
    version: Optional[str] = None
    source: Optional[str] = None
    ai_tailor_commentary: Optional[str] = None


class ParsedResume(CamelModel):
    name: Optional[str] = None
    title: Optional[str] = None
    summary: Optional[str] = None
    contact: Optional[Contact] = None
    experience: List[ExperienceItem] = Field(default_factory=list)
    education: List[EducationItem] = Field(default_factory=list)
    certifications: List[CertificationItem] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    profile_image: Optional[str] = None
    custom_colors: Dict[str, str] = Field(default_factory=dict)
    metadata: Optional[ResumeMetadata] = None

    @field_validator("experience", "education", "certifications", "skills", mode="before")
    @classmethod
    def _lists_none_to_list(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("custom_colors", mode="before")
    @classmethod
    def _colors_none_to_dict(cls, value: Any) -> Any:
        return {} if value is None or value == [] else value

    @field_validator("custom_colors")
    @classmethod
    def _known_color_keys(cls, value: Dict[str, str]) -> Dict[str, str]:
        unknown = sorted(k for k in value if k not in COLOR_KEYS)
        if unknown:
            raise ValueError(f"unknown color keys: {', '.join(unknown)}")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Wire/storage representation (camelCase, nulls dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def has_profile_image(self) -> bool:
        return is_profile_image_present(self.profile_image)


def is_profile_image_present(value: Optional[str]) -> bool:
    """Empty string and the "omitted" sentinel both mean no image."""
    if not value:
        return False
    return value.strip() not in ("", PROFILE_IMAGE_OMITTED)


def effective_colors(custom: Optional[Dict[str, str]]) -> Dict[str, str]:
    """System defaults overlaid with the resume's own colors."""
    merged = dict(DEFAULT_COLORS)
    for key, value in (custom or {}).items():
        if key in COLOR_KEYS and value:
            merged[key] = value
    return merged


def _derived_id(list_name: str, index: int, item: BaseModel, salt: int = 0) -> str:
    content = item.model_dump_json(exclude={"id"})
    return hashlib.sha1(f"{list_name}:{index}:{salt}:{content}".encode("utf-8")).hexdigest()[:12]


def ensure_item_ids(resume: ParsedResume) -> ParsedResume:
    """Give every list item an id that is unique within its list.

    Existing unique ids are kept. Missing or repeated ones are derived from the
    list name, position and item content, so the same payload always gets the
    same ids.
    """
    lists = (
        ("experience", resume.experience),
        ("education", resume.education),
        ("certifications", resume.certifications),
    )
    for list_name, items in lists:
        taken = {item.id for item in items if item.id}
        seen: set[str] = set()
        for index, item in enumerate(items):
            if not item.id or item.id in seen:
                salt = 0
                new_id = _derived_id(list_name, index, item)
                while new_id in taken:
                    salt += 1
                    new_id = _derived_id(list_name, index, item, salt)
                item.id = new_id
                taken.add(new_id)
            seen.add(item.id)
    return resume


def error_paths(exc: ValidationError) -> List[str]:
    paths = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        paths.append(loc or "<root>")
    return paths


def validate_parsed_resume(value: Any) -> ParsedResume:
    """Validate an arbitrary JSON value as a ParsedResume.

    Raises SchemaValidationError listing the offending field paths. Never truncates.
    """
    if isinstance(value, ParsedResume):
        return ensure_item_ids(value)
    if not isinstance(value, dict):
        raise SchemaValidationError("Resume data must be a JSON object", fields=["<root>"])
    try:
        resume = ParsedResume.model_validate(value)
    except ValidationError as exc:
        raise SchemaValidationError("Resume data does not match the expected schema", fields=error_paths(exc)) from exc
    return ensure_item_ids(resume)


# --- Library API models ---

class ResumeMeta(CamelModel):
    method: str
    confidence: int
    filename: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    resume_id: Optional[UUID] = None
    resume_slug: Optional[str] = None
    temp_token: Optional[str] = None
    tailored: bool = False
    ai_tailor_commentary: Optional[str] = None


class ParseResponse(CamelModel):
    data: Dict[str, Any]
    meta: ResumeMeta


class ResumeSummary(CamelModel):
    id: UUID
    title: str
    slug: str
    is_public: bool
    parse_method: Optional[str] = None
    view_count: int = 0
    download_count: int = 0
    version: int = 1
    created_at: datetime
    updated_at: datetime


class ResumeListOut(CamelModel):
    items: list[ResumeSummary]
    total: int


class ResumeDetail(ResumeSummary):
    parsed_data: Dict[str, Any]
    confidence_score: Optional[float] = None
    original_filename: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    additional_context: Optional[Dict[str, Any]] = None


class PublicResumeOut(CamelModel):
    title: str
    slug: str
    parsed_data: Dict[str, Any]
    view_count: int = 0
    created_at: datetime


class ResumeCreate(CamelModel):
    parsed_data: Dict[str, Any]
    title: Optional[str] = None
    is_public: bool = True


class ResumeUpdate(CamelModel):
    """Whole-document replace: ``parsedData`` replaces the stored payload as-is."""
    parsed_data: Optional[Dict[str, Any]] = None
    is_public: Optional[bool] = None
    expected_version: Optional[int] = Field(default=None, ge=1)


class ResumeVersionOut(CamelModel):
    version_number: int
    parsed_data: Dict[str, Any]
    changes_summary: Optional[str] = None
    created_at: datetime
