"""Resume quality checks: completeness and consistency of an already schema-valid ParsedResume."""
from __future__ import annotations

import re
from typing import Any, Dict, List

from resumeforge.schemas.resume import ParsedResume

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PLACEHOLDER_VALUES = {"unknown degree", "unknown institution", "unknown issuer"}


class ValidationResult:
    """Result of a validation check."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.info: List[str] = []
        self.quality_score: float = 1.0

    def add_error(self, message: str):
        self.errors.append(message)
        self.quality_score = max(0.0, self.quality_score - 0.2)

    def add_warning(self, message: str):
        self.warnings.append(message)
        self.quality_score = max(0.0, self.quality_score - 0.1)

    def add_info(self, message: str):
        self.info.append(message)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def summary(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid,
            "quality_score": round(self.quality_score, 2),
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
        }


def assess_quality(resume: ParsedResume) -> ValidationResult:
    """
    Score how complete an extraction is.

    Checks:
    - Identity and contact fields present
    - Experience / education entries carry their key fields
    - Skills present
    """
    result = ValidationResult()

    _check_person(resume, result)
    _check_experience(resume, result)
    _check_education(resume, result)
    _check_skills(resume, result)

    if not any([resume.summary, resume.experience, resume.education, resume.skills]):
        result.add_error("No resume sections extracted")

    return result


def _check_person(resume: ParsedResume, result: ValidationResult):
    if not resume.name or len(resume.name.strip()) < 2:
        result.add_warning("Missing or invalid candidate name")

    contact = resume.contact
    if contact is None or not (contact.email or contact.phone):
        result.add_warning("No contact information (email/phone) extracted")
    elif contact.email and not EMAIL_PATTERN.match(contact.email):
        result.add_warning(f"Suspicious email format: {contact.email}")

    if not resume.title:
        result.add_info("No professional title found")


def _check_experience(resume: ParsedResume, result: ValidationResult):
    if not resume.experience:
        result.add_warning("No work experience extracted")
        return

    for idx, item in enumerate(resume.experience):
        if not item.display_title:
            result.add_warning(f"Experience #{idx + 1}: missing job title")
        if not item.company:
            result.add_warning(f"Experience #{idx + 1}: missing company")
        if not item.duration:
            result.add_info(f"Experience #{idx + 1}: no dates")


def _check_education(resume: ParsedResume, result: ValidationResult):
    if not resume.education:
        result.add_info("No education entries")
        return
    for idx, item in enumerate(resume.education):
        if item.degree.lower() in PLACEHOLDER_VALUES or item.institution.lower() in PLACEHOLDER_VALUES:
            result.add_warning(f"Education #{idx + 1}: incomplete degree/institution")


def _check_skills(resume: ParsedResume, result: ValidationResult):
    if not resume.skills:
        result.add_warning("No skills extracted")
    elif len(resume.skills) < 3:
        result.add_info("Very few skills extracted")
