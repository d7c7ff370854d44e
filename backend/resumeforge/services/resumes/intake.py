# resumeforge/services/resumes/intake.py
"""Boundary checks for everything a client uploads or pastes.

All checks here run before any file parsing, AI call or database access, so a
rejected request costs nothing beyond reading the form.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, Optional

from resumeforge.core.config import settings
from resumeforge.core.errors import InvalidInputError
from resumeforge.schemas.resume import COLOR_KEYS
from resumeforge.services.resumes.parsing_utils import parse_to_text

logger = logging.getLogger("resumes.intake")

MIME_TO_TYPE = {
    "application/pdf": "pdf",
    "application/x-pdf": "pdf",
    "text/plain": "txt",
}
EXTENSION_TO_TYPE = {".pdf": "pdf", ".txt": "txt"}


@dataclass
class UploadedFile:
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def stem(self) -> str:
        return PurePath(self.filename or "").stem


def detect_file_type(filename: Optional[str], content_type: Optional[str]) -> Optional[str]:
    """Declared MIME type first; the file extension only when the MIME type is generic."""
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime in MIME_TO_TYPE:
        return MIME_TO_TYPE[mime]
    if mime and mime not in ("application/octet-stream", "binary/octet-stream"):
        return None
    suffix = PurePath(filename or "").suffix.lower()
    return EXTENSION_TO_TYPE.get(suffix)


def validate_upload(filename: Optional[str], content_type: Optional[str], size: Optional[int], *, label: str = "Resume file") -> str:
    """Check size and type of an upload; returns "pdf" or "txt"."""
    if not filename and not size:
        raise InvalidInputError(f"{label} is required")
    if size is not None and size > settings.MAX_RESUME_BYTES:
        limit_mb = settings.MAX_RESUME_BYTES // (1024 * 1024)
        raise InvalidInputError(f"{label} is too large (max {limit_mb} MB)")
    if size == 0:
        raise InvalidInputError(f"{label} is empty")
    file_type = detect_file_type(filename, content_type)
    if file_type is None:
        raise InvalidInputError(f"{label} must be a PDF or TXT document", details=f"content_type={content_type}")
    return file_type


def validate_job_spec_text(text: Optional[str]) -> Optional[str]:
    """Pasted job description; blank means none."""
    if text is None or not text.strip():
        return None
    text = text.strip()
    if len(text) > settings.MAX_JOB_SPEC_CHARS:
        raise InvalidInputError(
            f"Job specification is too long ({len(text)} characters, max {settings.MAX_JOB_SPEC_CHARS})"
        )
    return text


def validate_extra_prompt(text: Optional[str]) -> Optional[str]:
    if text is None or not text.strip():
        return None
    text = text.strip()
    if len(text) > settings.MAX_EXTRA_PROMPT_CHARS:
        raise InvalidInputError(
            f"Additional instructions are too long ({len(text)} characters, max {settings.MAX_EXTRA_PROMPT_CHARS})"
        )
    return text


def parse_custom_colors(raw: Optional[str]) -> Dict[str, str]:
    """Parse the ``customColors`` form field (a JSON object string)."""
    if raw is None or not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidInputError("customColors must be a JSON object", details=str(exc)) from exc
    if not isinstance(value, dict):
        raise InvalidInputError("customColors must be a JSON object")
    unknown = sorted(k for k in value if k not in COLOR_KEYS)
    if unknown:
        raise InvalidInputError("customColors contains unknown keys", details=", ".join(unknown))
    bad = sorted(k for k, v in value.items() if not isinstance(v, str))
    if bad:
        raise InvalidInputError("customColors values must be strings", details=", ".join(bad))
    return value


def read_resume_text(upload: UploadedFile, file_type: str) -> str:
    """Extract text from an already-validated resume upload."""
    try:
        text = parse_to_text(upload.data, file_type)
    except (RuntimeError, ValueError) as exc:
        logger.warning("Could not read %s as %s: %s", upload.filename, file_type, exc)
        if file_type == "pdf":
            message = "The PDF could not be read. Please upload a text-based PDF or a TXT file."
        else:
            message = "The text file could not be read. Please upload a UTF-8 encoded TXT file or a PDF."
        raise InvalidInputError(message) from exc

    if len(text) < settings.MIN_RESUME_TEXT_CHARS:
        raise InvalidInputError(
            "Insufficient content detected. Please upload a file containing resume text.",
            details=f"extracted {len(text)} characters",
        )
    return text


def read_job_spec_file(upload: UploadedFile) -> Optional[str]:
    """Extract and length-check the text of an uploaded job description."""
    file_type = validate_upload(upload.filename, upload.content_type, upload.size, label="Job specification file")
    try:
        text = parse_to_text(upload.data, file_type)
    except (RuntimeError, ValueError) as exc:
        raise InvalidInputError("The job specification file could not be read") from exc
    return validate_job_spec_text(text)
