# backend/resumeforge/models/__init__.py
from resumeforge.models.resume import Resume, ResumeVersion

__all__ = [
    "Resume",
    "ResumeVersion",
]
