# resumeforge/services/resumes/render.py
"""Render a ParsedResume to a standalone HTML page with one of the bundled templates."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from resumeforge.core.config import settings
from resumeforge.core.errors import InvalidInputError
from resumeforge.schemas.resume import ParsedResume, effective_colors

TEMPLATES = ("classic", "modern", "minimal")
TEMPLATE_DIR = Path(__file__).resolve().parents[2] / "templates" / "resume"


@lru_cache(maxsize=1)
def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "html.j2"]),
    )


def _truncate(text: Optional[str], limit: int) -> Optional[str]:
    if not text or len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def render_resume_html(resume: ParsedResume, template: str = "classic") -> str:
    if template not in TEMPLATES:
        raise InvalidInputError(f"Unknown template '{template}'", details="Use one of: " + ", ".join(TEMPLATES))

    contact = resume.contact
    contact_items = []
    if contact is not None:
        contact_items = [v for v in (contact.email, contact.phone, contact.location, contact.linkedin, contact.github, contact.website) if v]

    return _get_env().get_template(f"{template}.html.j2").render(
        resume=resume,
        template=template,
        colors=effective_colors(resume.custom_colors),
        show_image=resume.has_profile_image,
        contact_items=contact_items,
        # display only; the stored summary is never shortened
        summary=_truncate(resume.summary, settings.SUMMARY_DISPLAY_LIMIT),
    )
