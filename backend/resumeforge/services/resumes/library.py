# resumeforge/services/resumes/library.py
"""Saved-resume library: create, list, replace, delete, public sharing and counters.

Data access lives in ``resume_repo``; this module owns the rules (ownership,
whole-document replace, optimistic version checks, slug generation).
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from resumeforge.core.errors import (
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    VersionConflictError,
)
from resumeforge.models.resume import Resume, ResumeVersion
from resumeforge.repositories import resume_repo
from resumeforge.schemas.resume import ParsedResume, validate_parsed_resume
from resumeforge.services.resumes.slugs import public_slug

logger = logging.getLogger("resumes.repo")

SLUG_ATTEMPTS = 5
UNTITLED = "Untitled Resume"


def resume_title(resume: ParsedResume, filename_stem: Optional[str] = None) -> str:
    """Name first, then the uploaded file's stem, then a placeholder."""
    for candidate in (resume.name, filename_stem):
        if candidate and candidate.strip():
            return candidate.strip()[:255]
    return UNTITLED


def _unique_slug(db: Session, title: str) -> str:
    for _ in range(SLUG_ATTEMPTS):
        slug = public_slug(title)
        if not resume_repo.slug_exists(db, slug):
            return slug
    return f"{public_slug(title)}-{uuid.uuid4().hex[:6]}"


def save_parsed_resume(
    db: Session,
    *,
    owner_id: str,
    resume: ParsedResume,
    title: Optional[str] = None,
    is_public: bool = True,
    parse_method: Optional[str] = None,
    confidence: Optional[float] = None,
    filename: Optional[str] = None,
    file_type: Optional[str] = None,
    file_size: Optional[int] = None,
    additional_context: Optional[Dict[str, Any]] = None,
) -> Resume:
    """Insert a new library row with a fresh public slug."""
    title = title or resume_title(resume)
    last_error: Optional[Exception] = None
    for _ in range(2):
        slug = _unique_slug(db, title)
        try:
            row = resume_repo.create_resume(
                db,
                owner_id=owner_id,
                title=title,
                slug=slug,
                parsed_data=resume.to_payload(),
                is_public=is_public,
                parse_method=parse_method,
                confidence_score=confidence,
                original_filename=filename,
                file_type=file_type,
                file_size=file_size,
                additional_context=additional_context,
            )
        except IntegrityError as exc:
            # slug taken between the check and the insert
            db.rollback()
            last_error = exc
            continue
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Saving resume for owner %s failed", owner_id)
            raise PersistenceError("Could not save the resume. Please try again.") from exc
        logger.info("Saved resume %s (slug=%s) for owner %s", row.id, row.slug, owner_id)
        return row

    logger.error("Could not allocate a unique slug for %r: %s", title, last_error)
    raise PersistenceError("Could not save the resume. Please try again.")


def list_owner_resumes(db: Session, owner_id: str, *, offset: int = 0, limit: int = 50) -> Tuple[list[Resume], int]:
    return resume_repo.list_by_owner(db, owner_id, offset=offset, limit=limit)


def get_owned_resume(db: Session, resume_id: UUID, owner_id: str) -> Resume:
    resume = resume_repo.get_resume(db, resume_id)
    if resume is None:
        raise NotFoundError("Resume not found")
    if resume.owner_id != owner_id:
        raise ForbiddenError("You do not have access to this resume")
    return resume


def replace_resume(
    db: Session,
    resume_id: UUID,
    owner_id: str,
    *,
    parsed_data: Optional[Dict[str, Any]] = None,
    is_public: Optional[bool] = None,
    expected_version: Optional[int] = None,
) -> Resume:
    """Replace the stored document as a whole (no field merge).

    ``expected_version`` turns on the optimistic check: a stale version is rejected
    with VERSION_CONFLICT instead of silently overwriting a newer edit.
    """
    resume = get_owned_resume(db, resume_id, owner_id)

    payload = None
    if parsed_data is not None:
        payload = validate_parsed_resume(parsed_data).to_payload()

    if expected_version is not None and expected_version != resume.version:
        raise VersionConflictError(
            "This resume was changed elsewhere. Reload it before saving.",
            details=f"expected version {expected_version}, current version {resume.version}",
        )

    try:
        ok = resume_repo.replace_document(
            db,
            resume,
            parsed_data=payload,
            is_public=is_public,
            changes_summary="Edited resume",
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Updating resume %s failed", resume_id)
        raise PersistenceError("Could not save the resume. Please try again.") from exc
    if not ok:
        raise VersionConflictError("This resume was changed elsewhere. Reload it before saving.")
    return resume


def delete_resume(db: Session, resume_id: UUID, owner_id: str) -> None:
    resume = get_owned_resume(db, resume_id, owner_id)
    try:
        resume_repo.delete_resume(db, resume)
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Could not delete the resume") from exc
    logger.info("Deleted resume %s for owner %s", resume_id, owner_id)


def list_resume_versions(db: Session, resume_id: UUID, owner_id: str) -> list[ResumeVersion]:
    get_owned_resume(db, resume_id, owner_id)
    return resume_repo.list_versions(db, resume_id)


def get_public_resume(db: Session, slug: str) -> Resume:
    resume = resume_repo.get_by_slug(db, slug)
    if resume is None or not resume.is_public:
        raise NotFoundError("Resume not found")
    return resume


def record_view(db: Session, slug: str) -> int:
    resume = get_public_resume(db, slug)
    count = resume_repo.increment_counter(db, resume.id, "view_count")
    if count is None:
        raise NotFoundError("Resume not found")
    return count


def record_download(db: Session, resume_id: UUID, owner_id: Optional[str]) -> Resume:
    """Owners may export any of their resumes; others only public ones."""
    resume = resume_repo.get_resume(db, resume_id)
    if resume is None or (resume.owner_id != owner_id and not resume.is_public):
        raise NotFoundError("Resume not found")
    resume_repo.increment_counter(db, resume.id, "download_count")
    db.refresh(resume)
    return resume
