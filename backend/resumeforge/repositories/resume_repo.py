from __future__ import annotations
from typing import Any, Optional, Tuple
from uuid import UUID
from sqlalchemy import select, func, update
from sqlalchemy.orm import Session
from resumeforge.models.resume import Resume, ResumeVersion


def create_resume(
    db: Session,
    *,
    owner_id: str,
    title: str,
    slug: str,
    parsed_data: dict,
    is_public: bool = True,
    parse_method: Optional[str] = None,
    confidence_score: Optional[float] = None,
    original_filename: Optional[str] = None,
    file_type: Optional[str] = None,
    file_size: Optional[int] = None,
    additional_context: Optional[dict] = None,
) -> Resume:
    r = Resume(
        owner_id=owner_id,
        title=title,
        slug=slug,
        parsed_data=parsed_data,
        is_public=is_public,
        parse_method=parse_method,
        confidence_score=confidence_score,
        original_filename=original_filename,
        file_type=file_type,
        file_size=file_size,
        additional_context=additional_context,
        view_count=0,
        download_count=0,
        version=1,
    )
    db.add(r)
    db.commit()
    db.refresh(r)
    return r


def get_resume(db: Session, resume_id: UUID) -> Optional[Resume]:
    return db.get(Resume, resume_id)


def get_by_slug(db: Session, slug: str) -> Optional[Resume]:
    stmt = select(Resume).where(Resume.slug == slug)
    return db.execute(stmt).scalar_one_or_none()


def slug_exists(db: Session, slug: str) -> bool:
    stmt = select(func.count()).select_from(Resume).where(Resume.slug == slug)
    return db.execute(stmt).scalar_one() > 0


def list_by_owner(db: Session, owner_id: str, *, offset: int = 0, limit: int = 50) -> Tuple[list[Resume], int]:
    total = db.execute(select(func.count()).select_from(Resume).where(Resume.owner_id == owner_id)).scalar_one()
    rows = db.execute(
        select(Resume)
        .where(Resume.owner_id == owner_id)
        .order_by(Resume.created_at.desc(), Resume.id)
        .offset(offset)
        .limit(limit)
    ).scalars().all()
    return rows, total


def replace_document(
    db: Session,
    resume: Resume,
    *,
    parsed_data: Optional[dict],
    is_public: Optional[bool],
    changes_summary: Optional[str] = None,
) -> bool:
    """Whole-document replace guarded by the row's current version.

    When the payload changes, the previous payload is kept as a ResumeVersion and
    the version number goes up. Returns False if someone else updated the row first.
    """
    current_version = resume.version
    values: dict[str, Any] = {}
    payload_changed = parsed_data is not None and parsed_data != resume.parsed_data

    if payload_changed:
        db.add(ResumeVersion(
            resume_id=resume.id,
            version_number=current_version,
            parsed_data=resume.parsed_data,
            changes_summary=changes_summary,
        ))
        values["parsed_data"] = parsed_data
        values["version"] = current_version + 1
    if is_public is not None and is_public != resume.is_public:
        values["is_public"] = is_public

    if not values:
        return True

    result = db.execute(
        update(Resume)
        .where(Resume.id == resume.id, Resume.version == current_version)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return False
    db.commit()
    db.refresh(resume)
    return True


def increment_counter(db: Session, resume_id: UUID, column: str) -> Optional[int]:
    """Atomically add one to view_count / download_count; returns the new value."""
    col = getattr(Resume, column)
    result = db.execute(
        update(Resume).where(Resume.id == resume_id).values({column: col + 1}).execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        return None
    db.commit()
    return db.execute(select(col).where(Resume.id == resume_id)).scalar_one()


def list_versions(db: Session, resume_id: UUID) -> list[ResumeVersion]:
    stmt = (
        select(ResumeVersion)
        .where(ResumeVersion.resume_id == resume_id)
        .order_by(ResumeVersion.version_number.desc())
    )
    return db.execute(stmt).scalars().all()


def delete_resume(db: Session, resume: Resume) -> None:
    db.delete(resume)
    db.commit()
