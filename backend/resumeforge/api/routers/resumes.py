# resumeforge/api/routers/resumes.py
"""Resume library endpoints: owner CRUD and version history, public sharing by slug,
HTML rendering, and the temporary store for anonymous parses."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import HTMLResponse, JSONResponse
from sqlalchemy.orm import Session

from resumeforge.api.deps import get_owner_id, get_temp_store, require_owner
from resumeforge.core.errors import NotFoundError
from resumeforge.db.base import get_db
from resumeforge.schemas.resume import (
    PublicResumeOut,
    ResumeCreate,
    ResumeDetail,
    ResumeListOut,
    ResumeSummary,
    ResumeUpdate,
    ResumeVersionOut,
    validate_parsed_resume,
)
from resumeforge.services.resumes import library
from resumeforge.services.resumes.render import render_resume_html

router = APIRouter(prefix="/api/resumes", tags=["resumes"])
public_router = APIRouter(prefix="/api/resume", tags=["public"])
temp_router = APIRouter(prefix="/api/temp-resumes", tags=["temp-resumes"])


@router.get("", response_model=ResumeListOut)
def list_resumes(
    db: Session = Depends(get_db),
    owner_id: str = Depends(require_owner),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
):
    rows, total = library.list_owner_resumes(db, owner_id, offset=offset, limit=limit)
    return ResumeListOut(items=[ResumeSummary.model_validate(r) for r in rows], total=total)


@router.post("", response_model=ResumeDetail, status_code=201)
def create_resume(body: ResumeCreate, db: Session = Depends(get_db), owner_id: str = Depends(require_owner)):
    """Save an already-structured document (e.g. a temp resume after sign-in)."""
    resume = validate_parsed_resume(body.parsed_data)
    row = library.save_parsed_resume(
        db,
        owner_id=owner_id,
        resume=resume,
        title=body.title.strip() if body.title and body.title.strip() else None,
        is_public=body.is_public,
    )
    return ResumeDetail.model_validate(row)


@router.get("/{resume_id}", response_model=ResumeDetail)
def get_resume(resume_id: UUID, db: Session = Depends(get_db), owner_id: str = Depends(require_owner)):
    return ResumeDetail.model_validate(library.get_owned_resume(db, resume_id, owner_id))


@router.put("/{resume_id}", response_model=ResumeDetail)
def update_resume(
    resume_id: UUID,
    body: ResumeUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(require_owner),
):
    row = library.replace_resume(
        db,
        resume_id,
        owner_id,
        parsed_data=body.parsed_data,
        is_public=body.is_public,
        expected_version=body.expected_version,
    )
    return ResumeDetail.model_validate(row)


@router.delete("/{resume_id}", status_code=204)
def delete_resume(resume_id: UUID, db: Session = Depends(get_db), owner_id: str = Depends(require_owner)):
    library.delete_resume(db, resume_id, owner_id)
    return Response(status_code=204)


@router.get("/{resume_id}/versions", response_model=List[ResumeVersionOut])
def list_versions(resume_id: UUID, db: Session = Depends(get_db), owner_id: str = Depends(require_owner)):
    return [ResumeVersionOut.model_validate(v) for v in library.list_resume_versions(db, resume_id, owner_id)]


@router.get("/{resume_id}/export")
def export_resume(resume_id: UUID, db: Session = Depends(get_db), owner_id: Optional[str] = Depends(get_owner_id)):
    """Download the document as JSON and count the download."""
    row = library.record_download(db, resume_id, owner_id)
    return JSONResponse(
        content=row.parsed_data,
        headers={"Content-Disposition": f'attachment; filename="{row.slug}.json"'},
    )


# --- public, by slug ---

@public_router.get("/{slug}", response_model=PublicResumeOut)
def get_public_resume(slug: str, db: Session = Depends(get_db)):
    return PublicResumeOut.model_validate(library.get_public_resume(db, slug))


@public_router.post("/{slug}/view")
def record_view(slug: str, db: Session = Depends(get_db)):
    return {"viewCount": library.record_view(db, slug)}


@public_router.get("/{slug}/html", response_class=HTMLResponse)
def render_public_resume(slug: str, template: str = Query("classic"), db: Session = Depends(get_db)):
    row = library.get_public_resume(db, slug)
    return HTMLResponse(render_resume_html(validate_parsed_resume(row.parsed_data), template))


# --- temporary (anonymous) results ---

@temp_router.get("/{token}")
def get_temp_resume(token: str, temp_store=Depends(get_temp_store)):
    item = temp_store.get(token)
    if item is None:
        raise NotFoundError("Temporary resume not found or expired")
    return {"data": item.data, "meta": item.meta}


@temp_router.delete("/{token}", status_code=204)
def discard_temp_resume(token: str, temp_store=Depends(get_temp_store)):
    if not temp_store.discard(token):
        raise NotFoundError("Temporary resume not found or expired")
    return Response(status_code=204)
