# resumeforge/api/routers/parse.py
"""Resume upload endpoints: plain JSON response and a progress-streaming variant."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from resumeforge.api.deps import get_llm, get_owner_id, get_temp_store
from resumeforge.core.errors import InvalidInputError
from resumeforge.db.base import SessionLocal, get_db
from resumeforge.schemas.resume import ParseResponse
from resumeforge.services.resumes.ingestion_pipeline import (
    ParseRequest,
    run_resume_pipeline,
    stream_resume_pipeline,
    validate_request,
)
from resumeforge.services.resumes.intake import UploadedFile

router = APIRouter(prefix="/api", tags=["parse"])


async def _read(upload: Optional[UploadFile]) -> Optional[UploadedFile]:
    if upload is None:
        return None
    data = await upload.read()
    return UploadedFile(filename=upload.filename or "", content_type=upload.content_type, data=data)


async def _parse_request(
    file: Optional[UploadFile],
    job_spec_file: Optional[UploadFile],
    job_spec_text: Optional[str],
    tone: Optional[str],
    extra_prompt: Optional[str],
    profile_image: Optional[str],
    custom_colors: Optional[str],
    tailor: bool,
    is_authenticated: bool,
    owner_id: Optional[str],
) -> ParseRequest:
    resume_file = await _read(file)
    if resume_file is None:
        raise InvalidInputError("Resume file is required")
    return ParseRequest(
        resume_file=resume_file,
        job_spec_file=await _read(job_spec_file),
        job_spec_text=job_spec_text,
        tone=tone,
        extra_prompt=extra_prompt,
        profile_image=profile_image,
        custom_colors=custom_colors,
        tailor=tailor,
        owner_id=owner_id,
        is_authenticated=is_authenticated,
    )


@router.post("/parse-resume", response_model=ParseResponse)
async def parse_resume(
    file: Optional[UploadFile] = File(None),
    job_spec_file: Optional[UploadFile] = File(None, alias="jobSpecFile"),
    job_spec_text: Optional[str] = Form(None, alias="jobSpecText"),
    tone: Optional[str] = Form(None),
    extra_prompt: Optional[str] = Form(None, alias="extraPrompt"),
    profile_image: Optional[str] = Form(None, alias="profileImage"),
    custom_colors: Optional[str] = Form(None, alias="customColors"),
    tailor: bool = Form(False),
    is_authenticated: bool = Form(True, alias="isAuthenticated"),
    owner_id: Optional[str] = Depends(get_owner_id),
    db: Session = Depends(get_db),
    llm=Depends(get_llm),
    temp_store=Depends(get_temp_store),
):
    """
    Upload a PDF/TXT resume and get the structured document back.

    When a job specification is supplied (file or pasted) the resume is also tailored
    to it. Authenticated callers get the result saved to their library; anonymous
    results go to the temporary store and come back with a ``tempToken``.
    """
    request = await _parse_request(
        file, job_spec_file, job_spec_text, tone, extra_prompt,
        profile_image, custom_colors, tailor, is_authenticated, owner_id,
    )
    # blocking work (PDF parsing, AI calls, DB)
    result = await run_in_threadpool(run_resume_pipeline, request, db, llm, temp_store)
    return result.to_response()


@router.post("/parse-resume-enhanced")
async def parse_resume_enhanced(
    file: Optional[UploadFile] = File(None),
    job_spec_file: Optional[UploadFile] = File(None, alias="jobSpecFile"),
    job_spec_text: Optional[str] = Form(None, alias="jobSpecText"),
    tone: Optional[str] = Form(None),
    extra_prompt: Optional[str] = Form(None, alias="extraPrompt"),
    profile_image: Optional[str] = Form(None, alias="profileImage"),
    custom_colors: Optional[str] = Form(None, alias="customColors"),
    tailor: bool = Form(False),
    is_authenticated: bool = Form(True, alias="isAuthenticated"),
    owner_id: Optional[str] = Depends(get_owner_id),
    llm=Depends(get_llm),
    temp_store=Depends(get_temp_store),
):
    """Same inputs as /parse-resume; answers with ``data: <json>`` progress events."""
    request = await _parse_request(
        file, job_spec_file, job_spec_text, tone, extra_prompt,
        profile_image, custom_colors, tailor, is_authenticated, owner_id,
    )
    # input errors get a plain 4xx before streaming starts
    checked = validate_request(request)
    return StreamingResponse(
        stream_resume_pipeline(request, SessionLocal, llm, temp_store, checked),
        media_type="text/plain",
    )
