# resumeforge/services/resumes/ingestion_pipeline.py
"""
Resume Ingestion Pipeline - upload to saved (or temporary) resume.

Flow:
1. Intake checks (size, type, lengths, tone, colors) before any I/O
2. Text extraction (PyMuPDF / UTF-8)
3. Resume extraction (AI, regex fallback)
4. Optional job-spec extraction + tailoring
5. Merge user presentation choices (colors, profile image)
6. Persist for authenticated owners, temp store otherwise

Both the plain endpoint and the streaming endpoint walk the same steps; the
streaming variant only forwards the progress events.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Optional

from sqlalchemy.orm import Session

from resumeforge.core.config import settings
from resumeforge.core.errors import (
    ErrorCode,
    FeatureDisabledError,
    InvalidInputError,
    ResumeForgeError,
)
from resumeforge.schemas.job_spec import JobSpec, UserAdditionalContext, parse_tone
from resumeforge.schemas.resume import ParsedResume, ResumeMeta, ResumeMetadata
from resumeforge.services.jobfit.job_spec_extractor import extract_job_spec
from resumeforge.services.jobfit.tailor import tailor_resume
from resumeforge.services.resumes import intake, library
from resumeforge.services.resumes.extraction_pipeline import extract_resume
from resumeforge.services.resumes.temp_store import TempResumeStore

logger = logging.getLogger("resumes.pipeline")

PROCESSING_MESSAGES = [
    "Extracting personal information...",
    "Processing work experience...",
    "Analyzing skills and qualifications...",
    "Formatting resume sections...",
    "Finalizing resume structure...",
]


@dataclass
class ParseRequest:
    """Everything the parse endpoints accept, already read from the multipart form."""
    resume_file: intake.UploadedFile
    job_spec_file: Optional[intake.UploadedFile] = None
    job_spec_text: Optional[str] = None
    tone: Optional[str] = None
    extra_prompt: Optional[str] = None
    profile_image: Optional[str] = None
    custom_colors: Optional[str] = None
    tailor: bool = False
    owner_id: Optional[str] = None
    is_authenticated: bool = True

    @property
    def persist(self) -> bool:
        return bool(self.is_authenticated and self.owner_id)


@dataclass
class PipelineResult:
    resume: ParsedResume
    meta: ResumeMeta

    def to_response(self) -> Dict[str, Any]:
        return {
            "data": self.resume.to_payload(),
            "meta": self.meta.model_dump(by_alias=True, mode="json"),
        }


@dataclass
class ProgressEvent:
    status: str
    progress: int
    message: str
    result: Optional[PipelineResult] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"status": self.status, "progress": self.progress, "message": self.message}
        if self.result is not None:
            body.update(self.result.to_response())
        return body


def _processing(step: int) -> ProgressEvent:
    return ProgressEvent("processing", min(20 + 15 * step, 90), PROCESSING_MESSAGES[step])


@dataclass
class ValidatedInput:
    file_type: str
    job_spec_text: Optional[str]
    job_spec_source: Optional[str]
    extra_prompt: Optional[str]
    tone: Any
    colors: Dict[str, str]
    wants_tailoring: bool


def validate_request(request: ParseRequest) -> ValidatedInput:
    """All rejections that need no parsing, AI or database work.

    The streaming endpoint calls this before the response starts so bad input
    still gets a 4xx status.
    """
    upload = request.resume_file
    file_type = intake.validate_upload(upload.filename, upload.content_type, upload.size)

    job_spec_source = None
    if request.job_spec_file is not None and request.job_spec_file.size:
        jf = request.job_spec_file
        intake.validate_upload(jf.filename, jf.content_type, jf.size, label="Job specification file")
        job_spec_source = "upload"
    job_spec_text = intake.validate_job_spec_text(request.job_spec_text)
    if job_spec_source is None and job_spec_text:
        job_spec_source = "pasted"

    extra_prompt = intake.validate_extra_prompt(request.extra_prompt)
    tone = parse_tone(request.tone)
    colors = intake.parse_custom_colors(request.custom_colors)

    wants_tailoring = bool(job_spec_source) or request.tailor
    if request.tailor and not job_spec_source:
        raise InvalidInputError("Tailoring requires a job specification (file or pasted text)")
    if wants_tailoring and not settings.IS_JOB_TAILORING_ENABLED:
        raise FeatureDisabledError("Job tailoring is currently disabled")

    return ValidatedInput(file_type, job_spec_text, job_spec_source, extra_prompt, tone, colors, wants_tailoring)


def _apply_presentation(resume: ParsedResume, request: ParseRequest, colors: Dict[str, str]) -> ParsedResume:
    merged = dict(resume.custom_colors)
    merged.update(colors)
    resume.custom_colors = merged
    resume.profile_image = request.profile_image or resume.profile_image
    return resume


def _stamp_metadata(resume: ParsedResume, method: str) -> None:
    meta = resume.metadata or ResumeMetadata()
    meta.last_updated = datetime.now(timezone.utc).isoformat()
    meta.source = meta.source or method
    resume.metadata = meta


def pipeline_events(
    request: ParseRequest,
    db: Session,
    llm,
    temp_store: TempResumeStore,
    checked: Optional[ValidatedInput] = None,
) -> Iterator[ProgressEvent]:
    """Run the pipeline, yielding progress; the final event carries the result."""
    if checked is None:
        checked = validate_request(request)
    upload = request.resume_file
    logger.info(
        "Parsing %s (%s, %d bytes, tailoring=%s, persist=%s)",
        upload.filename, checked.file_type, upload.size, checked.wants_tailoring, request.persist,
    )
    yield ProgressEvent("analyzing", 10, "Analyzing your resume...")

    text = intake.read_resume_text(upload, checked.file_type)
    job_spec_text = checked.job_spec_text
    if checked.job_spec_source == "upload":
        job_spec_text = intake.read_job_spec_file(request.job_spec_file)

    yield _processing(0)
    outcome = extract_resume(text, llm)
    resume = _apply_presentation(outcome.resume, request, checked.colors)
    _stamp_metadata(resume, outcome.method)
    logger.info("Resume extracted via %s (confidence %d%%)", outcome.method, outcome.confidence)

    yield _processing(1)
    job_spec: Optional[JobSpec] = None
    if checked.wants_tailoring and job_spec_text:
        spec_outcome = extract_job_spec(job_spec_text, llm)
        job_spec = spec_outcome.job_spec

    yield _processing(2)
    context: Optional[UserAdditionalContext] = None
    if checked.wants_tailoring:
        resume = tailor_resume(resume, job_spec, checked.tone, checked.extra_prompt, llm)
        context = UserAdditionalContext(
            job_spec_source=checked.job_spec_source,
            job_spec_text=job_spec_text,
            job_spec_file_name=request.job_spec_file.filename if checked.job_spec_source == "upload" else None,
            tone=checked.tone,
            extra_prompt=checked.extra_prompt,
        )

    yield _processing(3)
    meta = ResumeMeta(
        method=outcome.method,
        confidence=outcome.confidence,
        filename=upload.filename,
        file_type=checked.file_type,
        file_size=upload.size,
        tailored=checked.wants_tailoring,
        ai_tailor_commentary=resume.metadata.ai_tailor_commentary if resume.metadata else None,
    )

    yield _processing(4)
    yield ProgressEvent("saving", 95, "Saving your tailored resume..." if checked.wants_tailoring else "Saving your resume...")
    if request.persist:
        row = library.save_parsed_resume(
            db,
            owner_id=request.owner_id,
            resume=resume,
            title=library.resume_title(resume, upload.stem),
            parse_method=outcome.method,
            confidence=outcome.confidence,
            filename=upload.filename,
            file_type=checked.file_type,
            file_size=upload.size,
            additional_context=context.to_payload() if context else None,
        )
        meta.resume_id = row.id
        meta.resume_slug = row.slug
    else:
        meta.temp_token = temp_store.put(resume.to_payload(), meta.model_dump(by_alias=True, mode="json"))
        logger.info("Unauthenticated parse kept in temporary store")

    yield ProgressEvent("completed", 100, "Resume parsed successfully", result=PipelineResult(resume, meta))


def run_resume_pipeline(request: ParseRequest, db: Session, llm, temp_store: TempResumeStore) -> PipelineResult:
    for event in pipeline_events(request, db, llm, temp_store):
        if event.result is not None:
            return event.result
    raise RuntimeError("Resume pipeline finished without a result")


def _sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def stream_resume_pipeline(
    request: ParseRequest,
    session_factory: Callable[[], Session],
    llm,
    temp_store: TempResumeStore,
    checked: Optional[ValidatedInput] = None,
) -> Iterator[str]:
    """Same steps as run_resume_pipeline, emitted as ``data: <json>`` lines.

    The response has already started when a step fails, so failures become a
    final ``error`` event instead of an HTTP status.
    """
    with session_factory() as db:
        try:
            for event in pipeline_events(request, db, llm, temp_store, checked):
                yield _sse(event.to_dict())
        except ResumeForgeError as exc:
            logger.warning("Streaming parse failed: %s (%s)", exc.code, exc.message)
            body = {"status": "error", "progress": 0, "message": exc.message, "error": exc.code}
            if exc.details:
                body["details"] = exc.details
            yield _sse(body)
        except Exception:
            logger.exception("Streaming parse failed unexpectedly")
            yield _sse({
                "status": "error",
                "progress": 0,
                "message": "An unexpected error occurred",
                "error": ErrorCode.INTERNAL_ERROR,
            })
