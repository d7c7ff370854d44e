# resumeforge/api/routers/figma.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from resumeforge.api.deps import get_figma_adapter
from resumeforge.core.errors import ErrorCode, InvalidInputError, ResumeForgeError, SchemaValidationError
from resumeforge.schemas.figma import AdaptFigmaRequest, AdaptFigmaResponse
from resumeforge.schemas.resume import validate_parsed_resume
from resumeforge.services.figma.adapter import FigmaAdaptationRequest
from resumeforge.services.figma.link import parse_figma_link

logger = logging.getLogger("figma.adapter")

router = APIRouter(prefix="/api", tags=["figma"])


@router.post("/adapt-figma-resume", response_model=AdaptFigmaResponse, response_model_exclude_none=True)
def adapt_figma_resume(body: AdaptFigmaRequest, adapter=Depends(get_figma_adapter)):
    """Generate a React component + CSS module from a Figma frame, bound to the given resume."""
    if not body.figma_link:
        raise InvalidInputError("Figma link is required", code=ErrorCode.MISSING_FIGMA_LINK)
    if not body.resume_data or not body.resume_data.get("name"):
        raise InvalidInputError(
            "Resume data is required and must include at least a name",
            code=ErrorCode.INVALID_RESUME_DATA,
        )

    link = parse_figma_link(body.figma_link)

    if adapter is None or not adapter.is_ready:
        raise ResumeForgeError(
            "Figma agent is not ready",
            code=ErrorCode.FIGMA_AGENT_NOT_READY,
            status_code=503,
            details="The Figma connection could not be established. Please check your configuration.",
        )

    try:
        resume = validate_parsed_resume(body.resume_data)
    except SchemaValidationError as exc:
        raise InvalidInputError(
            "Resume data does not match the expected schema",
            code=ErrorCode.INVALID_RESUME_DATA,
            details=exc.details,
        ) from exc

    result = adapter.adapt(
        FigmaAdaptationRequest(
            file_key=link.file_key,
            node_id=link.node_id,
            resume=resume,
            strategy=body.adaptation_strategy,
            custom_mappings=body.custom_mappings,
            preserve_elements=body.preserve_elements,
            color_scheme=body.color_scheme,
        )
    )

    if not result.success:
        failed = AdaptFigmaResponse(
            success=False,
            message="Failed to adapt Figma design",
            error=ErrorCode.ADAPTATION_FAILED,
            details="; ".join(result.errors),
            result=result,
        )
        return JSONResponse(status_code=500, content=failed.model_dump(by_alias=True, exclude_none=True))

    adapter.save_files(result)
    if result.saved_files:
        logger.info("Files saved: %s", ", ".join(result.saved_files))

    return AdaptFigmaResponse(
        success=True,
        message=f"Successfully adapted Figma design for resume: {result.component_name}",
        result=result,
    )


@router.get("/adapt-figma-resume")
def adapt_figma_resume_get():
    return JSONResponse(
        status_code=405,
        content={
            "success": False,
            "message": "This endpoint only accepts POST requests",
            "error": ErrorCode.METHOD_NOT_ALLOWED,
        },
    )
