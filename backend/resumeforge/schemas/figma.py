# resumeforge/schemas/figma.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from resumeforge.schemas.resume import CamelModel

AdaptationStrategy = Literal["content-mapping", "layout-preservation", "style-extraction", "hybrid"]
ColorScheme = Literal["original", "resume-colors", "adaptive"]


class FigmaNode(CamelModel):
    """Subset of the Figma node document the adapter reads."""
    id: str
    name: str = ""
    type: str = "FRAME"
    visible: bool = True
    characters: Optional[str] = None
    fills: List[Dict[str, Any]] = Field(default_factory=list)
    absolute_bounding_box: Optional[Dict[str, float]] = None
    children: List["FigmaNode"] = Field(default_factory=list)


class FigmaFileInfo(CamelModel):
    name: str
    last_modified: Optional[str] = None
    version: Optional[str] = None
    role: Optional[str] = None
    editor_type: Optional[str] = None
    link_access: Optional[str] = None


class FigmaStyle(CamelModel):
    key: str
    name: str
    style_type: Optional[str] = None
    remote: bool = False


class AdaptFigmaRequest(CamelModel):
    """Body of POST /api/adapt-figma-resume.

    ``figmaLink`` and ``resumeData`` are optional at the schema level so the endpoint
    can answer with MISSING_FIGMA_LINK / INVALID_RESUME_DATA instead of a generic 400.
    """
    figma_link: Optional[str] = None
    resume_data: Optional[Dict[str, Any]] = None
    adaptation_strategy: AdaptationStrategy = "hybrid"
    custom_mappings: Dict[str, str] = Field(default_factory=dict)
    preserve_elements: List[str] = Field(default_factory=list)
    color_scheme: ColorScheme = "adaptive"


class AdaptationResult(CamelModel):
    success: bool
    component_name: str
    jsx_code: str = ""
    css_code: str = ""
    mapped_fields: Dict[str, str] = Field(default_factory=dict)
    preserved_elements: List[str] = Field(default_factory=list)
    adaptation_log: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    stage: str = "IDLE"
    saved_files: List[str] = Field(default_factory=list)


class AdaptFigmaResponse(CamelModel):
    success: bool
    message: str
    result: Optional[AdaptationResult] = None
    error: Optional[str] = None
    details: Optional[str] = None
