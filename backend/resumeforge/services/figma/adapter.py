# resumeforge/services/figma/adapter.py
"""
Figma Adapter - turn a Figma frame into a resume-bound React component.

Stages:
FETCHING_FILE_INFO -> FETCHING_NODES -> MAPPING_CONTENT -> EXTRACTING_STYLES
-> GENERATING_COMPONENT -> SUCCESS (or FAILED from any stage)

The adapter is built once at startup, ``initialize()``d, and shared through
``app.state``; per-request state lives only in the returned AdaptationResult.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from resumeforge.core.config import settings
from resumeforge.core.errors import ResumeForgeError
from resumeforge.schemas.figma import AdaptationResult
from resumeforge.schemas.resume import ParsedResume
from resumeforge.services.figma.client import build_figma_client
from resumeforge.services.figma.component_generator import (
    component_name,
    extract_style_info,
    generate_component,
    to_kebab_case,
)
from resumeforge.services.figma.mapping_rules import map_nodes

logger = logging.getLogger("figma.adapter")

FAILED_COMPONENT_NAME = "FailedAdaptation"
DEFAULT_SEARCH_QUERY = "resume"


class Stage(str, Enum):
    IDLE = "IDLE"
    FETCHING_FILE_INFO = "FETCHING_FILE_INFO"
    FETCHING_NODES = "FETCHING_NODES"
    MAPPING_CONTENT = "MAPPING_CONTENT"
    EXTRACTING_STYLES = "EXTRACTING_STYLES"
    GENERATING_COMPONENT = "GENERATING_COMPONENT"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


@dataclass
class FigmaAdaptationRequest:
    file_key: str
    resume: ParsedResume
    node_id: Optional[str] = None
    strategy: str = "hybrid"
    custom_mappings: Dict[str, str] = field(default_factory=dict)
    preserve_elements: List[str] = field(default_factory=list)
    color_scheme: str = "adaptive"


class AdaptationStepError(Exception):
    """A stage could not produce what the next stage needs."""


class FigmaAdapter:
    def __init__(self, client=None, *, output_dir: Optional[str] = None):
        self._client = client
        self.output_dir = Path(output_dir or settings.GENERATED_COMPONENTS_DIR)
        self._ready = False

    def initialize(self) -> None:
        if self._client is None:
            self._client = build_figma_client()
        self._ready = True
        logger.info("Figma adapter ready (%s)", type(self._client).__name__)

    @property
    def is_ready(self) -> bool:
        return self._ready and self._client is not None

    def adapt(self, request: FigmaAdaptationRequest) -> AdaptationResult:
        """Run one adaptation; fetched Figma data lives only for this call."""
        try:
            return self._adapt(request)
        finally:
            if self._client is not None:
                self._client.clear_cache()

    def _adapt(self, request: FigmaAdaptationRequest) -> AdaptationResult:
        log: List[str] = []
        warnings: List[str] = []
        errors: List[str] = []
        stage = Stage.IDLE

        def enter(next_stage: Stage) -> Stage:
            logger.debug("Adaptation %s: %s -> %s", request.file_key, stage.value, next_stage.value)
            return next_stage

        try:
            log.append(f"Starting adaptation for file: {request.file_key}")

            stage = enter(Stage.FETCHING_FILE_INFO)
            info = self._client.get_file_info(request.file_key)
            log.append(f"File info retrieved: {info.name}")

            stage = enter(Stage.FETCHING_NODES)
            if request.node_id:
                nodes = self._client.get_nodes(request.file_key, [request.node_id])
            else:
                nodes = self._client.search_nodes(request.file_key, DEFAULT_SEARCH_QUERY)
            if not nodes:
                errors.append("No suitable nodes found for adaptation")
                raise AdaptationStepError("No nodes found")
            log.append(f"Found {len(nodes)} nodes for adaptation")

            stage = enter(Stage.MAPPING_CONTENT)
            mappings = map_nodes(nodes, request.custom_mappings)
            log.append(f"Created {len(mappings)} content mappings")

            stage = enter(Stage.EXTRACTING_STYLES)
            styles = self._client.get_styles(request.file_key)
            style_info = extract_style_info(nodes, [s.name for s in styles])
            log.append(f"Extracted style information from {len(styles)} styles")

            stage = enter(Stage.GENERATING_COMPONENT)
            name = component_name(info.name, request.node_id)
            jsx, css = generate_component(
                name,
                nodes,
                mappings,
                style_info,
                strategy=request.strategy,
                color_scheme=request.color_scheme,
                resume_colors=request.resume.custom_colors,
            )
            log.append(f"Generated component: {name}")
        except (AdaptationStepError, ResumeForgeError, ValidationError) as exc:
            message = exc.message if isinstance(exc, ResumeForgeError) else str(exc)
            errors.append(message)
            log.append(f"Error during adaptation: {message}")
            logger.warning("Adaptation of %s failed at %s: %s", request.file_key, stage.value, message)
            return AdaptationResult(
                success=False,
                component_name=FAILED_COMPONENT_NAME,
                adaptation_log=log,
                warnings=warnings,
                errors=errors,
                stage=Stage.FAILED.value,
            )

        logger.info("Adapted %s into %s (%d mappings)", request.file_key, name, len(mappings))
        return AdaptationResult(
            success=True,
            component_name=name,
            jsx_code=jsx,
            css_code=css,
            mapped_fields=mappings,
            preserved_elements=list(request.preserve_elements),
            adaptation_log=log,
            warnings=warnings,
            errors=errors,
            stage=Stage.SUCCESS.value,
        )

    def save_files(self, result: AdaptationResult) -> AdaptationResult:
        """Write ``<kebab>.tsx`` and ``<kebab>.module.css``; a failed write is only a warning."""
        kebab = to_kebab_case(result.component_name)
        files = [(f"{kebab}.tsx", result.jsx_code), (f"{kebab}.module.css", result.css_code)]
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            for filename, content in files:
                (self.output_dir / filename).write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.warning("Failed to persist generated files to %s: %s", self.output_dir, exc)
            result.warnings.append("Could not save generated files to disk")
            return result

        result.saved_files = [str(self.output_dir / filename) for filename, _ in files]
        result.adaptation_log.append(f"Files saved: {kebab}.tsx, {kebab}.module.css")
        return result
