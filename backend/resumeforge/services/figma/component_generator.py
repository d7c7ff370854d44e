# resumeforge/services/figma/component_generator.py
"""String templates for the generated React component and its CSS module."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from resumeforge.schemas.figma import FigmaNode

IDENTIFIER_RE = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")
CONTAINER_TYPES = {"FRAME", "GROUP", "RECTANGLE"}

DEFAULT_PRIMARY = "#000000"
DEFAULT_SECONDARY = "#666666"
# resume color keys standing in for primary / secondary
RESUME_PRIMARY_KEY = "--teal-main"
RESUME_SECONDARY_KEY = "--charcoal"


@dataclass
class StyleInfo:
    colors: List[str] = field(default_factory=list)
    spacing: List[float] = field(default_factory=list)
    style_names: List[str] = field(default_factory=list)


def rgba_to_hex(r: float, g: float, b: float, a: float = 1.0) -> str:
    def to_hex(n: float) -> str:
        return format(int(round(n * 255)), "02x")

    return f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}{to_hex(a) if a < 1 else ''}"


def extract_style_info(nodes: List[FigmaNode], style_names: Optional[List[str]] = None) -> StyleInfo:
    """Fill colors and bounding-box sizes, in first-seen order, across the node trees."""
    info = StyleInfo(style_names=list(style_names or []))

    def visit(node: FigmaNode) -> None:
        for fill in node.fills:
            color = fill.get("color") if isinstance(fill, dict) else None
            if color:
                hex_value = rgba_to_hex(color.get("r", 0), color.get("g", 0), color.get("b", 0), color.get("a", 1))
                if hex_value not in info.colors:
                    info.colors.append(hex_value)
        box = node.absolute_bounding_box
        if box:
            for size in (box.get("width"), box.get("height")):
                if size is not None and size not in info.spacing:
                    info.spacing.append(size)
        for child in node.children:
            visit(child)

    for node in nodes:
        visit(node)
    return info


def component_name(file_name: str, node_id: Optional[str] = None) -> str:
    base = re.sub(r"[^a-zA-Z0-9]", "", file_name)
    suffix = re.sub(r"[^a-zA-Z0-9]", "", node_id) if node_id else "Adapted"
    return f"FigmaAdapted{base}{suffix}"


def to_kebab_case(name: str) -> str:
    return re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", name).lower()


def class_name(node_name: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9\s]", "", node_name)
    return re.sub(r"\s+", "-", cleaned).lower()


def _class_access(name: str) -> str:
    return f"styles.{name}" if IDENTIFIER_RE.match(name) else f"styles['{name}']"


def node_to_jsx(node: FigmaNode, mappings: Dict[str, str]) -> str:
    access = _class_access(class_name(node.name))
    mapping = mappings.get(node.id)

    if node.type == "TEXT":
        content = mapping or "{`" + (node.characters or "") + "`}"
        return f"<span className={{{access}}}>{content}</span>"
    if node.type in CONTAINER_TYPES:
        children = "\n      ".join(node_to_jsx(child, mappings) for child in node.children)
        return f"<div className={{{access}}}>\n      {children}\n    </div>"
    return f"<div className={{{access}}}></div>"


def generate_jsx(name: str, nodes: List[FigmaNode], mappings: Dict[str, str]) -> str:
    body = node_to_jsx(nodes[0], mappings) if nodes else "<div></div>"
    return f"""import React from 'react';
import type {{ ParsedResume }} from '@/lib/resume-parser/schema';
import styles from './{to_kebab_case(name)}.module.css';

interface {name}Props {{
  resume: ParsedResume;
}}

export const {name}: React.FC<{name}Props> = ({{ resume }}) => {{
  return (
    {body}
  );
}};

export default {name};"""


def pick_colors(style: StyleInfo, color_scheme: str, resume_colors: Optional[Dict[str, str]]) -> Dict[str, str]:
    primary = style.colors[0] if style.colors else DEFAULT_PRIMARY
    secondary = style.colors[1] if len(style.colors) > 1 else DEFAULT_SECONDARY
    if color_scheme == "resume-colors" and resume_colors:
        primary = resume_colors.get(RESUME_PRIMARY_KEY) or primary
        secondary = resume_colors.get(RESUME_SECONDARY_KEY) or secondary
    return {"primary": primary, "secondary": secondary}


def generate_css(name: str, strategy: str, colors: Dict[str, str]) -> str:
    primary = colors["primary"]
    secondary = colors["secondary"]
    return f"""/* Generated CSS for {name} */
/* Adapted from Figma design with {strategy} strategy */

.container {{
  max-width: 800px;
  margin: 0 auto;
  padding: 2rem;
  font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
  color: {secondary};
}}

.header {{
  margin-bottom: 2rem;
  padding-bottom: 1rem;
  border-bottom: 2px solid {primary};
}}

.name {{
  font-size: 2.5rem;
  font-weight: 700;
  color: {primary};
  margin-bottom: 0.5rem;
}}

.title {{
  font-size: 1.5rem;
  font-weight: 500;
  color: {secondary};
  margin-bottom: 1rem;
}}

.contact {{
  display: flex;
  flex-wrap: wrap;
  gap: 1rem;
  margin-bottom: 2rem;
  font-size: 0.9rem;
}}

.section {{
  margin-bottom: 2rem;
}}

.section-title {{
  font-size: 1.25rem;
  font-weight: 600;
  color: {primary};
  margin-bottom: 1rem;
  padding-bottom: 0.5rem;
  border-bottom: 1px solid {primary}33;
}}

.experience-item {{
  margin-bottom: 1.5rem;
}}

.job-title {{
  font-size: 1.1rem;
  font-weight: 600;
  color: {primary};
  margin-bottom: 0.25rem;
}}

.company {{
  font-size: 0.9rem;
  color: {secondary};
  margin-bottom: 0.5rem;
}}

.skills {{
  display: flex;
  flex-wrap: wrap;
  gap: 0.5rem;
}}

.skill {{
  background-color: {primary}15;
  color: {primary};
  padding: 0.25rem 0.75rem;
  border-radius: 1rem;
  font-size: 0.85rem;
  font-weight: 500;
}}

@media (max-width: 768px) {{
  .container {{
    padding: 1rem;
  }}

  .name {{
    font-size: 2rem;
  }}

  .contact {{
    flex-direction: column;
    gap: 0.5rem;
  }}
}}"""


def generate_component(
    name: str,
    nodes: List[FigmaNode],
    mappings: Dict[str, str],
    style: StyleInfo,
    *,
    strategy: str = "hybrid",
    color_scheme: str = "adaptive",
    resume_colors: Optional[Dict[str, str]] = None,
) -> tuple[str, str]:
    """Return ``(jsx_code, css_code)``."""
    colors = pick_colors(style, color_scheme, resume_colors)
    return generate_jsx(name, nodes, mappings), generate_css(name, strategy, colors)
