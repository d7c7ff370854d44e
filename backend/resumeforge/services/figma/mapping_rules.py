# resumeforge/services/figma/mapping_rules.py
"""Node-to-resume-field heuristics.

Rules are checked in order against the lowercased node name and text; the first
match wins. Text nodes that match nothing keep their literal text.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from resumeforge.schemas.figma import FigmaNode

Predicate = Callable[[str, str], bool]


def _mentions(*name_words: str, text_word: Optional[str] = None) -> Predicate:
    text_word = text_word or name_words[0]

    def predicate(name: str, text: str) -> bool:
        return any(w in name for w in name_words) or text_word in text

    return predicate


MAPPING_RULES: List[Tuple[Predicate, str]] = [
    (_mentions("name"), "{resume.name}"),
    (_mentions("title", "job"), "{resume.title}"),
    (_mentions("email"), "{resume.contact?.email}"),
    (_mentions("phone"), "{resume.contact?.phone}"),
    (_mentions("location"), "{resume.contact?.location}"),
    (_mentions("summary", "about"), "{resume.summary}"),
    (_mentions("experience"), "{resume.experience.map(exp => ...)}"),
    (_mentions("education"), "{resume.education?.map(edu => ...)}"),
    (_mentions("skill"), "{resume.skills.map(skill => ...)}"),
]


def literal_text(characters: str) -> str:
    return "{`" + characters + "`}"


def match_node(node: FigmaNode) -> Optional[str]:
    name = (node.name or "").lower()
    text = (node.characters or "").lower()
    for predicate, target in MAPPING_RULES:
        if predicate(name, text):
            return target
    if node.characters:
        return literal_text(node.characters)
    return None


def map_nodes(nodes: List[FigmaNode], custom_mappings: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Map every node (depth-first) to a resume expression; explicit mappings are kept as given."""
    mappings: Dict[str, str] = dict(custom_mappings or {})

    def visit(node: FigmaNode) -> None:
        if mappings.get(node.id):
            return
        target = match_node(node)
        if target is not None:
            mappings[node.id] = target
        for child in node.children:
            visit(child)

    for node in nodes:
        visit(node)
    return mappings
