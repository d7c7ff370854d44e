# resumeforge/services/figma/link.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from resumeforge.core.errors import ErrorCode, InvalidInputError

LINK_FORMAT_HINT = (
    "The Figma link must be in the format: https://www.figma.com/file/FILE_KEY/... "
    "or https://www.figma.com/design/FILE_KEY/..."
)


@dataclass(frozen=True)
class FigmaLink:
    file_key: str
    node_id: Optional[str] = None


def _invalid() -> InvalidInputError:
    return InvalidInputError("Invalid Figma link format", code=ErrorCode.INVALID_FIGMA_LINK, details=LINK_FORMAT_HINT)


def parse_figma_link(url: str) -> FigmaLink:
    """Pull the file key and optional ``node-id`` out of a figma.com file/design URL."""
    try:
        parts = urlsplit((url or "").strip())
    except ValueError as exc:
        raise _invalid() from exc

    host = (parts.hostname or "").lower()
    if parts.scheme not in ("http", "https") or not (host == "figma.com" or host.endswith(".figma.com")):
        raise _invalid()

    segments = parts.path.split("/")
    index = next((i for i, seg in enumerate(segments) if seg in ("file", "design")), None)
    if index is None or index + 1 >= len(segments) or not segments[index + 1]:
        raise _invalid()

    node_ids = parse_qs(parts.query).get("node-id")
    return FigmaLink(file_key=segments[index + 1], node_id=node_ids[0] if node_ids else None)
