"""Resume parsing utilities for turning uploaded PDF/TXT bytes into plain text."""

from __future__ import annotations

import logging
import re

import fitz  # PyMuPDF

logger = logging.getLogger("resumes.parsing")


def parse_pdf_content(file_content: bytes) -> str:
    """
    Parses PDF content using PyMuPDF (fitz).
    Tries layout-preserving 'blocks' mode first.
    If that produces fragmented text (one char per line), falls back to 'text' mode.
    """
    with fitz.open(stream=file_content, filetype="pdf") as doc:
        full_text = []
        for page in doc:
            # (x0, y0, x1, y1, "text", block_no, block_type)
            blocks = page.get_text("blocks")
            text_blocks = [b for b in blocks if b[6] == 0 and b[4].strip()]
            # Row by row, then left to right
            text_blocks.sort(key=lambda b: (round(b[1] / 10) * 10, b[0]))
            for b in text_blocks:
                full_text.append(b[4].strip())

        text_result = "\n\n".join(full_text)

        if _is_extraction_broken(text_result):
            logger.info("PyMuPDF 'blocks' mode produced fragmented text. Retrying with 'text' mode...")
            text_result = "\n".join(page.get_text("text", sort=True) for page in doc)

    return text_result


def _is_extraction_broken(text: str) -> bool:
    """Heuristic: most non-empty lines are a single character."""
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if len(lines) < 10:
        return False
    short = sum(1 for ln in lines if len(ln.strip()) <= 1)
    return short / len(lines) > 0.5


def parse_text_content(file_content: bytes) -> str:
    """Helper for plain text files"""
    text = file_content.decode("utf-8", errors="ignore")
    return text.lstrip("\ufeff")


def clean_text(text: str) -> str:
    """Normalize line endings and collapse runs of blank lines."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def parse_to_text(file_content: bytes, file_type: str) -> str:
    """Dispatch on the detected file type ("pdf" | "txt")."""
    if file_type == "pdf":
        return clean_text(parse_pdf_content(file_content))
    return clean_text(parse_text_content(file_content))
