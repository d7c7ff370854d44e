# resumeforge/services/resumes/slugs.py
from __future__ import annotations

import random
import re

MAX_SLUG_BASE = 50


def create_slug(text: str) -> str:
    """Lowercase, URL-safe, dash-separated; at most 50 characters."""
    slug = (text or "").lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug.strip())
    slug = re.sub(r"-+", "-", slug)
    return slug[:MAX_SLUG_BASE].strip("-")


def public_slug(title: str, rng: random.Random | None = None) -> str:
    """``<slugified-title>-<4 digits>``; the suffix keeps common names apart."""
    base = create_slug(title) or "resume"
    suffix = (rng or random).randint(1000, 9999)
    return f"{base}-{suffix}"
