# resumeforge/api/deps.py
"""Request-scoped accessors for the shared services built at startup."""
from __future__ import annotations

from typing import Optional

from fastapi import Header, Request

from resumeforge.core.errors import ForbiddenError


def get_llm(request: Request):
    return request.app.state.llm


def get_figma_adapter(request: Request):
    return request.app.state.figma_adapter


def get_temp_store(request: Request):
    return request.app.state.temp_store


def get_owner_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Owner id as set by the auth proxy in front of the service; None for anonymous calls."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def require_owner(x_user_id: Optional[str] = Header(default=None)) -> str:
    owner = get_owner_id(x_user_id)
    if owner is None:
        raise ForbiddenError("Sign in to manage saved resumes")
    return owner
