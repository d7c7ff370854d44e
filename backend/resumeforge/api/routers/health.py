# resumeforge/api/routers/health.py
from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    adapter = getattr(request.app.state, "figma_adapter", None)
    llm = getattr(request.app.state, "llm", None)
    return {
        "status": "ok",
        "llm": llm.provider if llm is not None else "disabled",
        "figma": bool(adapter and adapter.is_ready),
    }
