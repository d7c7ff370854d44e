"""Application entrypoint: sets up FastAPI app, CORS, logging, error handlers and API routers.

Shared services (LLM client, Figma adapter, temporary resume store) are built once in
the lifespan hook and handed to endpoints through ``app.state``.
"""
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resumeforge.api.routers import figma as figma_router
from resumeforge.api.routers import health as health_router
from resumeforge.api.routers import parse as parse_router
from resumeforge.api.routers import resumes as resumes_router
from resumeforge.core.config import settings
from resumeforge.core.errors import register_error_handlers
from resumeforge.services.common.llm_client import LLMClient
from resumeforge.services.figma.adapter import FigmaAdapter
from resumeforge.services.resumes.temp_store import TempResumeStore


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logging.getLogger("resumes.pipeline").setLevel(logging.INFO)
logging.getLogger("resumes.extraction").setLevel(logging.INFO)
logging.getLogger("figma.adapter").setLevel(logging.INFO)

# Reduce noise from external libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.llm = LLMClient()
    app.state.temp_store = TempResumeStore(
        settings.TEMP_RESUME_TTL_SECONDS,
        keep_forever=settings.KEEP_TEMP_RESUMES_FOR_TESTING,
    )
    adapter = FigmaAdapter()
    adapter.initialize()
    app.state.figma_adapter = adapter
    yield


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health_router.router)
    app.include_router(parse_router.router)
    app.include_router(resumes_router.router)
    app.include_router(resumes_router.public_router)
    app.include_router(resumes_router.temp_router)
    app.include_router(figma_router.router)

    return app


app = create_app()
