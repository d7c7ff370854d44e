# resumeforge/core/config.py
from __future__ import annotations
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field

# Resolve the .env alongside the backend package root
ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):

    # --- Database ---
    DATABASE_URL: str = Field(..., description="SQLAlchemy URL (e.g., postgresql+psycopg://... or sqlite:///...)")

    # --- App info ---
    APP_NAME: str = Field(default="ResumeForge Backend")
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    # --- AI provider ---
    OLLAMA_BASE_URL: str | None = Field(default=None, description="Base URL of local Ollama server")
    LLM_CHAT_MODEL: str | None = Field(default=None, description="Ollama chat model; selects the Ollama provider when set")
    OPENAI_API_KEY: str | None = Field(default=None, description="API key for OpenAI services")
    OPENAI_MODEL: str | None = Field(default=None, description="OpenAI chat model; used when LLM_CHAT_MODEL is not set")
    LLM_TIMEOUT_S: int = Field(default=90)
    USE_LLM_EXTRACTION: bool = Field(default=True, description="When False, resume extraction goes straight to the regex extractor")

    # --- Feature flags ---
    IS_JOB_TAILORING_ENABLED: bool = True
    KEEP_TEMP_RESUMES_FOR_TESTING: bool = Field(default=False, description="Disable eviction of temporary (unauthenticated) resumes")

    # --- Intake limits ---
    MAX_RESUME_BYTES: int = 10 * 1024 * 1024
    MAX_JOB_SPEC_CHARS: int = 4000
    MAX_EXTRA_PROMPT_CHARS: int = 500
    MIN_RESUME_TEXT_CHARS: int = 20
    SUMMARY_DISPLAY_LIMIT: int = 1000

    # --- Temporary resumes ---
    TEMP_RESUME_TTL_SECONDS: int = 3600

    # --- Figma ---
    FIGMA_API_KEY: str | None = Field(default=None, description="Personal access token; mock capabilities are used when missing")
    FIGMA_API_BASE: str = Field(default="https://api.figma.com/v1")
    FIGMA_TIMEOUT_S: int = 30
    FIGMA_MAX_RETRIES: int = 2
    FIGMA_BACKOFF_BASE_S: float = 1.0
    GENERATED_COMPONENTS_DIR: str = Field(default="generated-components")

    class Config:
        env_file = str(ENV_PATH)
        case_sensitive = True

    @property
    def llm_enabled(self) -> bool:
        """True when some chat provider is configured."""
        return bool(self.LLM_CHAT_MODEL and self.OLLAMA_BASE_URL) or bool(self.OPENAI_MODEL and self.OPENAI_API_KEY)


settings = Settings()
