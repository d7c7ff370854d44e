import os

# Settings are read at import time; point everything at throwaway resources first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LLM_CHAT_MODEL"] = ""
os.environ["OPENAI_MODEL"] = ""
os.environ["FIGMA_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

import resumeforge.models  # noqa: F401
from resumeforge.db.base import Base, SessionLocal, engine
from resumeforge.services.common.llm_client import LLM_ERROR_KEY, _JSONResponse
from resumeforge.services.figma.adapter import FigmaAdapter
from resumeforge.services.figma.client import MockFigmaClient


class FakeLLM:
    """Scripted stand-in for LLMClient: hands out queued JSON payloads in order."""

    provider = "fake"

    def __init__(self, *responses, enabled=True):
        self.responses = list(responses)
        self.enabled = enabled
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def chat_json(self, messages, timeout=90, *, options=None, max_tokens=None):
        self.calls.append(messages)
        if not self.responses:
            return _JSONResponse(data={LLM_ERROR_KEY: "no scripted response"})
        return _JSONResponse(data=self.responses.pop(0))


def llm_error(message="503: service unavailable"):
    return {LLM_ERROR_KEY: message}


SAMPLE_RESUME_TEXT = """Jane Doe
Senior Software Engineer
jane.doe@example.com | +1 555 123 4567 | San Francisco, CA

Summary
Backend engineer with eight years of experience building APIs.

Experience
Senior Software Engineer at Acme Corp 2020 - Present
- Led a team of five engineers
- Designed a payments platform

Education
BSc Computer Science, Stanford University 2012 - 2016

Skills
Python, FastAPI, PostgreSQL, Docker
"""

AI_RESUME = {
    "name": "Jane Doe",
    "title": "Senior Software Engineer",
    "summary": "Backend engineer with eight years of experience building APIs.",
    "contact": {"email": "jane.doe@example.com", "phone": "+1 555 123 4567", "location": "San Francisco, CA"},
    "experience": [
        {
            "title": "Senior Software Engineer",
            "company": "Acme Corp",
            "duration": "2020 - Present",
            "details": ["Led a team of five engineers", "Designed a payments platform"],
        }
    ],
    "education": [{"degree": "BSc Computer Science", "institution": "Stanford University", "duration": "2012 - 2016"}],
    "skills": ["Python", "FastAPI", "PostgreSQL", "Docker"],
}

AI_JOB_SPEC = {
    "positionTitle": "Staff Frontend Engineer",
    "requiredSkills": ["React", "TypeScript"],
    "yearsExperience": 5,
    "responsibilities": ["Own the design system"],
    "companyValues": ["Ownership"],
}


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def figma_adapter(tmp_path):
    adapter = FigmaAdapter(MockFigmaClient(), output_dir=str(tmp_path / "generated"))
    adapter.initialize()
    return adapter


@pytest.fixture
def client(db, fake_llm, figma_adapter):
    from resumeforge.main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        app.state.llm = fake_llm
        app.state.figma_adapter = figma_adapter
        yield test_client


@pytest.fixture
def owner_headers():
    return {"X-User-Id": "user-123"}
