from resumeforge.services.common.llm_client import LLMClient
from resumeforge.services.resumes.extraction.deterministic import extract_with_regex
from resumeforge.services.resumes.extraction.llm_extractor import AI_CONFIDENCE
from resumeforge.services.resumes.extraction.outcome import METHOD_AI, METHOD_REGEX_FALLBACK
from resumeforge.services.resumes.extraction_pipeline import RegexResumeExtractor, extract_resume
from resumeforge.services.resumes.validation import assess_quality

from conftest import AI_RESUME, SAMPLE_RESUME_TEXT, FakeLLM, llm_error


class TestRegexExtraction:
    def test_inline_experience_header(self):
        payload, confidence = extract_with_regex(
            "John Smith\njohn@example.com\nExperience: Engineer at Acme 2020-2022"
        )
        assert payload["name"] == "John Smith"
        assert payload["contact"]["email"] == "john@example.com"
        assert payload["experience"] == [
            {"title": "Engineer", "company": "Acme", "duration": "2020-2022", "details": []}
        ]
        assert 15 <= confidence <= 85

    def test_sectioned_resume(self):
        payload, _ = extract_with_regex(SAMPLE_RESUME_TEXT)
        assert payload["name"] == "Jane Doe"
        assert payload["title"] == "Senior Software Engineer"
        assert payload["contact"]["email"] == "jane.doe@example.com"
        assert payload["summary"].startswith("Backend engineer")
        role = payload["experience"][0]
        assert role["company"] == "Acme Corp"
        assert role["duration"] == "2020 - Present"
        assert "Led a team of five engineers" in role["details"]
        assert "Stanford University" in payload["education"][0]["institution"]
        assert payload["skills"] == ["Python", "FastAPI", "PostgreSQL", "Docker"]

    def test_never_raises_on_noise(self):
        outcome = RegexResumeExtractor().extract("@@@@ ---- #### !!!! ???? ;;;; ::::")
        assert outcome.ok
        assert outcome.method == METHOD_REGEX_FALLBACK
        assert outcome.confidence >= 15


class TestExtractionPipeline:
    def test_ai_result_is_used_when_valid(self):
        llm = FakeLLM(AI_RESUME)
        outcome = extract_resume(SAMPLE_RESUME_TEXT, llm, use_ai=True)
        assert outcome.method == METHOD_AI
        assert outcome.confidence == AI_CONFIDENCE
        assert outcome.resume.name == "Jane Doe"
        assert len(llm.calls) == 1

    def test_provider_failure_falls_back_to_regex_once(self):
        llm = FakeLLM(llm_error())
        outcome = extract_resume(SAMPLE_RESUME_TEXT, llm, use_ai=True)
        assert outcome.method == METHOD_REGEX_FALLBACK
        assert outcome.resume.name == "Jane Doe"
        assert len(llm.calls) == 1

    def test_schema_invalid_ai_response_falls_back(self):
        llm = FakeLLM({"name": "Jane Doe", "education": [{"institution": "MIT"}]})
        outcome = extract_resume(SAMPLE_RESUME_TEXT, llm, use_ai=True)
        assert outcome.method == METHOD_REGEX_FALLBACK

    def test_presentation_fields_from_the_model_are_ignored(self):
        llm = FakeLLM({**AI_RESUME, "profileImage": "https://evil.example/x.png", "customColors": {"--peach": "#fff"}})
        outcome = extract_resume(SAMPLE_RESUME_TEXT, llm, use_ai=True)
        assert outcome.method == METHOD_AI
        assert outcome.resume.profile_image is None
        assert outcome.resume.custom_colors == {}

    def test_disabled_ai_goes_straight_to_regex(self):
        llm = FakeLLM(AI_RESUME)
        outcome = extract_resume(SAMPLE_RESUME_TEXT, llm, use_ai=False)
        assert outcome.method == METHOD_REGEX_FALLBACK
        assert llm.calls == []


def test_quality_report_flags_missing_sections():
    llm = FakeLLM(enabled=False)
    outcome = extract_resume("Someone Unknown\nnothing useful here at all", llm, use_ai=True)
    report = assess_quality(outcome.resume)
    assert not report.is_valid
    assert report.quality_score < 1.0


def test_coerce_json_handles_fenced_and_wrapped_output():
    assert LLMClient._coerce_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert LLMClient._coerce_json('Sure! Here it is: {"a": {"b": "}"}} thanks') == {"a": {"b": "}"}}
    assert LLMClient._coerce_json('[{"a": 1}]') == {"a": 1}
