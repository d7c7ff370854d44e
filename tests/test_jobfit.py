import pytest

from resumeforge.core.errors import ErrorCode, ExternalServiceError, TailoringFailedError
from resumeforge.schemas.job_spec import Tone, validate_job_spec
from resumeforge.schemas.resume import validate_parsed_resume
from resumeforge.services.jobfit.job_spec_extractor import calculate_extraction_confidence, extract_job_spec
from resumeforge.services.jobfit.prompt_builder import NOT_SPECIFIED, TONE_GUIDELINES, build_tailor_prompt
from resumeforge.services.jobfit.tailor import tailor_resume

from conftest import AI_JOB_SPEC, AI_RESUME, FakeLLM, llm_error


@pytest.fixture
def resume():
    return validate_parsed_resume({
        **AI_RESUME,
        "profileImage": "https://cdn.example.com/jane.png",
        "customColors": {"--teal-main": "#222222"},
    })


class TestJobSpecExtraction:
    def test_valid_extraction(self):
        outcome = extract_job_spec("We are hiring a Staff Frontend Engineer...", FakeLLM(AI_JOB_SPEC))
        assert not outcome.is_empty
        assert outcome.job_spec.position_title == "Staff Frontend Engineer"
        assert outcome.confidence == 95

    def test_provider_failure_degrades_to_empty(self):
        outcome = extract_job_spec("anything", FakeLLM(llm_error()))
        assert outcome.is_empty
        assert outcome.error.startswith("provider_error")

    def test_invalid_payload_degrades_to_empty(self):
        outcome = extract_job_spec("anything", FakeLLM({"requiredSkills": ["React"]}))
        assert outcome.is_empty
        assert "positionTitle" in outcome.error

    def test_disabled_llm_is_not_called(self):
        llm = FakeLLM(AI_JOB_SPEC, enabled=False)
        assert extract_job_spec("anything", llm).is_empty
        assert llm.calls == []

    def test_confidence_weights(self):
        spec = validate_job_spec({"positionTitle": "Dev", "requiredSkills": ["Go"]})
        assert calculate_extraction_confidence(spec) == 35


class TestPromptBuilder:
    def test_contains_tone_job_spec_and_resume(self, resume):
        prompt = build_tailor_prompt(resume, validate_job_spec(AI_JOB_SPEC), Tone.CREATIVE, "Keep it to one page")
        assert "Creative" in prompt
        assert TONE_GUIDELINES[Tone.CREATIVE] in prompt
        assert "React" in prompt
        assert "5+ years" in prompt
        assert "ORIGINAL RESUME:" in prompt
        assert "Acme Corp" in prompt
        assert "ADDITIONAL INSTRUCTIONS:" in prompt
        assert "Keep it to one page" in prompt

    def test_presentation_fields_are_not_sent(self, resume):
        prompt = build_tailor_prompt(resume, None, Tone.NEUTRAL)
        assert "cdn.example.com" not in prompt
        assert "#222222" not in prompt
        assert "ADDITIONAL INSTRUCTIONS" not in prompt

    def test_empty_job_spec_is_not_specified(self, resume):
        assert f"Position: {NOT_SPECIFIED}" in build_tailor_prompt(resume, None, Tone.FORMAL)

    def test_is_deterministic(self, resume):
        spec = validate_job_spec(AI_JOB_SPEC)
        assert build_tailor_prompt(resume, spec, Tone.FORMAL, "x") == build_tailor_prompt(resume, spec, Tone.FORMAL, "x")


class TestTailor:
    def test_tailored_resume_keeps_user_presentation(self, resume):
        tailored_payload = {
            **AI_RESUME,
            "summary": "Frontend-leaning engineer with React experience.",
            "profileImage": "omitted",
            "customColors": {"--peach": "#000000"},
            "metadata": {"aiTailorCommentary": "Emphasized React work."},
        }
        llm = FakeLLM(tailored_payload)
        tailored = tailor_resume(resume, validate_job_spec(AI_JOB_SPEC), Tone.NEUTRAL, None, llm)
        assert tailored.summary.startswith("Frontend-leaning")
        assert tailored.profile_image == "https://cdn.example.com/jane.png"
        assert tailored.custom_colors == {"--teal-main": "#222222"}
        assert tailored.metadata.ai_tailor_commentary == "Emphasized React work."

    def test_invalid_response_is_adaptation_failed(self, resume):
        llm = FakeLLM({"education": [{"degree": "BSc"}]})
        with pytest.raises(TailoringFailedError) as exc_info:
            tailor_resume(resume, None, Tone.NEUTRAL, None, llm)
        assert exc_info.value.code == ErrorCode.ADAPTATION_FAILED

    def test_rate_limit_is_classified(self, resume):
        with pytest.raises(ExternalServiceError) as exc_info:
            tailor_resume(resume, None, Tone.NEUTRAL, None, FakeLLM(llm_error("429: Rate limit reached")))
        assert exc_info.value.status_code == 429
        assert exc_info.value.details == "rate_limited"
