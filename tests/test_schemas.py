import pytest

from resumeforge.core.errors import InvalidInputError, SchemaValidationError
from resumeforge.schemas.job_spec import Tone, parse_tone, validate_job_spec
from resumeforge.schemas.resume import (
    DEFAULT_COLORS,
    ParsedResume,
    effective_colors,
    ensure_item_ids,
    is_profile_image_present,
    validate_parsed_resume,
)

from conftest import AI_JOB_SPEC, AI_RESUME


class TestParsedResume:
    def test_accepts_camel_case_and_dumps_camel_case(self):
        resume = validate_parsed_resume({
            **AI_RESUME,
            "profileImage": "data:image/png;base64,AAAA",
            "customColors": {"--teal-main": "#000000"},
        })
        payload = resume.to_payload()
        assert resume.profile_image.startswith("data:image/png")
        assert payload["profileImage"].startswith("data:image/png")
        assert payload["customColors"] == {"--teal-main": "#000000"}
        assert "profile_image" not in payload

    def test_null_lists_become_empty(self):
        resume = validate_parsed_resume({"name": "A B", "experience": None, "skills": None, "customColors": None})
        assert resume.experience == []
        assert resume.skills == []
        assert resume.custom_colors == {}

    def test_missing_required_education_field_is_reported_by_path(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_parsed_resume({"name": "A B", "education": [{"institution": "MIT"}]})
        assert "education.0.degree" in exc_info.value.fields
        assert exc_info.value.status_code == 422

    def test_unknown_color_key_is_rejected(self):
        with pytest.raises(SchemaValidationError):
            validate_parsed_resume({"customColors": {"--not-a-color": "#fff"}})

    def test_non_object_is_rejected(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_parsed_resume(["not", "an", "object"])
        assert exc_info.value.fields == ["<root>"]

    def test_long_summary_is_kept_whole(self):
        summary = "x" * 5000
        assert validate_parsed_resume({"summary": summary}).summary == summary


class TestItemIds:
    def test_missing_and_duplicate_ids_are_replaced(self):
        resume = ParsedResume.model_validate({
            "experience": [
                {"id": "a", "title": "One"},
                {"id": "a", "title": "Two"},
                {"title": "Three"},
            ]
        })
        ensure_item_ids(resume)
        ids = [item.id for item in resume.experience]
        assert ids[0] == "a"
        assert len(set(ids)) == 3
        assert all(ids)

    def test_generated_ids_are_stable_for_equal_payloads(self):
        payload = {
            "experience": [{"title": "Eng", "company": "Acme"}, {"title": "Eng", "company": "Acme"}],
            "education": [{"degree": "BSc", "institution": "MIT"}],
        }
        first = ensure_item_ids(ParsedResume.model_validate(payload))
        second = ensure_item_ids(ParsedResume.model_validate(payload))
        assert first.to_payload() == second.to_payload()
        assert first.experience[0].id != first.experience[1].id


class TestPresentationHelpers:
    @pytest.mark.parametrize("value", [None, "", "  ", "omitted"])
    def test_no_profile_image(self, value):
        assert not is_profile_image_present(value)

    def test_profile_image_present(self):
        assert is_profile_image_present("https://cdn.example.com/me.png")

    def test_effective_colors_overlay_defaults(self):
        colors = effective_colors({"--charcoal": "#111111"})
        assert colors["--charcoal"] == "#111111"
        assert colors["--teal-main"] == DEFAULT_COLORS["--teal-main"]


class TestJobSpec:
    def test_valid_job_spec(self):
        spec = validate_job_spec(AI_JOB_SPEC)
        assert spec.position_title == "Staff Frontend Engineer"
        assert spec.required_skills == ["React", "TypeScript"]

    def test_missing_position_title_fails(self):
        data = dict(AI_JOB_SPEC)
        del data["positionTitle"]
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_job_spec(data)
        assert "positionTitle" in exc_info.value.fields

    def test_too_many_skills_fails(self):
        with pytest.raises(SchemaValidationError):
            validate_job_spec({**AI_JOB_SPEC, "requiredSkills": [f"s{i}" for i in range(51)]})

    def test_tone_lookup(self):
        assert parse_tone(None) is Tone.NEUTRAL
        assert parse_tone("creative") is Tone.CREATIVE
        with pytest.raises(InvalidInputError):
            parse_tone("sarcastic")
