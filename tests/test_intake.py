import pytest

from resumeforge.core.config import settings
from resumeforge.core.errors import InvalidInputError
from resumeforge.services.resumes import intake
from resumeforge.services.resumes.intake import UploadedFile


def test_detect_file_type_prefers_mime_then_extension():
    assert intake.detect_file_type("cv.bin", "application/pdf") == "pdf"
    assert intake.detect_file_type("cv.txt", "text/plain; charset=utf-8") == "txt"
    assert intake.detect_file_type("cv.pdf", "application/octet-stream") == "pdf"
    assert intake.detect_file_type("cv.docx", None) is None
    assert intake.detect_file_type("cv.pdf", "image/png") is None


def test_oversized_upload_is_rejected():
    with pytest.raises(InvalidInputError) as exc_info:
        intake.validate_upload("cv.pdf", "application/pdf", settings.MAX_RESUME_BYTES + 1)
    assert "too large" in exc_info.value.message


def test_wrong_type_is_rejected():
    with pytest.raises(InvalidInputError):
        intake.validate_upload("photo.png", "image/png", 1000)


def test_empty_upload_is_rejected():
    with pytest.raises(InvalidInputError):
        intake.validate_upload("cv.txt", "text/plain", 0)


def test_job_spec_length_limit():
    assert intake.validate_job_spec_text("   ") is None
    assert intake.validate_job_spec_text("x" * settings.MAX_JOB_SPEC_CHARS) is not None
    with pytest.raises(InvalidInputError):
        intake.validate_job_spec_text("x" * (settings.MAX_JOB_SPEC_CHARS + 1))


def test_extra_prompt_length_limit():
    with pytest.raises(InvalidInputError):
        intake.validate_extra_prompt("y" * (settings.MAX_EXTRA_PROMPT_CHARS + 1))


def test_custom_colors_parsing():
    assert intake.parse_custom_colors(None) == {}
    assert intake.parse_custom_colors('{"--teal-main": "#123456"}') == {"--teal-main": "#123456"}
    with pytest.raises(InvalidInputError):
        intake.parse_custom_colors("{not json")
    with pytest.raises(InvalidInputError):
        intake.parse_custom_colors('{"--unknown": "#fff"}')
    with pytest.raises(InvalidInputError):
        intake.parse_custom_colors('["--teal-main"]')


def test_read_resume_text_strips_bom_and_normalizes_blank_lines():
    upload = UploadedFile("cv.txt", "text/plain", "\ufeffJane Doe\r\n\r\n\r\n\r\nEngineer at Acme".encode("utf-8"))
    assert intake.read_resume_text(upload, "txt") == "Jane Doe\n\nEngineer at Acme"


def test_read_resume_text_rejects_too_little_content():
    upload = UploadedFile("cv.txt", "text/plain", b"hi")
    with pytest.raises(InvalidInputError) as exc_info:
        intake.read_resume_text(upload, "txt")
    assert exc_info.value.message.startswith("Insufficient content detected")


def test_unreadable_pdf_is_invalid_input():
    upload = UploadedFile("cv.pdf", "application/pdf", b"this is not a pdf at all")
    with pytest.raises(InvalidInputError):
        intake.read_resume_text(upload, "pdf")


def test_unreadable_text_file_message_names_the_text_file(monkeypatch):
    def broken(data, file_type):
        raise ValueError("bad bytes")

    monkeypatch.setattr(intake, "parse_to_text", broken)
    upload = UploadedFile("cv.txt", "text/plain", b"whatever")
    with pytest.raises(InvalidInputError) as exc_info:
        intake.read_resume_text(upload, "txt")
    assert exc_info.value.message.startswith("The text file could not be read")
    assert "PDF could not be read" not in exc_info.value.message
