import random

import pytest

from resumeforge.core.errors import ForbiddenError, NotFoundError, VersionConflictError
from resumeforge.repositories import resume_repo
from resumeforge.schemas.resume import validate_parsed_resume
from resumeforge.services.resumes import library
from resumeforge.services.resumes.render import render_resume_html
from resumeforge.services.resumes.slugs import create_slug, public_slug
from resumeforge.services.resumes.temp_store import TempResumeStore

from conftest import AI_RESUME

OWNER = "owner-1"


@pytest.fixture
def saved(db):
    return library.save_parsed_resume(db, owner_id=OWNER, resume=validate_parsed_resume(AI_RESUME))


class TestSlugs:
    def test_create_slug(self):
        assert create_slug("  Jane  O'Doe -- Résumé ") == "jane-odoe-rsum"
        assert len(create_slug("x" * 200)) == 50

    def test_public_slug_has_four_digit_suffix(self):
        slug = public_slug("Jane Doe", random.Random(1))
        base, suffix = slug.rsplit("-", 1)
        assert base == "jane-doe"
        assert len(suffix) == 4 and suffix.isdigit()
        assert public_slug("!!!").startswith("resume-")


class TestLibrary:
    def test_save_uses_name_as_title(self, saved):
        assert saved.title == "Jane Doe"
        assert saved.slug.startswith("jane-doe-")
        assert saved.version == 1
        assert saved.parsed_data["name"] == "Jane Doe"

    def test_title_falls_back_to_filename_then_placeholder(self):
        nameless = validate_parsed_resume({"skills": ["Go"]})
        assert library.resume_title(nameless, "my_cv") == "my_cv"
        assert library.resume_title(nameless) == library.UNTITLED

    def test_slug_collision_retries(self, db, saved, monkeypatch):
        slugs = iter([saved.slug, "jane-doe-0001"])
        monkeypatch.setattr(library, "public_slug", lambda title: next(slugs))
        second = library.save_parsed_resume(db, owner_id=OWNER, resume=validate_parsed_resume(AI_RESUME))
        assert second.slug == "jane-doe-0001"

    def test_replace_is_whole_document(self, db, saved):
        updated = library.replace_resume(db, saved.id, OWNER, parsed_data={"name": "Jane Q. Doe"})
        assert updated.parsed_data == {"name": "Jane Q. Doe", "experience": [], "education": [], "certifications": [], "skills": [], "customColors": {}}
        assert updated.version == 2
        versions = library.list_resume_versions(db, saved.id, OWNER)
        assert [v.version_number for v in versions] == [1]
        assert versions[0].parsed_data["name"] == "Jane Doe"

    def test_identical_replace_is_idempotent(self, db, saved):
        payload = dict(saved.parsed_data)
        first = library.replace_resume(db, saved.id, OWNER, parsed_data=payload)
        second = library.replace_resume(db, saved.id, OWNER, parsed_data=payload)
        assert first.version == second.version == 1
        assert library.list_resume_versions(db, saved.id, OWNER) == []

    def test_identical_replace_without_item_ids_is_idempotent(self, db, saved):
        payload = {"name": "A", "experience": [{"title": "Eng", "company": "Acme"}]}
        first = library.replace_resume(db, saved.id, OWNER, parsed_data=payload)
        first_doc, first_version = dict(first.parsed_data), first.version
        second = library.replace_resume(db, saved.id, OWNER, parsed_data=payload)
        assert second.parsed_data == first_doc
        assert second.version == first_version == 2
        assert len(library.list_resume_versions(db, saved.id, OWNER)) == 1

    def test_stale_expected_version_conflicts(self, db, saved):
        library.replace_resume(db, saved.id, OWNER, parsed_data={"name": "v2"}, expected_version=1)
        with pytest.raises(VersionConflictError):
            library.replace_resume(db, saved.id, OWNER, parsed_data={"name": "v3"}, expected_version=1)

    def test_other_owner_is_forbidden(self, db, saved):
        with pytest.raises(ForbiddenError):
            library.replace_resume(db, saved.id, "someone-else", parsed_data={"name": "x"})
        with pytest.raises(ForbiddenError):
            library.delete_resume(db, saved.id, "someone-else")

    def test_delete_removes_versions(self, db, saved):
        library.replace_resume(db, saved.id, OWNER, parsed_data={"name": "v2"})
        library.delete_resume(db, saved.id, OWNER)
        with pytest.raises(NotFoundError):
            library.get_owned_resume(db, saved.id, OWNER)
        assert resume_repo.list_versions(db, saved.id) == []

    def test_public_access_and_counters(self, db, saved):
        assert library.record_view(db, saved.slug) == 1
        assert library.record_view(db, saved.slug) == 2
        assert library.record_download(db, saved.id, None).download_count == 1

        library.replace_resume(db, saved.id, OWNER, is_public=False)
        with pytest.raises(NotFoundError):
            library.get_public_resume(db, saved.slug)
        with pytest.raises(NotFoundError):
            library.record_download(db, saved.id, "stranger")
        assert library.record_download(db, saved.id, OWNER).download_count == 2


class TestTempStore:
    def test_put_get_discard(self):
        store = TempResumeStore(60)
        token = store.put({"name": "Jane"}, {"method": "ai"})
        assert store.get(token).data == {"name": "Jane"}
        assert store.discard(token)
        assert store.get(token) is None
        assert not store.discard(token)

    def test_entries_expire(self):
        now = [1000.0]
        store = TempResumeStore(60, clock=lambda: now[0])
        token = store.put({"name": "Jane"})
        now[0] += 61
        assert store.get(token) is None
        assert len(store) == 0

    def test_keep_forever_disables_eviction(self):
        now = [1000.0]
        store = TempResumeStore(60, keep_forever=True, clock=lambda: now[0])
        token = store.put({"name": "Jane"})
        now[0] += 10_000
        assert store.evict_expired() == 0
        assert store.get(token) is not None


class TestRender:
    def test_escapes_and_applies_colors(self):
        resume = validate_parsed_resume({
            **AI_RESUME,
            "name": "<script>alert(1)</script>",
            "customColors": {"--teal-main": "#abcdef"},
        })
        html = render_resume_html(resume, "modern")
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html
        assert "--teal-main: #abcdef;" in html
        assert "Acme Corp" in html

    @pytest.mark.parametrize("image", ["", "omitted"])
    def test_omitted_profile_image_is_not_rendered(self, image):
        html = render_resume_html(validate_parsed_resume({**AI_RESUME, "profileImage": image}))
        assert "profile-image\" src" not in html
        assert "<img" not in html

    def test_profile_image_is_rendered(self):
        html = render_resume_html(validate_parsed_resume({**AI_RESUME, "profileImage": "https://cdn.example.com/j.png"}))
        assert 'src="https://cdn.example.com/j.png"' in html

    def test_summary_is_truncated_for_display_only(self):
        resume = validate_parsed_resume({"name": "A B", "summary": "word " * 400})
        html = render_resume_html(resume, "minimal")
        assert "..." in html
        assert len(resume.summary) == 2000

    def test_unknown_template(self):
        from resumeforge.core.errors import InvalidInputError

        with pytest.raises(InvalidInputError):
            render_resume_html(validate_parsed_resume(AI_RESUME), "fancy")
