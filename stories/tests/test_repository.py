import pytest
from django.db import DatabaseError, IntegrityError

from stories.exceptions import SlugAlreadyInUse, SlugColumnMissing, SlugLookupFailed
from stories.models import Story, Comment
from stories.repository import StoryRepository

pytestmark = pytest.mark.django_db


def _story(**overrides):
    data = {
        "title": "Herbstlicht", "slug": "herbstlicht", "date": "13. Oktober 2024",
        "excerpt": "Kurz.", "body": "Lang.",
    }
    data.update(overrides)
    return Story.objects.create(**data)


def test_find_story_id_by_slug():
    story = _story()
    repo = StoryRepository()
    assert repo.find_story_id_by_slug("herbstlicht") == story.id
    assert repo.find_story_id_by_slug("unbekannt") is None


def test_lookup_database_error_becomes_slug_lookup_failed(monkeypatch):
    def boom(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(Story.objects, "filter", boom)
    with pytest.raises(SlugLookupFailed):
        StoryRepository().find_story_id_by_slug("herbstlicht")


def test_list_rows_counts_only_approved_comments():
    story = _story()
    Comment.objects.create(story=story, body="Schön.")
    Comment.objects.create(story=story, body="Spam", status=Comment.Status.REJECTED)

    rows = StoryRepository().list_rows()
    assert len(rows) == 1
    assert rows[0]["slug"] == "herbstlicht"
    assert rows[0]["comments_count"] == 1


def test_list_rows_without_slug_column_omits_slug():
    _story()
    rows = StoryRepository(has_slug_column=False).list_rows()
    assert "slug" not in rows[0]
    assert rows[0]["title"] == "Herbstlicht"


def test_create_duplicate_slug_raises_slug_already_in_use():
    _story()
    with pytest.raises(SlugAlreadyInUse) as excinfo:
        StoryRepository().create(title="Noch eins", slug="herbstlicht", date="1.1.2024", excerpt="x")
    assert excinfo.value.slug == "herbstlicht"
    assert Story.objects.count() == 1


def test_update_and_delete():
    story = _story()
    repo = StoryRepository()
    updated = repo.update(story.id, title="Winterlicht", slug="winterlicht")
    assert updated.slug == "winterlicht"
    assert repo.delete(story.id) == 1
    assert repo.delete(story.id) == 0


def test_writes_require_slug_column():
    with pytest.raises(SlugColumnMissing):
        StoryRepository(has_slug_column=False).create(title="x", slug="x", date="1.1.2024", excerpt="x")


def test_flag_defaults_to_settings(settings):
    settings.STORIES_HAS_SLUG_COLUMN = False
    assert StoryRepository().has_slug_column is False


def test_other_integrity_errors_are_not_reported_as_slug_conflicts():
    repo = StoryRepository()
    with pytest.raises(IntegrityError):
        repo.create(title=None, slug="ohne-titel", date="1.1.2024", excerpt="x")
    assert not Story.objects.exists()

    story = _story()
    with pytest.raises(IntegrityError):
        repo.update(story.id, excerpt=None)


def test_update_to_taken_slug_raises_slug_already_in_use():
    _story()
    other = _story(title="Winter", slug="winter")
    with pytest.raises(SlugAlreadyInUse) as excinfo:
        StoryRepository().update(other.id, slug="herbstlicht")
    assert excinfo.value.slug == "herbstlicht"
