import pytest
from django.db import DatabaseError

from stories.fallback import FALLBACK_STORIES
from stories.models import Story
from stories.services import (
    FALLBACK_NOTICE, build_storefront, find_story, load_story_rows, normalize_row,
    save_story, sort_stories, structured_data, tag_filters,
)


class FailingRepository:
    def list_rows(self):
        raise DatabaseError("no connection")


class ListRepository:
    def __init__(self, rows):
        self.rows = rows

    def list_rows(self):
        return [dict(r) for r in self.rows]


def test_normalize_row_assigns_seeded_slug_and_defaults():
    row = normalize_row({"title": "Die Leselampe", "body": "", "date": "1. September 2024"}, index=3)
    assert row["slug"] == "die-leselampe-4"
    assert row["category"] == "Feuilleton"
    assert row["openable"] is False
    assert row["read_time"] == "–"
    assert row["date_iso"] == "2024-09-01"


def test_normalize_row_keeps_stored_slug():
    row = normalize_row({"id": 9, "slug": "herbstlicht", "title": "Herbstlicht", "body": "Text"})
    assert row["slug"] == "herbstlicht"
    assert row["openable"] is True


def test_sort_puts_undated_last():
    rows = [
        {"slug": "a", "date": "irgendwann"},
        {"slug": "b", "date": "1. September 2024"},
        {"slug": "c", "date": "13. Oktober 2024"},
        {"slug": "d", "created_at": "2025-01-05T10:00:00+00:00", "date": "1.1.2020"},
    ]
    assert [r["slug"] for r in sort_stories(rows)] == ["d", "c", "b", "a"]


def test_unreadable_repository_falls_back_with_notice():
    rows, notice = load_story_rows(FailingRepository())
    assert notice == FALLBACK_NOTICE
    assert len(rows) == len(FALLBACK_STORIES)
    assert rows[0]["slug"] == "die-stille-hinter-den-schiebeturen-1"


def test_empty_repository_falls_back_without_notice():
    rows, notice = load_story_rows(ListRepository([]))
    assert notice is None
    assert len(rows) == len(FALLBACK_STORIES)


def test_storefront_lead_archive_and_tags():
    front = build_storefront(ListRepository(FALLBACK_STORIES))
    assert front.lead["title"] == "Die Stille hinter den Schiebetüren"
    assert [s["title"] for s in front.archive] == [
        "Das Telefon der Großmutter", "Aufrecht gehen die Schatten", "Die Leselampe",
    ]
    assert front.issue_number == "04"
    assert "Erinnerung" in front.tags and "Politik" in front.tags
    assert front.tags == sorted(front.tags, key=str.casefold)


def test_storefront_tag_filter_is_case_insensitive_and_skips_lead():
    front = build_storefront(ListRepository(FALLBACK_STORIES), tag="erinnerung")
    assert [s["title"] for s in front.archive] == ["Das Telefon der Großmutter"]

    front = build_storefront(ListRepository(FALLBACK_STORIES), tag="Digitales Feuilleton")
    assert front.archive == []


def test_archive_preview_is_limited_without_filter():
    rows = [
        {"id": i, "title": f"Text {i}", "date": f"{i}. Oktober 2024", "tag": "Alltag"}
        for i in range(1, 8)
    ]
    front = build_storefront(ListRepository(rows))
    assert front.lead["title"] == "Text 7"
    assert len(front.archive) == 3
    assert len(build_storefront(ListRepository(rows), tag="Alltag").archive) == 6


def test_tag_filters_include_fixed_set_once():
    tags = tag_filters([{"tag": "Politik"}, {"tag": "", "category": "Miniatur"}])
    assert tags.count("Politik") == 1
    assert "Miniatur" in tags


def test_find_story_and_structured_data():
    rows, _ = load_story_rows(ListRepository(FALLBACK_STORIES))
    story = find_story(rows, "die-leselampe-4/")
    assert story["title"] == "Die Leselampe"
    data = structured_data(story, "https://levitenleser.test/stories/die-leselampe-4")
    assert data["@type"] == "Article"
    assert data["articleSection"] == "Alltag"
    assert data["datePublished"].startswith("2024-09-01")
    assert find_story(rows, "gibt-es-nicht") is None


@pytest.mark.django_db
def test_save_story_twice_yields_distinct_slugs():
    data = {"title": "Herbstlicht", "date": "2024-10-13", "excerpt": "Kurz.", "read_time": "ca. 8 Minuten"}
    first = save_story(data, default_author="Autorin")
    second = save_story(data, default_author="Autorin")

    assert first.slug == "herbstlicht"
    assert second.slug == "herbstlicht-1"
    assert first.date == "13. Oktober 2024"
    assert first.read_time == "8 Min"
    assert first.author == "Autorin"
    assert Story.objects.get(slug=first.slug).pk == first.pk
    assert Story.objects.get(slug=second.slug).pk == second.pk


@pytest.mark.django_db
def test_save_story_update_keeps_own_slug_and_regenerates_cleared_one():
    story = save_story({"title": "Herbstlicht", "date": "1.10.2024", "excerpt": "x"})
    kept = save_story(
        {"title": "Herbstlicht", "slug": "herbstlicht", "date": "1.10.2024", "excerpt": "y"},
        story_id=story.pk,
    )
    assert kept.slug == "herbstlicht"

    regenerated = save_story(
        {"title": "Spätes Herbstlicht", "slug": "", "date": "1.10.2024", "excerpt": "y"},
        story_id=story.pk,
    )
    assert regenerated.slug == "spates-herbstlicht"


def test_tag_filters_sort_umlauts_like_their_base_letter():
    tags = tag_filters([{"tag": "Ärger"}, {"tag": "Übersee"}, {"tag": "Österreich"}])
    assert tags.index("Allgemeines") < tags.index("Ärger") < tags.index("Finanzen")
    assert tags.index("Medien") < tags.index("Österreich") < tags.index("Politik")
    assert tags.index("Technik") < tags.index("Übersee") < tags.index("Wirtschaft")


@pytest.mark.django_db
def test_save_story_caps_slug_length():
    max_length = Story._meta.get_field("slug").max_length
    data = {"title": "ß" * 200, "date": "1. Mai 2024", "excerpt": "x"}

    first = save_story(data)
    second = save_story(data)

    assert len(first.slug) <= max_length
    assert len(second.slug) <= max_length
    assert second.slug == f"{first.slug}-1"
