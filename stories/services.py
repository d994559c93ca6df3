# stories/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import DatabaseError

from .fallback import fallback_rows
from .models import Story
from .normalizer import (
    date_picker_value, ensure_slug, fold_text, normalize_date_input, normalize_read_time,
    resolve_unique_slug, slug_seed, slugify, story_timestamp,
)
from .repository import StoryRepository

logger = logging.getLogger("stories")

TAGS = [
    "Allgemeines",
    "Finanzen",
    "Gesellschaft",
    "Medien",
    "Politik",
    "Reise",
    "Sport",
    "Technik",
    "Wirtschaft",
]
READ_TIME_OPTIONS = ["3 Min", "4 Min", "5 Min", "6 Min", "7 Min", "8 Min", "10 Min", "12 Min"]

DEFAULT_CATEGORY = "Feuilleton"
ARCHIVE_PREVIEW_SIZE = 3
FALLBACK_NOTICE = "Inhalte werden vorübergehend aus dem lokalen Fallback angezeigt."


# ---------- rows ----------

def normalize_row(row: dict, index: int = 0) -> dict:
    """Eine Zeile (DB oder Fallback) in die Form bringen, die das Frontend liest."""
    story = dict(row)
    story["category"] = story.get("category") or DEFAULT_CATEGORY
    story["slug"] = ensure_slug(
        story.get("slug"),
        story.get("title"),
        slug_seed(story.get("id"), index),
        tag=story.get("tag"),
        category=story.get("category"),
    )
    story["tag"] = story.get("tag") or ""
    story["author"] = story.get("author") or ""
    story["read_time"] = story.get("read_time") or "–"
    story["body"] = story.get("body") or ""
    story["comments_count"] = story.get("comments_count") or 0
    story["openable"] = bool(story["body"].strip())
    story["date_iso"] = date_picker_value(story.get("date"))

    created_at = story.get("created_at")
    if created_at is not None and not isinstance(created_at, str):
        story["created_at"] = created_at.isoformat()
    return story


def sort_stories(rows: list[dict]) -> list[dict]:
    """Neueste zuerst; Geschichten ohne lesbares Datum ans Ende (stabil)."""
    dated, undated = [], []
    for row in rows:
        ts = story_timestamp(row.get("created_at"), row.get("date"))
        if ts is None:
            logger.warning(
                "Datum nicht lesbar, Geschichte wird ans Ende sortiert",
                extra={"slug": row.get("slug"), "date": row.get("date")},
            )
            undated.append(row)
        else:
            dated.append((ts, row))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [row for _, row in dated] + undated


def load_story_rows(repository: Optional[StoryRepository] = None) -> tuple[list[dict], Optional[str]]:
    """
    Geschichten für Storefront und Sitemap.

    Ist die Datenbank nicht lesbar, kommen die Fallback-Geschichten plus
    ein allgemeiner Hinweis zurück; leere Tabelle -> Fallback ohne Hinweis.
    """
    repository = repository or StoryRepository()
    notice = None
    try:
        rows = repository.list_rows()
    except DatabaseError as exc:
        logger.warning("Konnte Geschichten nicht laden, Fallback wird genutzt", exc_info=exc)
        rows, notice = [], FALLBACK_NOTICE

    if not rows:
        rows = fallback_rows()
    return [normalize_row(row, idx) for idx, row in enumerate(rows)], notice


# ---------- storefront ----------

def story_label(story: dict) -> str:
    return (story.get("tag") or story.get("category") or "").strip()


def tag_filters(stories: list[dict]) -> list[str]:
    tags = set(TAGS)
    for story in stories:
        label = story_label(story)
        if label:
            tags.add(label)
    return sorted(tags, key=lambda t: (fold_text(t), t))


def select_archive(archive: list[dict], active_tag: Optional[str]) -> list[dict]:
    if active_tag:
        wanted = active_tag.strip().casefold()
        return [s for s in archive if story_label(s).casefold() == wanted]
    return archive[:ARCHIVE_PREVIEW_SIZE]


@dataclass
class Storefront:
    stories: list[dict]
    lead: Optional[dict]
    archive: list[dict]
    tags: list[str]
    issue_number: str
    active_tag: Optional[str] = None
    notice: Optional[str] = None


def build_storefront(repository: Optional[StoryRepository] = None, tag: Optional[str] = None) -> Storefront:
    rows, notice = load_story_rows(repository)
    stories = sort_stories(rows)
    active_tag = (tag or "").strip() or None
    return Storefront(
        stories=stories,
        lead=stories[0] if stories else None,
        archive=select_archive(stories[1:], active_tag),
        tags=tag_filters(stories),
        issue_number=str(max(len(stories), 1)).zfill(2),
        active_tag=active_tag,
        notice=notice,
    )


def find_story(stories: list[dict], slug: str) -> Optional[dict]:
    slug = (slug or "").strip().strip("/")
    return next((s for s in stories if s.get("slug") == slug), None)


def structured_data(story: dict, url: str) -> dict:
    """schema.org Article für den Leser-View."""
    ts = story_timestamp(story.get("created_at"), story.get("date"))
    site_name = getattr(settings, "SITE_NAME", "Der Levitenleser")
    data = {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": story.get("title") or "",
        "description": story.get("excerpt") or "",
        "author": {"@type": "Person", "name": story.get("author") or site_name},
        "publisher": {"@type": "Organization", "name": site_name},
        "articleSection": story_label(story) or "Kurzgeschichte",
        "url": url,
        "inLanguage": "de-DE",
    }
    if ts is not None:
        data["datePublished"] = ts.isoformat()
    return data


# ---------- CMS ----------

def save_story(
    data: dict,
    *,
    repository: Optional[StoryRepository] = None,
    story_id=None,
    default_author: str = "",
) -> Story:
    """
    Anlegen oder Aktualisieren aus dem CMS.

    Slug: explizit gesetzt -> dieser, geleert -> neu aus dem Titel. In beiden
    Fällen läuft resolve_unique_slug; die eigene ID kollidiert nicht.
    """
    repository = repository or StoryRepository()
    title = (data.get("title") or "").strip()
    candidate = slugify(data.get("slug") or title)
    slug = resolve_unique_slug(
        candidate, story_id, repository, max_length=Story._meta.get_field("slug").max_length,
    )

    payload = {
        "title": title,
        "slug": slug,
        "category": data.get("category") or DEFAULT_CATEGORY,
        "date": normalize_date_input(data.get("date")),
        "read_time": normalize_read_time(data.get("read_time")),
        "tag": (data.get("tag") or "").strip(),
        "excerpt": data.get("excerpt") or "",
        "body": data.get("body") or "",
        "author": (data.get("author") or "").strip() or default_author,
    }
    if story_id is not None:
        story = repository.update(story_id, **payload)
        logger.info("Geschichte aktualisiert", extra={"id": story.id, "slug": story.slug})
    else:
        story = repository.create(**payload)
        logger.info("Geschichte angelegt", extra={"id": story.id, "slug": story.slug})
    return story
