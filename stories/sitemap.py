# stories/sitemap.py
"""
sitemap.xml aus denselben Daten wie die Storefront.

Gerendert mit dem Django-Template stories/sitemap.xml; genutzt vom
Management-Command generate_sitemap und von GET /sitemap.xml.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from django.conf import settings
from django.db import DatabaseError
from django.template.loader import render_to_string

from .fallback import fallback_rows
from .normalizer import ensure_slug, parse_story_date, slug_seed, story_timestamp
from .repository import StoryRepository

logger = logging.getLogger("stories")

STATIC_PAGES = ["/", "/newsletter", "/impressum", "/datenschutz"]


def _iso_utc(value: datetime) -> str:
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_lastmod(row: dict) -> Optional[str]:
    """created_at, sonst das geparste date (Mitternacht UTC), sonst None."""
    created_at = row.get("created_at")
    if created_at:
        ts = story_timestamp(created_at, None)
        if ts is not None:
            return _iso_utc(ts)
    parsed = parse_story_date(row.get("date"))
    if parsed:
        return _iso_utc(datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc))
    return None


def _entries(rows: list[dict]) -> list[dict]:
    return [
        {
            "slug": ensure_slug(
                row.get("slug"), row.get("title"), slug_seed(row.get("id"), idx),
                tag=row.get("tag"), category=row.get("category"),
            ),
            "lastmod": build_lastmod(row),
        }
        for idx, row in enumerate(rows)
    ]


def collect_story_entries(repository: Optional[StoryRepository] = None) -> list[dict]:
    """
    Geschichten aus der DB plus Fallback, ohne doppelte Slugs (erster gewinnt).
    Ist die DB nicht lesbar, nur der Fallback.
    """
    repository = repository or StoryRepository()
    fallback = _entries(fallback_rows())
    try:
        stored = _entries(repository.list_rows())
    except DatabaseError as exc:
        logger.warning("Konnte Geschichten nicht laden, Sitemap nur mit Fallback", exc_info=exc)
        return fallback

    unique: dict[str, dict] = {}
    for entry in stored + fallback:
        unique.setdefault(entry["slug"], entry)
    return list(unique.values())


def build_sitemap_xml(
    entries: Optional[list[dict]] = None,
    origin: Optional[str] = None,
) -> str:
    origin = (origin or settings.SITE_URL).rstrip("/")
    if entries is None:
        entries = collect_story_entries()

    urls = [{"loc": f"{origin}{page}", "lastmod": None} for page in STATIC_PAGES]
    urls += [
        {"loc": f"{origin}/stories/{entry['slug']}", "lastmod": entry.get("lastmod")}
        for entry in entries
    ]
    return render_to_string("stories/sitemap.xml", {"urls": urls})


def write_sitemap(path=None, repository: Optional[StoryRepository] = None) -> tuple[Path, int]:
    entries = collect_story_entries(repository)
    out = Path(path or settings.SITEMAP_OUTPUT)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(build_sitemap_xml(entries), encoding="utf-8")
    return out, len(entries)
