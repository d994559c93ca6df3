# stories/repository.py
"""
Zugriff auf die Geschichten-Tabelle.

Wird explizit konstruiert und an resolve_unique_slug übergeben, damit der
Normalizer selbst keine Datenbank und keine Settings kennt.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Q

from .exceptions import SlugAlreadyInUse, SlugColumnMissing, SlugLookupFailed
from .models import Story

logger = logging.getLogger("stories")

ROW_FIELDS = (
    "id", "title", "slug", "author", "category", "date", "read_time",
    "tag", "excerpt", "body", "created_at",
)


class StoryRepository:
    def __init__(self, has_slug_column: Optional[bool] = None):
        if has_slug_column is None:
            has_slug_column = getattr(settings, "STORIES_HAS_SLUG_COLUMN", True)
        self.has_slug_column = bool(has_slug_column)

    # --- lookups ---

    def find_story_id_by_slug(self, slug: str):
        """ID der Geschichte mit exakt diesem Slug oder None."""
        if not self.has_slug_column:
            return None
        try:
            return Story.objects.filter(slug=slug).values_list("id", flat=True).first()
        except DatabaseError as exc:
            raise SlugLookupFailed(str(exc)) from exc

    def list_rows(self) -> list[dict]:
        """
        Alle Geschichten als dicts, nach date absteigend, mit Anzahl
        freigegebener Kommentare. DatabaseError wird nicht abgefangen.
        """
        fields = ROW_FIELDS if self.has_slug_column else tuple(f for f in ROW_FIELDS if f != "slug")
        qs = (
            Story.objects
            .annotate(comments_count=Count("comments", filter=Q(comments__status="approved")))
            .order_by("-date", "-created_at")
            .values(*fields, "comments_count")
        )
        return list(qs)

    def get(self, pk) -> Story:
        return Story.objects.get(pk=pk)

    # --- writes ---

    def _check_slug_column(self):
        if not self.has_slug_column:
            raise SlugColumnMissing()

    def _slug_taken(self, slug, exclude_pk=None) -> bool:
        qs = Story.objects.filter(slug=slug)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()

    def create(self, **fields) -> Story:
        self._check_slug_column()
        try:
            with transaction.atomic():
                return Story.objects.create(**fields)
        except IntegrityError as exc:
            # nur der Unique-Constraint auf slug wird übersetzt
            if not self._slug_taken(fields.get("slug")):
                raise
            logger.warning("Slug-Konflikt beim Anlegen", extra={"slug": fields.get("slug")})
            raise SlugAlreadyInUse(fields.get("slug", "")) from exc

    def update(self, pk, **fields) -> Story:
        self._check_slug_column()
        story = self.get(pk)
        for name, value in fields.items():
            setattr(story, name, value)
        try:
            with transaction.atomic():
                story.save()
        except IntegrityError as exc:
            if not self._slug_taken(story.slug, exclude_pk=pk):
                raise
            logger.warning("Slug-Konflikt beim Aktualisieren", extra={"slug": story.slug, "id": pk})
            raise SlugAlreadyInUse(story.slug) from exc
        return story

    def delete(self, pk) -> int:
        deleted, _ = Story.objects.filter(pk=pk).delete()
        return deleted
