# stories/normalizer.py
"""
Slugs, Datumsangaben und Lesedauer.

Eine gemeinsame Implementierung für Sitemap, CMS und Storefront, damit alle
drei Stellen dieselben Slugs erzeugen.
"""
from __future__ import annotations

import logging
import re
import unicodedata
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Protocol

from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import SlugLookupFailed, SlugResolutionExhausted

logger = logging.getLogger("stories")

DEFAULT_SLUG = "geschichte"
MAX_SLUG_ATTEMPTS = 50
# Story.slug max_length
MAX_SLUG_LENGTH = 255

MONTHS_DE = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]

# Schlüssel: kleingeschrieben, mit Umlaut und in ASCII-Umschrift
MONTH_LOOKUP = {name.lower(): idx + 1 for idx, name in enumerate(MONTHS_DE)}
MONTH_LOOKUP["maerz"] = 3

_UMLAUT_ASCII = str.maketrans({"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_NUMERIC_RE = re.compile(r"^(\d{1,2})[./-](\d{1,2})[./-](\d{4})$")
_LONG_RE = re.compile(r"^(\d{1,2})\.?\s+([A-Za-zäöüÄÖÜß]+)\s+(\d{4})$")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
_MULTI_HYPHEN_RE = re.compile(r"-{2,}")
_DIGITS_RE = re.compile(r"(\d+)")

# Letzter Versuch vor None: englische Schreibweisen aus Altdaten
_FALLBACK_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%Y/%m/%d",
)


# ---------- slugs ----------

def fold_text(text: Optional[str]) -> str:
    """Kleingeschrieben, "ß" -> "ss", ohne Diakritika. Vergleichs- und Sortierschlüssel."""
    if not text:
        return ""
    value = str(text).lower().replace("ß", "ss").replace("ẞ", "ss")
    value = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in value if not unicodedata.combining(ch))


def slugify(text: Optional[str]) -> str:
    """
    Freitext -> URL-Slug aus [a-z0-9] und einfachen Bindestrichen.

    "ß" wird zu "ss" (wie bei den Monatsnamen), übrige Diakritika fallen
    nach NFD-Zerlegung weg: "Schiebetüren" -> "schiebeturen".
    """
    value = fold_text(text)
    if not value:
        return ""
    value = _NON_SLUG_RE.sub("-", value)
    value = value.strip("-")
    return _MULTI_HYPHEN_RE.sub("-", value)


def slug_seed(story_id=None, index: int = 0) -> str:
    """Suffix-Saat: die ID, sonst die 1-basierte Position in der Liste."""
    if story_id is not None and str(story_id) != "":
        return str(story_id)
    return str(index + 1)


def ensure_slug(
    candidate_slug: Optional[str],
    title: Optional[str],
    fallback_seed,
    *,
    tag: Optional[str] = "",
    category: Optional[str] = "",
) -> str:
    """
    Kandidaten-Slug für eine Geschichte, ohne Datenbankzugriff.

    Ein explizit gesetzter Slug wird übernommen. Sonst wird aus Titel
    (-> Tag -> Kategorie -> "geschichte") abgeleitet und die Saat angehängt.
    Deterministisch: gleiche Eingaben, gleicher Slug.
    """
    provided = slugify(candidate_slug)
    if provided and not provided.startswith("-"):
        return provided

    base = ""
    for source in (title, tag, category):
        base = slugify(source)
        if base:
            break
    base = base or DEFAULT_SLUG

    seed = slugify(str(fallback_seed)) if fallback_seed is not None else ""
    if not seed:
        return base
    return slugify(f"{base}-{seed}")


class SlugLookup(Protocol):
    def find_story_id_by_slug(self, slug: str): ...


def resolve_unique_slug(
    candidate: Optional[str],
    exclude_id,
    repository: SlugLookup,
    max_length: int = MAX_SLUG_LENGTH,
) -> str:
    """
    Sucht den ersten freien Slug: candidate, candidate-1, candidate-2, ...

    Der Suffix hängt immer am ursprünglichen Basis-Slug. Die Basis wird so
    gekürzt, dass auch der längste Suffix noch in max_length passt. Ein
    Treffer auf die gerade bearbeitete Geschichte (exclude_id) zählt nicht
    als Kollision. Das ist nur eine Vorprüfung, maßgeblich bleibt der
    Unique-Constraint.
    """
    base = (candidate or DEFAULT_SLUG).lstrip("-") or DEFAULT_SLUG
    limit = max_length - len(f"-{MAX_SLUG_ATTEMPTS - 1}")
    base = base[:limit].rstrip("-") or DEFAULT_SLUG
    excluded = None if exclude_id is None else str(exclude_id)

    for attempt in range(MAX_SLUG_ATTEMPTS):
        slug = base if attempt == 0 else f"{base}-{attempt}"
        try:
            found = repository.find_story_id_by_slug(slug)
        except SlugLookupFailed:
            raise
        except Exception as exc:
            logger.error("Slug-Prüfung fehlgeschlagen", extra={"slug": slug}, exc_info=exc)
            raise SlugLookupFailed() from exc

        if found is None or (excluded is not None and str(found) == excluded):
            return slug

    logger.warning("Kein freier Slug gefunden", extra={"base": base, "attempts": MAX_SLUG_ATTEMPTS})
    raise SlugResolutionExhausted(base, MAX_SLUG_ATTEMPTS)


# ---------- dates ----------

def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_fallback(value: str) -> Optional[date]:
    try:
        parsed_dt = parse_datetime(value)
        if parsed_dt is not None:
            return parsed_dt.date()
        parsed = parse_date(value)
        if parsed is not None:
            return parsed
    except ValueError:
        # wohlgeformt, aber kein gültiges Datum
        return None

    try:
        return parsedate_to_datetime(value).date()
    except (TypeError, ValueError, IndexError, OverflowError):
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def parse_story_date(text) -> Optional[date]:
    """
    "2024-10-13", "13.10.2024", "13. Oktober 2024", "13 Maerz 2024" -> date.

    Wirft nie: nicht erkennbare Angaben ergeben None.
    """
    if not text or not isinstance(text, str):
        return None
    value = text.strip()
    if not value:
        return None

    m = _ISO_RE.match(value)
    if m:
        y, mo, d = m.groups()
        return _safe_date(int(y), int(mo), int(d))

    m = _NUMERIC_RE.match(value)
    if m:
        d, mo, y = m.groups()
        return _safe_date(int(y), int(mo), int(d))

    m = _LONG_RE.match(value)
    if m:
        d, month_raw, y = m.groups()
        key = month_raw.lower()
        month = MONTH_LOOKUP.get(key) or MONTH_LOOKUP.get(key.translate(_UMLAUT_ASCII))
        if month:
            return _safe_date(int(y), month, int(d))

    return _parse_fallback(value)


def format_date_human(value: date) -> str:
    """date(2024, 10, 13) -> "13. Oktober 2024"."""
    return f"{value.day}. {MONTHS_DE[value.month - 1]} {value.year}"


def to_iso_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def date_picker_value(text: Optional[str]) -> str:
    parsed = parse_story_date(text)
    return to_iso_date(parsed) if parsed else ""


def normalize_date_input(text: Optional[str]) -> str:
    """Eingaben aus dem Datepicker/Formular in die Anzeigeform bringen."""
    parsed = parse_story_date(text)
    if parsed:
        return format_date_human(parsed)
    return (text or "").strip()


def story_timestamp(created_at=None, date_text: Optional[str] = None) -> Optional[datetime]:
    """
    Sortierschlüssel: created_at, sonst das geparste Datum (Mitternacht UTC).
    None = nicht datierbar, sortiert ans Ende.
    """
    if isinstance(created_at, datetime):
        if created_at.tzinfo is None:
            return created_at.replace(tzinfo=timezone.utc)
        return created_at
    if isinstance(created_at, str) and created_at.strip():
        try:
            parsed_dt = parse_datetime(created_at.strip())
        except ValueError:
            parsed_dt = None
        if parsed_dt is not None:
            if parsed_dt.tzinfo is None:
                parsed_dt = parsed_dt.replace(tzinfo=timezone.utc)
            return parsed_dt
    parsed = parse_story_date(date_text)
    if parsed:
        return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)
    return None


# ---------- read time ----------

def normalize_read_time(text: Optional[str]) -> str:
    """"ca. 8 Minuten" -> "8 Min"; ohne Ziffern bleibt der Text (getrimmt)."""
    if not text:
        return ""
    m = _DIGITS_RE.search(text)
    if m:
        return f"{m.group(1)} Min"
    return text.strip()


__all__ = [
    "fold_text", "slugify", "slug_seed", "ensure_slug", "resolve_unique_slug",
    "parse_story_date", "format_date_human", "to_iso_date",
    "date_picker_value", "normalize_date_input", "story_timestamp",
    "normalize_read_time", "MAX_SLUG_ATTEMPTS", "MAX_SLUG_LENGTH", "DEFAULT_SLUG",
]
