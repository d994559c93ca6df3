# newsletter/services.py
"""
Versand der Newsletter-Mail nach dem Anlegen einer Geschichte.

Fehler werden nicht nach oben geworfen, sondern als DispatchResult gemeldet:
die Geschichte ist dann gespeichert, nur die Benachrichtigung fehlt.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.conf import settings
from django.core.mail import BadHeaderError, EmailMultiAlternatives, get_connection
from django.db import DatabaseError, models
from django.template.loader import render_to_string

from stories.models import Story
from .models import NewsletterSignup

logger = logging.getLogger("newsletter")


class DispatchStatus(models.TextChoices):
    SENT = "sent", "Versendet"
    NO_SUBSCRIBERS = "no_subscribers", "Keine Abonnenten"
    NOT_CONFIGURED = "not_configured", "Kein Mail-Provider konfiguriert"
    STORY_NOT_FOUND = "story_not_found", "Geschichte nicht gefunden"
    ERROR = "error", "Versand fehlgeschlagen"


@dataclass
class DispatchResult:
    status: str
    recipients: int = 0
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status != DispatchStatus.ERROR


def _clean_header(s: str) -> str:
    # Keine Zeilenumbrüche in Betreff/Headern
    return (s or "").replace("\r", " ").replace("\n", " ").strip()


def subscriber_emails() -> list[str]:
    """Alle Adressen, getrimmt, kleingeschrieben, ohne Dubletten."""
    seen: dict[str, None] = {}
    for email in NewsletterSignup.objects.order_by("created_at", "id").values_list("email", flat=True):
        email = (email or "").strip().lower()
        if email:
            seen.setdefault(email, None)
    return list(seen)


def build_story_email(story: Story) -> tuple[str, str, str]:
    """(subject, text, html)"""
    ctx = {
        "story": story,
        "read_time": story.read_time or "–",
        "story_url": f"{settings.SITE_URL}/stories/{story.slug}",
        "site_name": settings.SITE_NAME,
    }
    subject = _clean_header(f"Neu: {story.title}")
    text = render_to_string("newsletter/story_email.txt", ctx)
    html = render_to_string("newsletter/story_email.html", ctx)
    return subject, text, html


def dispatch_story_newsletter(story_id) -> DispatchResult:
    try:
        story = Story.objects.get(pk=story_id)
    except (Story.DoesNotExist, ValueError, TypeError):
        logger.error("Geschichte für Newsletter nicht gefunden", extra={"story_id": story_id})
        return DispatchResult(DispatchStatus.STORY_NOT_FOUND, detail="Geschichte nicht gefunden")

    try:
        recipients = subscriber_emails()
    except DatabaseError as exc:
        logger.error("Abonnenten konnten nicht geladen werden", exc_info=exc)
        return DispatchResult(DispatchStatus.ERROR, detail="Abonnenten-Fehler")

    if not recipients:
        logger.info("Keine Abonnenten, kein Versand", extra={"story_id": story.id})
        return DispatchResult(DispatchStatus.NO_SUBSCRIBERS)

    if not getattr(settings, "NEWSLETTER_ENABLED", True):
        logger.warning("Newsletter-Versand deaktiviert, wird übersprungen", extra={"story_id": story.id})
        return DispatchResult(DispatchStatus.NOT_CONFIGURED, recipients=len(recipients))

    subject, text, html = build_story_email(story)
    from_email = getattr(settings, "NEWSLETTER_FROM_EMAIL", None) or settings.DEFAULT_FROM_EMAIL

    try:
        logger.info("Newsletter wird versendet", extra={"story_id": story.id, "recipients": len(recipients)})
        connection = get_connection(
            fail_silently=False,
            timeout=getattr(settings, "EMAIL_TIMEOUT", 30),
        )
        # Empfänger in BCC, damit Abonnent:innen sich gegenseitig nicht sehen
        message = EmailMultiAlternatives(
            subject=subject,
            body=text,
            from_email=from_email,
            to=[from_email],
            bcc=recipients,
            headers={"X-Story-ID": str(story.id)},
            connection=connection,
        )
        message.attach_alternative(html, "text/html")
        message.send()
    except BadHeaderError as exc:
        logger.error("BadHeaderError beim Newsletter-Versand", exc_info=exc)
        return DispatchResult(DispatchStatus.ERROR, recipients=len(recipients), detail="bad_header")
    except Exception as exc:
        # Zugangsdaten nicht loggen, nur den Fehler
        logger.error("Newsletter-Versand fehlgeschlagen", exc_info=exc)
        return DispatchResult(DispatchStatus.ERROR, recipients=len(recipients), detail="Versand fehlgeschlagen")

    logger.info("Newsletter versendet", extra={"story_id": story.id})
    return DispatchResult(DispatchStatus.SENT, recipients=len(recipients))
