import pytest
from django.core.mail import EmailMultiAlternatives

from newsletter.models import NewsletterSignup
from newsletter.services import DispatchStatus, build_story_email, dispatch_story_newsletter, subscriber_emails
from stories.models import Story

pytestmark = pytest.mark.django_db


@pytest.fixture
def story():
    return Story.objects.create(
        title="Herbstlicht", slug="herbstlicht", date="13. Oktober 2024",
        read_time="8 Min", excerpt="Ein Nachmittag im Park.", body="Die Blätter fielen.",
    )


def test_subscriber_emails_are_unique_and_lowercase():
    NewsletterSignup.objects.create(email="A@example.com")
    NewsletterSignup.objects.create(email="b@example.com")
    assert sorted(subscriber_emails()) == ["a@example.com", "b@example.com"]


def test_email_content(story):
    subject, text, html = build_story_email(story)
    assert subject == "Neu: Herbstlicht"
    assert "https://levitenleser.test/stories/herbstlicht" in text
    assert "Ein Nachmittag im Park." in html
    assert "8 Min" in text


def test_subject_has_no_line_breaks(story):
    story.title = "Herbst\r\nBcc: evil@example.com"
    subject, _, _ = build_story_email(story)
    assert "\n" not in subject and "\r" not in subject


def test_no_subscribers(story, mailoutbox):
    result = dispatch_story_newsletter(story.id)
    assert result.status == DispatchStatus.NO_SUBSCRIBERS
    assert result.ok
    assert mailoutbox == []


def test_not_configured(story, settings, mailoutbox):
    NewsletterSignup.objects.create(email="leserin@example.com")
    settings.NEWSLETTER_ENABLED = False
    result = dispatch_story_newsletter(story.id)
    assert result.status == DispatchStatus.NOT_CONFIGURED
    assert mailoutbox == []


def test_story_not_found():
    assert dispatch_story_newsletter(12345).status == DispatchStatus.STORY_NOT_FOUND


def test_recipients_go_to_bcc(story, mailoutbox):
    NewsletterSignup.objects.create(email="eins@example.com")
    NewsletterSignup.objects.create(email="zwei@example.com")

    result = dispatch_story_newsletter(story.id)

    assert result.status == DispatchStatus.SENT
    assert result.recipients == 2
    mail = mailoutbox[0]
    assert sorted(mail.bcc) == ["eins@example.com", "zwei@example.com"]
    assert mail.to == ["Levitenleser <news@levitenleser.test>"]
    assert mail.extra_headers["X-Story-ID"] == str(story.id)
    assert mail.alternatives[0][1] == "text/html"


def test_send_error_is_reported_not_raised(story, monkeypatch):
    NewsletterSignup.objects.create(email="eins@example.com")

    def boom(self, *args, **kwargs):
        raise OSError("smtp down")

    monkeypatch.setattr(EmailMultiAlternatives, "send", boom)
    result = dispatch_story_newsletter(story.id)
    assert result.status == DispatchStatus.ERROR
    assert not result.ok
