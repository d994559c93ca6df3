import pytest

from newsletter.models import NewsletterSignup
from stories.models import Story

pytestmark = pytest.mark.django_db


def test_signup_stores_lowercased_email(api_client):
    res = api_client.post("/api/newsletter/", {"email": "  Leserin@Example.com "}, format="json")
    assert res.status_code == 201
    assert res.data["subscribed"] is True
    assert NewsletterSignup.objects.get().email == "leserin@example.com"


def test_signup_twice_is_conflict(api_client):
    api_client.post("/api/newsletter/", {"email": "leserin@example.com"}, format="json")
    res = api_client.post("/api/newsletter/", {"email": "LESERIN@example.com"}, format="json")
    assert res.status_code == 409
    assert res.data["detail"] == "Diese Adresse ist bereits eingetragen."
    assert NewsletterSignup.objects.count() == 1


@pytest.mark.parametrize("email, message", [
    ("", "Bitte eine E-Mail-Adresse eintragen."),
    ("keine-adresse", "Die E-Mail-Adresse wirkt nicht gültig."),
    ("a@b", "Die E-Mail-Adresse wirkt nicht gültig."),
    ("foo@bar..de", "Die E-Mail-Adresse wirkt nicht gültig."),
    ("a@b.c.", "Die E-Mail-Adresse wirkt nicht gültig."),
    ("x@-y.de", "Die E-Mail-Adresse wirkt nicht gültig."),
    ('"@x.de', "Die E-Mail-Adresse wirkt nicht gültig."),
])
def test_signup_rejects_invalid_email(api_client, email, message):
    res = api_client.post("/api/newsletter/", {"email": email}, format="json")
    assert res.status_code == 400
    assert str(res.data["email"][0]) == message
    assert not NewsletterSignup.objects.exists()


def test_status(api_client):
    NewsletterSignup.objects.create(email="leserin@example.com")
    assert api_client.get("/api/newsletter/status/", {"email": "Leserin@example.com"}).data["subscribed"] is True
    assert api_client.get("/api/newsletter/status/", {"email": "x@example.com"}).data["subscribed"] is False
    assert api_client.get("/api/newsletter/status/").data["subscribed"] is False


def test_dispatch_requires_author(api_client):
    assert api_client.post("/api/newsletter/dispatch/", {"storyId": 1}, format="json").status_code == 401


def test_dispatch_missing_and_unknown_story(author_client):
    res = author_client.post("/api/newsletter/dispatch/", {}, format="json")
    assert res.status_code == 400
    assert res.data["detail"] == "storyId fehlt"

    res = author_client.post("/api/newsletter/dispatch/", {"storyId": 999}, format="json")
    assert res.status_code == 404


def test_dispatch_sends(author_client, mailoutbox):
    story = Story.objects.create(title="Herbstlicht", slug="herbstlicht", date="13. Oktober 2024", excerpt="x")
    NewsletterSignup.objects.create(email="leserin@example.com")

    res = author_client.post("/api/newsletter/dispatch/", {"storyId": story.id}, format="json")
    assert res.status_code == 200
    assert res.data == {"status": "sent", "recipients": 1}
    assert len(mailoutbox) == 1
