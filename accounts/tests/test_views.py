import pytest

from accounts.models import AuthorAllowlist

pytestmark = pytest.mark.django_db

AUTHOR_EMAIL = "autorin@example.com"
PASSWORD = "Lesezeichen-2024"


def test_register_requires_allowlist(api_client):
    res = api_client.post(
        "/accounts/api/register/", {"email": "fremd@example.com", "password": PASSWORD}, format="json",
    )
    assert res.status_code == 403
    assert res.data["detail"] == "Diese E-Mail ist nicht für das CMS freigeschaltet."


def test_register_takes_name_from_allowlist(api_client, django_user_model):
    AuthorAllowlist.objects.create(email="Neu@Example.com", name="Neue Autorin")
    res = api_client.post(
        "/accounts/api/register/", {"email": "neu@example.com", "password": PASSWORD}, format="json",
    )
    assert res.status_code == 201
    user = django_user_model.objects.get(username="neu@example.com")
    assert user.first_name == "Neue Autorin"
    assert user.check_password(PASSWORD)


def test_register_twice_fails(api_client, author):
    res = api_client.post("/accounts/api/register/", {"email": AUTHOR_EMAIL, "password": PASSWORD}, format="json")
    assert res.status_code == 400
    assert "email" in res.data


def test_login_returns_jwt_usable_for_cms(api_client, author):
    res = api_client.post("/accounts/api/login/", {"username": AUTHOR_EMAIL, "password": PASSWORD}, format="json")
    assert res.status_code == 200
    assert "access" in res.data and "refresh" in res.data

    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
    assert api_client.get("/api/cms/options/").status_code == 200


def test_profile_get_and_patch(author_client):
    res = author_client.get("/accounts/api/profile/")
    assert res.data["email"] == AUTHOR_EMAIL
    assert res.data["name"] == "Autorin"

    res = author_client.patch("/accounts/api/profile/", {"name": "A. Autorin"}, format="json")
    assert res.status_code == 200
    assert res.data["name"] == "A. Autorin"
