"""
Tests for apps/account: signup, login, cookies, logout and profile.
"""
from django.contrib.auth.models import User
from django.core.files.uploadedfile import SimpleUploadedFile

import pytest
from apps.account.models import UserProfile
from tests.conftest import PASSWORD

pytestmark = pytest.mark.django_db


class TestSignup:

    def test_signup_creates_user_profile_and_sets_cookies(self, api_client):
        response = api_client.post(
            "/account/signup/",
            {"email": "Carol@Example.edu", "password": "hunter22!", "name": "Carol"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["name"] == "Carol"
        assert response.data["email"] == "carol@example.edu"
        assert "access_token" in response.cookies
        assert "refresh_token" in response.cookies
        assert response.cookies["access_token"]["httponly"]

        user = User.objects.get(email="carol@example.edu")
        assert user.profile.name == "Carol"

    def test_signup_rejects_duplicate_email(self, api_client, user):
        response = api_client.post(
            "/account/signup/",
            {"email": user.email, "password": "hunter22!", "name": "Alice Again"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data == {"error": "This email is already registered."}

    @pytest.mark.parametrize("password, message", [
        ("short1!", "Password must be at least 8 characters long."),
        ("nodigits!!", "Password must contain at least one number."),
        ("nospecial123", "Password must contain at least one special character."),
    ])
    def test_signup_password_rules(self, api_client, password, message):
        response = api_client.post(
            "/account/signup/",
            {"email": "dave@example.edu", "password": password, "name": "Dave"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error"] == message

    def test_signup_requires_two_character_name(self, api_client):
        response = api_client.post(
            "/account/signup/",
            {"email": "eve@example.edu", "password": "hunter22!", "name": "E"},
            format="json",
        )
        assert response.status_code == 400


class TestLogin:

    def test_login_sets_cookies_usable_for_auth(self, api_client, user):
        response = api_client.post(
            "/account/login/", {"email": user.email, "password": PASSWORD}, format="json"
        )
        assert response.status_code == 200
        assert response.data["id"] == user.id

        # APIClient keeps the cookies; the access_token cookie authenticates
        profile = api_client.get("/account/profile/")
        assert profile.status_code == 200
        assert profile.data["email"] == user.email

    def test_login_unknown_email(self, api_client, db):
        response = api_client.post(
            "/account/login/", {"email": "nobody@example.edu", "password": PASSWORD}, format="json"
        )
        assert response.status_code == 400
        assert response.data == {"error": "No account found with this email."}

    def test_login_wrong_password(self, api_client, user):
        response = api_client.post(
            "/account/login/", {"email": user.email, "password": "wrong-pass1!"}, format="json"
        )
        assert response.status_code == 400
        assert response.data == {"error": "Incorrect password."}

    def test_login_deactivated_account(self, api_client, user):
        user.is_active = False
        user.save()

        response = api_client.post(
            "/account/login/", {"email": user.email, "password": PASSWORD}, format="json"
        )
        assert response.status_code == 403

    def test_bearer_header_authenticates(self, api_client, user):
        login = api_client.post(
            "/account/login/", {"email": user.email, "password": PASSWORD}, format="json"
        )
        access = login.cookies["access_token"].value

        fresh = type(api_client)()
        fresh.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        assert fresh.get("/account/profile/").status_code == 200


class TestTokens:

    def test_refresh_issues_new_access_cookie(self, api_client, user):
        api_client.post("/account/login/", {"email": user.email, "password": PASSWORD}, format="json")

        response = api_client.post("/account/token-refresh/")
        assert response.status_code == 200
        assert "access_token" in response.cookies

    def test_refresh_without_cookie(self, api_client, db):
        response = api_client.post("/account/token-refresh/")
        assert response.status_code == 401
        assert response.data == {"error": "No refresh_token"}

    def test_logout_blacklists_refresh_tokens(self, api_client, user):
        api_client.post("/account/login/", {"email": user.email, "password": PASSWORD}, format="json")
        refresh = api_client.cookies["refresh_token"].value

        response = api_client.post("/account/logout/")
        assert response.status_code == 200

        again = type(api_client)()
        again.cookies["refresh_token"] = refresh
        assert again.post("/account/token-refresh/").status_code == 401

    def test_logout_requires_login(self, api_client, db):
        response = api_client.post("/account/logout/")
        assert response.status_code == 401
        assert "error" in response.data


class TestProfile:

    def test_profile_created_by_signal(self, db):
        user = User.objects.create_user(username="f@example.edu", email="f@example.edu", password=PASSWORD)
        assert UserProfile.objects.filter(user=user).exists()

    def test_get_profile(self, auth_client, user):
        response = auth_client.get("/account/profile/")
        assert response.status_code == 200
        assert response.data["name"] == "Alice"
        assert response.data["image"] is None

    def test_update_profile_changes_name_and_image_but_not_email(self, auth_client, user):
        response = auth_client.patch(
            "/account/profile/",
            {"name": "Alice Liddell", "email": "new@example.edu", "image": "https://cdn.example.edu/a.png"},
            format="json",
        )

        assert response.status_code == 200
        user.refresh_from_db()
        assert user.profile.name == "Alice Liddell"
        assert user.profile.image == "https://cdn.example.edu/a.png"
        assert user.email == "alice@example.edu"

    def test_update_profile_validates_email(self, auth_client):
        response = auth_client.patch(
            "/account/profile/", {"name": "Alice", "email": "not-an-email"}, format="json"
        )
        assert response.status_code == 400

    def test_update_profile_requires_login(self, api_client, db):
        response = api_client.patch("/account/profile/", {"name": "Alice", "email": "a@b.co"}, format="json")
        assert response.status_code == 401

    def test_upload_profile_image(self, auth_client, user, supabase_client):
        image = SimpleUploadedFile("me.png", b"\x89PNG\r\n\x1a\n", content_type="image/png")

        response = auth_client.post("/account/profile/image/", {"image": image}, format="multipart")

        assert response.status_code == 200
        assert "/storage/v1/object/public/" in response.data["image"]
        assert "/profile_images/" in response.data["image"]
        supabase_client.storage.from_.return_value.upload.assert_called_once()

    def test_upload_profile_image_rejects_other_formats(self, auth_client, supabase_client):
        doc = SimpleUploadedFile("me.txt", b"hello", content_type="text/plain")

        response = auth_client.post("/account/profile/image/", {"image": doc}, format="multipart")

        assert response.status_code == 400
        assert response.data["error"].startswith("Unsupported file format.")
        supabase_client.storage.from_.return_value.upload.assert_not_called()

    def test_upload_profile_image_storage_failure(self, auth_client, supabase_client):
        supabase_client.storage.from_.return_value.upload.side_effect = RuntimeError("bucket down")
        image = SimpleUploadedFile("me.png", b"\x89PNG\r\n\x1a\n", content_type="image/png")

        response = auth_client.post("/account/profile/image/", {"image": image}, format="multipart")

        assert response.status_code == 500
        assert response.data == {"error": "Image upload failed."}
