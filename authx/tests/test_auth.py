from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from users.models import User


class AuthApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="maria",
            email="maria@example.com",
            password="s3cret-pass",
            role="volunteer",
        )

    def test_signup_returns_user_and_tokens(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {
                "username": "sam",
                "email": "Sam@Example.com",
                "password": "another-pass",
                "role": "organizer",
                "skills": ["Logistics", "logistics"],
            },
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.json()["data"]
        self.assertEqual(data["user"]["role"], "organizer")
        self.assertEqual(data["user"]["email"], "sam@example.com")
        self.assertEqual(data["user"]["skills"], ["Logistics"])
        self.assertIn("access", data)
        self.assertIn("refresh", data)
        self.assertTrue(User.objects.get(username="sam").check_password("another-pass"))

    def test_signup_defaults_to_volunteer(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {"username": "lee", "email": "lee@example.com", "password": "another-pass"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username="lee").role, "volunteer")

    def test_signup_cannot_create_admin(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {"username": "eve", "email": "eve@example.com", "password": "another-pass", "role": "admin"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("role", resp.json()["data"])
        self.assertFalse(User.objects.filter(username="eve").exists())

    def test_signup_rejects_duplicate_email(self):
        resp = self.client.post(
            "/api/auth/signup/",
            {"username": "maria2", "email": "MARIA@example.com", "password": "another-pass"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", resp.json()["data"])

    def test_login_with_username_or_email(self):
        by_username = self.client.post(
            "/api/auth/login/", {"username": "maria", "password": "s3cret-pass"}, format="json"
        )
        by_email = self.client.post(
            "/api/auth/login/", {"email": "maria@example.com", "password": "s3cret-pass"}, format="json"
        )

        for resp in (by_username, by_email):
            self.assertEqual(resp.status_code, status.HTTP_200_OK)
            self.assertEqual(resp.json()["message"], "Login successful")
            self.assertIn("access", resp.json()["data"])

    def test_login_with_wrong_password(self):
        resp = self.client.post(
            "/api/auth/login/", {"username": "maria", "password": "nope"}, format="json"
        )

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json()["message"], "Invalid credentials")

    def test_bearer_token_authenticates_me_and_refresh_works(self):
        tokens = self.client.post(
            "/api/auth/login/", {"username": "maria", "password": "s3cret-pass"}, format="json"
        ).json()["data"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        me = self.client.get("/api/auth/me/")
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.json()["data"]["username"], "maria")

        self.client.credentials()
        refreshed = self.client.post("/api/auth/jwt/refresh/", {"refresh": tokens["refresh"]}, format="json")
        self.assertEqual(refreshed.status_code, status.HTTP_200_OK)
        self.assertIn("access", refreshed.json()["data"])

    def test_refresh_with_garbage_token(self):
        resp = self.client.post("/api/auth/jwt/refresh/", {"refresh": "not-a-token"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        resp = self.client.get("/api/auth/me/")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json()["status"], 401)


class ProfileApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="kim", password="pass", role="volunteer")
        self.client.force_authenticate(user=self.user)

    def test_get_profile(self):
        resp = self.client.get("/api/users/me/")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["data"]["role"], "volunteer")

    def test_patch_profile_skills_and_bio(self):
        resp = self.client.patch(
            "/api/users/me/",
            {"bio": "  Retired nurse ", "skills": ["First Aid", "first aid", "Driving"], "role": "admin"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, "Retired nurse")
        self.assertEqual(self.user.skills, ["First Aid", "Driving"])
        # role is not editable through the profile
        self.assertEqual(self.user.role, "volunteer")
