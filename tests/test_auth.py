import unittest
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

from app.config import settings
from app.database.supabase_client import parse_timestamp
from app.main import app
from app.modules.auth.routes import get_google_client
from tests.helpers import ApiTestCase, PASSWORD


class FakeGoogleClient:
    def __init__(self, profile):
        self.profile = profile

    def authorization_url(self, state, redirect_uri):
        return f"https://accounts.google.test/auth?state={state}&redirect_uri={redirect_uri}"

    def fetch_profile(self, code, redirect_uri):
        return dict(self.profile)


class TestRegistration(ApiTestCase):
    def test_register_creates_basic_user(self):
        """A new account lands in the default group and never exposes its hash"""
        response = self.client.post(
            "/api/auth/register",
            json={"email": "New@Example.com", "password": PASSWORD, "full_name": "New User"}
        )
        self.assertEqual(response.status_code, 201, response.text)
        body = response.json()
        self.assertEqual(body["user"]["email"], "new@example.com")
        self.assertEqual(body["user"]["role"], "BASIC")
        self.assertNotIn("password", body["user"])

        stored = self.db.rows("users")[0]
        self.assertNotEqual(stored["password"], PASSWORD)
        self.assertTrue(stored["password"].startswith("$2"))

    def test_register_duplicate_email(self):
        payload = {"email": "dup@example.com", "password": PASSWORD, "full_name": "Dup"}
        self.assertEqual(self.client.post("/api/auth/register", json=payload).status_code, 201)
        response = self.client.post("/api/auth/register", json=payload)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "User already exists")

    def test_register_invalid_payload(self):
        """Malformed bodies answer 400 with the validation errors"""
        cases = [
            {"email": "a@example.com", "password": PASSWORD},
            {"email": "not-an-email", "password": PASSWORD, "full_name": "X"},
            {"email": "a@example.com", "password": "123", "full_name": "X"},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                response = self.client.post("/api/auth/register", json=payload)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["detail"], "Invalid request data")
                self.assertTrue(response.json()["errors"])
        self.assertEqual(self.db.rows("users"), [])


class TestLogin(ApiTestCase):
    def test_login_starts_session(self):
        user = self.create_user("ALUNO", email="student@example.com")
        response = self.login("student@example.com")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["id"], user["id"])
        self.assertIn(settings.session_cookie_name, response.cookies)

        me = self.client.get("/api/auth/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["role"], "ALUNO")
        self.assertIn("products.manage", me.json()["permissions"])
        self.assertNotIn("admin.manage_users", me.json()["permissions"])

    def test_login_failures_are_unauthorized(self):
        self.create_user("ALUNO", email="known@example.com")
        self.create_user("ALUNO", email="disabled@example.com", is_active=False)
        cases = [
            ("unknown@example.com", PASSWORD, "Email not found"),
            ("known@example.com", "wrong-password", "Incorrect password"),
            ("disabled@example.com", PASSWORD, "Account disabled"),
        ]
        for email, password, detail in cases:
            with self.subTest(email=email):
                response = self.login(email, password)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["detail"], detail)
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)

    def test_logout_destroys_session(self):
        self.create_user("ALUNO", email="bye@example.com")
        self.login("bye@example.com")
        self.assertEqual(self.client.get("/api/auth/me").status_code, 200)

        response = self.client.post("/api/auth/logout")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)

    def test_admin_gets_every_permission(self):
        _, client = self.client_for("ADM")
        permissions = client.get("/api/auth/me").json()["permissions"]
        self.assertIn("admin.manage_users", permissions)
        self.assertIn("materials.view_restricted", permissions)


class TestRoleRoutes(ApiTestCase):
    def test_role_gates(self):
        """Each role route admits exactly its roles"""
        expectations = {
            "/api/auth/admin-only": {"ADM"},
            "/api/auth/support-or-admin": {"SUPORTE", "ADM"},
            "/api/auth/students-only": {"ALUNO", "ALUNO_PRO", "SUPORTE", "ADM"},
        }
        clients = {group: self.client_for(group)[1] for group in ["BASIC", "ALUNO", "ALUNO_PRO", "SUPORTE", "ADM"]}
        for path, allowed in expectations.items():
            for group, client in clients.items():
                with self.subTest(path=path, group=group):
                    response = client.get(path)
                    if group in allowed:
                        self.assertEqual(response.status_code, 200)
                        self.assertEqual(response.json()["user"], group)
                    else:
                        self.assertEqual(response.status_code, 403)
                        self.assertEqual(response.json()["detail"]["user_role"], group)
                        self.assertIn("required_roles", response.json()["detail"])

    def test_role_routes_require_login(self):
        for path in ["/api/auth/admin-only", "/api/auth/support-or-admin", "/api/auth/students-only"]:
            with self.subTest(path=path):
                self.assertEqual(self.client.get(path).status_code, 401)

    def test_disabled_group_loses_role(self):
        user, client = self.client_for("ADM")
        self.db.table("user_groups").update({"is_active": False}).eq("id", user["group_id"]).execute()
        self.assertEqual(client.get("/api/auth/admin-only").status_code, 403)


class TestPasswordReset(ApiTestCase):
    def test_reset_flow(self):
        user = self.create_user("ALUNO", email="forgot@example.com")
        response = self.client.post("/api/auth/forgot-password", json={"email": "forgot@example.com"})
        self.assertEqual(response.status_code, 200)
        token = self.db.rows("auth_tokens")[0]["token"]

        response = self.client.post("/api/auth/reset-password", json={"token": token, "password": "brand-new"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.login("forgot@example.com", "brand-new").status_code, 200)
        self.assertEqual(self.login("forgot@example.com").status_code, 401)

        again = self.client.post("/api/auth/reset-password", json={"token": token, "password": "another1"})
        self.assertEqual(again.status_code, 400)
        self.assertEqual(self.db.rows("users")[0]["id"], user["id"])

    def test_token_with_trimmed_fraction(self):
        user = self.create_user("ALUNO", email="trim@example.com")
        self.db.table("auth_tokens").insert({
            "user_id": user["id"],
            "token": "trimmed-token",
            "type": "reset_password",
            "expires_at": "2999-05-01T10:00:00.12345+00:00",
            "used": False
        }).execute()
        response = self.client.post("/api/auth/reset-password", json={"token": "trimmed-token", "password": "brand-new"})
        self.assertEqual(response.status_code, 200, response.text)

    def test_unknown_email_gets_same_answer(self):
        response = self.client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.db.rows("auth_tokens"), [])


class TestParseTimestamp(unittest.TestCase):
    def test_postgres_formats(self):
        expected = datetime(2024, 5, 1, 10, 0, 0, 123450, tzinfo=timezone.utc)
        self.assertEqual(parse_timestamp("2024-05-01T10:00:00.12345+00:00"), expected)
        self.assertEqual(parse_timestamp("2024-05-01T10:00:00.12345Z"), expected)
        self.assertEqual(parse_timestamp("2024-05-01T10:00:00.12345"), expected)


class TestGoogleLogin(ApiTestCase):
    def _start(self, profile):
        app.dependency_overrides[get_google_client] = lambda: FakeGoogleClient(profile)
        response = self.client.get("/api/auth/google", follow_redirects=False)
        self.assertEqual(response.status_code, 302)
        return parse_qs(urlparse(response.headers["location"]).query)["state"][0]

    def test_google_not_configured(self):
        self.assertEqual(self.client.get("/api/auth/google", follow_redirects=False).status_code, 404)

    def test_callback_creates_user_and_session(self):
        state = self._start({"id": "g-1", "email": "g@example.com", "name": "Gee", "picture": None})
        response = self.client.get(
            "/api/auth/google/callback", params={"code": "abc", "state": state}, follow_redirects=False
        )
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.headers["location"], "/dashboard")

        me = self.client.get("/api/auth/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["email"], "g@example.com")
        self.assertEqual(me.json()["role"], "BASIC")

    def test_callback_links_existing_account(self):
        user = self.create_user("ALUNO", email="link@example.com")
        state = self._start({"id": "g-2", "email": "link@example.com", "name": "Link", "picture": None})
        self.client.get("/api/auth/google/callback", params={"code": "abc", "state": state}, follow_redirects=False)
        self.assertEqual(self.client.get("/api/auth/me").json()["id"], user["id"])
        self.assertEqual(self.db.rows("users")[0]["google_id"], "g-2")

    def test_callback_rejects_wrong_state(self):
        self._start({"id": "g-3", "email": "s@example.com", "name": "S", "picture": None})
        response = self.client.get(
            "/api/auth/google/callback", params={"code": "abc", "state": "forged"}, follow_redirects=False
        )
        self.assertEqual(response.headers["location"], "/login")
        self.assertEqual(self.db.rows("users"), [])


if __name__ == "__main__":
    unittest.main()
