import unittest

from app.config.permissions_config import all_permission_keys
from tests.helpers import ApiTestCase, PASSWORD


class TestSeedAccessControl(ApiTestCase):
    def test_seeded_catalogue(self):
        keys = sorted(row["key"] for row in self.db.rows("permissions"))
        self.assertEqual(keys, sorted(all_permission_keys()))
        names = {row["name"] for row in self.db.rows("user_groups")}
        self.assertEqual(names, {"BASIC", "ALUNO", "ALUNO_PRO", "SUPORTE", "ADM"})

    def test_reseeding_is_idempotent(self):
        from app.scripts.seed_access_control import seed_access_control
        links = len(self.db.rows("group_permissions"))
        seed_access_control(self.db)
        self.assertEqual(len(self.db.rows("permissions")), len(all_permission_keys()))
        self.assertEqual(len(self.db.rows("user_groups")), 5)
        self.assertEqual(len(self.db.rows("group_permissions")), links)


class TestUserAdmin(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.admin, self.admin_client = self.client_for("ADM")

    def test_create_user_defaults_to_basic(self):
        response = self.admin_client.post(
            "/api/users", json={"email": "made@example.com", "password": PASSWORD, "full_name": "Made"}
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.assertNotIn("password", response.json())
        basic_id = next(g["id"] for g in self.db.rows("user_groups") if g["name"] == "BASIC")
        self.assertEqual(response.json()["group_id"], basic_id)
        self.assertEqual(self.login("made@example.com").status_code, 200)

        again = self.admin_client.post(
            "/api/users", json={"email": "made@example.com", "password": PASSWORD, "full_name": "Made"}
        )
        self.assertEqual(again.status_code, 409)

    def test_search_users(self):
        self.create_user("ALUNO", email="maria@example.com", full_name="Maria Silva")
        self.create_user("ALUNO", email="joao@example.com", full_name="Joao Souza")
        found = self.admin_client.get("/api/users", params={"search": "silva"}).json()
        self.assertEqual([u["email"] for u in found], ["maria@example.com"])

    def test_disabling_user_ends_sessions(self):
        user, client = self.client_for("ALUNO")
        self.assertEqual(client.get("/api/auth/me").status_code, 200)
        response = self.admin_client.put(f"/api/users/{user['id']}", json={"is_active": False})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(client.get("/api/auth/me").status_code, 401)
        self.assertEqual(self.login(user["email"]).status_code, 401)

    def test_email_conflict_on_update(self):
        first = self.create_user("ALUNO")
        second = self.create_user("ALUNO")
        response = self.admin_client.put(f"/api/users/{second['id']}", json={"email": first["email"]})
        self.assertEqual(response.status_code, 409)

    def test_cannot_delete_self(self):
        response = self.admin_client.delete(f"/api/users/{self.admin['id']}")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Cannot delete your own account")

    def test_delete_user_removes_owned_rows(self):
        user, client = self.client_for("ALUNO")
        client.post("/api/products", json={"name": "Mug"})
        client.post("/api/my-suppliers", json={"name": "Co"})
        self.assertEqual(self.admin_client.delete(f"/api/users/{user['id']}").status_code, 204)
        self.assertEqual(self.db.rows("products"), [])
        self.assertEqual(self.db.rows("my_suppliers"), [])
        self.assertEqual(client.get("/api/auth/me").status_code, 401)

    def test_delete_user_recounts_partner_feedback(self):
        _, staff = self.client_for("SUPORTE")
        partner = staff.post(
            "/api/partners", json={"name": "Acme Prep", "description": "Prep center", "category_id": 1}
        ).json()
        leaving, leaving_client = self.client_for("ALUNO")
        _, staying_client = self.client_for("ALUNO")

        reviews = f"/api/partners/{partner['id']}/reviews"
        self.assertEqual(leaving_client.post(reviews, json={"rating": 5, "comment": "Great"}).status_code, 201)
        self.assertEqual(staying_client.post(reviews, json={"rating": 2, "comment": "Slow"}).status_code, 201)
        comment = staying_client.post(
            f"/api/partners/{partner['id']}/comments", json={"content": "Fast pickup"}
        ).json()
        like_url = f"/api/partners/{partner['id']}/comments/{comment['id']}/like"
        leaving_client.post(like_url)
        self.assertEqual(staying_client.post(like_url).json()["likes"], 2)

        self.assertEqual(self.admin_client.delete(f"/api/users/{leaving['id']}").status_code, 204)

        refreshed = self.client.get(f"/api/partners/{partner['id']}").json()
        self.assertEqual(refreshed["average_rating"], 2.0)
        self.assertEqual(refreshed["review_count"], 1)
        likes = next(row["likes"] for row in self.db.rows("partner_comments") if row["id"] == comment["id"])
        self.assertEqual(likes, 1)

    def test_students_cannot_administer(self):
        _, student = self.client_for("ALUNO")
        response = student.get("/api/users")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Insufficient permissions. Required: admin.manage_users")


class TestSelfService(ApiTestCase):
    def test_profile_update(self):
        _, client = self.client_for("ALUNO")
        response = client.put("/api/users/me", json={"full_name": "Renamed", "phone": "+55 11 99999-0000"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(client.get("/api/auth/me").json()["full_name"], "Renamed")

    def test_change_password(self):
        user, client = self.client_for("ALUNO")
        wrong = client.post("/api/users/me/password", json={"current_password": "nope", "new_password": "newpass1"})
        self.assertEqual(wrong.status_code, 400)
        self.assertEqual(wrong.json()["detail"], "Current password is incorrect")

        ok = client.post("/api/users/me/password", json={"current_password": PASSWORD, "new_password": "newpass1"})
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(self.login(user["email"], "newpass1").status_code, 200)
        actions = [row["action"] for row in self.db.rows("user_activity_log")]
        self.assertIn("password_changed", actions)


class TestGroupsAndPermissions(ApiTestCase):
    def setUp(self):
        super().setUp()
        _, self.admin = self.client_for("ADM")

    def _permission_id(self, key):
        return next(p["id"] for p in self.db.rows("permissions") if p["key"] == key)

    def test_group_permissions_drive_access(self):
        group = self.admin.post("/api/admin/groups", json={"name": "MENTOR", "display_name": "Mentor"}).json()
        user, client = self.client_for("MENTOR")
        self.assertEqual(client.get("/api/products").status_code, 403)

        response = self.admin.put(
            f"/api/admin/groups/{group['id']}/permissions",
            json={"permission_ids": [self._permission_id("products.manage")]}
        )
        self.assertEqual(response.json()["added_count"], 1)
        self.assertEqual(client.get("/api/products").status_code, 200)

        detail = self.admin.get(f"/api/admin/groups/{group['id']}").json()
        self.assertEqual([p["key"] for p in detail["permissions"]], ["products.manage"])

        self.assertEqual(self.admin.delete(f"/api/admin/groups/{group['id']}").status_code, 409)

    def test_unknown_permission_ids(self):
        group = self.admin.post("/api/admin/groups", json={"name": "X", "display_name": "X"}).json()
        response = self.admin.put(f"/api/admin/groups/{group['id']}/permissions", json={"permission_ids": [9999]})
        self.assertEqual(response.status_code, 404)

    def test_duplicate_group(self):
        response = self.admin.post("/api/admin/groups", json={"name": "ALUNO", "display_name": "Again"})
        self.assertEqual(response.status_code, 409)

    def test_permission_crud(self):
        response = self.admin.post(
            "/api/admin/permissions", json={"key": "reports.view", "name": "View reports", "module": "reports"}
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(
            self.admin.post(
                "/api/admin/permissions", json={"key": "reports.view", "name": "Again", "module": "reports"}
            ).status_code,
            409
        )
        self.assertEqual(
            self.admin.post("/api/admin/permissions", json={"key": "Not A Key", "name": "x", "module": "x"}).status_code,
            400
        )
        listed = self.admin.get("/api/admin/permissions", params={"module": "reports"}).json()
        self.assertEqual([p["key"] for p in listed], ["reports.view"])

    def test_matrix(self):
        matrix = self.admin.get("/api/admin/permissions/matrix").json()
        self.assertEqual(len(matrix["permissions"]), len(all_permission_keys()))
        self.assertIn("ADM", [g["name"] for g in matrix["groups"]])


class TestActivityLog(ApiTestCase):
    def test_logins_are_recorded(self):
        user, _ = self.client_for("ALUNO")
        _, admin = self.client_for("ADM")
        entries = admin.get("/api/admin/activity-log", params={"user_id": user["id"], "action": "login"}).json()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0]["user_id"], user["id"])

    def test_students_cannot_read_log(self):
        _, student = self.client_for("ALUNO")
        self.assertEqual(student.get("/api/admin/activity-log").status_code, 403)


class TestHealth(ApiTestCase):
    def test_health_endpoints(self):
        self.assertEqual(self.client.get("/").json()["status"], "healthy")
        health = self.client.get("/health").json()
        self.assertEqual(health["status"], "healthy")
        self.assertGreaterEqual(health["uptime"], 0)
        self.assertEqual(self.client.get("/ready").json(), {"status": "ready"})

    def test_security_headers(self):
        response = self.client.get("/health")
        self.assertEqual(response.headers["x-content-type-options"], "nosniff")
        self.assertEqual(response.headers["x-frame-options"], "DENY")


if __name__ == "__main__":
    unittest.main()
