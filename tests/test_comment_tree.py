import unittest

from app.modules.partners.comment_tree import build_comment_tree, collect_subtree_ids
from tests.helpers import ApiTestCase


def row(comment_id, parent_id=None, minute=0):
    return {
        "id": comment_id,
        "partner_id": 1,
        "user_id": 1,
        "content": f"comment {comment_id}",
        "parent_id": parent_id,
        "likes": 0,
        "created_at": f"2024-05-01T10:{minute:02d}:00Z",
    }


class TestBuildCommentTree(unittest.TestCase):
    def test_nests_replies_newest_first(self):
        rows = [
            row(1, minute=0),
            row(2, minute=5),
            row(3, parent_id=1, minute=1),
            row(4, parent_id=1, minute=3),
            row(5, parent_id=3, minute=2),
        ]
        tree = build_comment_tree(rows)

        self.assertEqual([node["id"] for node in tree], [2, 1])
        first = tree[1]
        self.assertEqual([node["id"] for node in first["replies"]], [4, 3])
        self.assertEqual([node["id"] for node in first["replies"][1]["replies"]], [5])
        self.assertEqual(tree[0]["replies"], [])

    def test_input_order_does_not_matter(self):
        rows = [row(5, parent_id=3, minute=2), row(3, parent_id=1, minute=1), row(1, minute=0)]
        tree = build_comment_tree(rows)
        self.assertEqual(tree[0]["replies"][0]["replies"][0]["id"], 5)

    def test_same_timestamp_falls_back_to_id(self):
        tree = build_comment_tree([row(1, minute=0), row(2, minute=0)])
        self.assertEqual([node["id"] for node in tree], [2, 1])

    def test_trimmed_fractional_seconds(self):
        rows = [
            {**row(1), "created_at": "2024-05-01T10:00:00.1+00:00"},
            {**row(2), "created_at": "2024-05-01T10:00:00.12345+00:00"},
            {**row(3), "created_at": "2024-05-01T09:59:59.9Z"},
        ]
        self.assertEqual([node["id"] for node in build_comment_tree(rows)], [2, 1, 3])

    def test_orphans_are_dropped(self):
        tree = build_comment_tree([row(1), row(2, parent_id=99)])
        self.assertEqual([node["id"] for node in tree], [1])
        self.assertEqual(tree[0]["replies"], [])

    def test_empty(self):
        self.assertEqual(build_comment_tree([]), [])

    def test_rows_are_not_mutated(self):
        rows = [row(1), row(2, parent_id=1)]
        build_comment_tree(rows)
        self.assertNotIn("replies", rows[0])


class TestCollectSubtreeIds(unittest.TestCase):
    def test_collects_every_descendant(self):
        rows = [row(1), row(2, 1), row(3, 2), row(4, 1), row(5)]
        self.assertEqual(collect_subtree_ids(rows, 1), {1, 2, 3, 4})
        self.assertEqual(collect_subtree_ids(rows, 2), {2, 3})
        self.assertEqual(collect_subtree_ids(rows, 5), {5})


class TestCommentApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.author, self.author_client = self.client_for("ALUNO", full_name="Author")
        self.reader, self.reader_client = self.client_for("ALUNO", full_name="Reader")
        self.partner_id = self._partner("Acme")

    def _partner(self, name):
        return self.db.table("partners").insert({
            "name": name,
            "description": "Logistics",
            "category_id": 1,
            "status": "published",
            "average_rating": 0,
            "review_count": 0,
        }).execute().data[0]["id"]

    def _comment(self, client, content, parent_id=None, partner_id=None):
        response = client.post(
            f"/api/partners/{partner_id or self.partner_id}/comments",
            json={"content": content, "parent_id": parent_id}
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]

    def test_thread_is_returned_nested(self):
        root = self._comment(self.author_client, "first")
        reply = self._comment(self.reader_client, "reply", parent_id=root)
        self._comment(self.author_client, "nested", parent_id=reply)
        newest = self._comment(self.reader_client, "second")

        tree = self.client.get(f"/api/partners/{self.partner_id}/comments").json()
        self.assertEqual([node["id"] for node in tree], [newest, root])
        self.assertEqual(tree[1]["user_name"], "Author")
        self.assertEqual(tree[1]["replies"][0]["user_name"], "Reader")
        self.assertEqual(tree[1]["replies"][0]["replies"][0]["content"], "nested")

    def test_reply_to_other_partner_is_rejected(self):
        other = self._partner("Other")
        foreign = self._comment(self.author_client, "elsewhere", partner_id=other)
        response = self.author_client.post(
            f"/api/partners/{self.partner_id}/comments",
            json={"content": "reply", "parent_id": foreign}
        )
        self.assertEqual(response.status_code, 400)

    def test_basic_users_cannot_comment(self):
        _, client = self.client_for("BASIC")
        response = client.post(f"/api/partners/{self.partner_id}/comments", json={"content": "hi"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Insufficient permissions. Required: partners.comment")

    def test_like_once_per_user(self):
        comment = self._comment(self.author_client, "like me")
        url = f"/api/partners/{self.partner_id}/comments/{comment}/like"

        self.assertEqual(self.reader_client.post(url).json()["likes"], 1)
        self.assertEqual(self.reader_client.post(url).status_code, 409)
        self.assertEqual(self.author_client.post(url).json()["likes"], 2)
        self.assertEqual(self.reader_client.delete(url).json()["likes"], 1)
        self.assertEqual(self.reader_client.delete(url).status_code, 404)

    def test_delete_removes_subtree(self):
        root = self._comment(self.author_client, "root")
        reply = self._comment(self.reader_client, "reply", parent_id=root)
        self._comment(self.author_client, "deeper", parent_id=reply)
        keep = self._comment(self.reader_client, "unrelated")
        self.reader_client.post(f"/api/partners/{self.partner_id}/comments/{reply}/like")

        forbidden = self.reader_client.delete(f"/api/partners/{self.partner_id}/comments/{root}")
        self.assertEqual(forbidden.status_code, 403)

        response = self.author_client.delete(f"/api/partners/{self.partner_id}/comments/{root}")
        self.assertEqual(response.status_code, 204)
        self.assertEqual([c["id"] for c in self.db.rows("partner_comments")], [keep])
        self.assertEqual(self.db.rows("partner_comment_likes"), [])

    def test_admin_may_delete_any_comment(self):
        comment = self._comment(self.author_client, "spam")
        _, admin = self.client_for("ADM")
        self.assertEqual(admin.delete(f"/api/partners/{self.partner_id}/comments/{comment}").status_code, 204)

    def test_unknown_partner(self):
        self.assertEqual(self.client.get("/api/partners/999/comments").status_code, 404)


if __name__ == "__main__":
    unittest.main()
