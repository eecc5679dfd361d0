import unittest
from unittest import mock

from app.core import sessions
from app.core.sessions import MemorySessionStore, SupabaseSessionStore, sign_session_id, unsign_session_id
from tests.fake_supabase import FakeSupabase


class TestMemorySessionStore(unittest.TestCase):
    def test_create_get_delete(self):
        store = MemorySessionStore(ttl_seconds=60)
        session_id = store.create({"user_id": 7})
        self.assertEqual(store.get(session_id), {"user_id": 7})

        store.update(session_id, {"user_id": 7, "oauth_state": "abc"})
        self.assertEqual(store.get(session_id)["oauth_state"], "abc")

        store.delete(session_id)
        self.assertIsNone(store.get(session_id))

    def test_sessions_expire(self):
        store = MemorySessionStore(ttl_seconds=10)
        with mock.patch.object(sessions.time, "monotonic", return_value=1000.0):
            session_id = store.create({"user_id": 1})
        with mock.patch.object(sessions.time, "monotonic", return_value=1009.0):
            self.assertIsNotNone(store.get(session_id))
        with mock.patch.object(sessions.time, "monotonic", return_value=1010.0):
            self.assertIsNone(store.get(session_id))

    def test_delete_for_user_keeps_other_users(self):
        store = MemorySessionStore()
        first = store.create({"user_id": 1})
        second = store.create({"user_id": 1})
        other = store.create({"user_id": 2})
        store.delete_for_user(1)
        self.assertIsNone(store.get(first))
        self.assertIsNone(store.get(second))
        self.assertEqual(store.get(other), {"user_id": 2})

    def test_returned_data_is_a_copy(self):
        store = MemorySessionStore()
        session_id = store.create({"user_id": 1})
        store.get(session_id)["user_id"] = 99
        self.assertEqual(store.get(session_id)["user_id"], 1)


class TestSupabaseSessionStore(unittest.TestCase):
    def test_round_trip_through_table(self):
        db = FakeSupabase()
        store = SupabaseSessionStore(db, ttl_seconds=60)
        session_id = store.create({"user_id": 3})
        self.assertEqual(store.get(session_id), {"user_id": 3})
        self.assertEqual(db.rows("user_sessions")[0]["user_id"], 3)

        store.delete_for_user(3)
        self.assertIsNone(store.get(session_id))

    def test_expired_rows_are_ignored(self):
        db = FakeSupabase()
        store = SupabaseSessionStore(db, ttl_seconds=60)
        session_id = store.create({"user_id": 3})
        db.table("user_sessions").update({"expires_at": "2000-01-01T00:00:00+00:00"}).eq("id", session_id).execute()
        self.assertIsNone(store.get(session_id))


class TestCookieSigning(unittest.TestCase):
    def test_signed_value_round_trips(self):
        self.assertEqual(unsign_session_id(sign_session_id("abc-123")), "abc-123")

    def test_rejects_tampered_values(self):
        signed = sign_session_id("abc-123")
        cases = [
            None,
            "",
            "abc-123",
            "other." + signed.split(".", 1)[1],
            signed[:-1] + ("0" if signed[-1] != "0" else "1"),
        ]
        for value in cases:
            with self.subTest(value=value):
                self.assertIsNone(unsign_session_id(value))


if __name__ == "__main__":
    unittest.main()
