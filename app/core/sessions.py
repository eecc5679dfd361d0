"""
Server-side session storage.

The browser only holds a signed session id in a cookie; the session payload
(user id, pending OAuth state) lives in a SessionStore. MemorySessionStore is
the default and is process-local; SupabaseSessionStore keeps sessions in the
user_sessions table so several API processes can share them.
"""
import hashlib
import hmac
import logging
import secrets
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from supabase import Client

from app.config import settings

logger = logging.getLogger(__name__)


class SessionStore:
    """Interface every session backend implements."""

    def create(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def update(self, session_id: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        raise NotImplementedError

    def delete_for_user(self, user_id: int) -> None:
        raise NotImplementedError


def _new_session_id() -> str:
    return secrets.token_urlsafe(32)


class MemorySessionStore(SessionStore):
    def __init__(self, ttl_seconds: int = settings.session_ttl_seconds):
        self.ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._sessions: Dict[str, tuple] = {}

    def create(self, data: Dict[str, Any]) -> str:
        session_id = _new_session_id()
        with self._lock:
            self._sessions[session_id] = (dict(data), time.monotonic() + self.ttl_seconds)
        return session_id

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            data, expiry = entry
            if time.monotonic() >= expiry:
                del self._sessions[session_id]
                return None
            return dict(data)

    def update(self, session_id: str, data: Dict[str, Any]) -> None:
        with self._lock:
            if session_id in self._sessions:
                self._sessions[session_id] = (dict(data), time.monotonic() + self.ttl_seconds)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def delete_for_user(self, user_id: int) -> None:
        with self._lock:
            stale = [sid for sid, (data, _) in self._sessions.items() if data.get("user_id") == user_id]
            for sid in stale:
                del self._sessions[sid]


class SupabaseSessionStore(SessionStore):
    """Sessions in the user_sessions table (id, user_id, data, expires_at)."""

    def __init__(self, supabase: Client, ttl_seconds: int = settings.session_ttl_seconds):
        self.supabase = supabase
        self.ttl_seconds = ttl_seconds

    def _expires_at(self) -> str:
        return (datetime.now(timezone.utc) + timedelta(seconds=self.ttl_seconds)).isoformat()

    def create(self, data: Dict[str, Any]) -> str:
        session_id = _new_session_id()
        self.supabase.table("user_sessions").insert({
            "id": session_id,
            "user_id": data.get("user_id"),
            "data": data,
            "expires_at": self._expires_at()
        }).execute()
        return session_id

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("user_sessions")\
            .select("data")\
            .eq("id", session_id)\
            .gt("expires_at", datetime.now(timezone.utc).isoformat())\
            .limit(1)\
            .execute()
        if not result.data:
            return None
        return result.data[0].get("data") or {}

    def update(self, session_id: str, data: Dict[str, Any]) -> None:
        self.supabase.table("user_sessions")\
            .update({"data": data, "user_id": data.get("user_id"), "expires_at": self._expires_at()})\
            .eq("id", session_id)\
            .execute()

    def delete(self, session_id: str) -> None:
        self.supabase.table("user_sessions").delete().eq("id", session_id).execute()

    def delete_for_user(self, user_id: int) -> None:
        self.supabase.table("user_sessions").delete().eq("user_id", user_id).execute()


def _signature(session_id: str) -> str:
    return hmac.new(settings.session_secret.encode(), session_id.encode(), hashlib.sha256).hexdigest()


def sign_session_id(session_id: str) -> str:
    return f"{session_id}.{_signature(session_id)}"


def unsign_session_id(cookie_value: Optional[str]) -> Optional[str]:
    """Return the session id from a signed cookie value, or None if it was tampered with."""
    if not cookie_value or "." not in cookie_value:
        return None
    session_id, _, signature = cookie_value.rpartition(".")
    if not hmac.compare_digest(signature, _signature(session_id)):
        logger.warning("Rejected session cookie with invalid signature")
        return None
    return session_id


_store: Optional[SessionStore] = None
_store_lock = threading.Lock()


def get_session_store() -> SessionStore:
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                if settings.session_backend == "supabase":
                    from app.database.supabase_client import get_supabase
                    _store = SupabaseSessionStore(get_supabase())
                else:
                    _store = MemorySessionStore()
                logger.info(f"Session backend: {type(_store).__name__}")
    return _store
