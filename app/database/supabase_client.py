from datetime import datetime, timezone
from typing import Iterable, Union
from postgrest.exceptions import APIError
from pydantic import TypeAdapter
from supabase import create_client, Client
from app.config import settings

_timestamp_adapter = TypeAdapter(datetime)


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            if not settings.supabase_url:
                raise RuntimeError("SUPABASE_URL must be set. Did you forget to provision a database?")
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use in the seed script."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def is_unique_violation(error: Exception) -> bool:
    """True when PostgREST reports a unique constraint violation (SQLSTATE 23505)."""
    return isinstance(error, APIError) and error.code == "23505"


def search_filter(columns: Iterable[str], term: str) -> str:
    """
    Build an or_() expression matching term case-insensitively in any of columns.

    Each operand is double-quoted so commas, dots and parentheses in the term
    stay part of the value instead of splitting the PostgREST logic tree.
    """
    escaped = term.replace("\\", "\\\\").replace('"', '\\"')
    return ",".join(f'{column}.ilike."*{escaped}*"' for column in columns)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse a timestamptz as PostgREST returns it. Naive values are taken as UTC."""
    parsed = _timestamp_adapter.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
