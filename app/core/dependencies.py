"""
Core dependencies for session handling, route protection and permission checking
"""

from dataclasses import dataclass, field
from fastapi import Depends, HTTPException, Request, Response, status
from app.config import settings
from app.config.permissions_config import ADMIN_GROUP, all_permission_keys
from app.core.sessions import SessionStore, get_session_store, sign_session_id, unsign_session_id
from app.database.supabase_client import get_supabase
from supabase import Client
from typing import List, Optional, Dict, Any, FrozenSet, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated caller: user row, role string (group name) and capability set."""
    user: Dict[str, Any]
    role: Optional[str] = None
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def id(self) -> int:
        return self.user["id"]

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_GROUP

    def has_role(self, roles: List[str]) -> bool:
        return self.role in roles

    def has_permission(self, key: str) -> bool:
        return self.is_admin or key in self.permissions


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (principal, session id)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def read_session_id(request: Request) -> Optional[str]:
    return unsign_session_id(request.cookies.get(settings.session_cookie_name))


def start_session(response: Response, store: SessionStore, data: Dict[str, Any]) -> str:
    """Create a session and attach the signed cookie to the response."""
    session_id = store.create(data)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(session_id),
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return session_id


def end_session(request: Request, response: Response, store: SessionStore) -> Optional[int]:
    """Delete the session behind the cookie and clear it. Returns the user id it belonged to."""
    session_id = read_session_id(request)
    user_id = None
    if session_id:
        user_id = (store.get(session_id) or {}).get("user_id")
        store.delete(session_id)
    response.delete_cookie(settings.session_cookie_name)
    return user_id


def resolve_group_access(group_id: Optional[int], supabase: Client) -> Tuple[Optional[str], FrozenSet[str]]:
    """Return (group name, permission keys) for a group. Inactive or missing groups grant nothing."""
    if group_id is None:
        return None, frozenset()
    group_result = supabase.table("user_groups")\
        .select("id, name, is_active")\
        .eq("id", group_id)\
        .limit(1)\
        .execute()
    if not group_result.data or not group_result.data[0].get("is_active", True):
        return None, frozenset()
    group_name = group_result.data[0]["name"]
    if group_name == ADMIN_GROUP:
        return group_name, frozenset(all_permission_keys())
    links = supabase.table("group_permissions")\
        .select("permission_id")\
        .eq("group_id", group_id)\
        .execute()
    permission_ids = list({row["permission_id"] for row in links.data}) if links.data else []
    if not permission_ids:
        return group_name, frozenset()
    permissions_result = supabase.table("permissions")\
        .select("key, is_active")\
        .in_("id", permission_ids)\
        .execute()
    keys = frozenset(p["key"] for p in permissions_result.data or [] if p.get("is_active", True))
    return group_name, keys


def get_optional_principal(
    request: Request,
    supabase: Client = Depends(get_supabase),
    store: SessionStore = Depends(get_session_store)
) -> Optional[Principal]:
    """Principal for the session cookie, resolved once per request; None for anonymous callers."""
    cache = _get_request_cache(request)
    if "principal" in cache:
        return cache["principal"]
    principal = None
    session_id = read_session_id(request)
    session = store.get(session_id) if session_id else None
    if session and session.get("user_id") is not None:
        user_result = supabase.table("users")\
            .select("*")\
            .eq("id", session["user_id"])\
            .limit(1)\
            .execute()
        if user_result.data:
            user = user_result.data[0]
            role, permissions = resolve_group_access(user.get("group_id"), supabase)
            principal = Principal(user=user, role=role, permissions=permissions)
    cache["principal"] = principal
    return principal


def get_current_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    """Require an authenticated, active user."""
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not principal.user.get("is_active", True):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")
    return principal


def require_role(allowed_roles: List[str]):
    """Factory function to create a role check dependency"""
    allowed = list(allowed_roles)

    def check_role(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_role(allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"message": "Access denied", "required_roles": allowed, "user_role": principal.role}
            )
        return principal
    return check_role


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_permission(required_permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return principal
    return check_permission


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
