import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

from fastapi import HTTPException
from passlib.context import CryptContext
from supabase import Client

from app.config.permissions_config import DEFAULT_GROUP
from app.database.supabase_client import parse_timestamp
from app.modules.auth.schemas import LoginRequest, RegisterRequest, AuthUser, ResetPasswordRequest
from app.modules.groups.service import get_group_id_by_name

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

RESET_TOKEN_TTL = timedelta(hours=1)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Not a recognised hash (e.g. legacy plain text); never matches
        return False


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("users")\
            .select("*")\
            .eq("email", email.lower())\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_user_by_google_id(self, google_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("users")\
            .select("*")\
            .eq("google_id", google_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_role_name(self, user: Dict[str, Any]) -> Optional[str]:
        if user.get("group_id") is None:
            return None
        result = self.supabase.table("user_groups")\
            .select("name")\
            .eq("id", user["group_id"])\
            .limit(1)\
            .execute()
        return result.data[0]["name"] if result.data else None

    def to_auth_user(self, user: Dict[str, Any]) -> AuthUser:
        return AuthUser(
            id=user["id"],
            email=user["email"],
            full_name=user["full_name"],
            role=self.get_role_name(user)
        )

    def _insert_user(self, values: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow_iso()
        row = {
            "group_id": get_group_id_by_name(self.supabase, DEFAULT_GROUP),
            "status": "active",
            "is_active": True,
            "ai_credits": 0,
            "created_at": now,
            "updated_at": now,
        }
        row.update(values)
        result = self.supabase.table("users").insert(row).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Registration failed")
        return result.data[0]

    def register(self, register_data: RegisterRequest) -> Dict[str, Any]:
        """Register a local account in the default group"""
        email = str(register_data.email).lower()
        try:
            if self.get_user_by_email(email):
                raise HTTPException(status_code=409, detail="User already exists")
            user = self._insert_user({
                "email": email,
                "password": hash_password(register_data.password),
                "full_name": register_data.full_name,
            })
            logger.info(f"Registered user {user['id']}")
            return user
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Registration failed for {email}: {e}")
            raise HTTPException(status_code=500, detail="Registration failed")

    def authenticate(self, login_data: LoginRequest) -> Dict[str, Any]:
        """Local strategy: check email, password and account status"""
        email = str(login_data.email).lower()
        try:
            user = self.get_user_by_email(email)
        except Exception as e:
            logger.error(f"Login lookup failed for {email}: {e}")
            raise HTTPException(status_code=500, detail="Authentication error")

        if not user:
            raise HTTPException(status_code=401, detail="Email not found")
        if not user.get("password"):
            raise HTTPException(status_code=401, detail="Use Google login for this account")
        if not verify_password(login_data.password, user["password"]):
            logger.warning(f"Failed login for user {user['id']}")
            raise HTTPException(status_code=401, detail="Incorrect password")
        if not user.get("is_active", True):
            raise HTTPException(status_code=401, detail="Account disabled")

        self.touch_last_login(user["id"])
        return user

    def touch_last_login(self, user_id: int) -> None:
        self.supabase.table("users")\
            .update({"last_login_at": utcnow_iso()})\
            .eq("id", user_id)\
            .execute()

    def login_with_google(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        """Find the user by Google id, else link by email, else create a new account"""
        user = self.get_user_by_google_id(profile["id"])
        if user:
            if not user.get("is_active", True):
                raise HTTPException(status_code=401, detail="Account disabled")
            self.touch_last_login(user["id"])
            return user

        email = (profile.get("email") or "").lower()
        if not email:
            raise HTTPException(status_code=401, detail="Email not provided by Google")

        user = self.get_user_by_email(email)
        if user:
            if not user.get("is_active", True):
                raise HTTPException(status_code=401, detail="Account disabled")
            result = self.supabase.table("users")\
                .update({
                    "google_id": profile["id"],
                    "profile_image": profile.get("picture") or user.get("profile_image"),
                    "last_login_at": utcnow_iso()
                })\
                .eq("id", user["id"])\
                .execute()
            logger.info(f"Linked Google account to user {user['id']}")
            return result.data[0] if result.data else user

        user = self._insert_user({
            "email": email,
            "password": None,
            "full_name": profile.get("name") or "Google user",
            "google_id": profile["id"],
            "profile_image": profile.get("picture"),
            "last_login_at": utcnow_iso(),
        })
        logger.info(f"Created user {user['id']} from Google login")
        return user

    def create_reset_token(self, email: str) -> Optional[str]:
        """Create a one-hour password reset token. Returns None when the email is unknown."""
        user = self.get_user_by_email(email)
        if not user:
            return None
        token = secrets.token_urlsafe(32)
        self.supabase.table("auth_tokens").insert({
            "user_id": user["id"],
            "token": token,
            "type": "reset_password",
            "expires_at": (datetime.now(timezone.utc) + RESET_TOKEN_TTL).isoformat(),
            "used": False
        }).execute()
        logger.info(f"Password reset token created for user {user['id']}")
        return token

    def reset_password(self, data: ResetPasswordRequest) -> int:
        result = self.supabase.table("auth_tokens")\
            .select("*")\
            .eq("token", data.token)\
            .eq("type", "reset_password")\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Invalid or expired token")
        token_row = result.data[0]
        if token_row.get("used") or parse_timestamp(token_row["expires_at"]) <= datetime.now(timezone.utc):
            raise HTTPException(status_code=400, detail="Invalid or expired token")

        self.supabase.table("users")\
            .update({"password": hash_password(data.password), "updated_at": utcnow_iso()})\
            .eq("id", token_row["user_id"])\
            .execute()
        self.supabase.table("auth_tokens")\
            .update({"used": True})\
            .eq("id", token_row["id"])\
            .execute()
        return token_row["user_id"]
