from supabase import Client
from app.config.permissions_config import DEFAULT_GROUP
from app.database.supabase_client import is_unique_violation, search_filter
from app.modules.auth.service import hash_password, verify_password, utcnow_iso
from app.modules.groups.service import get_group_id_by_name
from app.modules.partners.service import PartnerService
from app.modules.users.schemas import UserCreate, UserUpdate, ProfileUpdate, PasswordChange, UserResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def to_user_response(row: Dict[str, Any]) -> UserResponse:
    data = {k: v for k, v in row.items() if k != "password"}
    data["has_google"] = bool(row.get("google_id"))
    return UserResponse(**data)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_user(self, user_id: int) -> Dict[str, Any]:
        result = self.supabase.table("users")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return result.data[0]

    def _check_group(self, group_id: Optional[int]) -> None:
        if group_id is None:
            return
        result = self.supabase.table("user_groups")\
            .select("id")\
            .eq("id", group_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=400, detail="Group does not exist")

    def get_user_by_id(self, user_id: int) -> UserResponse:
        """Get user by ID"""
        try:
            return to_user_response(self._fetch_user(user_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch user")

    def list_users(
        self,
        search: Optional[str] = None,
        group_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[UserResponse]:
        """List users, newest first, optionally filtered by group or name/email"""
        try:
            query = self.supabase.table("users").select("*")
            if group_id is not None:
                query = query.eq("group_id", group_id)
            if search:
                query = query.or_(search_filter(["full_name", "email"], search))
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [to_user_response(row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing users: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch users")

    def create_user(self, user_data: UserCreate) -> UserResponse:
        """Create a local account on behalf of an admin"""
        self._check_group(user_data.group_id)
        values = user_data.model_dump()
        values["email"] = values["email"].lower()
        values["password"] = hash_password(values["password"])
        if values["group_id"] is None:
            values["group_id"] = get_group_id_by_name(self.supabase, DEFAULT_GROUP)
        now = utcnow_iso()
        values.update({"status": "active", "created_at": now, "updated_at": now})
        try:
            result = self.supabase.table("users").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create user")
            logger.info(f"Admin created user {result.data[0]['id']}")
            return to_user_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="User already exists")
            logger.error(f"Error creating user: {e}")
            raise HTTPException(status_code=500, detail="Failed to create user")

    def _apply_update(self, user_id: int, update_data: Dict[str, Any]) -> UserResponse:
        if not update_data:
            return self.get_user_by_id(user_id)
        update_data["updated_at"] = utcnow_iso()
        try:
            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
            return to_user_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Email already in use")
            logger.error(f"Error updating user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update user")

    def update_user(self, user_id: int, user_data: UserUpdate) -> UserResponse:
        update_data = user_data.model_dump(exclude_unset=True)
        if "group_id" in update_data:
            self._check_group(update_data["group_id"])
        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()
        return self._apply_update(user_id, update_data)

    def update_profile(self, user_id: int, profile_data: ProfileUpdate) -> UserResponse:
        return self._apply_update(user_id, profile_data.model_dump(exclude_unset=True))

    def change_password(self, user_id: int, data: PasswordChange) -> None:
        """Change the caller's password. Google-only accounts may set one without a current password."""
        user = self._fetch_user(user_id)
        if user.get("password"):
            if not data.current_password or not verify_password(data.current_password, user["password"]):
                raise HTTPException(status_code=400, detail="Current password is incorrect")
        self._apply_update(user_id, {"password": hash_password(data.new_password)})
        logger.info(f"Password changed for user {user_id}")

    def delete_user(self, user_id: int) -> bool:
        """Delete user and everything the user owns. Partner ratings and comment likes are recounted."""
        self._fetch_user(user_id)
        try:
            supplier_rows = self.supabase.table("my_suppliers")\
                .select("id")\
                .eq("user_id", user_id)\
                .execute()
            supplier_ids = [row["id"] for row in supplier_rows.data or []]
            if supplier_ids:
                self.supabase.table("my_supplier_contacts").delete().in_("my_supplier_id", supplier_ids).execute()
                self.supabase.table("my_supplier_branches").delete().in_("my_supplier_id", supplier_ids).execute()
                self.supabase.table("my_suppliers").delete().in_("id", supplier_ids).execute()

            ticket_rows = self.supabase.table("tickets")\
                .select("id")\
                .eq("user_id", user_id)\
                .execute()
            ticket_ids = [row["id"] for row in ticket_rows.data or []]
            if ticket_ids:
                self.supabase.table("ticket_messages").delete().in_("ticket_id", ticket_ids).execute()
                self.supabase.table("tickets").delete().in_("id", ticket_ids).execute()

            self.supabase.table("products").delete().eq("user_id", user_id).execute()

            review_rows = self.supabase.table("partner_reviews")\
                .select("partner_id")\
                .eq("user_id", user_id)\
                .execute()
            like_rows = self.supabase.table("partner_comment_likes")\
                .select("comment_id")\
                .eq("user_id", user_id)\
                .execute()
            self.supabase.table("partner_reviews").delete().eq("user_id", user_id).execute()
            self.supabase.table("partner_comment_likes").delete().eq("user_id", user_id).execute()
            partners = PartnerService(self.supabase)
            for partner_id in sorted({row["partner_id"] for row in review_rows.data or []}):
                partners.refresh_rating(partner_id)
            for comment_id in sorted({row["comment_id"] for row in like_rows.data or []}):
                partners.recount_likes(comment_id)

            result = self.supabase.table("users")\
                .delete()\
                .eq("id", user_id)\
                .execute()
            logger.info(f"Deleted user {user_id} ({len(supplier_ids)} suppliers, {len(ticket_ids)} tickets)")
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete user")
