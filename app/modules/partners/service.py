from supabase import Client
from app.database.supabase_client import is_unique_violation, search_filter
from app.modules.partners.comment_tree import build_comment_tree, collect_subtree_ids
from app.modules.partners.schemas import (
    PartnerCreate, PartnerUpdate, PartnerResponse,
    PartnerContactCreate, PartnerContactUpdate, PartnerContactResponse,
    PartnerReviewCreate, PartnerReviewResponse,
    PartnerFileCreate, PartnerFileResponse,
    CommentCreate, CommentResponse, CommentNode, CommentLikeResponse
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class PartnerService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Partners

    def _fetch_partner(self, partner_id: int) -> Dict[str, Any]:
        result = self.supabase.table("partners")\
            .select("*")\
            .eq("id", partner_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Partner not found")
        return result.data[0]

    def get_partner(self, partner_id: int, include_drafts: bool = False) -> PartnerResponse:
        try:
            partner = self._fetch_partner(partner_id)
            if partner.get("status") != "published" and not include_drafts:
                raise HTTPException(status_code=404, detail="Partner not found")
            return PartnerResponse(**partner)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch partner")

    def list_partners(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        include_drafts: bool = False,
        limit: int = 50,
        offset: int = 0
    ) -> List[PartnerResponse]:
        """List partners by name; drafts only for staff"""
        try:
            query = self.supabase.table("partners").select("*")
            if not include_drafts:
                query = query.eq("status", "published")
            if category_id is not None:
                query = query.eq("category_id", category_id)
            if search:
                query = query.or_(search_filter(["name", "description"], search))
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [PartnerResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing partners: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch partners")

    def create_partner(self, partner_data: PartnerCreate) -> PartnerResponse:
        try:
            values = partner_data.model_dump(mode="json")
            values.update({"average_rating": 0, "review_count": 0})
            result = self.supabase.table("partners").insert(values).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create partner")
            logger.info(f"Partner {result.data[0]['id']} created")
            return PartnerResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating partner: {e}")
            raise HTTPException(status_code=500, detail="Failed to create partner")

    def update_partner(self, partner_id: int, partner_data: PartnerUpdate) -> PartnerResponse:
        update_data = partner_data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            return self.get_partner(partner_id, include_drafts=True)
        try:
            result = self.supabase.table("partners")\
                .update(update_data)\
                .eq("id", partner_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Partner not found")
            return PartnerResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update partner")

    def delete_partner(self, partner_id: int) -> bool:
        """Delete partner with its contacts, reviews, comments and file records"""
        try:
            comments = self.supabase.table("partner_comments")\
                .select("id")\
                .eq("partner_id", partner_id)\
                .execute()
            comment_ids = [row["id"] for row in comments.data or []]
            if comment_ids:
                self.supabase.table("partner_comment_likes").delete().in_("comment_id", comment_ids).execute()
                self.supabase.table("partner_comments").delete().in_("id", comment_ids).execute()
            for table in ("partner_contacts", "partner_reviews", "partner_files"):
                self.supabase.table(table).delete().eq("partner_id", partner_id).execute()

            result = self.supabase.table("partners")\
                .delete()\
                .eq("id", partner_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete partner")

    # Contacts

    def list_contacts(self, partner_id: int) -> List[PartnerContactResponse]:
        self._fetch_partner(partner_id)
        try:
            result = self.supabase.table("partner_contacts")\
                .select("*")\
                .eq("partner_id", partner_id)\
                .order("name")\
                .execute()
            return [PartnerContactResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing contacts of partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch contacts")

    def create_contact(self, partner_id: int, contact_data: PartnerContactCreate) -> PartnerContactResponse:
        self._fetch_partner(partner_id)
        try:
            values = contact_data.model_dump(mode="json")
            values["partner_id"] = partner_id
            result = self.supabase.table("partner_contacts").insert(values).execute()
            return PartnerContactResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error creating contact for partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create contact")

    def update_contact(self, partner_id: int, contact_id: int, contact_data: PartnerContactUpdate) -> PartnerContactResponse:
        update_data = contact_data.model_dump(mode="json", exclude_unset=True)
        try:
            query = self.supabase.table("partner_contacts")
            if update_data:
                result = query.update(update_data).eq("id", contact_id).eq("partner_id", partner_id).execute()
            else:
                result = query.select("*").eq("id", contact_id).eq("partner_id", partner_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Contact not found")
            return PartnerContactResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating contact {contact_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update contact")

    def delete_contact(self, partner_id: int, contact_id: int) -> bool:
        try:
            result = self.supabase.table("partner_contacts")\
                .delete()\
                .eq("id", contact_id)\
                .eq("partner_id", partner_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting contact {contact_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete contact")

    # Reviews

    def list_reviews(self, partner_id: int, limit: int = 50, offset: int = 0) -> List[PartnerReviewResponse]:
        self._fetch_partner(partner_id)
        try:
            result = self.supabase.table("partner_reviews")\
                .select("*")\
                .eq("partner_id", partner_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [PartnerReviewResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing reviews of partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch reviews")

    def refresh_rating(self, partner_id: int) -> None:
        ratings = self.supabase.table("partner_reviews")\
            .select("rating")\
            .eq("partner_id", partner_id)\
            .execute()
        values = [row["rating"] for row in ratings.data or []]
        average = round(sum(values) / len(values), 1) if values else 0.0
        self.supabase.table("partners")\
            .update({"average_rating": average, "review_count": len(values)})\
            .eq("id", partner_id)\
            .execute()

    def create_review(self, partner_id: int, user_id: int, review_data: PartnerReviewCreate) -> PartnerReviewResponse:
        """One review per user and partner; the partner's rating summary is recomputed"""
        self.get_partner(partner_id)
        try:
            result = self.supabase.table("partner_reviews").insert({
                "partner_id": partner_id,
                "user_id": user_id,
                "rating": review_data.rating,
                "comment": review_data.comment
            }).execute()
            self.refresh_rating(partner_id)
            return PartnerReviewResponse(**result.data[0])
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="You already reviewed this partner")
            logger.error(f"Error creating review for partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create review")

    def delete_review(self, partner_id: int, review_id: int, user_id: int, is_admin: bool = False) -> bool:
        result = self.supabase.table("partner_reviews")\
            .select("*")\
            .eq("id", review_id)\
            .eq("partner_id", partner_id)\
            .limit(1)\
            .execute()
        if not result.data:
            return False
        if result.data[0]["user_id"] != user_id and not is_admin:
            raise HTTPException(status_code=403, detail="Only the author can delete this review")
        try:
            self.supabase.table("partner_reviews").delete().eq("id", review_id).execute()
            self.refresh_rating(partner_id)
            return True
        except Exception as e:
            logger.error(f"Error deleting review {review_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete review")

    # Files

    def list_files(self, partner_id: int) -> List[PartnerFileResponse]:
        self._fetch_partner(partner_id)
        try:
            result = self.supabase.table("partner_files")\
                .select("*")\
                .eq("partner_id", partner_id)\
                .order("created_at", desc=True)\
                .execute()
            return [PartnerFileResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing files of partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch files")

    def create_file(self, partner_id: int, file_data: PartnerFileCreate) -> PartnerFileResponse:
        self._fetch_partner(partner_id)
        try:
            values = file_data.model_dump()
            values["partner_id"] = partner_id
            result = self.supabase.table("partner_files").insert(values).execute()
            return PartnerFileResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error registering file for partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to register file")

    def delete_file(self, partner_id: int, file_id: int) -> bool:
        try:
            result = self.supabase.table("partner_files")\
                .delete()\
                .eq("id", file_id)\
                .eq("partner_id", partner_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting file {file_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete file")

    # Comments

    def _comment_rows(self, partner_id: int) -> List[Dict[str, Any]]:
        result = self.supabase.rpc("partner_comment_tree", {"p_partner_id": partner_id}).execute()
        return result.data or []

    def get_comment_tree(self, partner_id: int) -> List[CommentNode]:
        """All comments of a partner as nested threads, newest first"""
        self._fetch_partner(partner_id)
        try:
            tree = build_comment_tree(self._comment_rows(partner_id))
            return [CommentNode(**node) for node in tree]
        except Exception as e:
            logger.error(f"Error building comment tree for partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch partner comments")

    def _fetch_comment(self, partner_id: int, comment_id: int) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("partner_comments")\
            .select("*")\
            .eq("id", comment_id)\
            .eq("partner_id", partner_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def create_comment(self, partner_id: int, user_id: int, comment_data: CommentCreate) -> CommentResponse:
        """Add a top-level comment or a reply to a comment of the same partner"""
        self.get_partner(partner_id)
        if comment_data.parent_id is not None and not self._fetch_comment(partner_id, comment_data.parent_id):
            raise HTTPException(status_code=400, detail="Parent comment does not belong to this partner")
        try:
            result = self.supabase.table("partner_comments").insert({
                "partner_id": partner_id,
                "user_id": user_id,
                "content": comment_data.content,
                "parent_id": comment_data.parent_id,
                "likes": 0
            }).execute()
            return CommentResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error creating comment for partner {partner_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create comment")

    def recount_likes(self, comment_id: int) -> int:
        likes = self.supabase.table("partner_comment_likes")\
            .select("id")\
            .eq("comment_id", comment_id)\
            .execute()
        count = len(likes.data or [])
        self.supabase.table("partner_comments")\
            .update({"likes": count})\
            .eq("id", comment_id)\
            .execute()
        return count

    def like_comment(self, partner_id: int, comment_id: int, user_id: int) -> CommentLikeResponse:
        if not self._fetch_comment(partner_id, comment_id):
            raise HTTPException(status_code=404, detail="Comment not found")
        try:
            self.supabase.table("partner_comment_likes").insert({
                "comment_id": comment_id,
                "user_id": user_id
            }).execute()
            return CommentLikeResponse(comment_id=comment_id, likes=self.recount_likes(comment_id))
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Comment already liked")
            logger.error(f"Error liking comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to like comment")

    def unlike_comment(self, partner_id: int, comment_id: int, user_id: int) -> CommentLikeResponse:
        if not self._fetch_comment(partner_id, comment_id):
            raise HTTPException(status_code=404, detail="Comment not found")
        try:
            result = self.supabase.table("partner_comment_likes")\
                .delete()\
                .eq("comment_id", comment_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Like not found")
            return CommentLikeResponse(comment_id=comment_id, likes=self.recount_likes(comment_id))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing like from comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove like")

    def delete_comment(self, partner_id: int, comment_id: int, user_id: int, is_admin: bool = False) -> int:
        """Delete a comment and every reply below it. Returns the number of comments removed."""
        comment = self._fetch_comment(partner_id, comment_id)
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        if comment["user_id"] != user_id and not is_admin:
            raise HTTPException(status_code=403, detail="Only the author can delete this comment")
        try:
            ids = sorted(collect_subtree_ids(self._comment_rows(partner_id), comment_id))
            self.supabase.table("partner_comment_likes").delete().in_("comment_id", ids).execute()
            self.supabase.table("partner_comments").delete().in_("id", ids).execute()
            logger.info(f"Deleted comment {comment_id} and {len(ids) - 1} replies")
            return len(ids)
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete comment")
