from fastapi import APIRouter, Depends, HTTPException
from app.config.permissions_config import ADMIN_GROUP
from app.core.dependencies import (
    Principal, get_optional_principal, get_current_principal, require_permission, require_role
)
from app.database.supabase_client import get_supabase
from app.modules.partners.schemas import (
    PartnerCreate, PartnerUpdate, PartnerResponse,
    PartnerContactCreate, PartnerContactUpdate, PartnerContactResponse,
    PartnerReviewCreate, PartnerReviewResponse,
    PartnerFileCreate, PartnerFileResponse,
    CommentCreate, CommentResponse, CommentNode, CommentLikeResponse
)
from app.modules.partners.service import PartnerService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/partners", tags=["partners"])


def get_partner_service(supabase: Client = Depends(get_supabase)) -> PartnerService:
    return PartnerService(supabase)


def _is_staff(principal: Optional[Principal]) -> bool:
    return principal is not None and principal.has_permission("partners.manage")


@router.get("", response_model=List[PartnerResponse])
async def list_partners(
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: PartnerService = Depends(get_partner_service)
):
    """Public partner directory"""
    return service.list_partners(
        search=search, category_id=category_id, include_drafts=_is_staff(principal), limit=limit, offset=offset
    )


@router.post("", response_model=PartnerResponse, status_code=201)
async def create_partner(
    partner_data: PartnerCreate,
    principal: Principal = Depends(require_permission("partners.manage")),
    service: PartnerService = Depends(get_partner_service)
):
    return service.create_partner(partner_data)


@router.get("/{partner_id}", response_model=PartnerResponse)
async def get_partner(
    partner_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: PartnerService = Depends(get_partner_service)
):
    return service.get_partner(partner_id, include_drafts=_is_staff(principal))


@router.put("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    partner_id: int,
    partner_data: PartnerUpdate,
    principal: Principal = Depends(require_permission("partners.manage")),
    service: PartnerService = Depends(get_partner_service)
):
    return service.update_partner(partner_id, partner_data)


@router.delete("/{partner_id}", status_code=204)
async def delete_partner(
    partner_id: int,
    principal: Principal = Depends(require_role([ADMIN_GROUP])),
    service: PartnerService = Depends(get_partner_service)
):
    if not service.delete_partner(partner_id):
        raise HTTPException(status_code=404, detail="Partner not found")
    return None


# Contacts

@router.get("/{partner_id}/contacts", response_model=List[PartnerContactResponse])
async def list_contacts(
    partner_id: int,
    principal: Principal = Depends(get_current_principal),
    service: PartnerService = Depends(get_partner_service)
):
    return service.list_contacts(partner_id)


@router.post("/{partner_id}/contacts", response_model=PartnerContactResponse, status_code=201)
async def create_contact(
    partner_id: int,
    contact_data: PartnerContactCreate,
    principal: Principal = Depends(require_permission("partners.manage")),
    service: PartnerService = Depends(get_partner_service)
):
    return service.create_contact(partner_id, contact_data)


@router.put("/{partner_id}/contacts/{contact_id}", response_model=PartnerContactResponse)
async def update_contact(
    partner_id: int,
    contact_id: int,
    contact_data: PartnerContactUpdate,
    principal: Principal = Depends(require_permission("partners.manage")),
    service: PartnerService = Depends(get_partner_service)
):
    return service.update_contact(partner_id, contact_id, contact_data)


@router.delete("/{partner_id}/contacts/{contact_id}", status_code=204)
async def delete_contact(
    partner_id: int,
    contact_id: int,
    principal: Principal = Depends(require_permission("partners.manage")),
    service: PartnerService = Depends(get_partner_service)
):
    if not service.delete_contact(partner_id, contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return None


# Reviews

@router.get("/{partner_id}/reviews", response_model=List[PartnerReviewResponse])
async def list_reviews(
    partner_id: int,
    limit: int = 50,
    offset: int = 0,
    service: PartnerService = Depends(get_partner_service)
):
    return service.list_reviews(partner_id, limit=limit, offset=offset)


@router.post("/{partner_id}/reviews", response_model=PartnerReviewResponse, status_code=201)
async def create_review(
    partner_id: int,
    review_data: PartnerReviewCreate,
    principal: Principal = Depends(require_permission("partners.review")),
    service: PartnerService = Depends(get_partner_service)
):
    return service.create_review(partner_id, principal.id, review_data)


@router.delete("/{partner_id}/reviews/{review_id}", status_code=204)
async def delete_review(
    partner_id: int,
    review_id: int,
    principal: Principal = Depends(get_current_principal),
    service: PartnerService = Depends(get_partner_service)
):
    if not service.delete_review(partner_id, review_id, principal.id, is_admin=principal.is_admin):
        raise HTTPException(status_code=404, detail="Review not found")
    return None


# Files

@router.get("/{partner_id}/files", response_model=List[PartnerFileResponse])
async def list_files(
    partner_id: int,
    principal: Principal = Depends(get_current_principal),
    service: PartnerService = Depends(get_partner_service)
):
    return service.list_files(partner_id)


@router.post("/{partner_id}/files", response_model=PartnerFileResponse, status_code=201)
async def create_file(
    partner_id: int,
    file_data: PartnerFileCreate,
    principal: Principal = Depends(require_permission("partners.manage")),
    service: PartnerService = Depends(get_partner_service)
):
    """Register file metadata; the upload itself goes to external storage"""
    return service.create_file(partner_id, file_data)


@router.delete("/{partner_id}/files/{file_id}", status_code=204)
async def delete_file(
    partner_id: int,
    file_id: int,
    principal: Principal = Depends(require_permission("partners.manage")),
    service: PartnerService = Depends(get_partner_service)
):
    if not service.delete_file(partner_id, file_id):
        raise HTTPException(status_code=404, detail="File not found")
    return None


# Comments

@router.get("/{partner_id}/comments", response_model=List[CommentNode])
async def get_comments(
    partner_id: int,
    service: PartnerService = Depends(get_partner_service)
):
    """Comment threads of a partner, newest first at every level"""
    return service.get_comment_tree(partner_id)


@router.post("/{partner_id}/comments", response_model=CommentResponse, status_code=201)
async def create_comment(
    partner_id: int,
    comment_data: CommentCreate,
    principal: Principal = Depends(require_permission("partners.comment")),
    service: PartnerService = Depends(get_partner_service)
):
    return service.create_comment(partner_id, principal.id, comment_data)


@router.post("/{partner_id}/comments/{comment_id}/like", response_model=CommentLikeResponse)
async def like_comment(
    partner_id: int,
    comment_id: int,
    principal: Principal = Depends(get_current_principal),
    service: PartnerService = Depends(get_partner_service)
):
    return service.like_comment(partner_id, comment_id, principal.id)


@router.delete("/{partner_id}/comments/{comment_id}/like", response_model=CommentLikeResponse)
async def unlike_comment(
    partner_id: int,
    comment_id: int,
    principal: Principal = Depends(get_current_principal),
    service: PartnerService = Depends(get_partner_service)
):
    return service.unlike_comment(partner_id, comment_id, principal.id)


@router.delete("/{partner_id}/comments/{comment_id}", status_code=204)
async def delete_comment(
    partner_id: int,
    comment_id: int,
    principal: Principal = Depends(get_current_principal),
    service: PartnerService = Depends(get_partner_service)
):
    """Delete a comment with all its replies (author or ADM)"""
    service.delete_comment(partner_id, comment_id, principal.id, is_admin=principal.is_admin)
    return None
