from fastapi import APIRouter, Depends, HTTPException, Request
from app.core.dependencies import Principal, get_current_principal, require_permission, client_ip
from app.core.sessions import SessionStore, get_session_store
from app.database.supabase_client import get_supabase
from app.modules.activity.routes import get_activity_service
from app.modules.activity.service import ActivityService
from app.modules.users.schemas import UserCreate, UserUpdate, ProfileUpdate, PasswordChange, UserResponse
from app.modules.users.service import UserService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.put("/me", response_model=UserResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service)
):
    """Update the caller's own profile"""
    return service.update_profile(principal.id, profile_data)


@router.post("/me/password", status_code=200)
async def change_my_password(
    request: Request,
    data: PasswordChange,
    principal: Principal = Depends(get_current_principal),
    service: UserService = Depends(get_user_service),
    activity: ActivityService = Depends(get_activity_service)
):
    service.change_password(principal.id, data)
    activity.log(principal.id, "password_changed", ip_address=client_ip(request))
    return {"success": True, "message": "Password updated"}


@router.get("", response_model=List[UserResponse])
async def list_users(
    search: Optional[str] = None,
    group_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
    principal: Principal = Depends(require_permission("admin.manage_users")),
    service: UserService = Depends(get_user_service)
):
    return service.list_users(search=search, group_id=group_id, limit=limit, offset=offset)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: UserCreate,
    principal: Principal = Depends(require_permission("admin.manage_users")),
    service: UserService = Depends(get_user_service)
):
    return service.create_user(user_data)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    principal: Principal = Depends(require_permission("admin.manage_users")),
    service: UserService = Depends(get_user_service)
):
    return service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    principal: Principal = Depends(require_permission("admin.manage_users")),
    service: UserService = Depends(get_user_service),
    store: SessionStore = Depends(get_session_store)
):
    """Update user; disabling an account also ends its sessions"""
    user = service.update_user(user_id, user_data)
    if user_data.is_active is False:
        store.delete_for_user(user_id)
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    principal: Principal = Depends(require_permission("admin.manage_users")),
    service: UserService = Depends(get_user_service),
    store: SessionStore = Depends(get_session_store)
):
    if user_id == principal.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    service.delete_user(user_id)
    store.delete_for_user(user_id)
    return None
