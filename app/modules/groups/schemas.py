from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class GroupCreate(BaseModel):
    name: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    description: Optional[str] = None
    color: str = "#6b7280"
    is_active: bool = True


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None


class GroupResponse(BaseModel):
    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    color: str = "#6b7280"
    is_active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True


class GroupWithPermissionsResponse(GroupResponse):
    permissions: List[dict]  # PermissionResponse from permissions module


class GroupPermissionAssign(BaseModel):
    permission_id: int


class GroupPermissionsUpdate(BaseModel):
    permission_ids: List[int]


class GroupPermissionsResult(BaseModel):
    group_id: int
    added_count: int
    removed_count: int
    permission_ids: List[int]
