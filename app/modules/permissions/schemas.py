from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class PermissionCreate(BaseModel):
    key: str = Field(min_length=3, pattern=r"^[a-z_]+\.[a-z_]+$")
    name: str
    module: str
    category: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class PermissionUpdate(BaseModel):
    name: Optional[str] = None
    module: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class PermissionResponse(BaseModel):
    id: int
    key: str
    name: str
    module: str
    category: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True


class PermissionMatrixResponse(BaseModel):
    permissions: List[dict]
    groups: List[dict]
