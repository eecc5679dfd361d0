from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

AccessLevel = Literal["Public", "Restricted"]


class MaterialBase(BaseModel):
    description: Optional[str] = None
    content: Optional[str] = None
    file_path: Optional[str] = None
    url: Optional[str] = None
    embed_code: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = Field(default=None, ge=0)
    mime_type: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None


class MaterialCreate(MaterialBase):
    title: str = Field(min_length=1)
    type: str = Field(min_length=1)
    access_level: AccessLevel = "Public"
    is_active: bool = True
    is_featured: bool = False


class MaterialUpdate(MaterialBase):
    title: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    access_level: Optional[AccessLevel] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class MaterialResponse(MaterialBase):
    id: int
    title: str
    type: str
    access_level: AccessLevel = "Public"
    download_count: int = 0
    view_count: int = 0
    is_active: bool = True
    is_featured: bool = False
    created_at: datetime

    class Config:
        from_attributes = True
