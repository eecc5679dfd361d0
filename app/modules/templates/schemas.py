from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

TemplateStatus = Literal["published", "draft"]


class TemplateCreate(BaseModel):
    title: str = Field(min_length=1)
    category: str = Field(min_length=1)
    purpose: str = Field(min_length=1)
    usage_instructions: str = Field(min_length=1)
    content: str = Field(min_length=1)
    variable_tips: Optional[str] = None
    status: TemplateStatus = "published"
    language: str = "pt"
    tags: Optional[List[str]] = None


class TemplateUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    purpose: Optional[str] = None
    usage_instructions: Optional[str] = None
    content: Optional[str] = None
    variable_tips: Optional[str] = None
    status: Optional[TemplateStatus] = None
    language: Optional[str] = None
    tags: Optional[List[str]] = None


class TemplateResponse(BaseModel):
    id: int
    title: str
    category: str
    purpose: str
    usage_instructions: str
    content: str
    variable_tips: Optional[str] = None
    status: TemplateStatus = "published"
    copy_count: int = 0
    language: str = "pt"
    tags: Optional[List[str]] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
