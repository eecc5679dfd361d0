from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime


class AiPromptCreate(BaseModel):
    title: str = Field(min_length=1)
    category: str = Field(min_length=1)
    description: str = Field(min_length=1)
    content: str = Field(min_length=1)
    instructions: Optional[str] = None
    placeholders: Optional[List[Any]] = None
    tags: Optional[List[str]] = None
    is_active: bool = True
    is_featured: bool = False


class AiPromptUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    instructions: Optional[str] = None
    placeholders: Optional[List[Any]] = None
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class AiPromptResponse(BaseModel):
    id: int
    title: str
    category: str
    description: str
    content: str
    instructions: Optional[str] = None
    placeholders: Optional[List[Any]] = None
    tags: Optional[List[str]] = None
    use_count: int = 0
    is_active: bool = True
    is_featured: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
