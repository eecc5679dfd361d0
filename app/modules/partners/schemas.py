from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime


class PartnerCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category_id: int
    website: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    logo: Optional[str] = None
    is_verified: bool = False
    discount_info: Optional[str] = None
    status: str = Field(default="published", pattern="^(published|draft)$")


class PartnerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[int] = None
    website: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    logo: Optional[str] = None
    is_verified: Optional[bool] = None
    discount_info: Optional[str] = None
    status: Optional[str] = Field(default=None, pattern="^(published|draft)$")


class PartnerResponse(BaseModel):
    id: int
    name: str
    description: str
    category_id: int
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    logo: Optional[str] = None
    is_verified: bool = False
    discount_info: Optional[str] = None
    average_rating: float = 0.0
    review_count: int = 0
    status: str = "published"
    created_at: datetime

    class Config:
        from_attributes = True


class PartnerContactCreate(BaseModel):
    name: str = Field(min_length=1)
    position: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


class PartnerContactUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    position: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


class PartnerContactResponse(BaseModel):
    id: int
    partner_id: int
    name: str
    position: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PartnerReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)


class PartnerReviewResponse(BaseModel):
    id: int
    partner_id: int
    user_id: int
    rating: int
    comment: str
    created_at: datetime

    class Config:
        from_attributes = True


class PartnerFileCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    file_path: str = Field(min_length=1)
    file_type: str
    file_size: int = Field(ge=0)


class PartnerFileResponse(BaseModel):
    id: int
    partner_id: int
    name: str
    description: Optional[str] = None
    file_path: str
    file_type: str
    file_size: int
    created_at: datetime

    class Config:
        from_attributes = True


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    parent_id: Optional[int] = None


class CommentResponse(BaseModel):
    id: int
    partner_id: int
    user_id: int
    content: str
    parent_id: Optional[int] = None
    likes: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class CommentNode(CommentResponse):
    user_name: Optional[str] = None
    replies: List["CommentNode"] = []


class CommentLikeResponse(BaseModel):
    comment_id: int
    likes: int


CommentNode.model_rebuild()
