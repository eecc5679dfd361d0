from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)
    group_id: Optional[int] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    ai_credits: int = Field(default=0, ge=0)
    is_active: bool = True


class UserUpdate(BaseModel):
    """Admin update; every field optional"""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    group_id: Optional[int] = None
    status: Optional[str] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    profile_image: Optional[str] = None
    ai_credits: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    cpf: Optional[str] = None
    profile_image: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: Optional[str] = None
    new_password: str = Field(min_length=6)


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    group_id: Optional[int] = None
    status: str = "active"
    ai_credits: int = 0
    is_active: bool = True
    phone: Optional[str] = None
    cpf: Optional[str] = None
    profile_image: Optional[str] = None
    has_google: bool = False
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
