from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1)


class AuthUser(BaseModel):
    id: int
    email: str
    full_name: str
    role: Optional[str] = None


class AuthResponse(BaseModel):
    success: bool = True
    user: AuthUser


class MeResponse(BaseModel):
    id: int
    email: str
    full_name: str
    role: Optional[str] = None
    is_active: bool
    ai_credits: int = 0
    profile_image: Optional[str] = None
    permissions: List[str]


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str
    password: str = Field(min_length=6)


class RoleCheckResponse(BaseModel):
    message: str
    user: Optional[str] = None
