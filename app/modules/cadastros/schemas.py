from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class CadastroCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_active: bool = True
    # Only kept for the tables that have these columns
    format_type: Optional[str] = None
    display_config: Optional[Dict[str, Any]] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CadastroUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    format_type: Optional[str] = None
    display_config: Optional[Dict[str, Any]] = None
    color: Optional[str] = None
    icon: Optional[str] = None


class CadastroResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True
    format_type: Optional[str] = None
    display_config: Optional[Dict[str, Any]] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
