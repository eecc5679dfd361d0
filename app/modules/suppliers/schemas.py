from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class SupplierCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    product_type: str = Field(min_length=1)
    country: str = Field(min_length=1)
    website: Optional[str] = None
    logo: Optional[str] = None
    is_verified: bool = False
    discount_info: Optional[str] = None


class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    product_type: Optional[str] = None
    country: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    is_verified: Optional[bool] = None
    discount_info: Optional[str] = None


class SupplierResponse(BaseModel):
    id: int
    name: str
    description: str
    product_type: str
    country: str
    website: Optional[str] = None
    logo: Optional[str] = None
    is_verified: bool = False
    discount_info: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
