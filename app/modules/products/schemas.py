from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime


class CustomCost(BaseModel):
    name: str
    value: float = Field(ge=0)
    type: Literal["fixed", "percentage"] = "fixed"


class ProductBase(BaseModel):
    description: Optional[str] = None
    asin: Optional[str] = None
    sku: Optional[str] = None
    image: Optional[str] = None
    cost_price: Optional[float] = Field(default=None, ge=0)
    sale_price: Optional[float] = Field(default=None, ge=0)
    fba_fee: Optional[float] = Field(default=None, ge=0)
    fbm_fee: Optional[float] = Field(default=None, ge=0)
    dba_fee: Optional[float] = Field(default=None, ge=0)
    commission: Optional[float] = Field(default=None, ge=0)
    taxes: Optional[float] = Field(default=None, ge=0)
    prep_center_fee: Optional[float] = Field(default=None, ge=0)
    custom_costs: Optional[List[CustomCost]] = None


class ProductCreate(ProductBase):
    name: str = Field(min_length=1)


class ProductUpdate(ProductBase):
    name: Optional[str] = Field(default=None, min_length=1)


class ProductResponse(ProductBase):
    id: int
    user_id: int
    name: str
    total_cost: Optional[float] = None
    profit: Optional[float] = None
    margin: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True
