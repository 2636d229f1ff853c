from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime, date
from decimal import Decimal

ProductStatus = Literal["active", "limited", "outofstock"]

class ProductBase(BaseModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    base_price: Decimal = Field(..., ge=0)
    group1_price: Decimal = Field(..., ge=0)
    group2_price: Decimal = Field(..., ge=0)
    category_id: Optional[int] = None
    status: ProductStatus = "active"
    api_endpoint: str = Field(default="", max_length=255)
    api_identifier: str = Field(default="", max_length=255)

class ProductCreate(ProductBase):
    pass

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    base_price: Optional[Decimal] = Field(default=None, ge=0)
    group1_price: Optional[Decimal] = Field(default=None, ge=0)
    group2_price: Optional[Decimal] = Field(default=None, ge=0)
    category_id: Optional[int] = None
    status: Optional[ProductStatus] = None
    api_endpoint: Optional[str] = Field(default=None, max_length=255)
    api_identifier: Optional[str] = Field(default=None, max_length=255)

class Product(ProductBase):
    id: int
    master_category: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class PriceQuote(BaseModel):
    """What a reseller pays today for a product, after group pricing and pro-rata discount."""
    product_id: int
    reseller_group: int
    reference_date: date
    original_price: Decimal
    discount_percentage: int
    final_price: Decimal
    currency: str
