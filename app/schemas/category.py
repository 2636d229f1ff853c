from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

MasterCategory = Literal["MTN Fixed", "MTN GSM"]

class ProductCategoryBase(BaseModel):
    name: str = Field(..., max_length=255)
    master_category: MasterCategory = "MTN Fixed"
    description: str = ""
    is_active: bool = True

class ProductCategoryCreate(ProductCategoryBase):
    pass

class ProductCategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    master_category: Optional[MasterCategory] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

class ProductCategory(ProductCategoryBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
