from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class ClientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None

class ClientCreate(ClientBase):
    # Ignored for resellers, who always create clients for themselves
    reseller_id: Optional[int] = None

class ClientCreateInternal(ClientBase):
    reseller_id: int

class Client(ClientBase):
    id: int
    reseller_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class ClientProductPurchase(BaseModel):
    product_id: int

class ClientProductCreateInternal(BaseModel):
    client_id: int
    product_id: int
    status: str = "active"

class ClientProduct(BaseModel):
    id: int
    client_id: int
    product_id: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
