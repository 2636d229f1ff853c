from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal
from datetime import datetime
from decimal import Decimal

Role = Literal["admin", "reseller"]

class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=150)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None
    role: Role = "reseller"
    reseller_group: int = Field(default=1, ge=1, le=2)

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class UserUpdate(BaseModel):
    """Fields an admin may change. Credit is only changed through credit adjustments."""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None
    role: Optional[Role] = None
    reseller_group: Optional[int] = Field(default=None, ge=1, le=2)
    is_active: Optional[bool] = None
    password: Optional[str] = Field(default=None, min_length=6)

class User(UserBase):
    id: int
    credit_balance: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class CreditAdjustment(BaseModel):
    # Whole cents only, so the amount never rounds to zero
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    type: Literal["add", "subtract"]
    description: Optional[str] = Field(default=None, max_length=255)
