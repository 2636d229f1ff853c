from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

from app.schemas.product import Product
from app.schemas.client import Client

OrderStatus = Literal["pending", "active", "rejected"]
ProvisionMethod = Literal["courier", "self"]

class ProductOrderBase(BaseModel):
    client_id: int
    product_id: int
    provision_method: ProvisionMethod
    sim_number: Optional[str] = Field(default=None, max_length=64)
    address: Optional[str] = None
    contact_name: Optional[str] = Field(default=None, max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    country: Optional[str] = Field(default=None, max_length=100)

class ProductOrderCreate(ProductOrderBase):
    """
    Submitted by a reseller. The provisioning fields are checked against
    provision_method by the order lifecycle, not here, so that a mismatch
    is reported as a validation error of the order rather than a malformed body.
    """
    pass

class ProductOrderCreateInternal(ProductOrderBase):
    reseller_id: int
    status: OrderStatus = "pending"

class ProductOrderUpdate(BaseModel):
    """Admin decision on a pending order, as sent by the pending-orders screen."""
    status: Literal["active", "rejected"]
    rejection_reason: Optional[str] = None

class OrderRejection(BaseModel):
    reason: str

class ProductOrder(ProductOrderBase):
    id: int
    reseller_id: int
    status: OrderStatus
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    product: Optional[Product] = None
    client: Optional[Client] = None

    class Config:
        from_attributes = True
