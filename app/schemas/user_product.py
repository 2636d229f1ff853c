import json
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal, List, Dict, Any
from datetime import datetime

from app.schemas.product import Product
from app.schemas.api_setting import ApiSetting

UserProductStatus = Literal["active", "pending", "suspended", "cancelled"]

class UserProductBase(BaseModel):
    username: Optional[str] = Field(default=None, max_length=255)
    msisdn: Optional[str] = Field(default=None, max_length=32)
    sim_number: Optional[str] = Field(default=None, max_length=64)
    status: UserProductStatus = "active"
    comments: Optional[str] = None

class UserProductCreate(UserProductBase):
    """Manual assignment of a product to a user by an admin."""
    user_id: int
    product_id: int

class UserProductCreateInternal(UserProductCreate):
    source_order_id: Optional[int] = None

class UserProductUpdate(BaseModel):
    username: Optional[str] = Field(default=None, max_length=255)
    msisdn: Optional[str] = Field(default=None, max_length=32)
    sim_number: Optional[str] = Field(default=None, max_length=64)
    status: Optional[UserProductStatus] = None
    comments: Optional[str] = None


class UserProductEndpointBase(BaseModel):
    api_setting_id: int
    endpoint_path: str = Field(..., min_length=1, max_length=255)
    custom_parameters: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("custom_parameters", mode="before")
    @classmethod
    def parse_custom_parameters(cls, value):
        # Older rows stored the parameters as a JSON string
        if value is None:
            return {}
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else {}
            except json.JSONDecodeError as exc:
                raise ValueError(f"custom_parameters is not valid JSON: {exc.msg}") from exc
        if not isinstance(value, dict):
            raise ValueError("custom_parameters must be a JSON object")
        return value

class UserProductEndpointCreate(UserProductEndpointBase):
    pass

class UserProductEndpointCreateInternal(UserProductEndpointBase):
    user_product_id: int

class UserProductEndpoint(UserProductEndpointBase):
    id: int
    user_product_id: int
    created_at: datetime
    api_setting: Optional[ApiSetting] = None

    class Config:
        from_attributes = True


class UserProduct(UserProductBase):
    id: int
    user_id: int
    product_id: int
    source_order_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    product: Optional[Product] = None

    class Config:
        from_attributes = True

class UserProductDetail(UserProduct):
    endpoints: List[UserProductEndpoint] = []
