from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.schemas.category import MasterCategory

class ApiSettingBase(BaseModel):
    name: str = Field(..., max_length=255)
    endpoint: str = Field(..., min_length=1, max_length=255)
    master_category: MasterCategory
    is_enabled: bool = True

class ApiSettingCreate(ApiSettingBase):
    pass

class ApiSettingUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    endpoint: Optional[str] = Field(default=None, min_length=1, max_length=255)
    master_category: Optional[MasterCategory] = None
    is_enabled: Optional[bool] = None

class ApiSetting(ApiSettingBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
