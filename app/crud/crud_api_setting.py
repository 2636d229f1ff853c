from sqlalchemy.orm import Session
from typing import Optional, List

from app.models.api_setting import ApiSetting
from app.schemas.api_setting import ApiSettingCreate, ApiSettingUpdate

def get_api_setting(db: Session, api_setting_id: int) -> Optional[ApiSetting]:
    return db.query(ApiSetting).filter(ApiSetting.id == api_setting_id).first()

def get_api_settings(db: Session, *, master_category: Optional[str] = None) -> List[ApiSetting]:
    query = db.query(ApiSetting)
    if master_category:
        query = query.filter(ApiSetting.master_category == master_category)
    return query.order_by(ApiSetting.name).all()

def create_api_setting(db: Session, *, obj_in: ApiSettingCreate) -> ApiSetting:
    db_obj = ApiSetting(**obj_in.model_dump())
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def update_api_setting(db: Session, *, db_obj: ApiSetting, obj_in: ApiSettingUpdate) -> ApiSetting:
    for field, value in obj_in.model_dump(exclude_unset=True).items():
        setattr(db_obj, field, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj
