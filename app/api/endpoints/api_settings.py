from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud import crud_api_setting
from app.core.dependencies import get_current_active_admin
from app.db.session import get_db
from app.models.user import User as UserModel
from app.schemas.api_setting import ApiSetting, ApiSettingCreate, ApiSettingUpdate

router = APIRouter()

@router.get("/", response_model=List[ApiSetting])
def read_api_settings(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin),
    master_category: Optional[str] = Query(None)
):
    return crud_api_setting.get_api_settings(db, master_category=master_category)

@router.post("/", response_model=ApiSetting, status_code=201)
def create_api_setting(
    api_setting_in: ApiSettingCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    return crud_api_setting.create_api_setting(db=db, obj_in=api_setting_in)

@router.patch("/{api_setting_id}", response_model=ApiSetting)
def update_api_setting(
    api_setting_id: int,
    api_setting_in: ApiSettingUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    db_api_setting = crud_api_setting.get_api_setting(db, api_setting_id)
    if not db_api_setting:
        raise HTTPException(status_code=404, detail="API setting not found")
    return crud_api_setting.update_api_setting(db=db, db_obj=db_api_setting, obj_in=api_setting_in)
