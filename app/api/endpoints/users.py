from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud import crud_user, crud_transaction
from app.core import billing
from app.core.dependencies import get_current_active_user, get_current_active_admin
from app.db.session import get_db
from app.models.user import User as UserModel
from app.schemas.user import User, UserCreate, UserUpdate, CreditAdjustment
from app.schemas.transaction import Transaction

router = APIRouter()

@router.post("/", response_model=User, status_code=201)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Create a reseller or admin account. Users are managed locally; there is no self-registration.
    """
    if crud_user.get_user_by_username(db, username=user_in.username):
        raise HTTPException(status_code=400, detail="A user with this username already exists.")
    return crud_user.create_user(db=db, obj_in=user_in)

@router.get("/", response_model=List[User])
def read_users(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin),
    role: Optional[str] = Query(None, pattern="^(admin|reseller)$"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    return crud_user.get_users(db, role=role, skip=skip, limit=limit)

@router.get("/me", response_model=User)
def read_user_me(current_user: UserModel = Depends(get_current_active_user)):
    """
    Get the current logged-in user's profile, including credit balance.
    """
    return current_user

@router.get("/me/transactions", response_model=List[Transaction])
def read_my_transactions(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    return crud_transaction.get_transactions_by_user(db, user_id=current_user.id, skip=skip, limit=limit)

@router.patch("/{user_id}", response_model=User)
def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    db_user = crud_user.get_user(db, user_id=user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return crud_user.update_user(db=db, db_obj=db_user, obj_in=user_in)

@router.post("/{user_id}/credit", response_model=User)
def adjust_user_credit(
    user_id: int,
    adjustment: CreditAdjustment,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: add or subtract credit. Records a credit/debit transaction alongside the new balance.
    """
    db_user = crud_user.get_user(db, user_id=user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return billing.adjust_credit(db, user=db_user, adjustment=adjustment, actor=current_user)

@router.get("/{user_id}/transactions", response_model=List[Transaction])
def read_user_transactions(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    if not crud_user.get_user(db, user_id=user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return crud_transaction.get_transactions_by_user(db, user_id=user_id, skip=skip, limit=limit)
