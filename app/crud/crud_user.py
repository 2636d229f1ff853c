from sqlalchemy.orm import Session
from typing import Optional, List
from decimal import Decimal

from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.core.security import get_password_hash

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()

def get_users(db: Session, *, role: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.username).offset(skip).limit(limit).all()

def create_user(db: Session, *, obj_in: UserCreate) -> User:
    db_obj = User(
        username=obj_in.username,
        email=obj_in.email,
        full_name=obj_in.full_name,
        phone=obj_in.phone,
        address=obj_in.address,
        hashed_password=get_password_hash(obj_in.password),
        role=obj_in.role,
        reseller_group=obj_in.reseller_group,
        credit_balance=0,
        is_active=True, # Default to active on creation
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def update_user(db: Session, *, db_obj: User, obj_in: UserUpdate) -> User:
    update_data = obj_in.model_dump(exclude_unset=True)

    password = update_data.pop("password", None)
    if password is not None:
        update_data["hashed_password"] = get_password_hash(password)

    for field, value in update_data.items():
        setattr(db_obj, field, value)

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj

def change_credit_balance(
    db: Session, *, user_id: int, delta: Decimal, minimum_balance: Optional[Decimal] = None
) -> int:
    """
    Add delta (negative to deduct) to the stored balance in a single UPDATE, so
    concurrent adjustments cannot overwrite each other. With minimum_balance the row
    only changes if the new balance stays at or above it.

    Returns the number of rows changed (0 or 1). Does not commit.
    """
    query = db.query(User).filter(User.id == user_id)
    if minimum_balance is not None:
        query = query.filter(User.credit_balance + delta >= minimum_balance)
    return query.update({User.credit_balance: User.credit_balance + delta}, synchronize_session=False)
