from sqlalchemy.orm import Session
from typing import List

from app.models.transaction import Transaction
from app.schemas.transaction import TransactionCreate

def create_transaction(db: Session, *, obj_in: TransactionCreate, commit: bool = True) -> Transaction:
    """
    Record a ledger entry. With commit=False the entry is only flushed so the caller
    can commit it together with the balance change.
    """
    db_obj = Transaction(**obj_in.model_dump())
    db.add(db_obj)
    if commit:
        db.commit()
        db.refresh(db_obj)
    else:
        db.flush()
    return db_obj

def get_transactions_by_user(db: Session, *, user_id: int, skip: int = 0, limit: int = 100) -> List[Transaction]:
    return (
        db.query(Transaction)
        .filter(Transaction.user_id == user_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def get_recent_transactions(db: Session, *, limit: int = 10) -> List[Transaction]:
    return db.query(Transaction).order_by(Transaction.created_at.desc(), Transaction.id.desc()).limit(limit).all()
