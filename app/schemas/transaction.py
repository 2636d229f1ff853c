from pydantic import BaseModel, Field
from typing import Literal
from datetime import datetime
from decimal import Decimal

class TransactionCreate(BaseModel):
    """Internal schema for a ledger entry. `amount` is always positive."""
    user_id: int
    type: Literal["credit", "debit"]
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1)

class Transaction(TransactionCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
