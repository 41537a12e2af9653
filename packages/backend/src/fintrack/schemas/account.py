"""Pydantic schemas for accounts and transactions."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fintrack.db.models import TransactionType


# ─── Accounts ───────────────────────────────────────────

class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    balance: Decimal = Field(Decimal("0"), max_digits=18, decimal_places=2)


class AccountRead(BaseModel):
    id: uuid.UUID
    name: str
    balance: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


# ─── Transactions ───────────────────────────────────────

class TransactionCreate(BaseModel):
    account_id: uuid.UUID
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    type: TransactionType
    description: Optional[str] = Field(None, max_length=500)


class TransactionRead(BaseModel):
    id: uuid.UUID
    account_id: uuid.UUID
    amount: Decimal
    type: TransactionType
    description: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
