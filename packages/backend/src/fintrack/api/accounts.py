"""Account and transaction API routes.

Learn: Routes handle HTTP concerns, AccountService handles ownership
checks. The caller's identity comes from the Principal that the auth
gate bound to the request.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.responses import envelope
from fintrack.auth.dependencies import principal_from_request
from fintrack.db.engine import get_db
from fintrack.schemas.account import (
    AccountCreate,
    AccountRead,
    TransactionCreate,
    TransactionRead,
)
from fintrack.services.account_service import AccountService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> AccountService:
    return AccountService(db)


def _owner(request: Request) -> uuid.UUID:
    return principal_from_request(request).user_id


# ─── Accounts ───────────────────────────────────────────

@router.post("/account", status_code=201)
async def create_account(
    body: AccountCreate,
    owner: uuid.UUID = Depends(_owner),
    svc: AccountService = Depends(_svc),
):
    account = await svc.create_account(owner, name=body.name, balance=body.balance)
    return envelope(AccountRead.model_validate(account), status_code=201)


@router.get("/account")
async def list_accounts(
    owner: uuid.UUID = Depends(_owner),
    svc: AccountService = Depends(_svc),
):
    accounts = await svc.list_accounts(owner)
    return envelope([AccountRead.model_validate(a) for a in accounts])


# ─── Transactions ───────────────────────────────────────

@router.post("/transaction", status_code=201)
async def create_transaction(
    body: TransactionCreate,
    owner: uuid.UUID = Depends(_owner),
    svc: AccountService = Depends(_svc),
):
    """Record an income/expense entry on one of the caller's accounts."""
    txn = await svc.create_transaction(
        owner,
        account_id=body.account_id,
        amount=body.amount,
        type=body.type,
        description=body.description,
    )
    return envelope(TransactionRead.model_validate(txn), status_code=201)


@router.get("/transaction")
async def list_transactions(
    account_id: uuid.UUID = Query(...),
    owner: uuid.UUID = Depends(_owner),
    svc: AccountService = Depends(_svc),
):
    txns = await svc.list_transactions(owner, account_id)
    return envelope([TransactionRead.model_validate(t) for t in txns])
