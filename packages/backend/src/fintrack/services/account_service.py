"""Account and transaction service.

Learn: Every query is scoped by the caller's user_id. An account that
exists but belongs to someone else is reported exactly like a missing
one, so IDs cannot be probed.
"""

import uuid
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.db.models import Account, Transaction, TransactionType
from fintrack.errors import AccountNotFoundError

logger = structlog.get_logger()


class AccountService:
    """Business logic for accounts and their transactions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Accounts ───────────────────────────────────────

    async def create_account(
        self, user_id: uuid.UUID, name: str, balance: Decimal
    ) -> Account:
        account = Account(user_id=user_id, name=name, balance=balance)
        self.db.add(account)
        await self.db.commit()
        logger.info("account.created", account_id=str(account.id))
        return account

    async def list_accounts(self, user_id: uuid.UUID) -> list[Account]:
        result = await self.db.execute(
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.created_at)
        )
        return list(result.scalars().all())

    async def get_owned_account(
        self, user_id: uuid.UUID, account_id: uuid.UUID
    ) -> Account:
        account = await self.db.get(Account, account_id)
        if not account or account.user_id != user_id:
            raise AccountNotFoundError(str(account_id))
        return account

    # ─── Transactions ───────────────────────────────────

    async def create_transaction(
        self,
        user_id: uuid.UUID,
        account_id: uuid.UUID,
        amount: Decimal,
        type: TransactionType,
        description: Optional[str] = None,
    ) -> Transaction:
        await self.get_owned_account(user_id, account_id)

        txn = Transaction(
            account_id=account_id,
            amount=amount,
            type=type,
            description=description,
        )
        self.db.add(txn)
        await self.db.commit()
        logger.info(
            "transaction.created",
            transaction_id=str(txn.id),
            account_id=str(account_id),
            type=type.value,
        )
        return txn

    async def list_transactions(
        self, user_id: uuid.UUID, account_id: uuid.UUID
    ) -> list[Transaction]:
        await self.get_owned_account(user_id, account_id)
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.account_id == account_id)
            .order_by(Transaction.created_at)
        )
        return list(result.scalars().all())
