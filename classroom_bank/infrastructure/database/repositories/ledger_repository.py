"""SQLAlchemy implementation of the ledger repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from sqlalchemy import delete, select

from classroom_bank.infrastructure.database.models import LedgerAccount as LedgerAccountModel
from classroom_bank.modules.ledger.exceptions import LedgerTimeoutError
from classroom_bank.modules.ledger.models import LedgerAccount, Obligation, Transaction
from classroom_bank.modules.ledger.repository import LedgerRepository

from .base import DEFAULT_TIMEOUT, TimedSqlRepository

__all__ = ["DEFAULT_TIMEOUT", "SqlLedgerRepository"]


class SqlLedgerRepository(TimedSqlRepository, LedgerRepository):
    """Ledger repository backed by SQLAlchemy models."""

    timeout_error = LedgerTimeoutError

    async def _get_model(self, account_id: int) -> LedgerAccountModel:
        stmt = select(LedgerAccountModel).where(LedgerAccountModel.id == account_id)
        result = await self._execute(stmt)
        return result.scalar_one()

    async def get_account(self, account_holder: str, account_type: str, ledger: str) -> LedgerAccount | None:
        stmt = select(LedgerAccountModel).where(
            LedgerAccountModel.account_holder == account_holder,
            LedgerAccountModel.account_type == account_type,
            LedgerAccountModel.ledger == ledger,
        )
        result = await self._execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def list_accounts(self, account_holder: str, ledger: str) -> Sequence[LedgerAccount]:
        stmt = (
            select(LedgerAccountModel)
            .where(
                LedgerAccountModel.account_holder == account_holder,
                LedgerAccountModel.ledger == ledger,
            )
            .order_by(LedgerAccountModel.id)
        )
        result = await self._execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_accounts_with_obligations(self, ledger: str) -> Sequence[LedgerAccount]:
        stmt = select(LedgerAccountModel).where(LedgerAccountModel.ledger == ledger).order_by(LedgerAccountModel.id)
        result = await self._execute(stmt)
        return [
            self._to_domain(model)
            for model in result.scalars().all()
            if model.bills or model.payments
        ]

    async def create_account(
        self,
        *,
        profile_id: int,
        account_holder: str,
        account_type: str,
        ledger: str,
        bills: Iterable[Obligation] = (),
        payments: Iterable[Obligation] = (),
    ) -> LedgerAccount:
        model = LedgerAccountModel(
            profile_id=profile_id,
            account_holder=account_holder,
            account_type=account_type,
            ledger=ledger,
            balance_total=Decimal("0"),
            transactions=[],
            bills=[bill.to_document() for bill in bills],
            payments=[payment.to_document() for payment in payments],
            movements_dates=[],
        )
        self._session.add(model)
        await self._flush(model)
        return self._to_domain(model)

    async def delete_accounts(self, account_holder: str, ledger: str) -> int:
        stmt = delete(LedgerAccountModel).where(
            LedgerAccountModel.account_holder == account_holder,
            LedgerAccountModel.ledger == ledger,
        )
        result = await self._execute(stmt)
        return result.rowcount or 0

    async def append_transactions(
        self,
        account_id: int,
        transactions: Iterable[Transaction],
        movements: Iterable[datetime] = (),
    ) -> LedgerAccount:
        model = await self._get_model(account_id)
        # JSON columns only register a change on reassignment
        model.transactions = [*model.transactions, *(tx.to_document() for tx in transactions)]
        model.movements_dates = [*model.movements_dates, *(moment.isoformat() for moment in movements)]
        await self._flush(model)
        return self._to_domain(model)

    async def append_obligation(self, account_id: int, obligation: Obligation) -> LedgerAccount:
        model = await self._get_model(account_id)
        if obligation.kind == "payment":
            model.payments = [*model.payments, obligation.to_document()]
        else:
            model.bills = [*model.bills, obligation.to_document()]
        await self._flush(model)
        return self._to_domain(model)

    async def set_balance(self, account_id: int, balance: Decimal) -> LedgerAccount:
        model = await self._get_model(account_id)
        model.balance_total = balance
        await self._flush(model)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: LedgerAccountModel | None) -> LedgerAccount | None:
        if model is None:
            return None
        return LedgerAccount(
            id=model.id,
            profile_id=model.profile_id,
            account_holder=model.account_holder,
            account_type=model.account_type,
            ledger=model.ledger,
            balance_total=Decimal(str(model.balance_total or 0)),
            transactions=[Transaction.from_document(doc) for doc in model.transactions or []],
            bills=[Obligation.from_document(doc) for doc in model.bills or []],
            payments=[Obligation.from_document(doc) for doc in model.payments or []],
            movements_dates=[datetime.fromisoformat(value) for value in model.movements_dates or []],
            updated_at=model.updated_at,
        )
