"""Helpers shared by the HTTP routers."""

from __future__ import annotations

from fastapi import HTTPException, status

from classroom_bank.core.errors import ClassroomBankError, ConflictError, NotFoundError, ValidationError
from classroom_bank.modules.ledger.models import LedgerAccount
from classroom_bank.schemas import AccountResponse


def to_http_exception(exc: ClassroomBankError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


def account_response(account: LedgerAccount) -> AccountResponse:
    payload = account.to_payload()
    return AccountResponse(
        account_holder=account.account_holder,
        account_type=account.account_type,
        balance_total=account.balance_total,
        transactions=payload["transactions"],
        bills=payload["bills"],
        payments=payload["payments"],
        movements_dates=payload["movementsDates"],
    )
