"""Profile and ledger endpoints: obligations, transfers, deposits, loans."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.core.container import ApplicationContainer
from classroom_bank.core.errors import ClassroomBankError
from classroom_bank.interfaces.http.common import account_response, to_http_exception
from classroom_bank.interfaces.http.deps import get_container, get_db_session
from classroom_bank.interfaces.http.routers.lessons import lesson_management_group
from classroom_bank.modules.ledger.service import LedgerService, publish_account_updates
from classroom_bank.modules.roster.service import ProfileService
from classroom_bank.schemas import (
    AccountResponse,
    DepositRequest,
    LoanRequest,
    ObligationRequest,
    ProfileCreateRequest,
    ProfileResponse,
    ReconcileRequest,
    ReconcileResponse,
    SendFundsRequest,
    SuccessResponse,
    TransferRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

STUDENT_ADDED_EVENT = "studentAdded"


def _internal_error(action: str, exc: Exception) -> HTTPException:
    logger.error("%s failed: %s", action, exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action}.")


@router.post(
    "/profiles",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a student profile with checking and savings",
)
async def create_profile(
    payload: ProfileCreateRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    service = ProfileService.with_session(db, container.db_timeout)
    try:
        profile, accounts = await service.create_profile(
            payload.member_name,
            class_period=payload.class_period,
            teacher_name=payload.teacher_name,
        )
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:  # pylint: disable=broad-except
        raise _internal_error("create profile", exc) from exc

    if profile.teacher_name:
        event = {
            "memberName": profile.member_name,
            "classPeriod": profile.class_period,
            "teacherName": profile.teacher_name,
        }
        await container.presence.send_to(profile.teacher_name, STUDENT_ADDED_EVENT, event)
        await container.presence.send_to_group(
            lesson_management_group(profile.teacher_name), STUDENT_ADDED_EVENT, event
        )

    return ProfileResponse(
        member_name=profile.member_name,
        class_period=profile.class_period,
        teacher_name=profile.teacher_name,
        accounts=[account_response(account) for account in accounts],
    )


@router.get("/profiles/{member_name}", response_model=ProfileResponse, summary="Get a student's live accounts")
async def get_profile(
    member_name: str,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileResponse:
    try:
        profile = await ProfileService.with_session(db, container.db_timeout).get_profile(member_name)
        accounts = await LedgerService.with_session(db, container.db_timeout).list_accounts(member_name)
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    return ProfileResponse(
        member_name=profile.member_name,
        class_period=profile.class_period,
        teacher_name=profile.teacher_name,
        accounts=[account_response(account) for account in accounts],
    )


@router.post("/bills", response_model=SuccessResponse, summary="Attach a recurring bill or payment")
async def add_obligation(
    payload: ObligationRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    service = LedgerService.with_session(db, container.db_timeout)
    try:
        account, obligation = await service.add_obligation(
            account_holder=payload.member_name,
            kind=payload.kind,
            amount=payload.amount,
            interval=payload.interval,
            name=payload.name,
            category=payload.category,
            date=payload.date,
            created_at=container.clock(),
        )
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:  # pylint: disable=broad-except
        raise _internal_error("add obligation", exc) from exc

    # every obligation on the account is registered again, not only the new one
    container.scheduler.register_account(account)
    await publish_account_updates(container.presence, [account])
    return SuccessResponse(message=f"{obligation.kind.capitalize()} {obligation.name} added.")


@router.post("/transfer", response_model=list[AccountResponse], summary="Move money between own accounts")
async def transfer(
    payload: TransferRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> list[AccountResponse]:
    service = LedgerService.with_session(db, container.db_timeout)
    try:
        accounts = await service.transfer(
            account_holder=payload.member_name,
            from_account=payload.from_account,
            to_account=payload.to_account,
            amount=payload.amount,
            now=container.clock(),
        )
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:  # pylint: disable=broad-except
        raise _internal_error("transfer funds", exc) from exc

    await publish_account_updates(container.presence, accounts)
    return [account_response(account) for account in accounts]


@router.post("/deposits", response_model=AccountResponse, summary="Deposit into an account")
async def deposit(
    payload: DepositRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    service = LedgerService.with_session(db, container.db_timeout)
    try:
        account = await service.deposit(
            account_holder=payload.member_name,
            destination=payload.destination,
            amount=payload.amount,
            name=payload.name,
            now=container.clock(),
        )
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:  # pylint: disable=broad-except
        raise _internal_error("deposit funds", exc) from exc

    await publish_account_updates(container.presence, [account])
    return account_response(account)


@router.post("/sendFunds", response_model=list[AccountResponse], summary="Send money to another student")
async def send_funds(
    payload: SendFundsRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> list[AccountResponse]:
    service = LedgerService.with_session(db, container.db_timeout)
    try:
        accounts = await service.send_funds(
            sender=payload.sender_name,
            recipient=payload.recipient_name,
            amount=payload.amount,
            now=container.clock(),
        )
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:  # pylint: disable=broad-except
        raise _internal_error("send funds", exc) from exc

    await publish_account_updates(container.presence, accounts)
    return [account_response(account) for account in accounts]


@router.post("/loans", response_model=AccountResponse, summary="Credit a loan to checking")
async def loan(
    payload: LoanRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    service = LedgerService.with_session(db, container.db_timeout)
    try:
        account = await service.loan(account_holder=payload.member_name, amount=payload.amount, now=container.clock())
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:  # pylint: disable=broad-except
        raise _internal_error("issue loan", exc) from exc

    await publish_account_updates(container.presence, [account])
    return account_response(account)


@router.post("/reconcile", response_model=ReconcileResponse, summary="Recompute a balance from history")
async def reconcile(
    payload: ReconcileRequest,
    container: ApplicationContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> ReconcileResponse:
    service = LedgerService.with_session(db, container.db_timeout)
    try:
        account = await service.reconcile(payload.member_name, payload.account_type)
        await db.commit()
    except ClassroomBankError as exc:
        raise to_http_exception(exc) from exc

    await publish_account_updates(container.presence, [account])
    return ReconcileResponse(
        account_holder=account.account_holder,
        account_type=account.account_type,
        balance_total=account.balance_total,
    )
