"""
test_ledger_service.py - Ledger operations

Every operation appends and reconciles in one unit, so the balance invariant
holds as soon as the call returns.
"""

from decimal import Decimal

import pytest

from classroom_bank.core.errors import NotFoundError, ValidationError
from classroom_bank.modules.ledger import CHECKING, SAVINGS, InvalidLedgerOperationError
from classroom_bank.modules.ledger.service import LedgerService, publish_account_updates
from classroom_bank.modules.roster import ProfileAlreadyExistsError
from classroom_bank.modules.roster.service import ProfileService
from tests.conftest import FIXED_NOW, FakeConnection, create_student


async def test_new_profile_opens_empty_checking_and_savings(session):
    _, accounts = await create_student(session, "alice", teacher_name="ms-frizzle")

    assert [account.account_type for account in accounts] == [CHECKING, SAVINGS]
    assert all(account.balance_total == 0 and not account.transactions for account in accounts)


async def test_duplicate_profile_is_a_conflict(session):
    await create_student(session, "alice")
    with pytest.raises(ProfileAlreadyExistsError):
        await create_student(session, "alice")


async def test_transfer_moves_amount_between_own_accounts(session):
    await create_student(session, "alice")
    service = LedgerService.with_session(session)
    await service.deposit(account_holder="alice", destination=CHECKING, amount=Decimal("200"), name="Paycheck", now=FIXED_NOW)
    await service.deposit(account_holder="alice", destination=SAVINGS, amount=Decimal("10"), name="Gift", now=FIXED_NOW)

    checking, savings = await service.transfer(
        account_holder="alice",
        from_account=CHECKING,
        to_account=SAVINGS,
        amount=Decimal("50"),
        now=FIXED_NOW,
    )

    assert checking.transactions[-1].amount == Decimal("-50")
    assert savings.transactions[-1].amount == Decimal("50")
    assert checking.balance_total == Decimal("150")
    assert savings.balance_total == Decimal("60")
    assert checking.is_reconciled() and savings.is_reconciled()
    assert checking.movements_dates[-1] == FIXED_NOW


async def test_transfer_into_same_account_is_rejected(session):
    await create_student(session, "alice")
    with pytest.raises(InvalidLedgerOperationError):
        await LedgerService.with_session(session).transfer(
            account_holder="alice",
            from_account=CHECKING,
            to_account=CHECKING,
            amount=Decimal("5"),
            now=FIXED_NOW,
        )


async def test_send_funds_touches_both_students(session):
    await create_student(session, "alice")
    await create_student(session, "bob")
    service = LedgerService.with_session(session)

    sender, recipient = await service.send_funds(sender="alice", recipient="bob", amount=Decimal("25"), now=FIXED_NOW)

    assert sender.balance_total == Decimal("-25")
    assert recipient.balance_total == Decimal("25")
    assert recipient.transactions[0].category == "Money Received"


async def test_send_funds_to_unknown_student_is_not_found(session):
    await create_student(session, "alice")
    with pytest.raises(NotFoundError):
        await LedgerService.with_session(session).send_funds(
            sender="alice", recipient="ghost", amount=Decimal("1"), now=FIXED_NOW
        )


async def test_loan_credits_checking(session):
    await create_student(session, "alice")
    account = await LedgerService.with_session(session).loan(account_holder="alice", amount=Decimal("500"), now=FIXED_NOW)

    assert account.account_type == CHECKING
    assert account.balance_total == Decimal("500")
    assert account.transactions[0].category == "Loan"


async def test_non_positive_amount_is_a_validation_error(session):
    await create_student(session, "alice")
    with pytest.raises(ValidationError):
        await LedgerService.with_session(session).loan(account_holder="alice", amount=Decimal("0"), now=FIXED_NOW)


async def test_add_obligation_attaches_to_checking(session):
    await create_student(session, "alice")
    account, obligation = await LedgerService.with_session(session).add_obligation(
        account_holder="alice",
        kind="payment",
        amount=Decimal("120"),
        interval="bi-weekly",
        name="Paycheck",
        category="Income",
        date=None,
        created_at=FIXED_NOW,
    )

    assert account.account_type == CHECKING
    assert account.payments == [obligation]
    assert account.bills == []
    assert obligation.created_at == FIXED_NOW


async def test_add_obligation_rejects_unknown_interval(session):
    await create_student(session, "alice")
    with pytest.raises(InvalidLedgerOperationError):
        await LedgerService.with_session(session).add_obligation(
            account_holder="alice",
            kind="bill",
            amount=Decimal("-5"),
            interval="daily",
            name="Coffee",
            category="Food",
            date=None,
            created_at=FIXED_NOW,
        )


async def test_publish_account_updates_only_reaches_live_holders(session, presence):
    await create_student(session, "alice")
    await create_student(session, "bob")
    service = LedgerService.with_session(session)
    accounts = await service.send_funds(sender="alice", recipient="bob", amount=Decimal("5"), now=FIXED_NOW)
    alice = FakeConnection()
    presence.identify("alice", alice)

    delivered = await publish_account_updates(presence, accounts)

    assert delivered == 1
    [frame] = alice.events("checkingAccountUpdate")
    assert frame["data"]["accountHolder"] == "alice"
    assert Decimal(frame["data"]["balanceTotal"]) == Decimal("-5")


async def test_roster_lists_students_of_one_teacher(session):
    await create_student(session, "zoe", teacher_name="frizzle")
    await create_student(session, "adam", teacher_name="frizzle")
    await create_student(session, "carl", teacher_name="other")

    roster = await ProfileService.with_session(session).list_roster("frizzle")

    assert [profile.member_name for profile in roster] == ["adam", "zoe"]


async def test_sub_cent_deposit_stays_reconciled_after_reload(session, session_factory):
    await create_student(session, "alice")

    await LedgerService.with_session(session).deposit(
        account_holder="alice",
        destination=CHECKING,
        amount=Decimal("10.005"),
        name="Allowance",
        now=FIXED_NOW,
    )
    await session.commit()

    async with session_factory() as fresh:
        stored = await LedgerService.with_session(fresh).get_account("alice", CHECKING)
    assert stored.transactions[-1].amount == Decimal("10.01")
    assert stored.balance_total == Decimal("10.01")
    assert stored.is_reconciled()


async def test_amount_rounding_to_zero_is_rejected(session):
    await create_student(session, "alice")

    with pytest.raises(InvalidLedgerOperationError):
        await LedgerService.with_session(session).loan(
            account_holder="alice", amount=Decimal("0.004"), now=FIXED_NOW
        )
