"""Domain models for the account ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

CHECKING = "Checking"
SAVINGS = "Savings"
ACCOUNT_TYPES = (CHECKING, SAVINGS)

LIVE_LEDGER = "live"
TIME_TRAVEL_LEDGER = "time_travel"

INTERVALS = ("weekly", "bi-weekly", "monthly", "yearly")
ONE_OFF = "once"

BILL = "bill"
PAYMENT = "payment"

CENT = Decimal("0.01")


def to_cents(value: Any) -> Decimal:
    """Money is held at cent precision, the scale of the stored balance."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(slots=True, frozen=True)
class Transaction:
    amount: Decimal
    interval: str = ONE_OFF
    name: str = ""
    category: str = ""
    date: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_cents(self.amount))

    def to_document(self) -> dict[str, Any]:
        return {
            "amount": str(self.amount),
            "interval": self.interval,
            "Name": self.name,
            "Category": self.category,
            "Date": _format_datetime(self.date),
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Transaction":
        return cls(
            amount=Decimal(str(document.get("amount", "0"))),
            interval=document.get("interval", ONE_OFF),
            name=document.get("Name", ""),
            category=document.get("Category", ""),
            date=_parse_datetime(document.get("Date")),
        )


@dataclass(slots=True, frozen=True)
class Obligation:
    """A recurring bill or payment template owned by one account."""

    id: str
    kind: str
    amount: Decimal
    interval: str
    name: str
    category: str
    created_at: datetime
    date: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_cents(self.amount))

    def to_transaction(self, fired_at: datetime) -> Transaction:
        return Transaction(
            amount=self.amount,
            interval=self.interval,
            name=self.name,
            category=self.category,
            date=fired_at,
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "amount": str(self.amount),
            "interval": self.interval,
            "Name": self.name,
            "Category": self.category,
            "Date": _format_datetime(self.date),
            "createdAt": _format_datetime(self.created_at),
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Obligation":
        return cls(
            id=document["id"],
            kind=document.get("kind", BILL),
            amount=Decimal(str(document.get("amount", "0"))),
            interval=document["interval"],
            name=document.get("Name", ""),
            category=document.get("Category", ""),
            created_at=_parse_datetime(document["createdAt"]),
            date=_parse_datetime(document.get("Date")),
        )


def compute_balance(transactions: Iterable[Transaction]) -> Decimal:
    return sum((tx.amount for tx in transactions), Decimal("0"))


@dataclass(slots=True)
class LedgerAccount:
    id: int
    profile_id: int
    account_holder: str
    account_type: str
    ledger: str
    balance_total: Decimal
    transactions: list[Transaction] = field(default_factory=list)
    bills: list[Obligation] = field(default_factory=list)
    payments: list[Obligation] = field(default_factory=list)
    movements_dates: list[datetime] = field(default_factory=list)
    updated_at: Optional[datetime] = None

    @property
    def obligations(self) -> list[Obligation]:
        return [*self.bills, *self.payments]

    def is_reconciled(self) -> bool:
        return self.balance_total == compute_balance(self.transactions)

    def to_payload(self) -> dict[str, Any]:
        return {
            "accountHolder": self.account_holder,
            "accountType": self.account_type,
            "balanceTotal": str(self.balance_total),
            "transactions": [tx.to_document() for tx in self.transactions],
            "bills": [bill.to_document() for bill in self.bills],
            "payments": [payment.to_document() for payment in self.payments],
            "movementsDates": [_format_datetime(moment) for moment in self.movements_dates],
        }
