"""Pydantic schemas used across the project."""
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

AccountType = Literal["Checking", "Savings"]
Interval = Literal["weekly", "bi-weekly", "monthly", "yearly"]
ObligationKind = Literal["bill", "payment"]
# amounts are whole cents; the stored balance has two decimal places
Cents = Annotated[Decimal, Field(decimal_places=2)]


class WSMessage(BaseModel):
    type: str
    data: Optional[dict[str, Any]] = None


class SuccessResponse(BaseModel):
    success: bool = True
    message: str


class ProfileCreateRequest(BaseModel):
    member_name: str = Field(..., alias="memberName", min_length=1)
    class_period: Optional[str] = Field(default=None, alias="classPeriod")
    teacher_name: Optional[str] = Field(default=None, alias="teacherName")


class AccountResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_holder: str = Field(..., serialization_alias="accountHolder")
    account_type: str = Field(..., serialization_alias="accountType")
    balance_total: Decimal = Field(..., serialization_alias="balanceTotal")
    transactions: list[dict[str, Any]] = Field(default_factory=list)
    bills: list[dict[str, Any]] = Field(default_factory=list)
    payments: list[dict[str, Any]] = Field(default_factory=list)
    movements_dates: list[Optional[str]] = Field(default_factory=list, serialization_alias="movementsDates")


class ProfileResponse(BaseModel):
    member_name: str = Field(..., serialization_alias="memberName")
    class_period: Optional[str] = Field(default=None, serialization_alias="classPeriod")
    teacher_name: Optional[str] = Field(default=None, serialization_alias="teacherName")
    accounts: list[AccountResponse] = Field(default_factory=list)


class ObligationRequest(BaseModel):
    """Positional parcel: ``[profile, type, amount, interval, name, category, date]``."""

    parcel: tuple[str, ObligationKind, Cents, Interval, str, str, Optional[datetime]]

    @property
    def member_name(self) -> str:
        return self.parcel[0]

    @property
    def kind(self) -> str:
        return self.parcel[1]

    @property
    def amount(self) -> Decimal:
        return self.parcel[2]

    @property
    def interval(self) -> str:
        return self.parcel[3]

    @property
    def name(self) -> str:
        return self.parcel[4]

    @property
    def category(self) -> str:
        return self.parcel[5]

    @property
    def date(self) -> Optional[datetime]:
        return self.parcel[6]


class TransferRequest(BaseModel):
    member_name: str = Field(..., alias="memberName", min_length=1)
    from_account: AccountType = Field(..., alias="fromAccount")
    to_account: AccountType = Field(..., alias="toAccount")
    amount: Decimal = Field(..., gt=0, decimal_places=2)

    @model_validator(mode="after")
    def _distinct_accounts(self) -> "TransferRequest":
        if self.from_account == self.to_account:
            raise ValueError("fromAccount and toAccount must differ")
        return self


class DepositRequest(BaseModel):
    member_name: str = Field(..., alias="memberName", min_length=1)
    destination: AccountType = "Checking"
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    name: str = "Deposit"


class SendFundsRequest(BaseModel):
    sender_name: str = Field(..., alias="senderName", min_length=1)
    recipient_name: str = Field(..., alias="recipientName", min_length=1)
    amount: Decimal = Field(..., gt=0, decimal_places=2)


class LoanRequest(BaseModel):
    member_name: str = Field(..., alias="memberName", min_length=1)
    amount: Decimal = Field(..., gt=0, decimal_places=2)


class ReconcileRequest(BaseModel):
    member_name: str = Field(..., alias="memberName", min_length=1)
    account_type: AccountType = Field(default="Checking", alias="accountType")


class ReconcileResponse(BaseModel):
    account_holder: str = Field(..., serialization_alias="accountHolder")
    account_type: str = Field(..., serialization_alias="accountType")
    balance_total: Decimal = Field(..., serialization_alias="balanceTotal")


class TimeTravelProfileRequest(BaseModel):
    member_name: str = Field(..., alias="memberName", min_length=1)


class SimulateTimeTravelRequest(BaseModel):
    user_name: str = Field(..., alias="userName", min_length=1)
    days: int = Field(..., gt=0)


class SendMessageRequest(BaseModel):
    sender_id: str = Field(..., alias="senderId", min_length=1)
    recipient_id: str = Field(..., alias="recipientId", min_length=1)
    message_content: str = Field(..., alias="messageContent", min_length=1)


class SendMessageResponse(BaseModel):
    success: bool = True
    thread_id: str = Field(..., serialization_alias="threadId")


class ThreadResponse(BaseModel):
    thread_id: str = Field(..., serialization_alias="threadId")
    type: str
    participants: list[str]
    messages: list[dict[str, Any]]
    last_message_timestamp: Optional[datetime] = Field(default=None, serialization_alias="lastMessageTimestamp")


class ThreadListResponse(BaseModel):
    threads: list[ThreadResponse]


class LessonManagementUpdateRequest(BaseModel):
    teacher_name: str = Field(..., alias="teacherName", min_length=1)
    action: str = Field(..., min_length=1)
    data: Optional[Any] = None


class LessonManagementRefreshRequest(BaseModel):
    teacher_name: str = Field(..., alias="teacherName", min_length=1)
    units: list[Any] = Field(default_factory=list)
    lessons: list[Any] = Field(default_factory=list)
