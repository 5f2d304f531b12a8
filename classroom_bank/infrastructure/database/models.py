"""SQLAlchemy ORM models."""
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from classroom_bank.infrastructure.database.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_name = Column(String(100), unique=True, nullable=False, index=True)
    class_period = Column(String(50))
    teacher_name = Column(String(100), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    accounts = relationship("LedgerAccount", back_populates="profile", cascade="all, delete-orphan")


class LedgerAccount(Base):
    """Checking or savings record; ``ledger`` separates live from time-travel copies."""

    __tablename__ = "ledger_accounts"
    __table_args__ = (
        UniqueConstraint("account_holder", "account_type", "ledger", name="uq_ledger_accounts_holder_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    account_holder = Column(String(100), nullable=False, index=True)
    account_type = Column(String(20), nullable=False)
    ledger = Column(String(20), nullable=False, default="live")
    balance_total = Column(Numeric(18, 2), nullable=False, default=0)
    transactions = Column(JSON, nullable=False, default=list)
    bills = Column(JSON, nullable=False, default=list)
    payments = Column(JSON, nullable=False, default=list)
    movements_dates = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    profile = relationship("Profile", back_populates="accounts")


class MessageThread(Base):
    __tablename__ = "message_threads"

    thread_id = Column(String(255), primary_key=True)
    type = Column(String(20), nullable=False, default="private")  # private, class
    participants = Column(JSON, nullable=False, default=list)
    messages = Column(JSON, nullable=False, default=list)
    last_message_timestamp = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("ThreadParticipant", back_populates="thread", cascade="all, delete-orphan")


class ThreadParticipant(Base):
    __tablename__ = "thread_participants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    thread_id = Column(String(255), ForeignKey("message_threads.thread_id"), nullable=False, index=True)
    identity = Column(String(255), nullable=False, index=True)

    thread = relationship("MessageThread", back_populates="members")
