from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from database import Base


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class Transaction(Base, TimestampMixin):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType), nullable=False
    )
    category: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        CheckConstraint("amount_cents >= 0", name="ck_transactions_amount_positive"),
    )

    @property
    def amount(self) -> float:
        return self.amount_cents / 100
