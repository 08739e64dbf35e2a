"""Derived views over a flat list of transactions.

Every function here is pure: it takes whatever transactions are currently
loaded and recomputes its result from scratch. Amounts are integer cents and
carry no sign; the sign comes from the transaction type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Mapping, Protocol, Union

from models import TransactionType


class TransactionLike(Protocol):
    type: TransactionType
    amount_cents: int
    category: str
    date: date


@dataclass
class MonthlyBucket:
    income_cents: int = 0
    expense_cents: int = 0
    balance_cents: int = 0
    transactions: list = field(default_factory=list)

    def add(self, txn: TransactionLike) -> None:
        if txn.type == TransactionType.income:
            self.income_cents += txn.amount_cents
        else:
            self.expense_cents += txn.amount_cents
        self.balance_cents = self.income_cents - self.expense_cents
        self.transactions.append(txn)


@dataclass(frozen=True)
class AnnualSummary:
    income_cents: int
    expense_cents: int
    balance_cents: int


@dataclass(frozen=True)
class ChartPoint:
    month: str
    label: str
    income_cents: int
    expense_cents: int
    balance_cents: int


def month_key(value: Union[date, str]) -> str:
    text = value if isinstance(value, str) else value.isoformat()
    return text[:7]


def month_start(key: str) -> date:
    return datetime.strptime(key, "%Y-%m").date()


def monthly_buckets(transactions: Iterable[TransactionLike]) -> dict[str, MonthlyBucket]:
    buckets: dict[str, MonthlyBucket] = {}
    for txn in transactions:
        key = month_key(txn.date)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthlyBucket()
        bucket.add(txn)
    return buckets


def annual_summary(transactions: Iterable[TransactionLike]) -> AnnualSummary:
    income = 0
    expenses = 0
    for txn in transactions:
        if txn.type == TransactionType.income:
            income += txn.amount_cents
        else:
            expenses += txn.amount_cents
    return AnnualSummary(
        income_cents=income,
        expense_cents=expenses,
        balance_cents=income - expenses,
    )


def category_totals(transactions: Iterable[TransactionLike]) -> dict[str, int]:
    """Sum expense amounts per category label.

    Labels are used verbatim, so "Food" and "food" are separate categories.
    Income never contributes, even when it shares a label with expenses.
    """
    totals: dict[str, int] = {}
    for txn in transactions:
        if txn.type != TransactionType.expense:
            continue
        totals[txn.category] = totals.get(txn.category, 0) + txn.amount_cents
    return totals


def category_breakdown(
    transactions: Iterable[TransactionLike],
) -> list[dict[str, object]]:
    totals = category_totals(transactions)
    total = sum(totals.values())
    breakdown: list[dict[str, object]] = []
    for name, amount in totals.items():
        if amount <= 0:
            continue
        breakdown.append(
            {
                "name": name,
                "amount_cents": amount,
                "percent": (amount / total * 100) if total else 0,
            }
        )
    breakdown.sort(key=lambda r: int(r["amount_cents"]), reverse=True)
    return breakdown


def monthly_chart_series(buckets: Mapping[str, MonthlyBucket]) -> list[ChartPoint]:
    # Mapping order is insertion order, which follows whatever order the
    # transactions arrived in; charts need calendar order.
    points: list[ChartPoint] = []
    for key in sorted(buckets, key=month_start):
        bucket = buckets[key]
        points.append(
            ChartPoint(
                month=key,
                label=month_start(key).strftime("%b %Y"),
                income_cents=bucket.income_cents,
                expense_cents=bucket.expense_cents,
                balance_cents=bucket.balance_cents,
            )
        )
    return points


def months_descending(buckets: Mapping[str, MonthlyBucket]) -> list[str]:
    return sorted(buckets, key=month_start, reverse=True)
