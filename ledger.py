from __future__ import annotations

from typing import Iterable

from aggregation import (
    AnnualSummary,
    ChartPoint,
    MonthlyBucket,
    annual_summary,
    category_breakdown,
    category_totals,
    monthly_buckets,
    monthly_chart_series,
    months_descending,
)
from schemas import TransactionOut


class Ledger:
    """Local mirror of the stored transactions plus dashboard view state.

    Changes are reconciled by id from the canonical records the service
    returns. Derived views are recomputed from the current snapshot on every
    access.
    """

    def __init__(
        self,
        transactions: Iterable[TransactionOut] = (),
        expanded_months: Iterable[str] = (),
    ) -> None:
        self.transactions: list[TransactionOut] = list(transactions)
        self.expanded_months: set[str] = set(expanded_months)

    @classmethod
    def from_records(
        cls, records: Iterable[object], expanded_months: Iterable[str] = ()
    ) -> "Ledger":
        return cls(
            [TransactionOut.model_validate(r) for r in records],
            expanded_months,
        )

    def added(self, txn: TransactionOut) -> None:
        self.transactions = [txn, *self.transactions]

    def updated(self, txn: TransactionOut) -> None:
        self.transactions = [txn if t.id == txn.id else t for t in self.transactions]

    def removed(self, transaction_id: int) -> None:
        self.transactions = [t for t in self.transactions if t.id != transaction_id]

    def toggle_month(self, key: str) -> None:
        if key in self.expanded_months:
            self.expanded_months.discard(key)
        else:
            self.expanded_months.add(key)

    def is_expanded(self, key: str) -> bool:
        return key in self.expanded_months

    def toggled(self, key: str) -> list[str]:
        """Expanded keys as they would be after toggling ``key``."""
        keys = set(self.expanded_months)
        keys.symmetric_difference_update({key})
        return sorted(keys)

    @property
    def monthly(self) -> dict[str, MonthlyBucket]:
        return monthly_buckets(self.transactions)

    @property
    def annual(self) -> AnnualSummary:
        return annual_summary(self.transactions)

    @property
    def categories(self) -> dict[str, int]:
        return category_totals(self.transactions)

    @property
    def breakdown(self) -> list[dict[str, object]]:
        return category_breakdown(self.transactions)

    @property
    def chart_series(self) -> list[ChartPoint]:
        return monthly_chart_series(self.monthly)

    @property
    def months(self) -> list[str]:
        return months_descending(self.monthly)
