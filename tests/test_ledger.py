from datetime import date
from decimal import Decimal

from client import LedgerClient
from ledger import Ledger
from models import TransactionType
from schemas import TransactionIn, TransactionOut


def _out(id_: int, amount: float, on: date, type_=TransactionType.expense) -> TransactionOut:
    return TransactionOut(
        id=id_,
        description=f"txn {id_}",
        amount=amount,
        type=type_,
        category="misc",
        date=on,
    )


def test_reconciles_by_id() -> None:
    ledger = Ledger([_out(1, 10, date(2024, 1, 1)), _out(2, 20, date(2024, 1, 2))])

    ledger.added(_out(3, 5, date(2024, 2, 1)))
    assert [t.id for t in ledger.transactions] == [3, 1, 2]

    ledger.updated(_out(1, 99.5, date(2024, 1, 1)))
    assert [t.id for t in ledger.transactions] == [3, 1, 2]
    assert ledger.transactions[1].amount_cents == 9950

    ledger.removed(2)
    ledger.removed(2)
    assert [t.id for t in ledger.transactions] == [3, 1]


def test_derived_views_follow_changes() -> None:
    ledger = Ledger([_out(1, 10, date(2024, 1, 1))])
    assert ledger.annual.expense_cents == 1000

    ledger.added(_out(2, 250, date(2024, 3, 1), TransactionType.income))
    assert ledger.annual.balance_cents == 24_000
    assert ledger.months == ["2024-03", "2024-01"]
    assert [p.month for p in ledger.chart_series] == ["2024-01", "2024-03"]
    assert ledger.categories == {"misc": 1000}

    ledger.removed(1)
    assert ledger.categories == {}
    assert ledger.months == ["2024-03"]


def test_expanded_months_toggle_independently_of_data() -> None:
    ledger = Ledger([_out(1, 10, date(2024, 1, 1))], expanded_months=["2024-01"])
    assert ledger.is_expanded("2024-01")
    assert ledger.toggled("2024-02") == ["2024-01", "2024-02"]
    assert ledger.toggled("2024-01") == []

    ledger.toggle_month("2024-01")
    assert not ledger.is_expanded("2024-01")
    ledger.toggle_month("2024-05")
    ledger.removed(1)
    assert ledger.expanded_months == {"2024-05"}


def test_client_keeps_ledger_in_step_with_server(make_client) -> None:
    client = LedgerClient(make_client())
    ledger = client.load()
    assert ledger.transactions == []
    ledger.toggle_month("2024-01")

    salary = client.add(
        TransactionIn(
            description="Salary",
            amount=Decimal("1000"),
            type=TransactionType.income,
            category="work",
            date=date(2024, 1, 5),
        )
    )
    food = client.add(
        TransactionIn(
            description="Food",
            amount=Decimal("200"),
            type=TransactionType.expense,
            category="food",
            date=date(2024, 1, 10),
        )
    )
    assert [t.id for t in client.ledger.transactions] == [food.id, salary.id]
    assert client.ledger.annual.balance_cents == 80_000

    edited = client.edit(
        food.id,
        TransactionIn(
            description="Food",
            amount=Decimal("50"),
            type=TransactionType.expense,
            category="food",
            date=date(2024, 2, 1),
        ),
    )
    assert edited is not None
    assert client.ledger.monthly["2024-02"].balance_cents == -5_000
    assert client.edit(
        9999,
        TransactionIn(
            description="x",
            amount=Decimal("1"),
            type=TransactionType.expense,
            category="x",
            date=date(2024, 2, 1),
        ),
    ) is None

    client.remove(salary.id)
    assert [t.id for t in client.ledger.transactions] == [food.id]

    reloaded = client.load()
    assert [t.id for t in reloaded.transactions] == [food.id]
    assert reloaded.is_expanded("2024-01")
