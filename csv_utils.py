import csv
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from io import StringIO
from typing import Sequence

from models import Transaction, TransactionType
from schemas import MAX_AMOUNT, CSVRow

CSV_HEADER = ["Date", "Type", "Amount", "Category", "Description"]


def sanitize_csv_value(value: str) -> str:
    """
    Sanitize CSV values to prevent formula injection by prefixing dangerous patterns with tab.
    """
    if not value:
        return ""

    stripped = value.strip()

    formula_triggers = ("=", "+", "-", "@", "\t", "\r")

    if value.startswith(formula_triggers) or stripped.startswith(formula_triggers):
        return "\t" + value

    dangerous_patterns = [
        r"^cmd\s*",
        r"^powershell\s*",
        r"^bash\s*",
        r"^sh\s*",
        r"^http[s]?://",
    ]

    for pattern in dangerous_patterns:
        if re.match(pattern, stripped, re.IGNORECASE):
            return "\t" + value

    return value


def unguard_csv_value(value: str) -> str:
    """Undo the tab prefix added by `sanitize_csv_value`; other whitespace is kept."""
    if value.startswith("\t"):
        return value[1:]
    return value


def parse_date(value: str):
    value = value.strip()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return datetime.strptime(value, "%d.%m.%Y").date()


def decimal_to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1")))


def parse_amount(value: str) -> int:
    clean = value.strip().replace("$", "").replace(" ", "")
    clean = clean.replace(",", ".")
    if clean.count(".") > 1:
        parts = clean.split(".")
        clean = "".join(parts[:-1]) + "." + parts[-1]
    try:
        amount = Decimal(clean)
    except InvalidOperation as exc:
        raise ValueError("Invalid amount") from exc
    if not amount.is_finite():
        raise ValueError("Invalid amount")
    if amount > MAX_AMOUNT:
        raise ValueError("Amount too large")
    cents = decimal_to_cents(amount)
    if cents < 0:
        raise ValueError("Amount must be positive")
    return cents


def parse_csv(content: str) -> tuple[list[CSVRow], list[str]]:
    reader = csv.DictReader(StringIO(content))
    rows: list[CSVRow] = []
    errors: list[str] = []
    for idx, raw in enumerate(reader, start=1):
        try:
            date_value = parse_date((raw.get("Date") or "").strip())
            type_raw = (raw.get("Type") or "").strip().lower()
            type_value = TransactionType(type_raw)
            amount_value = parse_amount(raw.get("Amount") or "")
            rows.append(
                CSVRow(
                    date=date_value,
                    type=type_value,
                    amount_cents=amount_value,
                    category=unguard_csv_value(raw.get("Category") or ""),
                    description=unguard_csv_value(raw.get("Description") or ""),
                )
            )
        except Exception as exc:
            errors.append(f"Row {idx}: {exc}")
    return rows, errors


def export_transactions(transactions: Sequence[Transaction]) -> str:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)
    for txn in transactions:
        writer.writerow(
            [
                txn.date.isoformat(),
                txn.type.value,
                f"{txn.amount_cents / 100:.2f}",
                sanitize_csv_value(txn.category),
                sanitize_csv_value(txn.description),
            ]
        )
    return output.getvalue()
