import datetime as dt
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import TransactionType

CENT = Decimal("0.01")
# amount_cents is a signed 64-bit INTEGER column
MAX_AMOUNT_CENTS = 2**63 - 1
MAX_AMOUNT = Decimal("92233720368547758.07")


class TransactionIn(BaseModel):
    description: str
    amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    type: TransactionType
    category: str
    date: dt.date

    @field_validator("amount")
    @classmethod
    def _round_to_cents(cls, value: Decimal) -> Decimal:
        try:
            return value.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise ValueError("Invalid amount") from exc

    @property
    def amount_cents(self) -> int:
        return int(self.amount * 100)


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    amount: float
    type: TransactionType
    category: str
    date: dt.date

    @property
    def amount_cents(self) -> int:
        return int(Decimal(str(self.amount)).quantize(CENT, rounding=ROUND_HALF_UP) * 100)


class CSVRow(BaseModel):
    date: dt.date
    type: TransactionType
    amount_cents: int = Field(..., ge=0, le=MAX_AMOUNT_CENTS)
    category: str
    description: str


class AnnualSummaryOut(BaseModel):
    income: float
    expenses: float
    balance: float


class MonthlyBucketOut(BaseModel):
    income: float
    expenses: float
    balance: float
    transactions: list[TransactionOut] = Field(default_factory=list)


class CategoryTotalOut(BaseModel):
    name: str
    value: float
    percent: float


class ChartPointOut(BaseModel):
    month: str
    name: str
    income: float
    expenses: float
    balance: float


class SummaryOut(BaseModel):
    annual: AnnualSummaryOut
    monthly: dict[str, MonthlyBucketOut]
    categories: list[CategoryTotalOut]
    chart: list[ChartPointOut]


class DeleteOut(BaseModel):
    message: str = "Transaction deleted successfully"


class ImportOut(BaseModel):
    imported: int
