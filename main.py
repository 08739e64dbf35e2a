import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from urllib.parse import urlencode

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aggregation import month_start
from charts import bar_chart, donut_segments, line_chart
from config import get_settings
from csrf import generate_csrf_token, validate_csrf_token
from csv_utils import parse_amount
from database import get_db
from ledger import Ledger
from models import TransactionType
from schemas import (
    AnnualSummaryOut,
    CategoryTotalOut,
    ChartPointOut,
    DeleteOut,
    ImportOut,
    MonthlyBucketOut,
    SummaryOut,
    TransactionIn,
    TransactionOut,
)
from services import CSVService, TransactionService

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

app = FastAPI(title="Personal Finance Tracker")
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
templates = Jinja2Templates(directory=BASE_DIR / "templates")


def _load_app_version() -> str:
    try:
        import tomllib
    except Exception:
        return "unknown"
    try:
        with open(BASE_DIR / "pyproject.toml", "rb") as f:
            data = tomllib.load(f)
        return str(data.get("project", {}).get("version", "unknown"))
    except Exception:
        return "unknown"


APP_VERSION = _load_app_version()

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def format_currency(cents: int) -> str:
    symbol = CURRENCY_SYMBOLS.get(settings.currency, settings.currency + " ")
    sign = "-" if cents < 0 else ""
    return f"{sign}{symbol}{abs(cents) / 100:,.2f}"


def format_long_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def month_title(key: str) -> str:
    return month_start(key).strftime("%B %Y")


templates.env.filters["currency"] = format_currency
templates.env.filters["long_date"] = format_long_date
templates.env.filters["month_title"] = month_title
templates.env.globals["TransactionType"] = TransactionType
templates.env.globals["csrf_token"] = generate_csrf_token
templates.env.globals["app_version"] = APP_VERSION


def static_path(path: str) -> str:
    return app.url_path_for("static", path=path)


templates.env.globals["static_path"] = static_path


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        f"storage_error: method={request.method} path={request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Storage error"})


def render(request: Request, template: str, context: dict[str, object]) -> HTMLResponse:
    return templates.TemplateResponse(request, template, context)


def _money(cents: int) -> float:
    return cents / 100


def build_summary(ledger: Ledger) -> SummaryOut:
    annual = ledger.annual
    return SummaryOut(
        annual=AnnualSummaryOut(
            income=_money(annual.income_cents),
            expenses=_money(annual.expense_cents),
            balance=_money(annual.balance_cents),
        ),
        monthly={
            key: MonthlyBucketOut(
                income=_money(bucket.income_cents),
                expenses=_money(bucket.expense_cents),
                balance=_money(bucket.balance_cents),
                transactions=bucket.transactions,
            )
            for key, bucket in ledger.monthly.items()
        },
        categories=[
            CategoryTotalOut(
                name=str(item["name"]),
                value=_money(int(item["amount_cents"])),
                percent=float(item["percent"]),
            )
            for item in ledger.breakdown
        ],
        chart=[
            ChartPointOut(
                month=p.month,
                name=p.label,
                income=_money(p.income_cents),
                expenses=_money(p.expense_cents),
                balance=_money(p.balance_cents),
            )
            for p in ledger.chart_series
        ],
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/transactions", response_model=list[TransactionOut])
def list_transactions(db: Session = Depends(get_db)):
    return TransactionService(db).list_all()


@app.post("/transactions", response_model=TransactionOut)
def create_transaction(data: TransactionIn, db: Session = Depends(get_db)):
    return TransactionService(db).create(data)


@app.get("/transactions/export.csv")
def export_transactions_endpoint(db: Session = Depends(get_db)):
    content = CSVService(db).export()
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'},
    )


@app.post("/transactions/import", response_model=ImportOut)
async def import_transactions(
    file: UploadFile = File(...), db: Session = Depends(get_db)
):
    raw = await file.read()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8") from exc
    try:
        imported = CSVService(db).commit(content)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ImportOut(imported=imported)


@app.put("/transactions/{transaction_id}", response_model=TransactionOut)
def replace_transaction(
    transaction_id: int, data: TransactionIn, db: Session = Depends(get_db)
):
    txn = TransactionService(db).replace(transaction_id, data)
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@app.delete("/transactions/{transaction_id}", response_model=DeleteOut)
def delete_transaction(transaction_id: int, db: Session = Depends(get_db)):
    TransactionService(db).delete(transaction_id)
    return DeleteOut()


@app.get("/summary", response_model=SummaryOut)
def summary(db: Session = Depends(get_db)):
    ledger = Ledger.from_records(TransactionService(db).list_all())
    return build_summary(ledger)


def transaction_from_form(form) -> TransactionIn:
    return TransactionIn(
        description=form["description"],
        amount=Decimal(parse_amount(form["amount"])) / 100,
        type=TransactionType(form["type"]),
        category=form["category"],
        date=date.fromisoformat(form["date"]),
    )


def dashboard_url(request: Request, open_months: list[str]) -> str:
    url = request.app.url_path_for("dashboard")
    if open_months:
        url += "?" + urlencode([("open", key) for key in open_months])
    return url


def _redirect_to_dashboard(request: Request, form) -> RedirectResponse:
    return RedirectResponse(
        url=dashboard_url(request, sorted(form.getlist("open"))), status_code=303
    )


@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request, db: Session = Depends(get_db)):
    ledger = Ledger.from_records(
        TransactionService(db).list_all(), request.query_params.getlist("open")
    )
    monthly = ledger.monthly
    series = ledger.chart_series
    months = [
        {
            "key": key,
            "bucket": monthly[key],
            "expanded": ledger.is_expanded(key),
            "toggle_url": dashboard_url(request, ledger.toggled(key)),
        }
        for key in ledger.months
    ]
    return render(
        request,
        "dashboard.html",
        {
            "annual": ledger.annual,
            "donut": donut_segments(ledger.breakdown),
            "bars": bar_chart(series),
            "lines": line_chart(series),
            "months": months,
            "open_months": sorted(ledger.expanded_months),
            "today": date.today().isoformat(),
        },
    )


@app.post("/dashboard/transactions")
async def dashboard_create(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    if not validate_csrf_token(form.get("csrf_token", "")):
        raise HTTPException(status_code=400, detail="Invalid CSRF token")
    try:
        data = transaction_from_form(form)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    TransactionService(db).create(data)
    return _redirect_to_dashboard(request, form)


@app.get("/dashboard/transactions/{transaction_id}/edit", response_class=HTMLResponse)
def dashboard_edit_page(
    transaction_id: int, request: Request, db: Session = Depends(get_db)
):
    txn = TransactionService(db).get(transaction_id)
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return render(
        request,
        "transaction_edit.html",
        {"transaction": txn, "open_months": request.query_params.getlist("open")},
    )


@app.post("/dashboard/transactions/{transaction_id}/edit")
async def dashboard_edit_submit(
    transaction_id: int, request: Request, db: Session = Depends(get_db)
):
    form = await request.form()
    if not validate_csrf_token(form.get("csrf_token", "")):
        raise HTTPException(status_code=400, detail="Invalid CSRF token")
    try:
        data = transaction_from_form(form)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if TransactionService(db).replace(transaction_id, data) is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return _redirect_to_dashboard(request, form)


@app.post("/dashboard/transactions/{transaction_id}/delete")
async def dashboard_delete(
    transaction_id: int, request: Request, db: Session = Depends(get_db)
):
    form = await request.form()
    if not validate_csrf_token(form.get("csrf_token", "")):
        raise HTTPException(status_code=400, detail="Invalid CSRF token")
    TransactionService(db).delete(transaction_id)
    return _redirect_to_dashboard(request, form)
