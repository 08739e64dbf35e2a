from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from csv_utils import export_transactions, parse_csv
from models import Transaction
from schemas import TransactionIn

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[Transaction]:
        stmt = select(Transaction).order_by(
            Transaction.date.desc(), Transaction.id.desc()
        )
        return list(self.session.scalars(stmt).all())

    def get(self, transaction_id: int) -> Optional[Transaction]:
        return self.session.get(Transaction, transaction_id)

    def create(self, data: TransactionIn) -> Transaction:
        txn = Transaction(
            description=data.description,
            amount_cents=data.amount_cents,
            type=data.type,
            category=data.category,
            date=data.date,
        )
        self.session.add(txn)
        self.session.commit()
        self.session.refresh(txn)
        logger.info(
            f"transaction_created: id={txn.id} type={txn.type.value} date={txn.date}"
        )
        return txn

    def replace(self, transaction_id: int, data: TransactionIn) -> Optional[Transaction]:
        txn = self.get(transaction_id)
        if txn is None:
            return None
        txn.description = data.description
        txn.amount_cents = data.amount_cents
        txn.type = data.type
        txn.category = data.category
        txn.date = data.date
        self.session.commit()
        self.session.refresh(txn)
        logger.info(f"transaction_replaced: id={txn.id}")
        return txn

    def delete(self, transaction_id: int) -> None:
        txn = self.get(transaction_id)
        if txn is None:
            logger.info(f"transaction_delete_noop: id={transaction_id}")
            return
        self.session.delete(txn)
        self.session.commit()
        logger.info(f"transaction_deleted: id={transaction_id}")


class CSVService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def export(self) -> str:
        return export_transactions(TransactionService(self.session).list_all())

    def commit(self, content: str) -> int:
        rows, errors = parse_csv(content)
        if errors:
            raise ValueError("; ".join(errors))
        for row in rows:
            self.session.add(
                Transaction(
                    description=row.description,
                    amount_cents=row.amount_cents,
                    type=row.type,
                    category=row.category,
                    date=row.date,
                )
            )
        self.session.commit()
        logger.info(f"csv_import: rows={len(rows)}")
        return len(rows)
