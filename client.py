from __future__ import annotations

import logging
from typing import Optional

import httpx

from ledger import Ledger
from schemas import TransactionIn, TransactionOut

logger = logging.getLogger(__name__)


def _payload(data: TransactionIn) -> dict[str, object]:
    body = data.model_dump(mode="json")
    body["amount"] = float(data.amount)
    return body


class LedgerClient:
    """Drives the JSON API and keeps a local ``Ledger`` in step with it.

    The list is fetched once by ``load``; afterwards each write reconciles the
    ledger from the record the server returns instead of re-fetching.
    """

    def __init__(self, http: httpx.Client) -> None:
        self.http = http
        self.ledger = Ledger()

    @classmethod
    def connect(cls, base_url: str, timeout: float = 5.0) -> "LedgerClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def close(self) -> None:
        self.http.close()

    def load(self) -> Ledger:
        resp = self.http.get("/transactions")
        resp.raise_for_status()
        self.ledger = Ledger.from_records(resp.json(), self.ledger.expanded_months)
        return self.ledger

    def add(self, data: TransactionIn) -> TransactionOut:
        resp = self.http.post("/transactions", json=_payload(data))
        resp.raise_for_status()
        txn = TransactionOut.model_validate(resp.json())
        self.ledger.added(txn)
        return txn

    def edit(self, transaction_id: int, data: TransactionIn) -> Optional[TransactionOut]:
        resp = self.http.put(f"/transactions/{transaction_id}", json=_payload(data))
        if resp.status_code == 404:
            logger.warning(f"edit_missing: id={transaction_id}")
            return None
        resp.raise_for_status()
        txn = TransactionOut.model_validate(resp.json())
        self.ledger.updated(txn)
        return txn

    def remove(self, transaction_id: int) -> None:
        resp = self.http.delete(f"/transactions/{transaction_id}")
        resp.raise_for_status()
        self.ledger.removed(transaction_id)
