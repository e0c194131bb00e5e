"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

CREDIT = "credit"
DEBIT = "debit"


@dataclass(slots=True)
class TransactionRecord:
    id: str
    account_id: str
    amount: int
    type: str
    description: str
    reference_id: Optional[str]
    created_at: datetime

    @property
    def signed_amount(self) -> int:
        return self.amount if self.type == CREDIT else -self.amount


@dataclass(slots=True)
class LedgerCheck:
    account_id: str
    balance: int
    ledger_total: int

    @property
    def consistent(self) -> bool:
        return self.balance == self.ledger_total
