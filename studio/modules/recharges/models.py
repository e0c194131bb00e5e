"""Domain model for manual recharge requests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

DECISIONS = frozenset({APPROVED, REJECTED})
METHOD_LABELS = {"bkash": "bKash", "nagad": "Nagad"}
METHODS = frozenset(METHOD_LABELS)


@dataclass(slots=True)
class RechargeRequest:
    id: str
    account_id: str
    user_name: str
    amount: int
    method: str
    sender_number: str
    trx_id: str
    status: str
    created_at: datetime
    resolved_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING
