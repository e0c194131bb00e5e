"""Wallet domain exports"""

from .exceptions import InsufficientBalanceError, WalletError
from .models import CREDIT, DEBIT, LedgerCheck, TransactionRecord

__all__ = [
    "CREDIT",
    "DEBIT",
    "InsufficientBalanceError",
    "LedgerCheck",
    "TransactionRecord",
    "WalletError",
]
