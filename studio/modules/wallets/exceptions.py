"""Wallet domain exceptions."""


class WalletError(Exception):
    """Base class for wallet errors."""


class InsufficientBalanceError(WalletError):
    """Raised when a debit would drive a balance below zero."""

    def __init__(self, account_id: str, balance: int, required: int) -> None:
        super().__init__(f"insufficient balance for {account_id}: has {balance}, needs {required}")
        self.account_id = account_id
        self.balance = balance
        self.required = required
