"""Recharge domain exports"""

from .exceptions import (
    RechargeAccountMissingError,
    RechargeAlreadyProcessedError,
    RechargeAmountTooLowError,
    RechargeError,
    RechargeNotFoundError,
)
from .models import APPROVED, PENDING, REJECTED, RechargeRequest

__all__ = [
    "APPROVED",
    "PENDING",
    "REJECTED",
    "RechargeRequest",
    "RechargeError",
    "RechargeNotFoundError",
    "RechargeAlreadyProcessedError",
    "RechargeAmountTooLowError",
    "RechargeAccountMissingError",
]
