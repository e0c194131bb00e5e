"""Account domain models and errors. Services live in ``studio.modules.accounts.service``."""

from .models import ROLES, Account, AccountCreateInput, default_avatar
from .exceptions import (
    AccountError,
    AccountAlreadyExistsError,
    AccountNotFoundError,
)

__all__ = [
    "ROLES",
    "Account",
    "AccountCreateInput",
    "AccountError",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
    "default_avatar",
]
