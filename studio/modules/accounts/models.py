"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from urllib.parse import quote_plus

ROLES = frozenset({"user", "admin"})


@dataclass(slots=True)
class Account:
    id: str
    username: str
    name: str
    role: str
    balance: int
    is_active: bool
    password_hash: str = field(repr=False)
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(slots=True)
class AccountCreateInput:
    username: str
    password: str
    name: str
    role: str = "user"
    opening_balance: int = 0
    is_active: bool = True


def default_avatar(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote_plus(name)}&background=random&color=fff"
