"""Password hashing helpers.

Passwords are compared after trimming surrounding whitespace, so a password
typed with a trailing space on a phone keyboard still matches.
"""

from __future__ import annotations

import bcrypt


def normalize_password(password: str) -> bytes:
    return password.strip().encode("utf-8")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(normalize_password(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(normalize_password(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def looks_hashed(value: str) -> bool:
    """True when *value* is already a bcrypt hash (used when restoring backups)."""
    return value.startswith(("$2a$", "$2b$", "$2y$")) and len(value) == 60


__all__ = ["hash_password", "verify_password", "looks_hashed", "normalize_password"]
