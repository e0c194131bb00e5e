"""Account domain specific exceptions."""


class AccountError(Exception):
    """Base class for account domain errors."""


class AccountAlreadyExistsError(AccountError):
    """Raised when a username is already taken (compared case-insensitively)."""


class AccountNotFoundError(AccountError):
    """Raised when the requested account cannot be found."""
