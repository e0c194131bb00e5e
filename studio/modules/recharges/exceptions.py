"""Recharge workflow exceptions."""


class RechargeError(Exception):
    """Base class for recharge errors."""


class RechargeNotFoundError(RechargeError):
    """Raised when a recharge request id does not resolve."""


class RechargeAlreadyProcessedError(RechargeError):
    """Raised when resolving a request that is no longer pending."""


class RechargeAmountTooLowError(RechargeError):
    def __init__(self, amount: int, minimum: int) -> None:
        super().__init__(f"recharge amount {amount} is below the minimum of {minimum}")
        self.amount = amount
        self.minimum = minimum


class RechargeAccountMissingError(RechargeError):
    """Raised when approving a request whose account no longer exists."""
