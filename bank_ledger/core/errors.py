class BankError(Exception):
    """Base class for ledger failures that are reported back to the caller."""

    code = "BankError"
    status_code = 400


class CustomerNotFoundError(BankError):
    """Raised when no customer matches the given username."""

    code = "NotFound"
    status_code = 404


class DuplicateUsernameError(BankError):
    """Raised when registering a username that is already taken."""

    code = "DuplicateUsername"
    status_code = 409


class InvalidCredentialsError(BankError):
    """Raised when the password does not match the stored hash."""

    code = "InvalidCredentials"
    status_code = 401


class NoActiveSessionError(BankError):
    """Raised when an operation needs a logged in customer and there is none."""

    code = "NoActiveSession"
    status_code = 401


class InvalidAmountError(BankError):
    """Raised for non-positive transaction amounts or negative opening balances."""

    code = "InvalidAmount"
    status_code = 400


class InsufficientFundsError(BankError):
    """Raised when a withdrawal would drop the balance below zero."""

    code = "InsufficientFunds"
    status_code = 409
