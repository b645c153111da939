from .db import BANK_AGGREGATE_ID, MAX_MONEY, MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS
from .db import BankAggregate as BankAggregateModel
from .db import BankTransaction as BankTransactionModel
from .db import Customer as CustomerModel
from .schemas import (
    BalanceResponse,
    BankSummary,
    Credentials,
    CustomerCreate,
    CustomerCreated,
    CustomerView,
    MessageResponse,
    Operation,
    TransactionReceipt,
    TransactionRequest,
    TransactionResponse,
)

__all__ = [
    "BANK_AGGREGATE_ID",
    "MAX_MONEY",
    "MONEY_DECIMAL_PLACES",
    "MONEY_MAX_DIGITS",
    "BalanceResponse",
    "BankSummary",
    "Credentials",
    "CustomerCreate",
    "CustomerCreated",
    "CustomerView",
    "MessageResponse",
    "Operation",
    "TransactionReceipt",
    "TransactionRequest",
    "TransactionResponse",
    "BankAggregateModel",
    "BankTransactionModel",
    "CustomerModel",
]
