from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from .db import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS


class Operation(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class CustomerCreate(BaseModel):
    username: str = Field(..., min_length=1, description="Unique, case-sensitive login name")
    password: str = Field(..., min_length=1)
    initial_balance: Decimal = Field(
        default=Decimal("0"),
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        description="Opening balance; must not be negative",
    )


class CustomerCreated(BaseModel):
    id: UUID
    username: str
    message: str


class Credentials(BaseModel):
    username: str = Field(..., min_length=1)
    password: str


class CustomerView(BaseModel):
    id: UUID
    username: str
    balance: Decimal


class MessageResponse(BaseModel):
    message: str


class BalanceResponse(BaseModel):
    balance: Decimal
    message: str


class TransactionRequest(BaseModel):
    amount: Decimal = Field(
        ...,
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        description="Must be > 0",
    )
    operation: Operation


class TransactionResponse(BaseModel):
    id: UUID
    customer_id: UUID
    amount: Decimal
    operation: Operation
    timestamp: datetime


class TransactionReceipt(BaseModel):
    transaction: TransactionResponse
    balance: Decimal


class BankSummary(BaseModel):
    total_deposit: Decimal
    customer_balance_total: Decimal
    reconciled: bool
    customer_count: int
    transaction_count: int
    customers: list[CustomerView]
    transactions: list[TransactionResponse]
