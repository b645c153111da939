from __future__ import annotations
from datetime import datetime, UTC
from decimal import Decimal
from uuid import UUID, uuid4
from sqlmodel import Field, SQLModel

BANK_AGGREGATE_ID = 1

# SQLite keeps NUMERIC values as doubles, which hold 15 significant digits
# exactly. Every stored amount stays within that.
MONEY_MAX_DIGITS = 15
MONEY_DECIMAL_PLACES = 2
MAX_MONEY = Decimal("9999999999999.99")

class Customer(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    password_salt: str
    balance: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
    )

class BankTransaction(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    customer_id: UUID = Field(foreign_key="customer.id", index=True)
    amount: Decimal = Field(max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES)
    operation: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)

class BankAggregate(SQLModel, table=True):
    id: int = Field(default=BANK_AGGREGATE_ID, primary_key=True)
    total_deposit: Decimal = Field(
        default=Decimal("0"),
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
    )
