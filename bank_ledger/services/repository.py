from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlmodel import Session, select

from ..models import (
    BANK_AGGREGATE_ID,
    BankAggregateModel,
    BankTransactionModel,
    CustomerModel,
)


class BankRepository:
    """Thin data access layer around the SQLModel session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # Customers ----------------------------------------------------------
    def add_customer(
        self,
        *,
        customer_id: UUID,
        username: str,
        password_hash: str,
        password_salt: str,
        balance: Decimal,
    ) -> CustomerModel:
        customer = CustomerModel(
            id=customer_id,
            username=username,
            password_hash=password_hash,
            password_salt=password_salt,
            balance=balance,
        )
        self.session.add(customer)
        return customer

    def get_customer(self, customer_id: UUID) -> Optional[CustomerModel]:
        return self.session.get(CustomerModel, customer_id, populate_existing=True)

    def find_customer_by_username(self, username: str) -> Optional[CustomerModel]:
        stmt = select(CustomerModel).where(CustomerModel.username == username)
        return self.session.exec(stmt).first()

    def list_customers(self) -> list[CustomerModel]:
        stmt = select(CustomerModel).order_by(CustomerModel.username)
        return list(self.session.exec(stmt))

    # Transactions -------------------------------------------------------
    def add_transaction(self, transaction: BankTransactionModel) -> BankTransactionModel:
        self.session.add(transaction)
        return transaction

    def list_transactions(
        self, customer_id: Optional[UUID] = None
    ) -> list[BankTransactionModel]:
        stmt = select(BankTransactionModel)
        if customer_id is not None:
            stmt = stmt.where(BankTransactionModel.customer_id == customer_id)
        stmt = stmt.order_by(BankTransactionModel.timestamp)
        return list(self.session.exec(stmt))

    # Bank aggregate -----------------------------------------------------
    def get_bank(self) -> BankAggregateModel:
        bank = self.session.get(
            BankAggregateModel, BANK_AGGREGATE_ID, populate_existing=True
        )
        if bank is None:
            bank = BankAggregateModel(id=BANK_AGGREGATE_ID)
            self.session.add(bank)
        return bank
