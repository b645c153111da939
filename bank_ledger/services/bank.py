from __future__ import annotations

import logging
import threading
from decimal import Decimal
from functools import wraps
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Session

from ..core.errors import (
    CustomerNotFoundError,
    DuplicateUsernameError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidCredentialsError,
    NoActiveSessionError,
)
from ..core.security import generate_salt, hash_password, verify_password
from ..models import (
    MAX_MONEY,
    MONEY_DECIMAL_PLACES,
    BalanceResponse,
    BankSummary,
    BankTransactionModel,
    Credentials,
    CustomerCreate,
    CustomerCreated,
    CustomerModel,
    CustomerView,
    MessageResponse,
    Operation,
    TransactionReceipt,
    TransactionRequest,
    TransactionResponse,
)
from .clock import MonotonicClock
from .repository import BankRepository
from .sessions import SessionRegistry


logger = logging.getLogger(__name__)

CENT = Decimal(1).scaleb(-MONEY_DECIMAL_PLACES)

# FastAPI runs sync handlers in a threadpool; operations run one at a time.
_operation_lock = threading.RLock()


def serialized(method):
    @wraps(method)
    def wrapper(*args, **kwargs):
        with _operation_lock:
            return method(*args, **kwargs)

    return wrapper


class BankService:
    """Customer, session and transaction bookkeeping for one caller.

    Every public method either commits all of its writes at once or raises a
    ``BankError`` before touching the database session's transaction.
    """

    def __init__(
        self,
        session: Session,
        sessions: SessionRegistry,
        caller_id: str,
        repository: Optional[BankRepository] = None,
        clock: Optional[MonotonicClock] = None,
    ) -> None:
        self.session = session
        self.sessions = sessions
        self.caller_id = caller_id
        self.repository = repository or BankRepository(session)
        self.clock = clock or MonotonicClock()

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _new_customer_id(self) -> UUID:
        customer_id = uuid4()
        while self.repository.get_customer(customer_id) is not None:
            customer_id = uuid4()
        return customer_id

    def _current_customer(self) -> CustomerModel:
        customer_id = self.sessions.get(self.caller_id)
        if customer_id is None:
            raise NoActiveSessionError("There is no logged in customer.")
        customer = self.repository.get_customer(customer_id)
        if customer is None:
            self.sessions.close(self.caller_id)
            raise NoActiveSessionError("There is no logged in customer.")
        return customer

    def _check_amount(self, amount: Decimal) -> None:
        if not amount.is_finite() or amount <= 0:
            raise InvalidAmountError("Amount must be greater than zero")
        if amount > MAX_MONEY:
            raise InvalidAmountError(f"Amount cannot exceed {MAX_MONEY}")
        if amount != amount.quantize(CENT):
            raise InvalidAmountError("Amount cannot have more than two decimal places")

    def _check_limit(self, total: Decimal) -> None:
        if total > MAX_MONEY:
            raise InvalidAmountError(f"Balance cannot exceed {MAX_MONEY}")

    def _customer_to_view(self, customer: CustomerModel) -> CustomerView:
        return CustomerView(
            id=customer.id,
            username=customer.username,
            balance=customer.balance,
        )

    def _transaction_to_response(
        self, transaction: BankTransactionModel
    ) -> TransactionResponse:
        return TransactionResponse(
            id=transaction.id,
            customer_id=transaction.customer_id,
            amount=transaction.amount,
            operation=Operation(transaction.operation),
            timestamp=transaction.timestamp,
        )

    # ------------------------------------------------------------------
    # Customers and sessions
    # ------------------------------------------------------------------
    @serialized
    def register(self, payload: CustomerCreate) -> CustomerCreated:
        if self.repository.find_customer_by_username(payload.username) is not None:
            raise DuplicateUsernameError("Customer already exists")
        if payload.initial_balance < 0:
            raise InvalidAmountError("Initial balance cannot be negative")
        if payload.initial_balance > 0:
            self._check_amount(payload.initial_balance)
        bank = self.repository.get_bank()
        self._check_limit(bank.total_deposit + payload.initial_balance)

        salt = generate_salt()
        customer = self.repository.add_customer(
            customer_id=self._new_customer_id(),
            username=payload.username,
            password_hash=hash_password(payload.password, salt),
            password_salt=salt,
            balance=payload.initial_balance,
        )
        bank.total_deposit += payload.initial_balance
        self.session.commit()
        logger.info(
            "customer.registered",
            extra={"customer_id": str(customer.id), "username": payload.username},
        )
        return CustomerCreated(
            id=customer.id,
            username=payload.username,
            message=f"Customer {payload.username} added successfully.",
        )

    @serialized
    def authenticate(self, payload: Credentials) -> MessageResponse:
        customer = self.repository.find_customer_by_username(payload.username)
        if customer is None:
            raise CustomerNotFoundError(f"Customer {payload.username} does not exist.")
        if not verify_password(
            payload.password, customer.password_salt, customer.password_hash
        ):
            logger.warning(
                "session.rejected",
                extra={"caller_id": self.caller_id, "username": payload.username},
            )
            raise InvalidCredentialsError("Credentials not matching.")

        self.sessions.open(self.caller_id, customer.id)
        logger.info(
            "session.opened",
            extra={"caller_id": self.caller_id, "customer_id": str(customer.id)},
        )
        return MessageResponse(message="Logged in.")

    @serialized
    def sign_out(self) -> MessageResponse:
        customer_id = self.sessions.close(self.caller_id)
        if customer_id is None:
            raise NoActiveSessionError("There is no logged in customer.")
        logger.info(
            "session.closed",
            extra={"caller_id": self.caller_id, "customer_id": str(customer_id)},
        )
        return MessageResponse(message="Logged out.")

    @serialized
    def current_user(self) -> CustomerView:
        return self._customer_to_view(self._current_customer())

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    @serialized
    def record_transaction(self, payload: TransactionRequest) -> TransactionReceipt:
        return self._record(payload.amount, payload.operation)

    @serialized
    def deposit(self, amount: Decimal) -> TransactionReceipt:
        return self._record(amount, Operation.DEPOSIT)

    @serialized
    def withdraw(self, amount: Decimal) -> TransactionReceipt:
        return self._record(amount, Operation.WITHDRAW)

    def _record(self, amount: Decimal, operation: Operation) -> TransactionReceipt:
        customer = self._current_customer()
        self._check_amount(amount)
        bank = self.repository.get_bank()

        if operation is Operation.WITHDRAW:
            if customer.balance < amount:
                logger.info(
                    "transaction.rejected",
                    extra={
                        "customer_id": str(customer.id),
                        "amount": str(amount),
                        "balance": str(customer.balance),
                    },
                )
                raise InsufficientFundsError(
                    "Account balance lower than withdrawal amount."
                )
            delta = -amount
        else:
            delta = amount
            self._check_limit(customer.balance + delta)
            self._check_limit(bank.total_deposit + delta)

        customer.balance += delta
        bank.total_deposit += delta
        transaction = self.repository.add_transaction(
            BankTransactionModel(
                customer_id=customer.id,
                amount=amount,
                operation=operation.value,
                timestamp=self.clock.now(),
            )
        )

        self.session.commit()
        self.session.refresh(customer)
        self.session.refresh(transaction)
        logger.info(
            "transaction.recorded",
            extra={
                "customer_id": str(customer.id),
                "operation": operation.value,
                "amount": str(amount),
                "balance": str(customer.balance),
            },
        )
        return TransactionReceipt(
            transaction=self._transaction_to_response(transaction),
            balance=customer.balance,
        )

    @serialized
    def list_my_transactions(self) -> list[TransactionResponse]:
        customer = self._current_customer()
        return [
            self._transaction_to_response(transaction)
            for transaction in self.repository.list_transactions(customer.id)
        ]

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    @serialized
    def get_balance(self) -> BalanceResponse:
        customer = self._current_customer()
        return BalanceResponse(
            balance=customer.balance,
            message=f"Your balance is: {customer.balance} $",
        )

    @serialized
    def get_bank_summary(self) -> BankSummary:
        bank = self.repository.get_bank()
        customers = self.repository.list_customers()
        transactions = self.repository.list_transactions()
        balance_total = sum((c.balance for c in customers), Decimal("0"))
        return BankSummary(
            total_deposit=bank.total_deposit,
            customer_balance_total=balance_total,
            reconciled=bank.total_deposit == balance_total,
            customer_count=len(customers),
            transaction_count=len(transactions),
            customers=[self._customer_to_view(c) for c in customers],
            transactions=[self._transaction_to_response(t) for t in transactions],
        )
