from fastapi import APIRouter, Depends, status

from ..core.dependencies import get_bank_service
from ..models import (
    BalanceResponse,
    BankSummary,
    Credentials,
    CustomerCreate,
    CustomerCreated,
    CustomerView,
    MessageResponse,
    TransactionReceipt,
    TransactionRequest,
    TransactionResponse,
)
from ..services import BankService


bank_router = APIRouter(prefix="/bank", tags=["bank"])

@bank_router.get("", response_model=BankSummary)
def get_bank_summary(
    service: BankService = Depends(get_bank_service),
) -> BankSummary:
    return service.get_bank_summary()

customer_router = APIRouter(prefix="/customers", tags=["customers"])

@customer_router.post("", response_model=CustomerCreated, status_code=status.HTTP_201_CREATED)
def register(
    payload: CustomerCreate,
    service: BankService = Depends(get_bank_service),
) -> CustomerCreated:
    return service.register(payload)

session_router = APIRouter(prefix="/sessions", tags=["sessions"])

@session_router.post("", response_model=MessageResponse)
def authenticate(
    payload: Credentials,
    service: BankService = Depends(get_bank_service),
) -> MessageResponse:
    return service.authenticate(payload)

@session_router.delete("", response_model=MessageResponse)
def sign_out(
    service: BankService = Depends(get_bank_service),
) -> MessageResponse:
    return service.sign_out()

me_router = APIRouter(prefix="/me", tags=["me"])

@me_router.get("", response_model=CustomerView)
def current_user(
    service: BankService = Depends(get_bank_service),
) -> CustomerView:
    return service.current_user()

@me_router.get("/balance", response_model=BalanceResponse)
def get_balance(
    service: BankService = Depends(get_bank_service),
) -> BalanceResponse:
    return service.get_balance()

@me_router.get("/transactions", response_model=list[TransactionResponse])
def list_my_transactions(
    service: BankService = Depends(get_bank_service),
) -> list[TransactionResponse]:
    return service.list_my_transactions()

transaction_router = APIRouter(prefix="/transactions", tags=["transactions"])

@transaction_router.post("", response_model=TransactionReceipt, status_code=status.HTTP_201_CREATED)
def record_transaction(
    payload: TransactionRequest,
    service: BankService = Depends(get_bank_service),
) -> TransactionReceipt:
    return service.record_transaction(payload)

routers = [bank_router, customer_router, session_router, me_router, transaction_router]

__all__ = ["routers"]
