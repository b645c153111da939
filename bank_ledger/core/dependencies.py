from typing import Optional

from fastapi import Depends, Header, Request
from sqlmodel import Session

from ..services import BankRepository, BankService, MonotonicClock, SessionRegistry
from .config import get_settings
from .db import get_session


def get_caller_id(
    caller_id: Optional[str] = Header(default=None, alias="X-Caller-Id"),
) -> str:
    return caller_id or get_settings().default_caller_id

def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions

def get_clock(request: Request) -> MonotonicClock:
    return request.app.state.clock

def get_bank_service(
    session: Session = Depends(get_session),
    sessions: SessionRegistry = Depends(get_session_registry),
    caller_id: str = Depends(get_caller_id),
    clock: MonotonicClock = Depends(get_clock),
) -> BankService:
    repository = BankRepository(session)
    return BankService(session, sessions, caller_id, repository=repository, clock=clock)
