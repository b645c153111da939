from .bank import BankService
from .clock import MonotonicClock
from .repository import BankRepository
from .sessions import SessionRegistry

__all__ = ["BankRepository", "BankService", "MonotonicClock", "SessionRegistry"]
