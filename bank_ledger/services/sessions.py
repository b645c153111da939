from __future__ import annotations

from typing import Dict, Optional
from uuid import UUID


class SessionRegistry:
    """In-process map of caller id to the customer that caller logged in as.

    Nothing here is persisted; a restart logs everybody out. Callers that do
    not identify themselves all share one slot, so they overwrite each
    other's login.
    """

    def __init__(self) -> None:
        self._active: Dict[str, UUID] = {}

    def get(self, caller_id: str) -> Optional[UUID]:
        return self._active.get(caller_id)

    def open(self, caller_id: str, customer_id: UUID) -> None:
        self._active[caller_id] = customer_id

    def close(self, caller_id: str) -> Optional[UUID]:
        return self._active.pop(caller_id, None)
