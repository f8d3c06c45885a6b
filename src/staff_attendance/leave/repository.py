from __future__ import annotations

from typing import Protocol, Sequence

from .model import LeaveRequest


class LeaveRepository(Protocol):
    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError
