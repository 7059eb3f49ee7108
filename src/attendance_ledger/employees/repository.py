from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def list_active(self, *, org_id: Optional[int] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def list_active_joined_by(self, *, org_id: int, joined_on_or_before: date) -> Sequence[Employee]:
        """Active employees of the organization who had joined by the given date."""

        raise NotImplementedError
