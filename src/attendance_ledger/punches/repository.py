from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PunchEvent


class PunchRepository(Protocol):
    def append(self, punch: PunchEvent) -> int:
        """Store a new punch and return its id."""

        raise NotImplementedError

    def list_between(self, *, org_id: int, employee_id: int, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        """Punches with start <= punch_time <= end, ascending by punch_time."""

        raise NotImplementedError

    def get_latest_between(self, *, org_id: int, employee_id: int, start: datetime, end: datetime) -> Optional[PunchEvent]:
        raise NotImplementedError
