from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class Shift:
    """Work shift definition as configured for an organization."""

    shift_id: int
    org_id: int
    shift_name: str
    start_time: time
    end_time: time
    grace_minutes: int = 0
    working_hours: Optional[float] = None
    is_active: bool = True


@dataclass(frozen=True)
class ShiftSnapshot:
    """Point-in-time copy of a shift stored on the attendance record.

    Boundaries are kept as "HH:MM" strings so a later edit of the shift
    definition never changes a historical record.
    """

    start_time: Optional[str]
    end_time: Optional[str]
    grace_minutes: int = 0
    working_hours: Optional[float] = None
    shift_id: Optional[int] = None
    shift_name: Optional[str] = None

    @classmethod
    def from_shift(cls, shift: Shift) -> "ShiftSnapshot":
        return cls(
            shift_id=shift.shift_id,
            shift_name=shift.shift_name,
            start_time=shift.start_time.strftime("%H:%M") if shift.start_time else None,
            end_time=shift.end_time.strftime("%H:%M") if shift.end_time else None,
            grace_minutes=int(shift.grace_minutes or 0),
            working_hours=float(shift.working_hours) if shift.working_hours is not None else None,
        )

    @property
    def has_bounds(self) -> bool:
        return bool(self.start_time and self.end_time)
