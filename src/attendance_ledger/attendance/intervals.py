"""Pairing of a day's punches into work and break intervals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import minutes_between
from ..core.enums import PunchType
from ..punches.model import PunchEvent


@dataclass(frozen=True)
class IntervalTotals:
    work_minutes: int = 0
    break_minutes: int = 0


def first_check_in(punches: Sequence[PunchEvent]) -> Optional[datetime]:
    """Earliest IN punch time; punches must be sorted ascending."""
    for p in punches:
        if p.punch_type == PunchType.IN:
            return p.punch_time
    return None


def last_check_out(punches: Sequence[PunchEvent]) -> Optional[datetime]:
    """Latest OUT punch time; punches must be sorted ascending."""
    for p in reversed(punches):
        if p.punch_type == PunchType.OUT:
            return p.punch_time
    return None


def pair_intervals(punches: Sequence[PunchEvent]) -> IntervalTotals:
    """Walk sorted punches: IN..OUT is work, OUT..IN (after a work interval) is break.

    An OUT with no open IN is ignored. A repeated IN restarts the open work
    segment. For a trailing IN with no later OUT, the break leading into it
    is counted but its open work segment is not.
    """
    work = 0
    brk = 0
    open_in: Optional[datetime] = None
    open_out: Optional[datetime] = None

    for p in punches:
        if p.punch_type == PunchType.IN:
            if open_out is not None:
                brk += minutes_between(open_out, p.punch_time)
                open_out = None
            open_in = p.punch_time
        elif open_in is not None:
            work += minutes_between(open_in, p.punch_time)
            open_in = None
            open_out = p.punch_time

    return IntervalTotals(work_minutes=work, break_minutes=brk)
