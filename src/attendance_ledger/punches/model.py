from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PunchSource, PunchType


@dataclass(frozen=True)
class GeoLocation:
    lat: float
    lng: float


@dataclass(frozen=True)
class PunchEvent:
    """A single IN or OUT clock event. Immutable once recorded."""

    employee_id: int
    org_id: int
    punch_time: datetime
    punch_type: PunchType
    source: PunchSource
    is_manual_entry: bool = False
    device_info: Optional[str] = None
    geo_location: Optional[GeoLocation] = None
    punch_id: Optional[int] = None
