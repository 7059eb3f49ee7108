from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PunchSource, PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import GeoLocation, PunchEvent
from .repository import PunchRepository

_COLUMNS = """
    punch_id, org_id, employee_id, punch_time, punch_type, source,
    device_info, geo_lat, geo_lng, is_manual_entry
"""


def _to_punch(r: dict) -> PunchEvent:
    geo = None
    if r.get("geo_lat") is not None and r.get("geo_lng") is not None:
        geo = GeoLocation(lat=float(r["geo_lat"]), lng=float(r["geo_lng"]))
    return PunchEvent(
        punch_id=int(r["punch_id"]),
        org_id=int(r["org_id"]),
        employee_id=int(r["employee_id"]),
        punch_time=r["punch_time"],
        punch_type=PunchType(r["punch_type"]),
        source=PunchSource(r["source"]),
        device_info=r.get("device_info"),
        geo_location=geo,
        is_manual_entry=bool(r.get("is_manual_entry")),
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, punch: PunchEvent) -> int:
        geo = punch.geo_location
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_punches(
                    org_id, employee_id, punch_time, punch_type, source,
                    device_info, geo_lat, geo_lng, is_manual_entry
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(punch.org_id),
                    int(punch.employee_id),
                    punch.punch_time,
                    punch.punch_type.value,
                    punch.source.value,
                    punch.device_info,
                    geo.lat if geo else None,
                    geo.lng if geo else None,
                    1 if punch.is_manual_entry else 0,
                ),
            )
            return int(cur.lastrowid)

    def list_between(self, *, org_id: int, employee_id: int, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_punches
                WHERE org_id=%s AND employee_id=%s AND punch_time BETWEEN %s AND %s
                ORDER BY punch_time ASC, punch_id ASC
                """,
                (int(org_id), int(employee_id), start, end),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def get_latest_between(self, *, org_id: int, employee_id: int, start: datetime, end: datetime) -> Optional[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_punches
                WHERE org_id=%s AND employee_id=%s AND punch_time BETWEEN %s AND %s
                ORDER BY punch_time DESC, punch_id DESC
                LIMIT 1
                """,
                (int(org_id), int(employee_id), start, end),
            )
            r = fetchone(cur)
            return _to_punch(r) if r else None
