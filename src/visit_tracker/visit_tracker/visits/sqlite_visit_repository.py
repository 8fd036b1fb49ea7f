from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.geo import Coordinates
from ..core.exceptions import ConflictError
from ..database.connection import SQLiteConnection
from ..database.sqlite_base import IntegrityError, db_cursor, fetchall, fetchone, to_db_timestamp
from .mapping import SELECT_VISIT_COLUMNS, visit_from_row
from .model import Visit
from .repository import VisitRepository


class SQLiteVisitRepository(VisitRepository):
    def __init__(self, conn_factory: SQLiteConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, visit_id: int) -> Optional[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {SELECT_VISIT_COLUMNS} FROM visits WHERE id=?", (int(visit_id),))
            r = fetchone(cur)
            return visit_from_row(r) if r else None

    def get_open_for_user(self, user_name: str) -> Optional[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {SELECT_VISIT_COLUMNS}
                FROM visits
                WHERE user_name=? AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (user_name,),
            )
            r = fetchone(cur)
            return visit_from_row(r) if r else None

    def create_visit(
        self,
        *,
        user_name: str,
        client_name: str,
        company_name: str,
        check_in_address: Optional[str],
        check_in_map_link: Optional[str],
        check_in_coordinates: Coordinates,
        check_in_time: datetime,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO visits(
                        user_name, client_name, company_name, check_in_address, check_in_map_link,
                        check_in_time, check_in_latitude, check_in_longitude, location_mismatch, created_at
                    )
                    VALUES(?,?,?,?,?,?,?,?,0,?)
                    """,
                    (
                        user_name,
                        client_name,
                        company_name,
                        check_in_address,
                        check_in_map_link,
                        to_db_timestamp(check_in_time),
                        check_in_coordinates.latitude,
                        check_in_coordinates.longitude,
                        to_db_timestamp(check_in_time),
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            raise ConflictError(f"User {user_name!r} already has an open visit") from e

    def close_visit(
        self,
        *,
        visit_id: int,
        check_out_time: datetime,
        check_out_address: Optional[str],
        check_out_map_link: Optional[str],
        check_out_coordinates: Coordinates,
        distance_meters: Optional[float],
        location_mismatch: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE visits
                SET check_out_time=?, check_out_address=?, check_out_map_link=?,
                    check_out_latitude=?, check_out_longitude=?,
                    distance_meters=?, location_mismatch=?
                WHERE id=? AND check_out_time IS NULL
                """,
                (
                    to_db_timestamp(check_out_time),
                    check_out_address,
                    check_out_map_link,
                    check_out_coordinates.latitude,
                    check_out_coordinates.longitude,
                    distance_meters,
                    1 if location_mismatch else 0,
                    int(visit_id),
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, visit_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM visits WHERE id=?", (int(visit_id),))
            return cur.rowcount > 0

    def list_visits(
        self,
        *,
        user_name: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[Visit]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_name is not None:
            clauses.append("user_name=?")
            params.append(user_name)
        if start is not None:
            clauses.append("check_in_time >= ?")
            params.append(to_db_timestamp(start))
        if end is not None:
            clauses.append("check_in_time <= ?")
            params.append(to_db_timestamp(end))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {SELECT_VISIT_COLUMNS} FROM visits WHERE {where} ORDER BY check_in_time DESC, id DESC",
                tuple(params),
            )
            return [visit_from_row(r) for r in fetchall(cur)]

    def list_open_before(self, cutoff: datetime) -> Sequence[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {SELECT_VISIT_COLUMNS}
                FROM visits
                WHERE check_out_time IS NULL AND check_in_time < ?
                ORDER BY check_in_time ASC, id ASC
                """,
                (to_db_timestamp(cutoff),),
            )
            return [visit_from_row(r) for r in fetchall(cur)]
