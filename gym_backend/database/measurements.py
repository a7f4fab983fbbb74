"""
Measurement store - tenant-scoped SQL for the measurements table
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Date, DateTime, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from gym_backend.database.queries import execute_with_retry

# Writable columns, in table order
MEASUREMENT_FIELDS = (
    "measured_on",
    "weight",
    "height",
    "chest_cm",
    "waist_cm",
    "hip_cm",
    "left_arm_cm",
    "right_arm_cm",
    "left_leg_cm",
    "right_leg_cm",
    "body_fat_pct",
    "notes",
)

SELECT_COLUMNS = ", ".join(("id", "gym_id", "client_id") + MEASUREMENT_FIELDS + ("created_at", "updated_at"))

RESULT_TYPES = {
    "measured_on": Date,
    "created_at": DateTime(timezone=True),
    "updated_at": DateTime(timezone=True),
}

# Wire name -> column
SORTABLE_COLUMNS = {
    "id": "id",
    "fecha": "measured_on",
    "peso": "weight",
    "altura": "height",
    "grasaCorporal": "body_fat_pct",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


@dataclass(frozen=True)
class MeasurementFilter:
    """Optional predicates on top of the mandatory tenant scope"""
    gym_id: int
    client_id: Optional[int] = None


@dataclass(frozen=True)
class SortOrder:
    column: str = "measured_on"
    descending: bool = True

    @classmethod
    def parse(cls, sort: Optional[str]) -> "SortOrder":
        """
        Parse "field[,asc|desc]" using the wire field names

        Raises:
            ValueError: Unknown field or direction
        """
        if not sort or not sort.strip():
            return cls()

        field, _, direction = sort.strip().partition(",")
        column = SORTABLE_COLUMNS.get(field.strip())
        if column is None:
            raise ValueError(f"sort no soportado: {field.strip()}")

        direction = direction.strip().lower() or "asc"
        if direction not in ("asc", "desc"):
            raise ValueError(f"direccion de sort invalida: {direction}")
        return cls(column=column, descending=direction == "desc")

    def to_sql(self) -> str:
        direction = "DESC" if self.descending else "ASC"
        # id breaks ties so paging is stable
        if self.column == "id":
            return f"id {direction}"
        return f"{self.column} {direction}, id {direction}"


def _where(flt: MeasurementFilter) -> Tuple[str, Dict[str, Any]]:
    clauses = ["gym_id = :gym_id"]
    params: Dict[str, Any] = {"gym_id": flt.gym_id}

    if flt.client_id is not None:
        clauses.append("client_id = :client_id")
        params["client_id"] = flt.client_id

    return " AND ".join(clauses), params


def build_measurement_query(
    flt: MeasurementFilter,
    sort: Optional[SortOrder] = None,
    limit: Optional[int] = None,
    offset: int = 0,
):
    """Build the SELECT for a filter; LIMIT/OFFSET only when limit is given"""
    where, params = _where(flt)
    sql = f"SELECT {SELECT_COLUMNS} FROM measurements WHERE {where} ORDER BY {(sort or SortOrder()).to_sql()}"

    if limit is not None:
        sql += " LIMIT :limit OFFSET :offset"
        params["limit"] = limit
        params["offset"] = offset

    return text(sql).bindparams(**params).columns(**RESULT_TYPES)


def build_count_query(flt: MeasurementFilter):
    where, params = _where(flt)
    return text(f"SELECT COUNT(*) FROM measurements WHERE {where}").bindparams(**params)


class MeasurementStore:
    """Persistence for body measurements; every call is scoped by gym_id"""

    @staticmethod
    async def insert(
        session: AsyncSession,
        gym_id: int,
        client_id: int,
        values: Dict[str, Any],
    ) -> int:
        """
        Insert a measurement

        created_at and updated_at get the same server time here; created_at
        is never written again.

        Returns:
            New measurement id
        """
        now = datetime.now(timezone.utc)
        columns = ("gym_id", "client_id") + MEASUREMENT_FIELDS + ("created_at", "updated_at")
        placeholders = ", ".join(f":{c}" for c in columns)

        result = await execute_with_retry(
            session,
            text(f"""
                INSERT INTO measurements ({", ".join(columns)})
                VALUES ({placeholders})
                RETURNING id
            """).bindparams(
                bindparam("measured_on", value=values["measured_on"], type_=Date),
                bindparam("created_at", value=now, type_=DateTime(timezone=True)),
                bindparam("updated_at", value=now, type_=DateTime(timezone=True)),
                gym_id=gym_id,
                client_id=client_id,
                **{f: values.get(f) for f in MEASUREMENT_FIELDS if f != "measured_on"},
            )
        )
        return int(result.scalar_one())

    @staticmethod
    async def get_by_id(session: AsyncSession, measurement_id: int, gym_id: int) -> Optional[Dict[str, Any]]:
        """
        Tenant-scoped lookup

        Returns:
            Row as a dict, or None when absent or owned by another gym
        """
        result = await execute_with_retry(
            session,
            text(f"""
                SELECT {SELECT_COLUMNS}
                FROM measurements
                WHERE id = :id AND gym_id = :gym_id
            """).bindparams(id=measurement_id, gym_id=gym_id).columns(**RESULT_TYPES)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    @staticmethod
    async def find(
        session: AsyncSession,
        flt: MeasurementFilter,
        sort: Optional[SortOrder] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        result = await execute_with_retry(session, build_measurement_query(flt, sort, limit, offset))
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def count(session: AsyncSession, flt: MeasurementFilter) -> int:
        result = await execute_with_retry(session, build_count_query(flt))
        return int(result.scalar_one())

    @staticmethod
    async def delete(session: AsyncSession, measurement_id: int, gym_id: int) -> bool:
        """
        Remove one measurement

        Returns:
            True if a row was deleted
        """
        result = await execute_with_retry(
            session,
            text("DELETE FROM measurements WHERE id = :id AND gym_id = :gym_id").bindparams(
                id=measurement_id, gym_id=gym_id
            )
        )
        return result.rowcount > 0
