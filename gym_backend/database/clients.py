"""
Client store - gym members, always looked up together with their gym
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Date, DateTime, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from gym_backend.database.queries import execute_with_retry

CLIENT_COLUMNS = (
    "id, gym_id, first_name, last_name, phone, email, status, registered_on, "
    "membership_started_on, membership_expires_on, notes, created_at, updated_at"
)

RESULT_TYPES = {
    "registered_on": Date,
    "membership_started_on": Date,
    "membership_expires_on": Date,
    "created_at": DateTime(timezone=True),
    "updated_at": DateTime(timezone=True),
}


class ClientStore:
    """Persistence for gym members"""

    @staticmethod
    async def create(session: AsyncSession, gym_id: int, values: Dict[str, Any]) -> int:
        """
        Insert a client

        Args:
            session: Database session
            gym_id: Owning gym
            values: Column values (first_name required; registered_on defaults to today)

        Returns:
            New client id
        """
        now = datetime.now(timezone.utc)
        result = await execute_with_retry(
            session,
            text("""
                INSERT INTO clients (
                    gym_id, first_name, last_name, phone, email, status,
                    registered_on, membership_started_on, membership_expires_on,
                    notes, created_at, updated_at
                ) VALUES (
                    :gym_id, :first_name, :last_name, :phone, :email, :status,
                    :registered_on, :membership_started_on, :membership_expires_on,
                    :notes, :created_at, :updated_at
                )
                RETURNING id
            """).bindparams(
                bindparam("registered_on", value=values.get("registered_on") or date.today(), type_=Date),
                bindparam("membership_started_on", value=values.get("membership_started_on"), type_=Date),
                bindparam("membership_expires_on", value=values.get("membership_expires_on"), type_=Date),
                bindparam("created_at", value=now, type_=DateTime(timezone=True)),
                bindparam("updated_at", value=now, type_=DateTime(timezone=True)),
                gym_id=gym_id,
                first_name=values["first_name"],
                last_name=values.get("last_name"),
                phone=values.get("phone"),
                email=values.get("email"),
                status=values.get("status") or "ACTIVO",
                notes=values.get("notes"),
            )
        )
        return int(result.scalar_one())

    @staticmethod
    async def get_by_id(session: AsyncSession, client_id: int, gym_id: int) -> Optional[Dict[str, Any]]:
        """
        Get client by id within a gym

        Returns:
            Row as a dict, or None when absent or owned by another gym
        """
        result = await execute_with_retry(
            session,
            text(f"""
                SELECT {CLIENT_COLUMNS}
                FROM clients
                WHERE id = :id AND gym_id = :gym_id
            """).bindparams(id=client_id, gym_id=gym_id).columns(**RESULT_TYPES)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    @staticmethod
    async def list_by_expiry_date(session: AsyncSession, gym_id: int, expires_on: date) -> List[Dict[str, Any]]:
        """Clients of a gym whose membership ends on the given date"""
        result = await execute_with_retry(
            session,
            text(f"""
                SELECT {CLIENT_COLUMNS}
                FROM clients
                WHERE gym_id = :gym_id AND membership_expires_on = :expires_on
                ORDER BY id ASC
            """).bindparams(
                bindparam("expires_on", value=expires_on, type_=Date),
                gym_id=gym_id,
            ).columns(**RESULT_TYPES)
        )
        return [dict(row) for row in result.mappings().all()]
