"""
Client service - business logic for gym members
"""
import logging
from datetime import date
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from gym_backend.database.clients import ClientStore
from gym_backend.errors import NotFoundError
from gym_backend.models.schemas import ClientCreateRequest, ClientResponse
from gym_backend.utils.validators import blank_to_none

logger = logging.getLogger(__name__)


class ClientService:
    """Service for client-related operations"""

    @staticmethod
    async def create(session: AsyncSession, gym_id: int, request: ClientCreateRequest) -> ClientResponse:
        values = request.model_dump()
        values["first_name"] = request.first_name.strip()
        for field in ("last_name", "phone", "email", "notes"):
            values[field] = blank_to_none(values[field])

        client_id = await ClientStore.create(session, gym_id, values)
        await session.commit()
        logger.info("Client %s created in gym %s", client_id, gym_id)

        return ClientResponse.model_validate(await ClientStore.get_by_id(session, client_id, gym_id))

    @staticmethod
    async def get_by_id(session: AsyncSession, gym_id: int, client_id: int) -> ClientResponse:
        row = await ClientStore.get_by_id(session, client_id, gym_id)
        if row is None:
            raise NotFoundError("Cliente no encontrado")
        return ClientResponse.model_validate(row)

    @staticmethod
    async def list_expiring_on(session: AsyncSession, gym_id: int, expires_on: date) -> List[ClientResponse]:
        rows = await ClientStore.list_by_expiry_date(session, gym_id, expires_on)
        return [ClientResponse.model_validate(r) for r in rows]
