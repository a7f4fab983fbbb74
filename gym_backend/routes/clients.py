"""
Client endpoints
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gym_backend.database.connection import get_db_session
from gym_backend.models.schemas import ClientCreateRequest, ClientResponse
from gym_backend.services.client_service import ClientService
from gym_backend.utils.validators import validate_gym_id

router = APIRouter(prefix="/api/clients")


@router.post("", status_code=201, response_model=ClientResponse)
async def create_client(
    payload: ClientCreateRequest,
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    gym_id = validate_gym_id(x_gym_id)
    return await ClientService.create(session, gym_id, payload)


@router.get("/expiring", response_model=List[ClientResponse])
async def list_expiring_clients(
    fecha: date = Query(..., description="Membership expiry date, YYYY-MM-DD"),
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    """Clients whose membership expires on the given date"""
    gym_id = validate_gym_id(x_gym_id)
    return await ClientService.list_expiring_on(session, gym_id, fecha)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    gym_id = validate_gym_id(x_gym_id)
    return await ClientService.get_by_id(session, gym_id, client_id)
