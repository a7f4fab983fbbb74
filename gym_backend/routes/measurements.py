"""
Measurement endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from gym_backend.config import DEFAULT_PAGE_SIZE
from gym_backend.database.connection import get_db_session
from gym_backend.models.schemas import MeasurementRequest, MeasurementResponse, Page
from gym_backend.services.measurement_service import MeasurementService, ReportPdfPayload
from gym_backend.utils.validators import validate_gym_id

router = APIRouter(prefix="/api/measurements")


def _pdf_response(payload: ReportPdfPayload) -> Response:
    return Response(
        content=payload.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{payload.filename}"'},
    )


@router.post("", status_code=201, response_model=MeasurementResponse)
async def create_measurement(
    payload: MeasurementRequest,
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    """Register a measurement for a client of the current gym"""
    gym_id = validate_gym_id(x_gym_id)
    return await MeasurementService.create(session, gym_id, payload)


@router.get("", response_model=Page[MeasurementResponse])
async def list_measurements(
    client_id: Optional[int] = Query(None, alias="clientId"),
    page: int = Query(0),
    size: int = Query(DEFAULT_PAGE_SIZE),
    sort: Optional[str] = Query(None, description="field[,asc|desc], default fecha,desc"),
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    """Paged measurements of the current gym, newest first by default"""
    gym_id = validate_gym_id(x_gym_id)
    return await MeasurementService.list(session, gym_id, client_id, page, size, sort)


@router.get("/report/pdf")
async def download_report(
    client_id: Optional[int] = Query(None, alias="clientId"),
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    """All of a client's measurements as a PDF attachment"""
    gym_id = validate_gym_id(x_gym_id)
    return _pdf_response(await MeasurementService.build_report_pdf(session, gym_id, client_id))


@router.get("/{measurement_id}", response_model=MeasurementResponse)
async def get_measurement(
    measurement_id: int,
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    gym_id = validate_gym_id(x_gym_id)
    return await MeasurementService.get_by_id(session, gym_id, measurement_id)


@router.get("/{measurement_id}/report/pdf")
async def download_detail_report(
    measurement_id: int,
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    """One measurement as a PDF attachment"""
    gym_id = validate_gym_id(x_gym_id)
    return _pdf_response(await MeasurementService.build_detail_report_pdf(session, gym_id, measurement_id))


@router.delete("/{measurement_id}", status_code=204)
async def delete_measurement(
    measurement_id: int,
    x_gym_id: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_db_session),
):
    gym_id = validate_gym_id(x_gym_id)
    await MeasurementService.delete(session, gym_id, measurement_id)
    return Response(status_code=204)
