"""
Measurement service - business logic for body measurements and their reports
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from gym_backend.database.clients import ClientStore
from gym_backend.database.measurements import (
    MEASUREMENT_FIELDS,
    MeasurementFilter,
    MeasurementStore,
    SortOrder,
)
from gym_backend.errors import BadRequestError, NotFoundError
from gym_backend.models.schemas import (
    ClientResponse,
    MeasurementRequest,
    MeasurementResponse,
    Page,
)
from gym_backend.reports.formatting import client_report_filename, measurement_report_filename
from gym_backend.reports.html_builder import build_detail_report_html, build_list_report_html
from gym_backend.reports.pdf import render_pdf
from gym_backend.utils.validators import blank_to_none, validate_page_request

logger = logging.getLogger(__name__)

MEASUREMENT_NOT_FOUND = "Medicion no encontrada"
CLIENT_NOT_IN_GYM = "clientId invalido (no pertenece al gym)"


@dataclass(frozen=True)
class ReportPdfPayload:
    pdf: bytes
    filename: str


class MeasurementService:
    """Service for measurement operations; gym_id is always passed explicitly"""

    @staticmethod
    async def create(session: AsyncSession, gym_id: int, request: MeasurementRequest) -> MeasurementResponse:
        """
        Store a new measurement for a client of this gym

        Raises:
            BadRequestError: If the client doesn't belong to the gym
        """
        client = await ClientStore.get_by_id(session, request.client_id, gym_id)
        if client is None:
            raise BadRequestError(CLIENT_NOT_IN_GYM)

        values = request.model_dump(include=set(MEASUREMENT_FIELDS))
        values["notes"] = blank_to_none(request.notes)

        measurement_id = await MeasurementStore.insert(session, gym_id, client["id"], values)
        await session.commit()
        logger.info("Measurement %s created for client %s in gym %s", measurement_id, client["id"], gym_id)

        row = await MeasurementStore.get_by_id(session, measurement_id, gym_id)
        return MeasurementResponse.model_validate(row)

    @staticmethod
    async def list(
        session: AsyncSession,
        gym_id: int,
        client_id: Optional[int],
        page: int,
        size: int,
        sort: Optional[str] = None,
    ) -> Page[MeasurementResponse]:
        """
        Page through the gym's measurements, optionally for one client

        Raises:
            BadRequestError: Out-of-policy page/size or unknown sort
        """
        validate_page_request(page, size)
        try:
            order = SortOrder.parse(sort)
        except ValueError as e:
            raise BadRequestError(str(e))

        flt = MeasurementFilter(gym_id=gym_id, client_id=client_id)
        total = await MeasurementStore.count(session, flt)
        rows = await MeasurementStore.find(session, flt, order, limit=size, offset=page * size)

        return Page[MeasurementResponse](
            content=[MeasurementResponse.model_validate(r) for r in rows],
            number=page,
            size=size,
            total_elements=total,
            total_pages=math.ceil(total / size) if total else 0,
        )

    @staticmethod
    async def get_by_id(session: AsyncSession, gym_id: int, measurement_id: int) -> MeasurementResponse:
        row = await MeasurementStore.get_by_id(session, measurement_id, gym_id)
        if row is None:
            raise NotFoundError(MEASUREMENT_NOT_FOUND)
        return MeasurementResponse.model_validate(row)

    @staticmethod
    async def delete(session: AsyncSession, gym_id: int, measurement_id: int) -> None:
        row = await MeasurementStore.get_by_id(session, measurement_id, gym_id)
        if row is None:
            raise NotFoundError(MEASUREMENT_NOT_FOUND)

        await MeasurementStore.delete(session, row["id"], gym_id)
        await session.commit()
        logger.info("Measurement %s deleted in gym %s", measurement_id, gym_id)

    @staticmethod
    async def build_report_pdf(session: AsyncSession, gym_id: int, client_id: Optional[int]) -> ReportPdfPayload:
        """
        PDF over all of a client's measurements, newest first

        Raises:
            BadRequestError: If client_id is missing
            NotFoundError: If the client is absent or belongs to another gym
        """
        if client_id is None:
            raise BadRequestError("clientId requerido")

        client_row = await ClientStore.get_by_id(session, client_id, gym_id)
        if client_row is None:
            raise NotFoundError("Cliente no encontrado")
        client = ClientResponse.model_validate(client_row)

        rows = await MeasurementStore.find(
            session,
            MeasurementFilter(gym_id=gym_id, client_id=client_id),
            SortOrder(column="measured_on", descending=True),
        )
        measurements = [MeasurementResponse.model_validate(r) for r in rows]

        pdf = render_pdf(build_list_report_html(client, measurements))
        return ReportPdfPayload(pdf=pdf, filename=client_report_filename(client))

    @staticmethod
    async def build_detail_report_pdf(
        session: AsyncSession, gym_id: int, measurement_id: Optional[int]
    ) -> ReportPdfPayload:
        """
        PDF for a single measurement

        Raises:
            BadRequestError: If measurement_id is missing
            NotFoundError: If the measurement is absent or belongs to another gym
        """
        if measurement_id is None:
            raise BadRequestError("measurementId requerido")

        row = await MeasurementStore.get_by_id(session, measurement_id, gym_id)
        if row is None:
            raise NotFoundError(MEASUREMENT_NOT_FOUND)
        measurement = MeasurementResponse.model_validate(row)

        client_row = await ClientStore.get_by_id(session, measurement.client_id, gym_id)
        if client_row is None:
            raise NotFoundError("Cliente no encontrado")
        client = ClientResponse.model_validate(client_row)

        pdf = render_pdf(build_detail_report_html(client, measurement))
        return ReportPdfPayload(pdf=pdf, filename=measurement_report_filename(measurement.id))
