from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from gym_backend.config import settings
from gym_backend.database.clients import ClientStore
from gym_backend.database.schema import create_schema
from gym_backend.main import create_app
from gym_backend.models.schemas import MeasurementRequest
from gym_backend.utils.url_builder import build_async_url

GYM_A = 1
GYM_B = 2


def measurement_payload(client_id: int, **overrides) -> dict:
    """Valid POST /api/measurements body, wire names"""
    payload = {
        "clientId": client_id,
        "fecha": "2024-03-01",
        "peso": 70.0,
        "altura": 175.0,
        "pechoCm": 95.0,
        "cinturaCm": 80.0,
        "caderaCm": 98.0,
        "brazoIzqCm": 32.0,
        "brazoDerCm": 32.5,
        "piernaIzqCm": 55.0,
        "piernaDerCm": 55.5,
        "grasaCorporal": 18.2,
        "notas": "Primera medicion",
    }
    payload.update(overrides)
    return payload


def measurement_request(client_id: int, **overrides) -> MeasurementRequest:
    return MeasurementRequest.model_validate(measurement_payload(client_id, **overrides))


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'gym.db'}"


@pytest.fixture
async def session(database_url):
    """AsyncSession on a fresh SQLite file with the schema created"""
    engine = create_async_engine(build_async_url(database_url), poolclass=NullPool)
    await create_schema(engine)
    session_maker = sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    async with session_maker() as db_session:
        yield db_session
    await engine.dispose()


@pytest.fixture
def make_client(session):
    async def _make(gym_id: int = GYM_A, first_name: str = "Ana", last_name: str = "Lopez", **values):
        client_id = await ClientStore.create(
            session, gym_id, {"first_name": first_name, "last_name": last_name, **values}
        )
        await session.commit()
        return client_id
    return _make


@pytest.fixture
def api(database_url, monkeypatch):
    """TestClient over a fresh SQLite database"""
    monkeypatch.setattr(settings, "DATABASE_URL", database_url)
    monkeypatch.setattr(settings, "DB_AUTO_CREATE", True)
    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def api_client_id(api):
    """A client of GYM_A created through the API"""
    response = api.post(
        "/api/clients",
        json={"nombre": "José", "apellido": "Ñandú", "fechaVencimiento": date(2024, 12, 31).isoformat()},
        headers={"X-Gym-Id": str(GYM_A)},
    )
    assert response.status_code == 201
    return response.json()["id"]
