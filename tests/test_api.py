import json

from fastapi.testclient import TestClient

from gym_backend.config import settings
from gym_backend.main import create_app
from gym_backend.routes.backup import get_backup_service
from gym_backend.services.backup_service import BackupService, CommandResult

from conftest import GYM_A, GYM_B, measurement_payload

HEADERS_A = {"X-Gym-Id": str(GYM_A)}
HEADERS_B = {"X-Gym-Id": str(GYM_B)}


def create_measurement(api, client_id, headers=HEADERS_A, **overrides):
    response = api.post("/api/measurements", json=measurement_payload(client_id, **overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_healthz(api):
    assert api.get("/healthz").json() == {"status": "ok", "database": "ok"}


def test_database_not_configured_is_503(monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", "")
    with TestClient(create_app()) as client:
        response = client.get("/api/measurements", headers=HEADERS_A)
        assert client.get("/healthz").json()["database"] == "not_configured"

    assert response.status_code == 503
    assert response.json()["message"] == "Database not configured"


def test_create_and_fetch_measurement(api, api_client_id):
    created = create_measurement(api, api_client_id)

    assert created["clientId"] == api_client_id
    assert created["gymId"] == GYM_A
    assert created["fecha"] == "2024-03-01"
    assert created["pechoCm"] == 95.0
    assert created["grasaCorporal"] == 18.2
    assert created["createdAt"] and created["updatedAt"]

    fetched = api.get(f"/api/measurements/{created['id']}", headers=HEADERS_A)
    assert fetched.status_code == 200
    assert fetched.json() == created


def test_optional_fields_may_be_omitted(api, api_client_id):
    payload = measurement_payload(api_client_id)
    del payload["grasaCorporal"]
    del payload["notas"]

    response = api.post("/api/measurements", json=payload, headers=HEADERS_A)

    assert response.status_code == 201
    assert response.json()["grasaCorporal"] is None
    assert response.json()["notas"] is None


def test_validation_errors_are_aggregated(api, api_client_id):
    payload = measurement_payload(api_client_id, peso=None)
    del payload["altura"]
    del payload["fecha"]

    response = api.post("/api/measurements", json=payload, headers=HEADERS_A)

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validación fallida"
    assert body["path"] == "/api/measurements"
    assert set(body["details"]["fieldErrors"]) == {"peso", "altura", "fecha"}


def test_non_finite_numbers_are_rejected(api, api_client_id):
    body = json.dumps(measurement_payload(api_client_id, peso="INF", grasaCorporal="NAN"))
    body = body.replace('"INF"', "Infinity").replace('"NAN"', "NaN")

    response = api.post(
        "/api/measurements",
        content=body,
        headers={**HEADERS_A, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validación fallida"
    assert set(response.json()["details"]["fieldErrors"]) == {"peso", "grasaCorporal"}


def test_reports_render_huge_values(api, api_client_id):
    measurement_id = create_measurement(api, api_client_id, peso=1e27, altura=1e-12)["id"]

    detail = api.get(f"/api/measurements/{measurement_id}/report/pdf", headers=HEADERS_A)
    listing = api.get("/api/measurements/report/pdf", params={"clientId": api_client_id}, headers=HEADERS_A)

    assert detail.status_code == 200
    assert listing.status_code == 200
    assert listing.content.startswith(b"%PDF")


def test_missing_gym_header_is_rejected(api, api_client_id):
    response = api.post("/api/measurements", json=measurement_payload(api_client_id))
    assert response.status_code == 400
    assert "X-Gym-Id" in response.json()["message"]

    assert api.get("/api/measurements", headers={"X-Gym-Id": "abc"}).status_code == 400
    assert api.get("/api/measurements", headers={"X-Gym-Id": "0"}).status_code == 400


def test_cross_tenant_client_reference_is_bad_request(api, api_client_id):
    response = api.post("/api/measurements", json=measurement_payload(api_client_id), headers=HEADERS_B)
    assert response.status_code == 400
    assert response.json()["message"] == "clientId invalido (no pertenece al gym)"


def test_tenant_isolation(api, api_client_id):
    created = create_measurement(api, api_client_id)
    measurement_id = created["id"]

    assert api.get(f"/api/measurements/{measurement_id}", headers=HEADERS_B).status_code == 404
    assert api.get(f"/api/measurements/{measurement_id}/report/pdf", headers=HEADERS_B).status_code == 404
    assert api.delete(f"/api/measurements/{measurement_id}", headers=HEADERS_B).status_code == 404
    assert api.get("/api/measurements", headers=HEADERS_B).json()["totalElements"] == 0

    assert api.get(f"/api/measurements/{measurement_id}", headers=HEADERS_A).status_code == 200


def test_list_defaults_and_filter(api, api_client_id):
    create_measurement(api, api_client_id, fecha="2024-01-01")
    create_measurement(api, api_client_id, fecha="2024-02-01")

    response = api.get("/api/measurements", params={"clientId": api_client_id}, headers=HEADERS_A)

    assert response.status_code == 200
    body = response.json()
    assert [m["fecha"] for m in body["content"]] == ["2024-02-01", "2024-01-01"]
    assert body["number"] == 0
    assert body["size"] == 100
    assert body["totalElements"] == 2
    assert body["totalPages"] == 1


def test_list_rejects_oversized_page(api):
    response = api.get("/api/measurements", params={"size": 501}, headers=HEADERS_A)
    assert response.status_code == 400
    assert response.json()["message"] == "size maximo permitido: 500"

    assert api.get("/api/measurements", params={"size": 500}, headers=HEADERS_A).status_code == 200


def test_delete(api, api_client_id):
    measurement_id = create_measurement(api, api_client_id)["id"]

    response = api.delete(f"/api/measurements/{measurement_id}", headers=HEADERS_A)
    assert response.status_code == 204
    assert response.content == b""

    again = api.delete(f"/api/measurements/{measurement_id}", headers=HEADERS_A)
    assert again.status_code == 404
    assert again.json()["message"] == "Medicion no encontrada"


def test_client_report_pdf(api, api_client_id):
    create_measurement(api, api_client_id)

    response = api.get("/api/measurements/report/pdf", params={"clientId": api_client_id}, headers=HEADERS_A)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="mediciones_Jose_Nandu.pdf"'
    assert response.content.startswith(b"%PDF")


def test_client_report_requires_client_id(api):
    response = api.get("/api/measurements/report/pdf", headers=HEADERS_A)
    assert response.status_code == 400
    assert response.json()["message"] == "clientId requerido"


def test_client_report_other_gym_is_not_found(api, api_client_id):
    response = api.get("/api/measurements/report/pdf", params={"clientId": api_client_id}, headers=HEADERS_B)
    assert response.status_code == 404


def test_detail_report_pdf(api, api_client_id):
    measurement_id = create_measurement(api, api_client_id)["id"]

    response = api.get(f"/api/measurements/{measurement_id}/report/pdf", headers=HEADERS_A)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == f'attachment; filename="medicion_{measurement_id}.pdf"'
    assert response.content.startswith(b"%PDF")


def test_clients_endpoints(api, api_client_id):
    client = api.get(f"/api/clients/{api_client_id}", headers=HEADERS_A).json()
    assert client["nombre"] == "José"
    assert client["estado"] == "ACTIVO"

    assert api.get(f"/api/clients/{api_client_id}", headers=HEADERS_B).status_code == 404

    expiring = api.get("/api/clients/expiring", params={"fecha": "2024-12-31"}, headers=HEADERS_A).json()
    assert [c["id"] for c in expiring] == [api_client_id]
    assert api.get("/api/clients/expiring", params={"fecha": "2024-12-31"}, headers=HEADERS_B).json() == []


def test_create_client_validation(api):
    response = api.post("/api/clients", json={"nombre": "", "estado": "VIP"}, headers=HEADERS_A)
    assert response.status_code == 400
    assert set(response.json()["details"]["fieldErrors"]) == {"nombre", "estado"}


def test_unhandled_error_is_opaque(api, monkeypatch):
    from gym_backend.services import measurement_service

    async def boom(*args, **kwargs):
        raise RuntimeError("secret connection string leaked")

    monkeypatch.setattr(measurement_service.MeasurementStore, "get_by_id", boom)
    client = TestClient(api.app, raise_server_exceptions=False)

    response = client.get("/api/measurements/1", headers=HEADERS_A)

    assert response.status_code == 500
    assert response.json()["message"] == "Error interno"
    assert "secret" not in response.text


def test_failed_request_is_still_access_logged(api, monkeypatch):
    from gym_backend import logging_config
    from gym_backend.services import measurement_service

    async def boom(*args, **kwargs):
        raise RuntimeError("store exploded")

    records = []
    monkeypatch.setattr(measurement_service.MeasurementStore, "get_by_id", boom)
    monkeypatch.setattr(logging_config.request_logger, "info", records.append)
    client = TestClient(api.app, raise_server_exceptions=False)

    response = client.get("/api/measurements/1", headers={**HEADERS_A, "X-Request-ID": "req-500"})

    assert response.status_code == 500
    assert len(records) == 1
    assert records[0]["status"] == "500"
    assert records[0]["request_id"] == "req-500"
    assert records[0]["request"] == "GET /api/measurements/1"


class StaticRunner:
    def run(self, args, timeout):
        return CommandResult(exit_code=0, output="backup ok\n")


def test_backup_endpoint(api, tmp_path):
    script = tmp_path / "backup.sh"
    script.write_text("#!/bin/sh\n")
    service = BackupService(token="s3cret", script_path=str(script), runner=StaticRunner())
    api.app.dependency_overrides[get_backup_service] = lambda: service

    ok = api.post("/api/backup", headers={"X-BACKUP-TOKEN": "s3cret"})
    denied = api.post("/api/backup", headers={"X-BACKUP-TOKEN": "nope"})
    missing = api.post("/api/backup")

    assert ok.status_code == 200
    assert ok.json() == {"success": True, "exitCode": 0, "output": "backup ok"}
    assert denied.json() == {"success": False, "exitCode": -1, "output": "Token de respaldo invalido."}
    assert missing.json()["success"] is False


def test_backup_endpoint_unconfigured(api, monkeypatch):
    monkeypatch.setattr(settings, "BACKUP_TOKEN", "")
    response = api.post("/api/backup", headers={"X-BACKUP-TOKEN": "anything"})
    assert response.status_code == 200
    assert response.json()["output"] == "Token de respaldo no configurado."


def test_request_id_is_echoed(api):
    response = api.get("/healthz", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_startup_serves_app_from_environment(monkeypatch):
    import startup

    calls = []
    monkeypatch.setattr(startup.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("PORT", "9123")

    startup.main()

    app_path, kwargs = calls[0]
    assert app_path == "gym_backend.main:app"
    assert kwargs["port"] == 9123
    assert kwargs["log_config"] is None
