from datetime import date, datetime

from gym_backend.models.schemas import ClientResponse, MeasurementResponse
from gym_backend.reports.html_builder import build_detail_report_html, build_list_report_html
from gym_backend.reports.pdf import render_pdf

NOW = datetime(2024, 3, 1, 9, 30)


def make_client():
    return ClientResponse(
        id=3,
        gym_id=1,
        first_name="Ana",
        last_name="<Lopez>",
        status="ACTIVO",
        registered_on=date(2024, 1, 1),
        created_at=NOW,
        updated_at=NOW,
    )


def make_measurement(measurement_id, measured_on, weight=70.0, height=175.0, notes=None, body_fat=None):
    return MeasurementResponse(
        id=measurement_id,
        gym_id=1,
        client_id=3,
        measured_on=measured_on,
        weight=weight,
        height=height,
        chest_cm=95,
        waist_cm=80.25,
        hip_cm=98,
        left_arm_cm=32,
        right_arm_cm=32.5,
        left_leg_cm=55,
        right_leg_cm=55.5,
        body_fat_pct=body_fat,
        notes=notes,
        created_at=NOW,
        updated_at=NOW,
    )


def test_list_report_lists_measurements_in_given_order():
    measurements = [
        make_measurement(2, date(2024, 3, 1), weight=68.5, body_fat=17.0),
        make_measurement(1, date(2024, 2, 1), notes='Tom & "Jerry" <3'),
    ]
    html = build_list_report_html(make_client(), measurements, generated_on=date(2024, 3, 2))

    assert "Reporte de Mediciones" in html
    assert "Ana &lt;Lopez&gt;" in html
    assert "2 mediciones" in html
    assert "Ultima medicion: 2024-03-01" in html
    assert html.index("2024-03-01") < html.index("2024-02-01")
    assert "Notas: Tom &amp; &quot;Jerry&quot; &lt;3" in html
    assert "Generado: 2024-03-02" in html
    # latest measurement summary: 68.5 / 1.75^2
    assert "22.37" in html
    assert "17 %" in html


def test_list_report_without_measurements():
    html = build_list_report_html(make_client(), [], generated_on=date(2024, 3, 2))

    assert "No hay mediciones registradas." in html
    assert "0 mediciones" in html
    assert "Ultima medicion: -" in html


def test_list_report_missing_body_fat_renders_dash():
    html = build_list_report_html(make_client(), [make_measurement(1, date(2024, 2, 1))])
    assert "- %" in html


def test_detail_report_sections():
    html = build_detail_report_html(make_client(), make_measurement(9, date(2024, 2, 1), notes="Buen progreso"))

    assert "Detalle de Medicion" in html
    assert "Medicion ID: 9" in html
    assert "Fecha: 2024-02-01" in html
    for section in ("Datos Basicos", "Circunferencias Torso", "Circunferencias Brazos", "Circunferencias Piernas"):
        assert section in html
    assert "22.86" in html
    assert "80.25" in html
    assert "Buen progreso" in html


def test_detail_report_skips_blank_notes():
    html = build_detail_report_html(make_client(), make_measurement(9, date(2024, 2, 1), notes="   "))
    assert "Notas" not in html


def test_detail_report_zero_height_bmi_is_dash():
    html = build_detail_report_html(make_client(), make_measurement(9, date(2024, 2, 1), height=0))
    assert '<div class="label">IMC</div><div class="value">-</div>' in html


def test_render_pdf_produces_pdf_bytes():
    html = build_list_report_html(make_client(), [make_measurement(1, date(2024, 2, 1), notes="ok")])
    pdf = render_pdf(html)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 500
