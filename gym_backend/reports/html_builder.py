"""
HTML documents for the measurement reports

Layout sticks to tables and block boxes so xhtml2pdf renders it the same
way a browser does.
"""
from datetime import date
from typing import List, Optional, Sequence, Tuple

from gym_backend.models.schemas import ClientResponse, MeasurementResponse
from gym_backend.reports.formatting import (
    client_full_name,
    escape,
    format_bmi,
    format_date,
    format_number,
)

_BASE_STYLE = """
@page { size: a4 portrait; margin: 1.6cm; }
body { font-family: Helvetica, Arial, sans-serif; color: #111827; font-size: 11px; }
.header { background-color: #ffe5e6; padding: 12px 14px; }
.title { font-size: 18px; font-weight: bold; }
.subtitle { font-size: 10px; color: #6b7280; }
.card-soft { background-color: #ffe5d9; border: 1px solid #ffe1d0; padding: 10px 12px; margin-top: 12px; }
.client-name { font-size: 16px; font-weight: bold; }
.badge { background-color: #ff5e62; color: #ffffff; font-weight: bold; padding: 3px 8px; text-align: center; }
.muted { color: #6b7280; font-size: 10px; }
.section-title { font-size: 13px; font-weight: bold; margin-top: 14px; margin-bottom: 6px; }
.label { font-size: 9px; color: #6b7280; text-transform: uppercase; }
.value { font-size: 14px; font-weight: bold; }
.unit { font-size: 9px; color: #6b7280; }
.metric { background-color: #f9fafb; border: 1px solid #eef0f4; padding: 8px; text-align: center; }
.summary-card { background-color: #fff7f2; border: 1px solid #ffe6da; padding: 6px 8px; }
table.history { width: 100%; margin-top: 8px; }
table.history th { font-size: 10px; color: #6b7280; text-align: left; padding: 4px 6px; border-bottom: 1px solid #e5e7eb; }
table.history td { font-size: 10px; padding: 4px 6px; background-color: #f9fafb; border-bottom: 1px solid #f3f4f6; }
table.grid { width: 100%; }
"""


def _document(body: str) -> str:
    return (
        '<html lang="es"><head><meta charset="utf-8"/>'
        f"<style>{_BASE_STYLE}</style>"
        f"</head><body>{body}</body></html>"
    )


def _header(title: str, subtitle: str) -> str:
    return (
        '<div class="header">'
        f'<div class="title">{escape(title)}</div>'
        f'<div class="subtitle">{escape(subtitle)}</div>'
        "</div>"
    )


def _metric(label: str, value: str, unit: str = "") -> str:
    html = (
        '<div class="metric">'
        f'<div class="label">{escape(label)}</div>'
        f'<div class="value">{escape(value)}</div>'
    )
    if unit:
        html += f'<div class="unit">{escape(unit)}</div>'
    return html + "</div>"


def _grid(cells: Sequence[str]) -> str:
    width = 100 // len(cells)
    tds = "".join(f'<td width="{width}%">{cell}</td>' for cell in cells)
    return f'<table class="grid" cellspacing="6"><tr>{tds}</tr></table>'


def _client_banner(name: str, subline: str, badge: str) -> str:
    return (
        '<div class="card-soft"><table class="grid"><tr>'
        f'<td><div class="client-name">{name}</div><div class="muted">{subline}</div></td>'
        f'<td width="30%"><div class="badge">{badge}</div></td>'
        "</tr></table>"
    )


def build_list_report_html(
    client: ClientResponse,
    measurements: List[MeasurementResponse],
    generated_on: Optional[date] = None,
) -> str:
    """
    Report over all of a client's measurements

    Args:
        client: Owning client
        measurements: Newest first; the first one feeds the summary cards
        generated_on: Footer date, today by default
    """
    latest = measurements[0] if measurements else None
    parts = [_header("Reporte de Mediciones", "Resumen de mediciones del cliente")]

    parts.append(_client_banner(
        escape(client_full_name(client)),
        f"Cliente ID: {client.id}",
        f"{len(measurements)} mediciones",
    ))
    parts.append(
        f'<div class="muted">Ultima medicion: {format_date(latest.measured_on) if latest else "-"}</div>'
    )
    if latest is not None:
        summary: List[Tuple[str, str]] = [
            ("Peso", f"{format_number(latest.weight)} kg"),
            ("Altura", f"{format_number(latest.height)} cm"),
            ("IMC", format_bmi(latest.weight, latest.height)),
            ("Grasa", f"{format_number(latest.body_fat_pct)} %"),
        ]
        parts.append(_grid([
            f'<div class="summary-card"><div class="label">{label}</div><div class="value">{value}</div></div>'
            for label, value in summary
        ]))
    parts.append("</div>")

    parts.append('<div class="section-title">Historial de Mediciones</div>')
    if not measurements:
        parts.append('<div class="muted">No hay mediciones registradas.</div>')
    else:
        headers = ["Fecha", "Peso (kg)", "Altura (cm)", "IMC", "Cintura (cm)", "Cadera (cm)", "Grasa (%)"]
        parts.append('<table class="history"><thead><tr>')
        parts.extend(f"<th>{h}</th>" for h in headers)
        parts.append("</tr></thead><tbody>")
        for m in measurements:
            cells = [
                format_date(m.measured_on),
                format_number(m.weight),
                format_number(m.height),
                format_bmi(m.weight, m.height),
                format_number(m.waist_cm),
                format_number(m.hip_cm),
                format_number(m.body_fat_pct),
            ]
            parts.append("<tr>" + "".join(f"<td>{c}</td>" for c in cells) + "</tr>")
            if m.notes and m.notes.strip():
                parts.append(
                    f'<tr><td colspan="{len(headers)}" class="muted">Notas: {escape(m.notes)}</td></tr>'
                )
        parts.append("</tbody></table>")

    parts.append(f'<div class="muted" style="margin-top: 16px;">Generado: {format_date(generated_on or date.today())}</div>')
    return _document("".join(parts))


def build_detail_report_html(client: ClientResponse, measurement: MeasurementResponse) -> str:
    """Report for a single measurement"""
    m = measurement
    parts = [_header("Detalle de Medicion", "Resumen completo de la medicion registrada")]

    parts.append(_client_banner(
        escape(client_full_name(client)),
        f"Fecha: {format_date(m.measured_on)}",
        f"Medicion ID: {m.id}",
    ))
    parts.append("</div>")

    parts.append('<div class="section-title">Datos Basicos</div>')
    parts.append(_grid([
        _metric("Peso", format_number(m.weight), "kg"),
        _metric("Altura", format_number(m.height), "cm"),
        _metric("IMC", format_bmi(m.weight, m.height)),
        _metric("Grasa", format_number(m.body_fat_pct), "%"),
    ]))

    parts.append('<div class="section-title">Circunferencias Torso</div>')
    parts.append(_grid([
        _metric("Pecho", format_number(m.chest_cm), "cm"),
        _metric("Cintura", format_number(m.waist_cm), "cm"),
        _metric("Cadera", format_number(m.hip_cm), "cm"),
    ]))

    parts.append('<div class="section-title">Circunferencias Brazos</div>')
    parts.append(_grid([
        _metric("Brazo Izquierdo", format_number(m.left_arm_cm), "cm"),
        _metric("Brazo Derecho", format_number(m.right_arm_cm), "cm"),
    ]))

    parts.append('<div class="section-title">Circunferencias Piernas</div>')
    parts.append(_grid([
        _metric("Pierna Izquierda", format_number(m.left_leg_cm), "cm"),
        _metric("Pierna Derecha", format_number(m.right_leg_cm), "cm"),
    ]))

    if m.notes and m.notes.strip():
        parts.append('<div class="section-title">Notas</div>')
        parts.append(f'<div class="muted">{escape(m.notes)}</div>')

    return _document("".join(parts))
