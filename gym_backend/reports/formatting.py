"""
Value formatting shared by the measurement reports
"""
import math
import re
import unicodedata
from datetime import date
from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from typing import Optional, Union

from gym_backend.models.schemas import ClientResponse

Number = Union[int, float, Decimal]

MISSING = "-"
_TWO_PLACES = Decimal("0.01")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def _round2(value: Number) -> Decimal:
    number = Decimal(str(value))
    # quantize needs every integer digit plus the two decimals to fit the precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + 3)
        return number.quantize(_TWO_PLACES, rounding=ROUND_HALF_EVEN)


def format_number(value: Optional[Number]) -> str:
    """At most two decimals, no trailing zeros; "-" when missing"""
    if value is None or not math.isfinite(value):
        return MISSING
    text = format(_round2(value), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def compute_bmi(weight: Optional[Number], height_cm: Optional[Number]) -> Optional[float]:
    """
    Body-mass index, weight (kg) / height (m)^2, rounded to two decimals

    Returns None when either input is missing or height is zero.
    """
    if weight is None or height_cm is None or height_cm == 0:
        return None
    height_m = float(height_cm) / 100.0
    divisor = height_m * height_m
    if divisor == 0:
        return None
    bmi = float(weight) / divisor
    if not math.isfinite(bmi):
        return None
    return float(_round2(bmi))


def format_bmi(weight: Optional[Number], height_cm: Optional[Number]) -> str:
    return format_number(compute_bmi(weight, height_cm))


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value else MISSING


def escape(value: Optional[str]) -> str:
    if value is None:
        return ""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def client_full_name(client: ClientResponse) -> str:
    first = (client.first_name or "").strip()
    last = (client.last_name or "").strip()
    return f"{first} {last}".strip()


def client_report_filename(client: ClientResponse) -> str:
    """
    mediciones_<slug>.pdf from the client's full name

    Diacritics are stripped and every run of non-alphanumerics becomes a
    single underscore; an empty slug falls back to "cliente".
    """
    decomposed = unicodedata.normalize("NFD", client_full_name(client))
    without_marks = "".join(ch for ch in decomposed if not unicodedata.category(ch).startswith("M"))
    slug = _NON_ALNUM.sub("_", without_marks).strip("_")
    return f"mediciones_{slug or 'cliente'}.pdf"


def measurement_report_filename(measurement_id: int) -> str:
    return f"medicion_{measurement_id}.pdf"
