"""
HTML -> PDF rendering
"""
import io
import logging

from xhtml2pdf import pisa

logger = logging.getLogger(__name__)


class ReportRenderError(RuntimeError):
    """The PDF engine could not produce a document"""


def render_pdf(html: str) -> bytes:
    """
    Render an HTML document to PDF bytes

    Raises:
        ReportRenderError: If xhtml2pdf reports errors
    """
    output = io.BytesIO()
    try:
        status = pisa.CreatePDF(src=html, dest=output, encoding="utf-8")
    except Exception as e:
        raise ReportRenderError("No se pudo generar el PDF de mediciones") from e

    if status.err:
        logger.error("xhtml2pdf reported %s error(s) while rendering a report", status.err)
        raise ReportRenderError("No se pudo generar el PDF de mediciones")

    return output.getvalue()
