from __future__ import annotations

import logging

from resume_builder.errors import RenderingFailed

logger = logging.getLogger(__name__)

DOCUMENT_ENVELOPE = (
    '<!DOCTYPE html><html><head><meta charset="UTF-8"></head><body>{body}</body></html>'
)


def wrap_document(markup: str) -> str:
    """Wrap an HTML fragment in a minimal document; full documents pass through."""
    if "<html" in markup.lower():
        return markup
    return DOCUMENT_ENVELOPE.format(body=markup)


def render_pdf(markup: str) -> bytes:
    """Convert HTML markup to PDF bytes."""
    html = wrap_document(markup)
    try:
        pdf_bytes = _html_to_pdf(html)
    except Exception as e:
        logger.error("Error generating PDF", exc_info=True)
        raise RenderingFailed(f"Failed to generate PDF: {e}") from e
    logger.info("Successfully generated PDF, size: %d bytes", len(pdf_bytes))
    return pdf_bytes


def _html_to_pdf(html: str) -> bytes:
    """Convert HTML string to PDF bytes using WeasyPrint, with fpdf2 fallback."""
    try:
        from weasyprint import HTML
        return HTML(string=html).write_pdf()
    except (ImportError, OSError):
        logger.warning("WeasyPrint not available, using fpdf2 fallback")
        from resume_builder.export.pdf_fallback import html_to_pdf_fpdf2
        return html_to_pdf_fpdf2(html)
