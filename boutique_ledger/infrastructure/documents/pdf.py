"""PDF output for rendered HTML documents"""

import logging

logger = logging.getLogger(__name__)


def render_pdf(html_content: str) -> bytes:
    """Convert an HTML document to PDF bytes with WeasyPrint (loaded on first call)"""
    from weasyprint import HTML

    pdf = HTML(string=html_content).write_pdf()
    logger.debug("Rendered PDF document", extra={"size_bytes": len(pdf)})
    return pdf
