"""PDF attachment text extraction (e-tickets, itineraries)"""
import logging
from io import BytesIO

from pypdf import PdfReader

logger = logging.getLogger(__name__)


def extract_pdf_text(data):
    """
    Extract plain text from PDF bytes

    Never raises: a damaged or encrypted PDF yields an empty string.

    Args:
        data: Raw PDF bytes

    Returns:
        Text of all pages joined by newlines, or '' on failure
    """
    if not data:
        return ''

    try:
        reader = PdfReader(BytesIO(data))
        pages = []
        for page in reader.pages:
            text = (page.extract_text() or '').replace('\u202f', ' ').replace('\xa0', ' ')
            pages.append(text)
        return '\n'.join(pages)
    except Exception as e:
        logger.warning(f"PDF text extraction failed: {e}")
        return ''
