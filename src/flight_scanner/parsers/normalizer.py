"""Turns a raw multi-part message into one plain-text blob"""
import re
import logging
from bs4 import BeautifulSoup

from .pdf_text import extract_pdf_text

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = 'application/pdf'
WHITESPACE_RE = re.compile(r'\s+')


def decode_text(data):
    """Decode body bytes as UTF-8, dropping undecodable bytes"""
    if not data:
        return ''
    return data.decode('utf-8', errors='ignore')


def strip_html(html):
    """Remove tags without adding separators, then collapse runs of whitespace"""
    text = BeautifulSoup(html, 'lxml').get_text()
    return WHITESPACE_RE.sub(' ', text).strip()


def find_first_part(part, mime_type):
    """Depth-first search for the first part of the given type carrying data"""
    if part.mime_type == mime_type and part.data is not None:
        return part
    for child in part.parts:
        found = find_first_part(child, mime_type)
        if found is not None:
            return found
    return None


def iter_parts(part):
    """Yield every part of the tree, depth-first"""
    yield part
    for child in part.parts:
        yield from iter_parts(child)


class TextNormalizer:
    """Builds subject + body + PDF text for a RawEmail"""

    def __init__(self, fetch_attachment=None, pdf_extractor=extract_pdf_text):
        """
        Initialize normalizer

        Args:
            fetch_attachment: Callable (message_id, attachment_id) -> bytes.
                When None, PDF attachments that are not inlined are ignored.
            pdf_extractor: Callable bytes -> str
        """
        self.fetch_attachment = fetch_attachment
        self.pdf_extractor = pdf_extractor

    def normalize(self, raw_email):
        """
        Normalize an email to plain text

        Args:
            raw_email: RawEmail

        Returns:
            subject + "\\n" + body text + PDF text
        """
        body_text = self.extract_body(raw_email.payload)
        pdf_text = self.extract_pdf_attachments(raw_email)
        return f"{raw_email.subject}\n{body_text}{pdf_text}"

    def extract_body(self, payload):
        """Pick the body text: inline body, else first text/plain, else first text/html"""
        if not payload.parts:
            return decode_text(payload.data)

        plain = find_first_part(payload, 'text/plain')
        if plain is not None:
            return decode_text(plain.data)

        html = find_first_part(payload, 'text/html')
        if html is not None:
            return strip_html(decode_text(html.data))

        return ''

    def extract_pdf_attachments(self, raw_email):
        """Concatenate the text of every PDF part, newline-separated"""
        chunks = []
        for part in iter_parts(raw_email.payload):
            if part.mime_type != PDF_MIME_TYPE:
                continue
            data = self._load_pdf_bytes(raw_email.message_id, part)
            text = self.pdf_extractor(data) if data else ''
            if text:
                logger.debug(f"Extracted {len(text)} chars from PDF '{part.filename}'")
            chunks.append(f"\n{text}")
        return ''.join(chunks)

    def _load_pdf_bytes(self, message_id, part):
        if part.attachment_id and self.fetch_attachment is not None:
            try:
                return self.fetch_attachment(message_id, part.attachment_id)
            except Exception as e:
                logger.warning(f"Could not fetch attachment '{part.filename}' of {message_id}: {e}")
                return b''
        return part.data or b''
