"""Tests for PDF text extraction"""
from io import BytesIO
from unittest.mock import Mock, patch

from pypdf import PdfWriter

from flight_scanner.parsers.pdf_text import extract_pdf_text


def blank_pdf():
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestExtractPdfText:
    """Test extract_pdf_text"""

    def test_empty_input(self):
        assert extract_pdf_text(b'') == ''
        assert extract_pdf_text(None) == ''

    def test_garbage_bytes_never_raise(self):
        assert extract_pdf_text(b'this is not a pdf') == ''

    def test_blank_pdf(self):
        assert extract_pdf_text(blank_pdf()).strip() == ''

    def test_pages_joined_with_newlines(self):
        pages = [Mock(), Mock()]
        pages[0].extract_text.return_value = 'E-TICKET\xa0BA456'
        pages[1].extract_text.return_value = 'LHR JFK'

        with patch('flight_scanner.parsers.pdf_text.PdfReader') as reader:
            reader.return_value.pages = pages
            assert extract_pdf_text(b'%PDF-1.4') == 'E-TICKET BA456\nLHR JFK'
