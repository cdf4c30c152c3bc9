"""Tests for pipeline data records"""
import base64
from datetime import date

from flight_scanner.models import ExtractedFlight, MessagePart, RawEmail, decode_body_data


def b64url(text):
    return base64.urlsafe_b64encode(text.encode('utf-8')).decode('ascii').rstrip('=')


class TestDecodeBodyData:
    """Test decode_body_data"""

    def test_missing_padding(self):
        assert decode_body_data(b64url('Flight BA456')) == b'Flight BA456'

    def test_url_safe_alphabet(self):
        data = base64.urlsafe_b64encode(b'\xfb\xff\xfe').decode('ascii')
        assert '-' in data or '_' in data
        assert decode_body_data(data) == b'\xfb\xff\xfe'

    def test_empty(self):
        assert decode_body_data('') == b''
        assert decode_body_data(None) == b''


class TestRawEmail:
    """Test RawEmail.from_gmail"""

    def test_headers_and_tree(self):
        message = {
            'id': 'msg1',
            'payload': {
                'mimeType': 'multipart/mixed',
                'headers': [
                    {'name': 'subject', 'value': 'Your e-ticket'},
                    {'name': 'From', 'value': 'noreply@thy.com'},
                    {'name': 'Subject', 'value': 'second subject ignored'},
                ],
                'body': {'size': 0},
                'parts': [
                    {'mimeType': 'text/plain', 'body': {'data': b64url('TK1980 IST LHR')}},
                    {
                        'mimeType': 'application/pdf',
                        'filename': 'ticket.pdf',
                        'body': {'attachmentId': 'att1', 'size': 1024},
                    },
                ],
            },
        }

        email = RawEmail.from_gmail(message)

        assert email.message_id == 'msg1'
        assert email.subject == 'Your e-ticket'
        assert email.sender == 'noreply@thy.com'
        assert email.date == ''
        text_part, pdf_part = email.payload.parts
        assert text_part.data == b'TK1980 IST LHR'
        assert pdf_part.data is None
        assert pdf_part.attachment_id == 'att1'
        assert pdf_part.filename == 'ticket.pdf'

    def test_missing_payload(self):
        email = RawEmail.from_gmail({'id': 'msg2'})

        assert email.subject == ''
        assert email.payload == MessagePart()


class TestExtractedFlight:
    """Test ExtractedFlight predicates and serialization"""

    def test_usable_needs_both_airports(self):
        assert not ExtractedFlight(departure_airport='LHR').is_usable
        assert ExtractedFlight(departure_airport='LHR', arrival_airport='JFK').is_usable

    def test_insertable_needs_flight_number(self):
        flight = ExtractedFlight(departure_airport='LHR', arrival_airport='JFK')
        assert not flight.is_insertable

        flight.flight_number = 'BA456'
        assert flight.is_insertable

    def test_to_dict_uses_iso_dates(self):
        flight = ExtractedFlight(flight_number='BA456', departure_date=date(2024, 6, 15))

        data = flight.to_dict()

        assert data['departure_date'] == '2024-06-15'
        assert data['arrival_date'] is None
        assert data['flight_number'] == 'BA456'
