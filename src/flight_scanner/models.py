"""Data records passed between the pipeline stages"""
import base64
import logging
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


# Scan log statuses
STATUS_SUCCESS = 'success'
STATUS_SKIPPED = 'skipped'
STATUS_FAILED = 'failed'
STATUS_NO_FLIGHT_DATA = 'no_flight_data'

SCAN_STATUSES = (STATUS_SUCCESS, STATUS_SKIPPED, STATUS_FAILED, STATUS_NO_FLIGHT_DATA)


def decode_body_data(data):
    """Decode Gmail's base64url body data, tolerating missing padding"""
    if not data:
        return b''
    padded = data + '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded)


@dataclass(frozen=True)
class MessagePart:
    """One node of a MIME tree"""
    mime_type: str = ''
    data: Optional[bytes] = None
    attachment_id: Optional[str] = None
    filename: str = ''
    parts: Tuple['MessagePart', ...] = ()

    @classmethod
    def from_gmail(cls, payload):
        """Build a part tree from a Gmail API payload dict"""
        body = payload.get('body', {})
        data = decode_body_data(body['data']) if body.get('data') else None
        return cls(
            mime_type=payload.get('mimeType', ''),
            data=data,
            attachment_id=body.get('attachmentId'),
            filename=payload.get('filename', ''),
            parts=tuple(cls.from_gmail(p) for p in payload.get('parts', [])),
        )


@dataclass(frozen=True)
class RawEmail:
    """A fetched message: headers plus its MIME part tree"""
    message_id: str
    subject: str = ''
    sender: str = ''
    date: str = ''
    payload: MessagePart = field(default_factory=MessagePart)

    @classmethod
    def from_gmail(cls, message):
        """
        Build a RawEmail from a Gmail `format=full` message

        Args:
            message: Message resource dict returned by users.messages.get

        Returns:
            RawEmail
        """
        headers = {}
        payload = message.get('payload', {})
        for header in payload.get('headers', []):
            name = header['name'].lower()
            if name in ('subject', 'from', 'date') and name not in headers:
                headers[name] = header['value']

        return cls(
            message_id=message['id'],
            subject=headers.get('subject', ''),
            sender=headers.get('from', ''),
            date=headers.get('date', ''),
            payload=MessagePart.from_gmail(payload),
        )


@dataclass
class ExtractedFlight:
    """Structured flight fields pulled out of one email"""
    confirmation_code: Optional[str] = None
    airline: Optional[str] = None
    flight_number: Optional[str] = None
    departure_airport: Optional[str] = None
    arrival_airport: Optional[str] = None
    departure_date: Optional[date] = None
    arrival_date: Optional[date] = None

    @property
    def is_usable(self):
        """Both airport codes are present"""
        return bool(self.departure_airport and self.arrival_airport)

    @property
    def is_insertable(self):
        """Usable and carries a flight number"""
        return self.is_usable and bool(self.flight_number)

    def to_dict(self):
        data = asdict(self)
        for key in ('departure_date', 'arrival_date'):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


@dataclass(frozen=True)
class ScanLogEntry:
    """Outcome of processing one email"""
    email_id: str
    subject: str
    status: str
    sender: str = ''
    date: str = ''
    reason: Optional[str] = None
    extracted: Optional[dict] = None


@dataclass(frozen=True)
class ProcessResult:
    """What the pipeline hands back to the scan driver for one email"""
    accepted: Optional[ExtractedFlight]
    log_entry: ScanLogEntry
