"""Gemini-powered flight extraction, used when heuristics come up short"""
import re
import json
import logging
from datetime import date
from typing import Optional

import requests
from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..models import ExtractedFlight
from ..utils.retry import retry_transient_http

logger = logging.getLogger(__name__)

GEMINI_API_URL = 'https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent'
NOT_A_FLIGHT_BOOKING = 'NOT_A_FLIGHT_BOOKING'

AIRPORT_RE = re.compile(r'^[A-Z]{3}$')

PROMPT_TEMPLATE = """Extract flight information from this email.

If the email is NOT a flight booking confirmation (for example a check-in reminder,
newsletter, promotion or receipt for something other than a flight), reply with exactly
{sentinel} and nothing else.

Otherwise return ONLY a JSON object with these fields (use null if not found):
- confirmationCode: booking reference/PNR (string)
- airline: airline name (string)
- flightNumber: flight number including airline code, e.g. "BA456" (string)
- departureAirport: 3-letter IATA code (string, uppercase)
- arrivalAirport: 3-letter IATA code (string, uppercase)
- departureDate: ISO date YYYY-MM-DD (string)
- arrivalDate: ISO date YYYY-MM-DD (string)

The flight number is mandatory. If you cannot find a flight number, reply with {sentinel}.

Email Subject: {subject}

Email Body:
{body}

Return ONLY valid JSON, no markdown, no explanations."""


def find_json_object(text):
    """Return the first well-formed JSON object embedded in text, or None"""
    decoder = json.JSONDecoder()
    for match in re.finditer(r'\{', text):
        try:
            obj, _ = decoder.raw_decode(text, match.start())
        except ValueError:
            continue
        if isinstance(obj, dict):
            return obj
    return None


def _blank_to_none(value):
    """Strip strings; blank and null-like strings become None"""
    if isinstance(value, str):
        value = value.strip()
        if not value or value.lower() in ('null', 'none', 'n/a'):
            return None
    return value


class AiFlightInfo(BaseModel):
    """Flight fields as returned by the model, camelCase on the wire"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    confirmation_code: Optional[str] = Field(default=None, alias='confirmationCode')
    airline: Optional[str] = None
    flight_number: Optional[str] = Field(default=None, alias='flightNumber')
    departure_airport: Optional[str] = Field(default=None, alias='departureAirport')
    arrival_airport: Optional[str] = Field(default=None, alias='arrivalAirport')
    departure_date: Optional[date] = Field(default=None, alias='departureDate')
    arrival_date: Optional[date] = Field(default=None, alias='arrivalDate')

    @field_validator('confirmation_code', 'airline', mode='before')
    @classmethod
    def _clean_text(cls, value):
        return _blank_to_none(value)

    @field_validator('flight_number', mode='before')
    @classmethod
    def _clean_flight_number(cls, value):
        value = _blank_to_none(value)
        if isinstance(value, str):
            return re.sub(r'\s+', '', value).upper()
        return value

    @field_validator('departure_airport', 'arrival_airport', mode='before')
    @classmethod
    def _clean_airport(cls, value):
        value = _blank_to_none(value)
        if isinstance(value, str):
            value = value.upper()
            return value if AIRPORT_RE.match(value) else None
        return value

    @field_validator('departure_date', 'arrival_date', mode='before')
    @classmethod
    def _parse_date(cls, value):
        value = _blank_to_none(value)
        if isinstance(value, str):
            try:
                return date_parser.parse(value).date()
            except (ValueError, OverflowError):
                logger.debug(f"Unparseable date from AI response: {value!r}")
                return None
        return value


def parse_response(text):
    """
    Turn the service's raw reply into an ExtractedFlight

    Args:
        text: Raw response text from the model

    Returns:
        ExtractedFlight with airports and flight number, or None
    """
    if not text or NOT_A_FLIGHT_BOOKING in text:
        return None

    data = find_json_object(text)
    if data is None:
        logger.debug("No JSON object in AI response")
        return None

    try:
        info = AiFlightInfo.model_validate(data)
    except ValidationError as e:
        logger.debug(f"AI response failed validation: {e}")
        return None

    flight = ExtractedFlight(**info.model_dump())
    if not flight.is_insertable:
        logger.debug("AI response lacks airports or flight number")
        return None
    return flight


class GeminiExtractor:
    """Fallback extractor backed by the Gemini generateContent API"""

    def __init__(self, api_key=None, model='gemini-2.0-flash', timeout=20,
                 max_body_chars=2000, session=None):
        """
        Initialize extractor

        Args:
            api_key: Gemini API key; without one the fallback is disabled
            model: Gemini model name
            timeout: Per-request timeout in seconds
            max_body_chars: Email text is truncated to this many characters
            session: Optional requests.Session
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.max_body_chars = max_body_chars
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning("GEMINI_API_KEY not configured, AI fallback extraction disabled")

    @property
    def enabled(self):
        return bool(self.api_key)

    def build_prompt(self, subject, text):
        body = (text or '')[:self.max_body_chars]
        return PROMPT_TEMPLATE.format(sentinel=NOT_A_FLIGHT_BOOKING, subject=subject, body=body)

    def extract(self, subject, text):
        """
        Ask the model for flight details

        Args:
            subject: Email subject
            text: Normalized email text

        Returns:
            ExtractedFlight or None (disabled, service failure, not a booking,
            or missing mandatory fields)
        """
        if not self.enabled:
            return None

        try:
            reply = self._generate(self.build_prompt(subject, text))
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Gemini extraction failed: {e}")
            return None

        flight = parse_response(reply)
        if flight:
            logger.info(f"Gemini extracted {flight.flight_number} "
                        f"{flight.departure_airport}->{flight.arrival_airport}")
        return flight

    @retry_transient_http(max_tries=3, max_time=60)
    def _generate(self, prompt):
        response = self.session.post(
            GEMINI_API_URL.format(model=self.model),
            headers={
                'Content-Type': 'application/json',
                'x-goog-api-key': self.api_key,
            },
            json={
                'contents': [{'parts': [{'text': prompt}]}],
                'generationConfig': {'temperature': 0, 'maxOutputTokens': 500},
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        return payload['candidates'][0]['content']['parts'][0]['text']
