"""Tests for the Gemini fallback extractor"""
import json
from datetime import date
from unittest.mock import Mock

import pytest
import requests

from flight_scanner.fallback.gemini_extractor import (
    NOT_A_FLIGHT_BOOKING,
    GeminiExtractor,
    find_json_object,
    parse_response,
)


FLIGHT_JSON = {
    'confirmationCode': 'ABC123',
    'airline': 'British Airways',
    'flightNumber': 'ba 456',
    'departureAirport': 'lhr',
    'arrivalAirport': 'JFK',
    'departureDate': '2024-06-15',
    'arrivalDate': None,
}


def gemini_response(text, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = {
        'candidates': [{'content': {'parts': [{'text': text}]}}]
    }
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    else:
        response.raise_for_status.return_value = None
    return response


class TestParseResponse:
    """Test parse_response"""

    def test_plain_json(self):
        flight = parse_response(json.dumps(FLIGHT_JSON))

        assert flight is not None
        assert flight.confirmation_code == 'ABC123'
        assert flight.flight_number == 'BA456'
        assert flight.departure_airport == 'LHR'
        assert flight.arrival_airport == 'JFK'
        assert flight.departure_date == date(2024, 6, 15)
        assert flight.arrival_date is None

    def test_markdown_fenced_json(self):
        text = "```json\n" + json.dumps(FLIGHT_JSON) + "\n```"
        assert parse_response(text).flight_number == 'BA456'

    def test_first_well_formed_block(self):
        text = "Note {not json} then " + json.dumps(FLIGHT_JSON) + " and {\"x\": 1}"
        assert parse_response(text).confirmation_code == 'ABC123'

    def test_sentinel(self):
        assert parse_response(NOT_A_FLIGHT_BOOKING) is None
        assert parse_response(f"{NOT_A_FLIGHT_BOOKING}\n{json.dumps(FLIGHT_JSON)}") is None

    def test_airports_only_rejected(self):
        data = dict(FLIGHT_JSON, flightNumber=None)
        assert parse_response(json.dumps(data)) is None

    def test_invalid_airport_rejected(self):
        data = dict(FLIGHT_JSON, arrivalAirport='New York')
        assert parse_response(json.dumps(data)) is None

    def test_null_like_strings_cleared(self):
        data = dict(FLIGHT_JSON, confirmationCode=' null ', airline='')
        flight = parse_response(json.dumps(data))
        assert flight.confirmation_code is None
        assert flight.airline is None

    def test_wrong_field_type_rejected(self):
        data = dict(FLIGHT_JSON, flightNumber=['BA', 456])
        assert parse_response(json.dumps(data)) is None

    def test_unknown_fields_ignored(self):
        data = dict(FLIGHT_JSON, seat='12A')
        assert parse_response(json.dumps(data)).flight_number == 'BA456'

    def test_unparseable_date_dropped(self):
        data = dict(FLIGHT_JSON, departureDate='sometime soon')
        flight = parse_response(json.dumps(data))
        assert flight is not None
        assert flight.departure_date is None

    @pytest.mark.parametrize("text", ["", "no json here", "{broken", "[1, 2, 3]"])
    def test_malformed(self, text):
        assert parse_response(text) is None

    def test_find_json_object(self):
        assert find_json_object('x {"a": {"b": 1}} y') == {'a': {'b': 1}}
        assert find_json_object('nothing') is None


class TestGeminiExtractor:
    """Test GeminiExtractor"""

    def setup_method(self):
        self.session = Mock()
        self.extractor = GeminiExtractor(api_key='test-key', timeout=5,
                                         max_body_chars=50, session=self.session)

    def test_disabled_without_api_key(self):
        session = Mock()
        extractor = GeminiExtractor(api_key=None, session=session)

        assert not extractor.enabled
        assert extractor.extract('Subject', 'LHR JFK') is None
        session.post.assert_not_called()

    def test_successful_extraction(self):
        self.session.post.return_value = gemini_response(json.dumps(FLIGHT_JSON))

        flight = self.extractor.extract('Your trip', 'Flight BA 456 London to New York')

        assert flight.flight_number == 'BA456'
        _, kwargs = self.session.post.call_args
        assert kwargs['headers']['x-goog-api-key'] == 'test-key'
        assert kwargs['timeout'] == 5
        assert kwargs['json']['generationConfig']['temperature'] == 0

    def test_body_truncated_in_prompt(self):
        prompt = self.extractor.build_prompt('Subject', 'x' * 200)
        assert 'x' * 50 in prompt
        assert 'x' * 51 not in prompt
        assert NOT_A_FLIGHT_BOOKING in prompt

    def test_http_error_returns_none(self):
        self.session.post.return_value = gemini_response('', status_code=500)
        assert self.extractor.extract('Subject', 'text') is None

    def test_timeout_returns_none(self):
        self.session.post.side_effect = requests.Timeout('timed out')
        assert self.extractor.extract('Subject', 'text') is None
        assert self.session.post.call_count == 3

    def test_missing_candidates_returns_none(self):
        response = gemini_response('')
        response.json.return_value = {'promptFeedback': {'blockReason': 'SAFETY'}}
        self.session.post.return_value = response
        assert self.extractor.extract('Subject', 'text') is None

    def test_not_a_booking_returns_none(self):
        self.session.post.return_value = gemini_response(NOT_A_FLIGHT_BOOKING)
        assert self.extractor.extract('Sale!', 'text') is None
