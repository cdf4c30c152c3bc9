"""Flight email parser - heuristic extraction of flight details from text"""
import re
import logging
from datetime import date

from ..airports import is_valid_code
from ..models import ExtractedFlight

logger = logging.getLogger(__name__)


# Labels match case-insensitively; the captured code must be uppercase.
# Order is priority: the first pattern that matches anywhere wins.
CONFIRMATION_PATTERNS = [
    re.compile(r'\b(?i:confirmation)\s*(?i:code|number)?\s*[:#]?\s*([A-Z0-9]{5,8})\b'),
    re.compile(r'\b(?i:booking)\s*(?i:reference|code)?\s*[:#]?\s*([A-Z0-9]{5,8})\b'),
    re.compile(r'\b(?i:pnr)\s*[:#]?\s*([A-Z0-9]{5,8})\b'),
    re.compile(r'\b(?i:record\s+locator)\s*[:#]?\s*([A-Z0-9]{5,8})\b'),
    re.compile(r'\b(?i:reservation)\s*(?i:code|number)?\s*[:#]?\s*([A-Z0-9]{5,8})\b'),
    re.compile(r'\b(?i:ref(?:erence)?)\s*[:#.]?\s*([A-Z0-9]{5,8})\b'),
    re.compile(r'\b(?i:ticket\s+number)\s*[:#]?\s*([A-Z0-9]{5,8})\b'),
]

# More specific names precede names they contain ("Delta Air Lines" before "Delta")
AIRLINES = [
    'American Airlines', 'Delta Air Lines', 'Delta', 'United Airlines', 'United',
    'Southwest Airlines', 'Southwest', 'JetBlue', 'Alaska Airlines',
    'British Airways', 'Lufthansa', 'Air France', 'KLM', 'Emirates',
    'Qatar Airways', 'Turkish Airlines', 'Pegasus Airlines', 'Etihad Airways', 'Etihad',
    'Virgin Atlantic', 'Iberia', 'Ryanair', 'easyJet', 'Air Canada', 'Qantas',
    'Singapore Airlines', 'Cathay Pacific', 'All Nippon Airways', 'ANA',
    'Japan Airlines', 'JAL', 'Thai Airways', 'Thai AirAsia', 'Bangkok Airways',
    'Malaysia Airlines', 'Garuda Indonesia', 'AirAsia', 'Air Asia',
]

FLIGHT_NUMBER_PATTERN = re.compile(r'\b([A-Z]{2})\s*(\d{1,4})\b')
AIRPORT_CODE_PATTERN = re.compile(r'\b([A-Z]{3})\b')

MONTHS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}
_MONTH = r'(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*'


def _iso_date(match):
    year, month, day = match.groups()
    return int(year), int(month), int(day)


def _day_month_year(match):
    day, month, year = match.groups()
    return int(year), MONTHS[month[:3].lower()], int(day)


def _month_day_year(match):
    month, day, year = match.groups()
    return int(year), MONTHS[month[:3].lower()], int(day)


# (pattern, converter) pairs, tried in this order
DATE_PATTERNS = [
    (re.compile(r'(\d{4})[-/](\d{1,2})[-/](\d{1,2})'), _iso_date),
    (re.compile(r'\b(\d{1,2})\s+' + _MONTH + r'\s+(\d{4})', re.IGNORECASE), _day_month_year),
    (re.compile(_MONTH + r'\s+(\d{1,2}),?\s+(\d{4})', re.IGNORECASE), _month_day_year),
]


def extract_confirmation_code(text):
    """Return the booking reference following the highest-priority label, or None"""
    for pattern in CONFIRMATION_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_airline(text):
    """Return the first known airline name (in list order) contained in the text"""
    for airline in AIRLINES:
        if airline in text:
            return airline
    return None


def extract_flight_number(text):
    """Return the first carrier-code + number token, e.g. 'BA 456' -> 'BA456'"""
    match = FLIGHT_NUMBER_PATTERN.search(text)
    if match:
        return f"{match.group(1)}{match.group(2)}"
    return None


def extract_airport_codes(text, is_valid=is_valid_code):
    """
    Find valid IATA codes in first-seen document order

    Args:
        text: Text to scan
        is_valid: Predicate deciding whether a 3-letter token is an airport

    Returns:
        List of unique codes; the first is read as departure, the second as arrival
    """
    codes = []
    for code in AIRPORT_CODE_PATTERN.findall(text):
        if code not in codes and is_valid(code):
            codes.append(code)
    return codes


def extract_dates(text):
    """Collect dates pattern by pattern, each pattern in document order"""
    dates = []
    for pattern, convert in DATE_PATTERNS:
        for match in pattern.finditer(text):
            try:
                dates.append(date(*convert(match)))
            except ValueError:
                logger.debug(f"Ignoring invalid date '{match.group(0)}'")
    return dates


class FlightParser:
    """Heuristic flight email parser"""

    def __init__(self, is_valid_airport=is_valid_code):
        self.is_valid_airport = is_valid_airport

    def parse(self, text):
        """
        Extract flight details from normalized email text

        Args:
            text: Normalized email text

        Returns:
            ExtractedFlight, or None when two airport codes were not found
        """
        if not text:
            return None

        flight = ExtractedFlight(
            confirmation_code=extract_confirmation_code(text),
            airline=extract_airline(text),
            flight_number=extract_flight_number(text),
        )

        airports = extract_airport_codes(text, self.is_valid_airport)
        if len(airports) >= 2:
            flight.departure_airport = airports[0]
            flight.arrival_airport = airports[1]

        dates = extract_dates(text)
        if dates:
            flight.departure_date = dates[0]
            if len(dates) > 1:
                flight.arrival_date = dates[1]

        if not flight.is_usable:
            logger.debug(f"Heuristic parse found {len(airports)} airport code(s), need 2")
            return None

        logger.debug(f"Heuristic parse: {flight.flight_number} "
                     f"{flight.departure_airport}->{flight.arrival_airport}")
        return flight
