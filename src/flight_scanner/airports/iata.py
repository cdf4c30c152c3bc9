"""IATA airport code validation and location lookup"""
from collections import namedtuple

AirportInfo = namedtuple('AirportInfo', ['code', 'city', 'country', 'lat', 'lng'])


# Codes accepted by the extractor: a curated subset of the ~9000 real codes.
# Some (ADD, CAN, MAN, SAN) are also English words, so uppercase prose can
# still yield false airports.
VALID_IATA_CODES = frozenset([
    # Major international hubs
    'LHR', 'JFK', 'LAX', 'ORD', 'DXB', 'CDG', 'AMS', 'FRA', 'IST', 'SIN',
    'HKG', 'NRT', 'ICN', 'PEK', 'PVG', 'CAN', 'SYD', 'MEL', 'YYZ', 'YVR',

    # United States
    'ATL', 'DFW', 'DEN', 'SFO', 'SEA', 'LAS', 'MCO', 'EWR', 'BOS', 'IAH',
    'MIA', 'PHX', 'IAD', 'MSP', 'DTW', 'PHL', 'LGA', 'BWI', 'MDW', 'SLC',
    'SAN', 'TPA', 'PDX', 'STL', 'HNL', 'AUS', 'BNA', 'OAK', 'RDU', 'SMF',

    # Europe
    'MAD', 'BCN', 'FCO', 'MXP', 'VCE', 'MUC', 'ZRH', 'VIE', 'BRU', 'CPH',
    'OSL', 'ARN', 'HEL', 'WAW', 'PRG', 'BUD', 'ATH', 'LIS', 'OPO', 'DUB',
    'MAN', 'EDI', 'GLA', 'LGW', 'STN', 'LTN', 'BHX', 'NCL',

    # Asia
    'BKK', 'KUL', 'CGK', 'MNL', 'HAN', 'SGN', 'DEL', 'BOM', 'BLR', 'HYD',
    'TPE', 'KHH', 'OSA', 'NGO', 'FUK', 'CTU', 'XIY', 'WUH', 'SZX', 'SHA',
    'HND', 'KIX',

    # Middle East
    'DOH', 'AUH', 'KWI', 'RUH', 'JED', 'CAI', 'AMM', 'BEY', 'TLV',

    # Latin America
    'GRU', 'GIG', 'EZE', 'SCL', 'LIM', 'BOG', 'MEX', 'PTY', 'UIO',

    # Africa
    'JNB', 'CPT', 'NBO', 'ADD', 'LOS', 'ACC', 'CMN', 'TUN',

    # Oceania
    'AKL', 'CHC', 'WLG', 'BNE', 'PER', 'ADL',

    # Turkey
    'SAW', 'AYT', 'ADB', 'ESB', 'DLM', 'BJV', 'TZX', 'ASR',

    # Thailand
    'DMK', 'CNX', 'HKT', 'USM', 'HDY',
])


AIRPORT_DATA = {
    'LHR': AirportInfo('LHR', 'London', 'United Kingdom', 51.4700, -0.4543),
    'LGW': AirportInfo('LGW', 'London', 'United Kingdom', 51.1537, -0.1821),
    'JFK': AirportInfo('JFK', 'New York', 'United States', 40.6413, -73.7781),
    'EWR': AirportInfo('EWR', 'Newark', 'United States', 40.6895, -74.1745),
    'LAX': AirportInfo('LAX', 'Los Angeles', 'United States', 33.9416, -118.4085),
    'SFO': AirportInfo('SFO', 'San Francisco', 'United States', 37.6213, -122.3790),
    'ORD': AirportInfo('ORD', 'Chicago', 'United States', 41.9742, -87.9073),
    'ATL': AirportInfo('ATL', 'Atlanta', 'United States', 33.6407, -84.4277),
    'DFW': AirportInfo('DFW', 'Dallas', 'United States', 32.8998, -97.0403),
    'DEN': AirportInfo('DEN', 'Denver', 'United States', 39.8561, -104.6737),
    'SEA': AirportInfo('SEA', 'Seattle', 'United States', 47.4502, -122.3088),
    'BOS': AirportInfo('BOS', 'Boston', 'United States', 42.3656, -71.0096),
    'MIA': AirportInfo('MIA', 'Miami', 'United States', 25.7959, -80.2870),
    'YYZ': AirportInfo('YYZ', 'Toronto', 'Canada', 43.6777, -79.6248),
    'YVR': AirportInfo('YVR', 'Vancouver', 'Canada', 49.1967, -123.1815),
    'DXB': AirportInfo('DXB', 'Dubai', 'United Arab Emirates', 25.2532, 55.3657),
    'DOH': AirportInfo('DOH', 'Doha', 'Qatar', 25.2731, 51.6081),
    'AUH': AirportInfo('AUH', 'Abu Dhabi', 'United Arab Emirates', 24.4330, 54.6511),
    'CDG': AirportInfo('CDG', 'Paris', 'France', 49.0097, 2.5479),
    'AMS': AirportInfo('AMS', 'Amsterdam', 'Netherlands', 52.3105, 4.7683),
    'FRA': AirportInfo('FRA', 'Frankfurt', 'Germany', 50.0379, 8.5622),
    'MUC': AirportInfo('MUC', 'Munich', 'Germany', 48.3537, 11.7750),
    'MAD': AirportInfo('MAD', 'Madrid', 'Spain', 40.4983, -3.5676),
    'BCN': AirportInfo('BCN', 'Barcelona', 'Spain', 41.2974, 2.0833),
    'FCO': AirportInfo('FCO', 'Rome', 'Italy', 41.8003, 12.2389),
    'ZRH': AirportInfo('ZRH', 'Zurich', 'Switzerland', 47.4582, 8.5555),
    'IST': AirportInfo('IST', 'Istanbul', 'Turkey', 41.2753, 28.7519),
    'SAW': AirportInfo('SAW', 'Istanbul', 'Turkey', 40.8986, 29.3092),
    'AYT': AirportInfo('AYT', 'Antalya', 'Turkey', 36.8987, 30.8005),
    'ESB': AirportInfo('ESB', 'Ankara', 'Turkey', 40.1281, 32.9951),
    'BKK': AirportInfo('BKK', 'Bangkok', 'Thailand', 13.6900, 100.7501),
    'DMK': AirportInfo('DMK', 'Bangkok', 'Thailand', 13.9126, 100.6068),
    'HKT': AirportInfo('HKT', 'Phuket', 'Thailand', 8.1132, 98.3169),
    'CNX': AirportInfo('CNX', 'Chiang Mai', 'Thailand', 18.7668, 98.9626),
    'SIN': AirportInfo('SIN', 'Singapore', 'Singapore', 1.3644, 103.9915),
    'HKG': AirportInfo('HKG', 'Hong Kong', 'Hong Kong', 22.3080, 113.9185),
    'NRT': AirportInfo('NRT', 'Tokyo', 'Japan', 35.7653, 140.3863),
    'HND': AirportInfo('HND', 'Tokyo', 'Japan', 35.5494, 139.7798),
    'ICN': AirportInfo('ICN', 'Seoul', 'South Korea', 37.4602, 126.4407),
    'DEL': AirportInfo('DEL', 'Delhi', 'India', 28.5562, 77.1000),
    'BOM': AirportInfo('BOM', 'Mumbai', 'India', 19.0896, 72.8656),
    'SYD': AirportInfo('SYD', 'Sydney', 'Australia', -33.9399, 151.1753),
    'MEL': AirportInfo('MEL', 'Melbourne', 'Australia', -37.6690, 144.8410),
    'AKL': AirportInfo('AKL', 'Auckland', 'New Zealand', -37.0082, 174.7850),
    'GRU': AirportInfo('GRU', 'Sao Paulo', 'Brazil', -23.4356, -46.4731),
    'MEX': AirportInfo('MEX', 'Mexico City', 'Mexico', 19.4361, -99.0719),
    'JNB': AirportInfo('JNB', 'Johannesburg', 'South Africa', -26.1367, 28.2411),
    'CAI': AirportInfo('CAI', 'Cairo', 'Egypt', 30.1219, 31.4056),
}


def is_valid_code(code):
    """Check whether a string is a known IATA airport code (case-insensitive)"""
    if not code:
        return False
    return code.upper() in VALID_IATA_CODES


def lookup(code):
    """
    Look up city, country and coordinates for an airport

    Args:
        code: IATA airport code

    Returns:
        AirportInfo or None when the airport has no location data
    """
    if not code:
        return None
    return AIRPORT_DATA.get(code.upper())
