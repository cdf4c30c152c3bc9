"""Duplicate detection module"""
import logging
import threading
from collections import defaultdict
from enum import Enum

logger = logging.getLogger(__name__)


class SkipReason(str, Enum):
    """Why a candidate flight was not stored"""
    NO_FLIGHT_NUMBER = 'no flight number'
    DUPLICATE_IN_SCAN = 'duplicate within this scan'
    DUPLICATE_CONFIRMATION_CODE = 'duplicate confirmation code in storage'
    DUPLICATE_FLIGHT_ROUTE = 'duplicate flight number+route'
    DUPLICATE_BY_DATE = 'duplicate by date'


def build_dedup_key(record):
    """
    Build the composite key identifying a flight across emails

    Args:
        record: ExtractedFlight

    Returns:
        Tuple keyed by confirmation code, else flight number, else departure date
    """
    route = (record.departure_airport, record.arrival_airport)
    if record.confirmation_code:
        return ('pnr', record.confirmation_code) + route
    if record.flight_number:
        return ('flight', record.flight_number) + route
    return ('route',) + route + (record.departure_date,)


class DedupSession:
    """Keys seen during one scan, shared by all workers of that scan"""

    def __init__(self):
        self._keys = set()
        self._lock = threading.Lock()
        self._owner_locks = defaultdict(threading.Lock)

    def add_if_new(self, key):
        """Atomically add a key; False when it was already present"""
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def owner_lock(self, owner_id):
        """Lock serializing the storage check-then-insert section for one owner"""
        with self._lock:
            return self._owner_locks[owner_id]

    def __contains__(self, key):
        with self._lock:
            return key in self._keys

    def __len__(self):
        with self._lock:
            return len(self._keys)


def new_dedup_session():
    """Create the registry for one scan; discard it when the scan ends"""
    return DedupSession()


def should_skip(record, session, store, owner_id):
    """
    Decide whether a candidate flight is a duplicate

    Checks run in a fixed order and the first hit wins.

    Args:
        record: ExtractedFlight with both airports present
        session: DedupSession of the current scan
        store: Persisted lookup with find_by_confirmation_code,
            find_by_flight_route and find_by_route_and_date
        owner_id: User the flights belong to

    Returns:
        SkipReason, or None when the record may be stored
    """
    if not record.flight_number:
        return SkipReason.NO_FLIGHT_NUMBER

    if not session.add_if_new(build_dedup_key(record)):
        return SkipReason.DUPLICATE_IN_SCAN

    dep, arr = record.departure_airport, record.arrival_airport

    if record.confirmation_code and store.find_by_confirmation_code(owner_id, record.confirmation_code):
        return SkipReason.DUPLICATE_CONFIRMATION_CODE

    if store.find_by_flight_route(owner_id, record.flight_number, dep, arr):
        return SkipReason.DUPLICATE_FLIGHT_ROUTE

    if record.departure_date and store.find_by_route_and_date(owner_id, dep, arr, record.departure_date):
        return SkipReason.DUPLICATE_BY_DATE

    return None


class Deduplicator:
    """Issues duplicate verdicts for one owner against a session and a store"""

    def __init__(self, store):
        """
        Initialize deduplicator

        Args:
            store: Persisted lookup (see should_skip)
        """
        self.store = store

    def should_skip(self, record, session, owner_id):
        reason = should_skip(record, session, self.store, owner_id)
        if reason:
            logger.debug(f"Skipping {record.flight_number or 'flight'} "
                         f"{record.departure_airport}->{record.arrival_airport}: {reason.value}")
        return reason
