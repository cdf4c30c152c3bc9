"""Per-email pipeline: normalize, classify, extract, deduplicate, store"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from ..airports import lookup
from ..dedup import Deduplicator, new_dedup_session
from ..models import (
    ProcessResult,
    ScanLogEntry,
    STATUS_SUCCESS,
    STATUS_SKIPPED,
    STATUS_FAILED,
    STATUS_NO_FLIGHT_DATA,
)
from ..parsers import BookingClassifier, FlightParser
from .scan_logger import ScanLogger

logger = logging.getLogger(__name__)


class EmailProcessor:
    """Runs one scan's emails through the extraction pipeline"""

    def __init__(self, normalizer, store, owner_id, classifier=None, parser=None,
                 fallback=None, session=None, scan_logger=None, airport_lookup=lookup):
        """
        Initialize processor

        Args:
            normalizer: TextNormalizer
            store: StateManager (duplicate lookups and inserts)
            owner_id: User the flights are stored for
            classifier: BookingClassifier
            parser: FlightParser
            fallback: Optional extractor with extract(subject, text)
            session: DedupSession; a fresh one is created when omitted
            scan_logger: ScanLogger; a fresh one is created when omitted
            airport_lookup: Callable code -> AirportInfo or None
        """
        self.normalizer = normalizer
        self.store = store
        self.owner_id = owner_id
        self.classifier = classifier or BookingClassifier()
        self.parser = parser or FlightParser()
        self.fallback = fallback
        self.session = session if session is not None else new_dedup_session()
        self.scan_logger = scan_logger if scan_logger is not None else ScanLogger()
        self.airport_lookup = airport_lookup
        self.deduplicator = Deduplicator(store)

    def process_email(self, raw_email):
        """
        Process one email

        Args:
            raw_email: RawEmail

        Returns:
            ProcessResult; exactly one ScanLogEntry is recorded per call
        """
        text = self.normalizer.normalize(raw_email)

        is_booking, why = self.classifier.classify(text)
        if not is_booking:
            logger.debug(f"Not a booking confirmation: {raw_email.subject[:60]}")
            return self._finish(raw_email, STATUS_SKIPPED, f"not a booking confirmation ({why})")

        flight = self.parser.parse(text)
        if (flight is None or not flight.is_usable) and self.fallback is not None:
            logger.debug(f"Heuristics incomplete, trying AI fallback: {raw_email.subject[:60]}")
            flight = self.fallback.extract(raw_email.subject, text)

        if flight is None or not flight.is_usable:
            return self._finish(raw_email, STATUS_NO_FLIGHT_DATA, 'no departure/arrival airports found')

        # Storage lookups and the insert must not interleave for one owner
        with self.session.owner_lock(self.owner_id):
            reason = self.deduplicator.should_skip(flight, self.session, self.owner_id)
            if reason:
                return self._finish(raw_email, STATUS_SKIPPED, reason.value, flight)

            try:
                self.store.insert_flight(
                    self.owner_id,
                    flight,
                    departure_info=self.airport_lookup(flight.departure_airport),
                    arrival_info=self.airport_lookup(flight.arrival_airport),
                    subject=raw_email.subject,
                    message_id=raw_email.message_id,
                )
            except Exception as e:
                logger.error(f"Failed to store flight from {raw_email.message_id}: {e}")
                return self._finish(raw_email, STATUS_FAILED, str(e), flight)

        logger.info(f"✓ {flight.flight_number} {flight.departure_airport}->{flight.arrival_airport} "
                    f"({raw_email.subject[:50]})")
        return self._finish(raw_email, STATUS_SUCCESS, None, flight, accepted=True)

    def process_many(self, message_ids, load_email, max_workers=4):
        """
        Load and process emails on a bounded worker pool

        Args:
            message_ids: Ids to process
            load_email: Callable message_id -> RawEmail
            max_workers: Pool size

        Returns:
            List of ProcessResult in completion order
        """
        results = []
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='scan') as executor:
            futures = {
                executor.submit(self._load_and_process, message_id, load_email): message_id
                for message_id in message_ids
            }
            for i, future in enumerate(as_completed(futures), 1):
                results.append(future.result())
                if i % 25 == 0:
                    logger.info(f"Processed {i}/{len(futures)} emails...")
        return results

    def _load_and_process(self, message_id, load_email):
        try:
            raw_email = load_email(message_id)
            return self.process_email(raw_email)
        except Exception as e:
            logger.error(f"Error processing message {message_id}: {e}")
            entry = ScanLogEntry(email_id=message_id, subject='', status=STATUS_FAILED, reason=str(e))
            self.scan_logger.record(entry)
            return ProcessResult(accepted=None, log_entry=entry)

    def _finish(self, raw_email, status, reason, flight=None, accepted=False):
        entry = ScanLogEntry(
            email_id=raw_email.message_id,
            subject=raw_email.subject,
            sender=raw_email.sender,
            date=raw_email.date,
            status=status,
            reason=reason,
            extracted=flight.to_dict() if flight else None,
        )
        self.scan_logger.record(entry)
        return ProcessResult(accepted=flight if accepted else None, log_entry=entry)
