"""Booking classifier - determines if an email is a genuine booking confirmation"""
import logging

logger = logging.getLogger(__name__)


# Operational and marketing phrases. Checked first: airline mail often talks
# about a booking while really being a check-in reminder or a promotion.
REJECT_PHRASES = [
    'check-in now',
    'online check-in',
    'web check-in',
    'mobile check-in',
    'newsletter',
    'special offer',
    'sale',
    'discount',
    'subscribe',
    'unsubscribe',
    'promotional',
    'advertisement',
]

ACCEPT_PHRASES = [
    'booking confirmation',
    'flight confirmation',
    'ticket confirmation',
    'your booking',
    'itinerary',
    'e-ticket',
    'eticket',
    'travel confirmation',
    'reservation confirmed',
    'booking reference',
    'pnr',
    'record locator',
    'boarding pass',
    'ticket receipt',
    'flight receipt',
]


class BookingClassifier:
    """Keyword allow/deny classifier biased toward precision"""

    def __init__(self, reject_phrases=None, accept_phrases=None):
        self.reject_phrases = [p.lower() for p in (reject_phrases or REJECT_PHRASES)]
        self.accept_phrases = [p.lower() for p in (accept_phrases or ACCEPT_PHRASES)]

    def classify(self, text):
        """
        Classify normalized email text

        Args:
            text: Normalized email text (subject + body + PDF text)

        Returns:
            Tuple (is_booking: bool, reason: str)
        """
        lowered = (text or '').lower()

        for phrase in self.reject_phrases:
            if phrase in lowered:
                logger.debug(f"Rejected by phrase '{phrase}'")
                return False, f"reject: '{phrase}'"

        for phrase in self.accept_phrases:
            if phrase in lowered:
                logger.debug(f"Accepted by phrase '{phrase}'")
                return True, f"accept: '{phrase}'"

        return False, 'no booking phrase'

    def is_booking_confirmation(self, text):
        """True when the text reads like a booking confirmation"""
        is_booking, _ = self.classify(text)
        return is_booking
