"""Per-email scan outcomes and aggregate statistics"""
import threading

from ..models import (
    STATUS_SUCCESS,
    STATUS_SKIPPED,
    STATUS_FAILED,
    STATUS_NO_FLIGHT_DATA,
)

UNPARSEABLE_STATUSES = (STATUS_FAILED, STATUS_NO_FLIGHT_DATA)


class ScanLogger:
    """Append-only record of what happened to each email in one scan"""

    def __init__(self):
        self._entries = []
        self._lock = threading.Lock()

    def record(self, entry):
        with self._lock:
            self._entries.append(entry)

    def entries(self):
        with self._lock:
            return list(self._entries)

    def summary(self):
        """
        Count entries by status

        Returns:
            Dict with total, one count per status and success_rate, a
            percentage string with one decimal ("0.0" for an empty scan)
        """
        entries = self.entries()
        total = len(entries)
        counts = {status: 0 for status in (STATUS_SUCCESS, STATUS_SKIPPED,
                                           STATUS_FAILED, STATUS_NO_FLIGHT_DATA)}
        for entry in entries:
            if entry.status in counts:
                counts[entry.status] += 1

        success_rate = f"{counts[STATUS_SUCCESS] / total * 100:.1f}" if total else '0.0'
        return {'total': total, **counts, 'success_rate': success_rate}

    def unparseable(self):
        """Entries that failed or yielded no flight data"""
        return [e for e in self.entries() if e.status in UNPARSEABLE_STATUSES]

    def successful(self):
        return [e for e in self.entries() if e.status == STATUS_SUCCESS]
