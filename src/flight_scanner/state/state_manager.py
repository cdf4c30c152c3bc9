"""Persistent store for users, flights, sync status and scan history"""
import sqlite3
import logging
from contextlib import contextmanager

from ..utils.dry_run import dry_run_safe

logger = logging.getLogger(__name__)

SYNC_STATUSES = ('pending', 'in_progress', 'completed', 'failed')


def _iso(value):
    return value.isoformat() if value is not None else None


class StateManager:
    """Manages flights and scan state in SQLite"""

    def __init__(self, db_path):
        """
        Initialize state manager

        Args:
            db_path: Path to SQLite database
        """
        self.db_path = db_path

    @contextmanager
    def get_connection(self):
        """Context manager for database connections"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _fetch_one(self, query, params):
        with self.get_connection() as conn:
            result = conn.execute(query, params).fetchone()
            return dict(result) if result else None

    # Users

    def get_or_create_user(self, email, name=None):
        """
        Return the id of the user with this email, creating the row if needed

        Args:
            email: Account email address
            name: Optional display name

        Returns:
            User id
        """
        with self.get_connection() as conn:
            conn.execute("""
                INSERT INTO users (email, name) VALUES (?, ?)
                ON CONFLICT(email) DO UPDATE SET
                    name = COALESCE(excluded.name, users.name),
                    updated_at = CURRENT_TIMESTAMP
            """, (email, name))
            row = conn.execute("SELECT id FROM users WHERE email = ?", (email,)).fetchone()
            return row['id']

    def get_user_by_email(self, email):
        return self._fetch_one("SELECT * FROM users WHERE email = ?", (email,))

    # Duplicate lookups

    def find_by_confirmation_code(self, user_id, confirmation_code):
        """Flight of this user with the given booking reference, or None"""
        return self._fetch_one("""
            SELECT * FROM flights
            WHERE user_id = ? AND confirmation_code = ?
            LIMIT 1
        """, (user_id, confirmation_code))

    def find_by_flight_route(self, user_id, flight_number, departure_airport, arrival_airport):
        """Flight of this user with the same flight number and route, or None"""
        return self._fetch_one("""
            SELECT * FROM flights
            WHERE user_id = ? AND flight_number = ?
            AND departure_airport = ? AND arrival_airport = ?
            LIMIT 1
        """, (user_id, flight_number, departure_airport, arrival_airport))

    def find_by_route_and_date(self, user_id, departure_airport, arrival_airport, departure_date):
        """Flight of this user on the same route and departure date, or None"""
        return self._fetch_one("""
            SELECT * FROM flights
            WHERE user_id = ? AND departure_airport = ?
            AND arrival_airport = ? AND departure_date = ?
            LIMIT 1
        """, (user_id, departure_airport, arrival_airport, _iso(departure_date)))

    # Flights

    @dry_run_safe(return_value=None)
    def insert_flight(self, user_id, flight, departure_info=None, arrival_info=None,
                      subject=None, message_id=None):
        """
        Insert an extracted flight

        Args:
            user_id: Owner of the flight
            flight: ExtractedFlight
            departure_info: Optional AirportInfo for the departure airport
            arrival_info: Optional AirportInfo for the arrival airport
            subject: Subject of the source email
            message_id: Gmail id of the source email

        Returns:
            New flight id

        Raises:
            sqlite3.IntegrityError: when the booking reference is already stored
        """
        with self.get_connection() as conn:
            cursor = conn.execute("""
                INSERT INTO flights
                (user_id, confirmation_code, airline, flight_number,
                 departure_airport, departure_city, departure_country,
                 departure_lat, departure_lng, departure_date,
                 arrival_airport, arrival_city, arrival_country,
                 arrival_lat, arrival_lng, arrival_date,
                 raw_email_subject, source_message_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                user_id, flight.confirmation_code, flight.airline, flight.flight_number,
                flight.departure_airport,
                departure_info.city if departure_info else None,
                departure_info.country if departure_info else None,
                departure_info.lat if departure_info else None,
                departure_info.lng if departure_info else None,
                _iso(flight.departure_date),
                flight.arrival_airport,
                arrival_info.city if arrival_info else None,
                arrival_info.country if arrival_info else None,
                arrival_info.lat if arrival_info else None,
                arrival_info.lng if arrival_info else None,
                _iso(flight.arrival_date),
                subject, message_id,
            ))
            return cursor.lastrowid

    def get_flights(self, user_id):
        """All flights of a user, oldest departure first"""
        with self.get_connection() as conn:
            results = conn.execute("""
                SELECT * FROM flights
                WHERE user_id = ?
                ORDER BY departure_date, id
            """, (user_id,)).fetchall()
            return [dict(row) for row in results]

    def count_flights(self, user_id):
        with self.get_connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS count FROM flights WHERE user_id = ?",
                               (user_id,)).fetchone()
            return row['count']

    # Sync status

    def update_sync_status(self, user_id, status, emails_scanned=None,
                           flights_found=None, error_message=None):
        """
        Record the state of the user's latest mailbox sync

        Args:
            user_id: User id
            status: One of pending, in_progress, completed, failed
            emails_scanned: Number of emails scanned in this sync
            flights_found: Number of flights stored in this sync
            error_message: Error text for a failed sync
        """
        if status not in SYNC_STATUSES:
            raise ValueError(f"Unknown sync status: {status}")

        with self.get_connection() as conn:
            conn.execute("""
                INSERT INTO email_sync_status
                (user_id, last_sync_at, emails_scanned, flights_found, sync_status, error_message)
                VALUES (?, CURRENT_TIMESTAMP, COALESCE(?, 0), COALESCE(?, 0), ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    last_sync_at = CURRENT_TIMESTAMP,
                    emails_scanned = COALESCE(?, email_sync_status.emails_scanned),
                    flights_found = COALESCE(?, email_sync_status.flights_found),
                    sync_status = excluded.sync_status,
                    error_message = excluded.error_message
            """, (user_id, emails_scanned, flights_found, status, error_message,
                  emails_scanned, flights_found))

    def get_sync_status(self, user_id):
        return self._fetch_one("SELECT * FROM email_sync_status WHERE user_id = ?", (user_id,))

    # Scan history

    def record_scan_result(self, message_id, user_id, status, reason=None):
        """Append the outcome of processing one email"""
        with self.get_connection() as conn:
            conn.execute("""
                INSERT INTO scan_history (message_id, user_id, status, reason)
                VALUES (?, ?, ?, ?)
            """, (message_id, user_id, status, reason))

    def get_scan_stats(self, user_id=None):
        """
        Get processing statistics

        Args:
            user_id: Optional user to filter by

        Returns:
            List of dicts with status and count
        """
        with self.get_connection() as conn:
            if user_id is not None:
                results = conn.execute("""
                    SELECT status, COUNT(*) as count
                    FROM scan_history
                    WHERE user_id = ?
                    GROUP BY status
                """, (user_id,)).fetchall()
            else:
                results = conn.execute("""
                    SELECT status, COUNT(*) as count
                    FROM scan_history
                    GROUP BY status
                """).fetchall()

            return [dict(row) for row in results]
