"""SQLite database initialization and schema"""
import sqlite3
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def init_database(db_path):
    """
    Initialize the SQLite database with schema

    Args:
        db_path: Path to the SQLite database file
    """
    logger.info(f"Initializing database at {db_path}")
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            name TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS flights (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            confirmation_code TEXT,
            airline TEXT,
            flight_number TEXT,
            departure_airport TEXT NOT NULL,
            departure_city TEXT,
            departure_country TEXT,
            departure_lat REAL,
            departure_lng REAL,
            departure_date TEXT,
            arrival_airport TEXT NOT NULL,
            arrival_city TEXT,
            arrival_country TEXT,
            arrival_lat REAL,
            arrival_lng REAL,
            arrival_date TEXT,
            raw_email_subject TEXT,
            source_message_id TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (user_id) REFERENCES users(id)
        )
    """)

    # One row per user
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS email_sync_status (
            user_id INTEGER PRIMARY KEY,
            last_sync_at TIMESTAMP,
            emails_scanned INTEGER DEFAULT 0,
            flights_found INTEGER DEFAULT 0,
            sync_status TEXT NOT NULL DEFAULT 'pending',
            error_message TEXT,
            FOREIGN KEY (user_id) REFERENCES users(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS scan_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            message_id TEXT NOT NULL,
            user_id INTEGER,
            status TEXT NOT NULL,
            reason TEXT,
            processed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # A booking reference can be stored only once per user
    cursor.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS idx_flights_confirmation
        ON flights(user_id, confirmation_code)
        WHERE confirmation_code IS NOT NULL
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_flights_route
        ON flights(user_id, flight_number, departure_airport, arrival_airport)
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_flights_route_date
        ON flights(user_id, departure_airport, arrival_airport, departure_date)
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_scan_history_status
        ON scan_history(user_id, status)
    """)

    conn.commit()
    conn.close()

    logger.info("Database initialized successfully")
