"""Tests for state manager"""
import os
import sqlite3
import tempfile
from datetime import date

import pytest

from flight_scanner.airports import lookup
from flight_scanner.models import ExtractedFlight
from flight_scanner.state.database import init_database
from flight_scanner.state.state_manager import StateManager
from flight_scanner.utils.dry_run import DryRunManager


def make_flight(**overrides):
    fields = dict(
        confirmation_code='ABC123',
        airline='British Airways',
        flight_number='BA456',
        departure_airport='LHR',
        arrival_airport='JFK',
        departure_date=date(2024, 6, 15),
    )
    fields.update(overrides)
    return ExtractedFlight(**fields)


class TestStateManager:
    """Test StateManager"""

    def setup_method(self):
        """Setup temp database for each test"""
        self.temp_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.temp_db.close()
        self.db_path = self.temp_db.name

        init_database(self.db_path)
        self.state_manager = StateManager(self.db_path)
        self.user_id = self.state_manager.get_or_create_user('me@example.com', 'Me')
        DryRunManager.disable()

    def teardown_method(self):
        """Cleanup temp database"""
        DryRunManager.disable()
        if os.path.exists(self.db_path):
            os.unlink(self.db_path)

    def test_get_or_create_user_is_idempotent(self):
        again = self.state_manager.get_or_create_user('me@example.com')
        other = self.state_manager.get_or_create_user('you@example.com')

        assert again == self.user_id
        assert other != self.user_id
        assert self.state_manager.get_user_by_email('me@example.com')['name'] == 'Me'

    def test_insert_and_find(self):
        flight_id = self.state_manager.insert_flight(
            self.user_id, make_flight(),
            departure_info=lookup('LHR'), arrival_info=lookup('JFK'),
            subject='Your booking confirmation', message_id='msg1'
        )

        assert flight_id is not None
        row = self.state_manager.find_by_confirmation_code(self.user_id, 'ABC123')
        assert row['flight_number'] == 'BA456'
        assert row['departure_city'] == 'London'
        assert row['arrival_city'] == 'New York'
        assert row['departure_date'] == '2024-06-15'
        assert row['source_message_id'] == 'msg1'

        assert self.state_manager.find_by_flight_route(self.user_id, 'BA456', 'LHR', 'JFK')
        assert self.state_manager.find_by_route_and_date(self.user_id, 'LHR', 'JFK', date(2024, 6, 15))

    def test_lookups_miss(self):
        self.state_manager.insert_flight(self.user_id, make_flight())

        assert self.state_manager.find_by_confirmation_code(self.user_id, 'ZZZ999') is None
        assert self.state_manager.find_by_flight_route(self.user_id, 'BA456', 'JFK', 'LHR') is None
        assert self.state_manager.find_by_route_and_date(self.user_id, 'LHR', 'JFK', date(2024, 6, 16)) is None

    def test_lookups_scoped_to_owner(self):
        other = self.state_manager.get_or_create_user('you@example.com')
        self.state_manager.insert_flight(other, make_flight())

        assert self.state_manager.find_by_confirmation_code(self.user_id, 'ABC123') is None

    def test_confirmation_code_unique_per_user(self):
        self.state_manager.insert_flight(self.user_id, make_flight())

        with pytest.raises(sqlite3.IntegrityError):
            self.state_manager.insert_flight(self.user_id, make_flight(flight_number='BA999'))

    def test_flights_without_code_not_unique(self):
        self.state_manager.insert_flight(self.user_id, make_flight(confirmation_code=None))
        self.state_manager.insert_flight(self.user_id, make_flight(confirmation_code=None))

        assert self.state_manager.count_flights(self.user_id) == 2

    def test_dry_run_skips_insert(self):
        DryRunManager.enable()

        assert self.state_manager.insert_flight(self.user_id, make_flight()) is None
        assert self.state_manager.get_flights(self.user_id) == []

    def test_sync_status(self):
        self.state_manager.update_sync_status(self.user_id, 'in_progress')
        status = self.state_manager.get_sync_status(self.user_id)
        assert status['sync_status'] == 'in_progress'
        assert status['emails_scanned'] == 0

        self.state_manager.update_sync_status(self.user_id, 'completed', emails_scanned=12, flights_found=3)
        status = self.state_manager.get_sync_status(self.user_id)
        assert status['sync_status'] == 'completed'
        assert status['emails_scanned'] == 12
        assert status['flights_found'] == 3

        self.state_manager.update_sync_status(self.user_id, 'failed', error_message='auth expired')
        status = self.state_manager.get_sync_status(self.user_id)
        assert status['sync_status'] == 'failed'
        assert status['error_message'] == 'auth expired'
        assert status['emails_scanned'] == 12

    def test_unknown_sync_status(self):
        with pytest.raises(ValueError):
            self.state_manager.update_sync_status(self.user_id, 'done')

    def test_scan_stats(self):
        self.state_manager.record_scan_result('msg1', self.user_id, 'success')
        self.state_manager.record_scan_result('msg2', self.user_id, 'success')
        self.state_manager.record_scan_result('msg3', self.user_id, 'skipped', 'no flight number')

        stats = {s['status']: s['count'] for s in self.state_manager.get_scan_stats(self.user_id)}

        assert stats == {'success': 2, 'skipped': 1}
        assert self.state_manager.get_scan_stats(user_id=999) == []
