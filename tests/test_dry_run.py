"""Tests for dry-run functionality"""
from flight_scanner.utils.dry_run import DryRunManager, dry_run_safe


class TestDryRunManager:
    """Test DryRunManager class"""

    def setup_method(self):
        """Reset dry-run state before each test"""
        DryRunManager.disable()

    def teardown_method(self):
        DryRunManager.disable()

    def test_enable_disable(self):
        assert not DryRunManager.is_enabled()

        DryRunManager.enable()
        assert DryRunManager.is_enabled()

        DryRunManager.disable()
        assert not DryRunManager.is_enabled()

    def test_decorated_method_skipped_when_enabled(self):
        class Store:
            def __init__(self):
                self.rows = []

            @dry_run_safe(return_value=None)
            def insert(self, row):
                self.rows.append(row)
                return len(self.rows)

        store = Store()
        assert store.insert('a') == 1

        DryRunManager.enable()
        assert store.insert('b') is None
        assert store.rows == ['a']

    def test_wrapped_name_preserved(self):
        @dry_run_safe()
        def insert_flight():
            pass

        assert insert_flight.__name__ == 'insert_flight'
