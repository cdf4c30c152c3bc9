"""Dry-run mode: run the whole pipeline without storing flights"""
import logging
from functools import wraps

logger = logging.getLogger(__name__)


class DryRunManager:
    """Process-wide dry-run switch"""
    _enabled = False

    @classmethod
    def enable(cls):
        cls._enabled = True
        logger.info("DRY-RUN MODE ENABLED - flights will be extracted but not stored")

    @classmethod
    def disable(cls):
        cls._enabled = False

    @classmethod
    def is_enabled(cls):
        return cls._enabled


def dry_run_safe(return_value=None):
    """
    Decorator skipping a write while dry-run mode is enabled

    Args:
        return_value: Value returned instead of calling the function

    Example:
        @dry_run_safe(return_value=None)
        def insert_flight(self, user_id, flight):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if DryRunManager.is_enabled():
                shown = ', '.join(str(arg)[:60] for arg in args[1:3])
                logger.info(f"[DRY-RUN] Would call {func.__name__}({shown}...)")
                return return_value
            return func(*args, **kwargs)
        return wrapper
    return decorator
