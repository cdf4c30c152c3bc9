"""Utilities package"""
from .logging_config import setup_logging
from .retry import make_request_with_backoff, retry_transient_http
from .dry_run import DryRunManager, dry_run_safe

__all__ = [
    'setup_logging',
    'make_request_with_backoff',
    'retry_transient_http',
    'DryRunManager',
    'dry_run_safe'
]
