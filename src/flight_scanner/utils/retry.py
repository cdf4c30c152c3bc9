"""Retry utilities with exponential backoff"""
import time
import random
import logging
import backoff
import requests
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

# Gmail answers quota and transient server errors with these statuses
RETRYABLE_GMAIL_STATUSES = (403, 429, 500, 503)


def _log_backoff(details):
    logger.warning(f"Transient HTTP error, retrying in {details['wait']:.2f}s "
                   f"(attempt {details['tries']})")


def retry_transient_http(max_tries=3, max_time=60):
    """
    Decorator retrying a `requests` call on connection errors and timeouts

    Other errors (including non-2xx responses) propagate immediately.

    Args:
        max_tries: Maximum number of attempts
        max_time: Upper bound in seconds across all attempts
    """
    return backoff.on_exception(
        backoff.expo,
        (requests.ConnectionError, requests.Timeout),
        max_tries=max_tries,
        max_time=max_time,
        jitter=backoff.full_jitter,
        on_backoff=_log_backoff,
    )


def make_request_with_backoff(request_func, max_retries=5):
    """
    Execute a Gmail API request, retrying rate-limit and server errors

    Args:
        request_func: Function to execute
        max_retries: Maximum number of retry attempts

    Returns:
        Result of request_func()
    """
    for n in range(max_retries):
        try:
            return request_func()
        except HttpError as error:
            if error.resp.status in RETRYABLE_GMAIL_STATUSES:
                if n == max_retries - 1:
                    raise
                wait_time = (2 ** n) + random.random()
                logger.warning(f"Rate limit hit, retrying in {wait_time:.2f}s (attempt {n+1}/{max_retries})")
                time.sleep(wait_time)
            else:
                raise
