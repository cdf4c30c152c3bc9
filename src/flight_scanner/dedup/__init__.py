"""Deduplication package"""
from .deduplicator import (
    Deduplicator,
    DedupSession,
    SkipReason,
    build_dedup_key,
    new_dedup_session,
    should_skip,
)

__all__ = [
    'Deduplicator',
    'DedupSession',
    'SkipReason',
    'build_dedup_key',
    'new_dedup_session',
    'should_skip',
]
