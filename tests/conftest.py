"""
Shared fixtures for the ledger core tests.

Test strategy:
1. Unit tests for each component against in-memory storage
2. Sync flows against the in-memory bill server
3. No real network or filesystem outside tmp_path
"""

import pytest

from money_notes.audit import AuditLogger, InMemoryAuditSink
from money_notes.categories import CategoryRegistry
from money_notes.config import LedgerSettings
from money_notes.ledger import LocalLedgerStore
from money_notes.statistics import StatisticsAggregator
from money_notes.storage import InMemoryKeyValueStore


@pytest.fixture
def settings(tmp_path) -> LedgerSettings:
    return LedgerSettings(
        storage_path=tmp_path / "storage.json",
        submit_max_attempts=3,
        submit_retry_wait_seconds=0,
        log_json=True,
    )


@pytest.fixture
def storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture
def audit_logger(audit_sink) -> AuditLogger:
    return AuditLogger(audit_sink)


@pytest.fixture
def registry(storage, audit_logger, settings) -> CategoryRegistry:
    return CategoryRegistry(storage, audit_logger, settings=settings)


@pytest.fixture
def store(storage, audit_logger) -> LocalLedgerStore:
    return LocalLedgerStore(storage, audit_logger)


@pytest.fixture
def aggregator(registry, settings) -> StatisticsAggregator:
    return StatisticsAggregator(registry, settings=settings)
