"""
Pytest fixtures for the txboundary test kit.

Usage:
    # conftest.py
    from txboundary.testkit.fixtures import (  # noqa: F401
        capturing_logger,
        in_memory_tx,
        static_provider,
        interceptor,
    )

    def test_commit(interceptor, in_memory_tx):
        assert interceptor.intercept(lambda: 42).unwrap() == 42
        assert in_memory_tx.calls == ["begin", "commit"]

Fixtures:
- capturing_logger: CapturingLogger
- in_memory_tx: InMemoryTransaction, initially inactive
- static_provider: StaticProvider handing out `in_memory_tx`
- interceptor: TransactionInterceptor wired to the two above
"""

from __future__ import annotations

import pytest

from txboundary.interceptor import TransactionInterceptor
from txboundary.testkit import CapturingLogger, InMemoryTransaction, StaticProvider


@pytest.fixture
def capturing_logger() -> CapturingLogger:
    """Logger that records log entries for assertions."""
    return CapturingLogger()


@pytest.fixture
def in_memory_tx() -> InMemoryTransaction:
    """Fresh, inactive in-memory transaction handle."""
    return InMemoryTransaction()


@pytest.fixture
def static_provider(in_memory_tx: InMemoryTransaction) -> StaticProvider:
    return StaticProvider(in_memory_tx)


@pytest.fixture
def interceptor(
    static_provider: StaticProvider, capturing_logger: CapturingLogger
) -> TransactionInterceptor:
    """Interceptor over `static_provider`, logging into `capturing_logger`."""
    return TransactionInterceptor(static_provider, logger=capturing_logger)


__all__ = [
    "capturing_logger",
    "in_memory_tx",
    "static_provider",
    "interceptor",
]
