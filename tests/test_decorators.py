from __future__ import annotations

import pytest

from txboundary import transactional, transactional_result
from txboundary.ports import HandleState
from txboundary.result import Err, Ok
from txboundary.testkit import CapturingLogger, InMemoryTransaction, StaticProvider


class Overdrawn(Exception):
    def __init__(self, balance: int) -> None:
        super().__init__(f"balance would be {balance}")
        self.balance = balance


def make_account(tx: InMemoryTransaction):
    provider = StaticProvider(tx)
    logger = CapturingLogger()
    balances = {"alice": 10, "bob": 0}

    @transactional(provider, logger=logger)
    def withdraw(name: str, amount: int) -> int:
        balances[name] -= amount
        if balances[name] < 0:
            raise Overdrawn(balances[name])
        return balances[name]

    @transactional(provider, logger=logger)
    def transfer(src: str, dst: str, amount: int) -> None:
        withdraw(src, amount)
        balances[dst] += amount

    return withdraw, transfer


def test_decorated_function_commits_and_returns_value():
    tx = InMemoryTransaction()
    withdraw, _ = make_account(tx)
    assert withdraw("alice", 3) == 7
    assert tx.calls == ["begin", "commit"]


def test_decorated_function_raises_original_exception_type():
    tx = InMemoryTransaction()
    withdraw, _ = make_account(tx)
    with pytest.raises(Overdrawn) as info:
        withdraw("bob", 5)
    assert info.value.balance == -5
    assert tx.calls == ["begin", "rollback"]


def test_nested_decorated_calls_share_one_transaction():
    tx = InMemoryTransaction()
    _, transfer = make_account(tx)
    transfer("alice", "bob", 4)
    assert tx.calls == ["begin", "commit"]


def test_nested_failure_rolls_back_outer():
    tx = InMemoryTransaction()
    _, transfer = make_account(tx)
    with pytest.raises(Overdrawn):
        transfer("bob", "alice", 1)
    assert tx.calls == ["begin", "mark_rollback_only", "rollback"]
    assert tx.state is HandleState.INACTIVE


def test_wraps_preserves_metadata():
    tx = InMemoryTransaction()

    @transactional(StaticProvider(tx), logger=CapturingLogger())
    def documented(x: int) -> int:
        """Doubles x."""
        return x * 2

    assert documented.__name__ == "documented"
    assert documented.__doc__ == "Doubles x."
    assert documented.__wrapped__(2) == 4  # type: ignore[attr-defined]
    assert tx.calls == []


def test_transactional_result_returns_outcomes():
    tx = InMemoryTransaction()

    @transactional_result(StaticProvider(tx), logger=CapturingLogger())
    def parse(raw: str) -> int:
        return int(raw)

    assert parse("12") == Ok(12)
    res = parse("nope")
    assert isinstance(res, Err)
    assert isinstance(res.err, ValueError)
    assert tx.calls == ["begin", "commit", "begin", "rollback"]
