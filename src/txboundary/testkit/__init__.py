from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import HandleStateError, PersistenceError
from ..ports import HandleState, LoggerPort, TransactionHandle

Transition = Tuple[str, HandleState, HandleState]


@dataclass(repr=False)
class InMemoryTransaction(TransactionHandle):
    """
    Reference transaction handle for tests.

    Implements the Inactive / Active / ActiveRollbackOnly state machine,
    records every call in `calls` and every state change in `history`.

    Failure injection:
        tx = InMemoryTransaction(fail_on={"commit": PersistenceError("disk full")})

    A failing call raises before changing state, unless it is a commit and
    `deactivate_on_commit_failure` is set, in which case the handle becomes
    inactive first (as some drivers do after a failed commit).
    """

    name: str = "tx"
    active: bool = False
    rollback_only: bool = False
    fail_on: Dict[str, BaseException] = field(default_factory=dict)
    deactivate_on_commit_failure: bool = False
    calls: List[str] = field(default_factory=list)
    history: List[Transition] = field(default_factory=list)

    @property
    def state(self) -> HandleState:
        return HandleState.of(self)

    def is_active(self) -> bool:
        return self.active

    def is_rollback_only(self) -> bool:
        return self.rollback_only

    def begin(self) -> None:
        before = self._call("begin")
        if self.active:
            raise HandleStateError("Transaction already active", {"tx": self.name})
        self.active = True
        self.rollback_only = False
        self._moved("begin", before)

    def commit(self) -> None:
        before = self.state
        self.calls.append("commit")
        if "commit" in self.fail_on:
            if self.deactivate_on_commit_failure:
                self.active = False
                self._moved("commit", before)
            raise self.fail_on["commit"]
        if not self.active:
            raise HandleStateError("Transaction not active", {"tx": self.name})
        if self.rollback_only:
            self.active = False
            self.rollback_only = False
            self._moved("commit", before)
            raise PersistenceError(
                "Transaction marked rollback-only", {"tx": self.name}
            )
        self.active = False
        self._moved("commit", before)

    def rollback(self) -> None:
        before = self._call("rollback")
        if not self.active:
            raise HandleStateError("Transaction not active", {"tx": self.name})
        self.active = False
        self.rollback_only = False
        self._moved("rollback", before)

    def mark_rollback_only(self) -> None:
        before = self._call("mark_rollback_only")
        if not self.active:
            raise HandleStateError("Transaction not active", {"tx": self.name})
        self.rollback_only = True
        self._moved("mark_rollback_only", before)

    def count(self, call: str) -> int:
        return self.calls.count(call)

    def _call(self, name: str) -> HandleState:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]
        return self.state

    def _moved(self, name: str, before: HandleState) -> None:
        self.history.append((name, before, self.state))

    def __repr__(self) -> str:
        return f"<InMemoryTransaction {self.name} {self.state.value}>"


@dataclass
class StaticProvider:
    """
    Provider that always hands out the same handle, as a session-scoped
    provider does within one thread. Counts `get()` calls.
    """

    handle: TransactionHandle
    gets: int = 0

    def get(self) -> TransactionHandle:
        self.gets += 1
        return self.handle


class CapturingLogger(LoggerPort):
    """
    Test logger that captures log records for assertions.
    """

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def _push(self, level: str, msg: str, **fields: Any) -> None:
        rec = {"level": level, "msg": msg, **fields}
        self.records.append(rec)

    def debug(self, msg: str, **fields: Any) -> None:
        self._push("debug", msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._push("info", msg, **fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._push("warning", msg, **fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._push("error", msg, **fields)

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [
            r["msg"] for r in self.records if level is None or r["level"] == level
        ]


__all__ = [
    "InMemoryTransaction",
    "StaticProvider",
    "CapturingLogger",
    "Transition",
]
