from __future__ import annotations

import enum
from typing import Any, Callable, Protocol, Union, runtime_checkable


@runtime_checkable
class Port(Protocol):
    """
    Marker protocol for txboundary ports (collaborators supplied from outside).
    """


@runtime_checkable
class TransactionHandle(Port, Protocol):
    """
    One unit-of-work against a resource, e.g. a session's transaction.

    The interceptor only observes and transitions a handle during a single
    invocation; ownership stays with whatever vends it.
    """

    def is_active(self) -> bool: ...
    def is_rollback_only(self) -> bool: ...
    def begin(self) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def mark_rollback_only(self) -> None: ...


@runtime_checkable
class HandleProvider(Port, Protocol):
    """
    Vends the handle to use for the current invocation.
    """

    def get(self) -> TransactionHandle: ...


@runtime_checkable
class LoggerPort(Port, Protocol):
    """
    Minimal structured logger port. Accepts a message and optional contextual fields.
    """

    def debug(self, msg: str, **fields: Any) -> None: ...
    def info(self, msg: str, **fields: Any) -> None: ...
    def warning(self, msg: str, **fields: Any) -> None: ...
    def error(self, msg: str, **fields: Any) -> None: ...


class HandleState(str, enum.Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    ACTIVE_ROLLBACK_ONLY = "active_rollback_only"

    @classmethod
    def of(cls, handle: TransactionHandle) -> "HandleState":
        if not handle.is_active():
            return cls.INACTIVE
        if handle.is_rollback_only():
            return cls.ACTIVE_ROLLBACK_ONLY
        return cls.ACTIVE


class _CallableProvider:
    def __init__(self, factory: Callable[[], TransactionHandle]) -> None:
        self._factory = factory

    def get(self) -> TransactionHandle:
        return self._factory()

    def __repr__(self) -> str:
        return f"<provider {self._factory!r}>"


ProviderLike = Union[HandleProvider, Callable[[], TransactionHandle]]


def as_provider(source: ProviderLike) -> HandleProvider:
    """
    Accept either a HandleProvider or a plain zero-argument factory.
    """
    if isinstance(source, HandleProvider):
        return source
    if callable(source):
        return _CallableProvider(source)
    raise TypeError(f"not a handle provider: {source!r}")
