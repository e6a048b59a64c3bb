from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union, overload

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class Result(Generic[T, E]):
    """
    Outcome of one transactional invocation: either the operation's value (Ok)
    or the failure that ended it (Err).

    An Err produced by the interceptor holds the original exception object,
    never a wrapper around it:

        match interceptor.intercept(op):
            case Ok(value):
                ...
            case Err(error):
                ...

    `unwrap()` hands the value back or re-raises the stored exception itself,
    so the caller sees the same type, identity and traceback the operation
    produced.
    """

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    @property
    def ok(self) -> T | None:
        return self.value if isinstance(self, Ok) else None  # type: ignore[attr-defined]

    @property
    def err(self) -> E | None:
        return self.error if isinstance(self, Err) else None  # type: ignore[attr-defined]

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        if isinstance(self, Ok):
            return Ok(fn(self.value))
        return self  # type: ignore[return-value]

    @overload
    def unwrap_or(self, default: T) -> T: ...
    @overload
    def unwrap_or(self, default: Callable[[], T]) -> T: ...

    def unwrap_or(self, default: Union[T, Callable[[], T]]) -> T:
        if isinstance(self, Ok):
            return self.value
        return default() if callable(default) else default

    def unwrap(self) -> T:
        if isinstance(self, Ok):
            return self.value
        error = self.error  # type: ignore[attr-defined]
        if isinstance(error, BaseException):
            raise error
        raise RuntimeError(f"called unwrap() on Err: {error!r}")

    def unwrap_err(self) -> E:
        if isinstance(self, Err):
            return self.error
        raise RuntimeError(f"called unwrap_err() on Ok: {self.value!r}")  # type: ignore[attr-defined]

    def fold(self, on_ok: Callable[[T], U], on_err: Callable[[E], U]) -> U:
        if isinstance(self, Ok):
            return on_ok(self.value)
        return on_err(self.error)  # type: ignore[attr-defined]


@dataclass(slots=True)
class Ok(Result[T, E]):
    value: T


@dataclass(slots=True)
class Err(Result[T, E]):
    error: E
