from __future__ import annotations

import functools
from typing import Any, Callable, Optional, TypeVar

from .config import InterceptorConfig
from .interceptor import TransactionInterceptor
from .ports import LoggerPort, ProviderLike
from .result import Result

T = TypeVar("T")


def transactional(
    provider: ProviderLike,
    *,
    logger: Optional[LoggerPort] = None,
    config: Optional[InterceptorConfig] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator running every call of the wrapped function inside a transaction
    boundary. Usage:

        @transactional(session_provider)
        def rename(user_id: int, name: str) -> User: ...

    Calls made while a transaction is already active join it. The wrapped
    function returns the original value or raises the original exception
    object; only a failed commit replaces a successful return.
    """
    interceptor = TransactionInterceptor(provider, logger=logger, config=config)

    def wrapper(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapped(*args: Any, **kwargs: Any) -> T:
            return interceptor(lambda: fn(*args, **kwargs))

        wrapped.interceptor = interceptor  # type: ignore[attr-defined]
        return wrapped

    return wrapper


def transactional_result(
    provider: ProviderLike,
    *,
    logger: Optional[LoggerPort] = None,
    config: Optional[InterceptorConfig] = None,
) -> Callable[[Callable[..., T]], Callable[..., Result[T, Exception]]]:
    """
    Like `transactional`, but the wrapped function returns the Result
    (Ok(value) or Err(exception)) instead of raising.
    """
    interceptor = TransactionInterceptor(provider, logger=logger, config=config)

    def wrapper(fn: Callable[..., T]) -> Callable[..., Result[T, Exception]]:
        @functools.wraps(fn)
        def wrapped(*args: Any, **kwargs: Any) -> Result[T, Exception]:
            return interceptor.intercept(lambda: fn(*args, **kwargs))

        wrapped.interceptor = interceptor  # type: ignore[attr-defined]
        return wrapped

    return wrapper
