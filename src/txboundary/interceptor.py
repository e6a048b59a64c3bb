from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TypeVar

from .config import DEFAULT_CONFIG, InterceptorConfig
from .errors import ProviderError
from .logger import StdlibLogger
from .ports import HandleProvider, LoggerPort, ProviderLike, TransactionHandle, as_provider
from .result import Err, Ok, Result

T = TypeVar("T")


@dataclass
class Invocation:
    """
    Per-call context. `is_local` is decided once, before any work, and means
    this call began the transaction and must resolve it.
    """

    handle: TransactionHandle
    is_local: bool


class TransactionInterceptor:
    """
    Runs an operation inside a transaction boundary.

    If the provider's handle is inactive on entry, the call begins a local
    transaction and resolves it before returning: commit on success, rollback
    on failure or when a nested call marked it rollback-only. If the handle is
    already active, the call joins it and on failure only marks it
    rollback-only, leaving resolution to the owner.

    Execution contract of `intercept`:
      - Returns Ok(value) or Err(exception)
      - Err holds the operation's own exception object, or the commit's
        exception when a local commit fails
      - Failures while rolling back or marking rollback-only are logged, never
        surfaced
      - ProviderError is raised when no handle can be obtained
      - BaseExceptions that are not Exceptions are re-raised after cleanup
    """

    def __init__(
        self,
        provider: Optional[ProviderLike],
        *,
        logger: Optional[LoggerPort] = None,
        config: Optional[InterceptorConfig] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.provider: Optional[HandleProvider] = (
            None if provider is None else as_provider(provider)
        )
        self.logger: LoggerPort = logger or StdlibLogger(self.config.logger_name)

    def __call__(self, operation: Callable[[], T]) -> T:
        return self.intercept(operation).unwrap()

    def intercept(self, operation: Callable[[], T]) -> Result[T, Exception]:
        invocation = self._enter()
        try:
            value = operation()
        except BaseException as exc:
            self._on_failure(invocation)
            if not isinstance(exc, Exception):
                raise
            return Err(exc)
        return self._on_success(invocation, value)

    # Steps ------------------------------------------------------------------

    def _acquire(self) -> TransactionHandle:
        if self.provider is None:
            raise ProviderError("No transaction handle provider configured")
        try:
            handle = self.provider.get()
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(
                f"Transaction handle provider failed: {exc}",
                {"provider": repr(self.provider)},
            ) from exc
        if handle is None:
            raise ProviderError(
                "Transaction handle provider returned None",
                {"provider": repr(self.provider)},
            )
        return handle

    def _enter(self) -> Invocation:
        handle = self._acquire()
        self.logger.debug("Retrieved transaction handle", **self._fields(handle))

        invocation = Invocation(handle=handle, is_local=not handle.is_active())
        if invocation.is_local:
            self.logger.debug("Beginning automatic transaction", **self._fields(handle))
            handle.begin()
        else:
            self.logger.debug("Joining active transaction", **self._fields(handle))
        return invocation

    def _on_failure(self, invocation: Invocation) -> None:
        handle = invocation.handle
        try:
            if invocation.is_local and (
                handle.is_active() or handle.is_rollback_only()
            ):
                self.logger.debug(
                    "Rolling back local transaction", **self._fields(handle)
                )
                handle.rollback()
            elif not handle.is_rollback_only():
                self.logger.debug(
                    "Marking transaction rollback-only", **self._fields(handle)
                )
                handle.mark_rollback_only()
        except BaseException as inner:
            self.logger.error(
                "Rollback failed", exc_info=inner, **self._fields(handle)
            )

    def _on_success(self, invocation: Invocation, value: T) -> Result[T, Exception]:
        handle = invocation.handle
        if not invocation.is_local:
            self.logger.debug(
                "Not committing joined transaction", **self._fields(handle)
            )
            return Ok(value)

        if not handle.is_active():
            # resolved by the operation itself
            self.logger.debug(
                "Local transaction already inactive", **self._fields(handle)
            )
            return Ok(value)

        if handle.is_rollback_only():
            self.logger.debug(
                "Rolling back transaction marked rollback-only", **self._fields(handle)
            )
            self._rollback_quietly(handle)
            return Ok(value)

        try:
            handle.commit()
        except BaseException as exc:
            self._rollback_quietly(handle, only_if_active=True)
            if not isinstance(exc, Exception):
                raise
            return Err(exc)
        self.logger.debug("Committed automatic transaction", **self._fields(handle))
        return Ok(value)

    # Helpers ----------------------------------------------------------------

    def _rollback_quietly(
        self, handle: TransactionHandle, only_if_active: bool = False
    ) -> None:
        try:
            if only_if_active and not handle.is_active():
                return
            self.logger.debug("Rolling back transaction", **self._fields(handle))
            handle.rollback()
        except BaseException as inner:
            self.logger.error(
                "Rollback failed", exc_info=inner, **self._fields(handle)
            )

    def _fields(self, handle: TransactionHandle) -> Dict[str, Any]:
        if not self.config.log_fields:
            return {}
        return {"tx": repr(handle)}


def intercept(
    provider: ProviderLike,
    operation: Callable[[], T],
    *,
    logger: Optional[LoggerPort] = None,
    config: Optional[InterceptorConfig] = None,
) -> Result[T, Exception]:
    """
    One-off form of `TransactionInterceptor(provider).intercept(operation)`.
    """
    return TransactionInterceptor(provider, logger=logger, config=config).intercept(
        operation
    )
