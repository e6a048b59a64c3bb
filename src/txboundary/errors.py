from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass
class TxError(Exception):
    """
    Base error for txboundary.
    Carries a stable `code`, human-readable `message`,
    and optional serializable `details`.
    """

    code: str
    message: str
    details: Optional[Mapping[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        base = f"{self.code}: {self.message}"
        if self.details:
            return f"{base} details={dict(self.details)}"
        return base


# Wiring errors ---------------------------------------------------------------


@dataclass
class ProviderError(TxError):
    """
    No transaction handle could be obtained. A configuration defect,
    never a business failure.
    """

    def __init__(
        self,
        message: str = "Transaction handle provider unavailable",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(code="provider_unavailable", message=message, details=details)


# Resolution errors -----------------------------------------------------------


@dataclass
class PersistenceError(TxError):
    """
    A begin/commit/rollback against the underlying resource failed.
    """

    def __init__(
        self, message: str, details: Optional[Mapping[str, Any]] = None
    ) -> None:
        super().__init__(code="persistence_error", message=message, details=details)


@dataclass
class HandleStateError(TxError):
    def __init__(
        self, message: str, details: Optional[Mapping[str, Any]] = None
    ) -> None:
        super().__init__(code="invalid_handle_state", message=message, details=details)
