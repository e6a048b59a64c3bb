from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InterceptorConfig:
    """
    Settings shared by TransactionInterceptor and the `transactional` decorators.

    - logger_name: name of the stdlib logger used when no LoggerPort is supplied
    - log_fields: attach the handle repr (`tx=`) to every log record
    """

    logger_name: str = "txboundary"
    log_fields: bool = True


DEFAULT_CONFIG = InterceptorConfig()
