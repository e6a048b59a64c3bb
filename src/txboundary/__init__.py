from .config import InterceptorConfig
from .decorators import transactional, transactional_result
from .errors import HandleStateError, PersistenceError, ProviderError, TxError
from .interceptor import Invocation, TransactionInterceptor, intercept
from .logger import StdlibLogger
from .ports import (
    HandleProvider,
    HandleState,
    LoggerPort,
    TransactionHandle,
    as_provider,
)
from .result import Err, Ok, Result

__all__ = [
    "transactional",
    "transactional_result",
    "intercept",
    "TransactionInterceptor",
    "Invocation",
    "InterceptorConfig",
    "TransactionHandle",
    "HandleProvider",
    "HandleState",
    "LoggerPort",
    "StdlibLogger",
    "as_provider",
    "Result",
    "Ok",
    "Err",
    "TxError",
    "ProviderError",
    "PersistenceError",
    "HandleStateError",
]
