from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from txboundary.config import InterceptorConfig
from txboundary.errors import HandleStateError, PersistenceError, ProviderError, TxError
from txboundary.interceptor import TransactionInterceptor
from txboundary.ports import LoggerPort, ProviderLike
from txboundary.result import Ok

InputParser = Callable[[Mapping[str, Any]], Any]
OutputMapper = Callable[[Any], Any]
Handler = Callable[[Any], Any]


@dataclass
class ErrorMapping:
    status_code: int
    code: Optional[str] = None


DEFAULT_ERROR_TABLE: Dict[Type[TxError], ErrorMapping] = {
    ProviderError: ErrorMapping(HTTP_503_SERVICE_UNAVAILABLE, "provider_unavailable"),
    PersistenceError: ErrorMapping(HTTP_500_INTERNAL_SERVER_ERROR, "persistence_error"),
    HandleStateError: ErrorMapping(HTTP_409_CONFLICT, "invalid_handle_state"),
}


def _error_payload(err: TxError, fallback_code: str) -> Dict[str, Any]:
    return {
        "error": {
            "code": getattr(err, "code", None) or fallback_code,
            "message": getattr(err, "message", None) or str(err),
            "details": dict(err.details) if getattr(err, "details", None) else None,
        }
    }


def default_error_mapper(err: TxError) -> JSONResponse:
    for etype, mapping in DEFAULT_ERROR_TABLE.items():
        if isinstance(err, etype):
            return JSONResponse(
                status_code=mapping.status_code,
                content=_error_payload(err, mapping.code or "error"),
            )
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST, content=_error_payload(err, "error")
    )


def build_router(
    *,
    path: str,
    method: str,
    handler: Handler,
    provider: ProviderLike,
    input_parser: Optional[InputParser] = None,
    output_mapper: Optional[OutputMapper] = None,
    error_mapper: Callable[[TxError], JSONResponse] = default_error_mapper,
    logger: Optional[LoggerPort] = None,
    config: Optional[InterceptorConfig] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    tags: Optional[list[str]] = None,
) -> APIRouter:
    """
    Build an APIRouter exposing `handler` at path/method, with every request
    handled inside one transaction boundary.

    - input_parser: converts the request body dict into the handler input
      (if None, pass the dict as-is)
    - output_mapper: converts the handler's value into JSON content
      (if None, Mappings are returned as-is, anything else under "data")
    - error_mapper: maps TxError (failed commit, missing provider, ...) to a
      JSONResponse; any other exception is re-raised unchanged

    The route function is sync so FastAPI runs it in its threadpool and the
    transaction handle stays on one thread for the whole request.
    """
    http_method = method.lower()
    if http_method not in {"get", "post", "put", "patch", "delete"}:
        raise ValueError(f"Unsupported method: {method}")

    interceptor = TransactionInterceptor(provider, logger=logger, config=config)
    router = APIRouter()

    def route(body: Optional[Dict[str, Any]] = Body(default=None)) -> JSONResponse:
        payload = body or {}
        try:
            outcome = interceptor.intercept(
                lambda: handler(input_parser(payload) if input_parser else payload)
            )
        except TxError as te:
            return error_mapper(te)

        if isinstance(outcome, Ok):
            out = outcome.value
            mapped = output_mapper(out) if output_mapper else out
            content = mapped if isinstance(mapped, Mapping) else {"data": mapped}
            return JSONResponse(status_code=HTTP_200_OK, content=dict(content))

        error = outcome.unwrap_err()
        if isinstance(error, TxError):
            return error_mapper(error)
        raise error

    route.__name__ = getattr(handler, "__name__", "transactional_route")
    getattr(router, http_method)(
        path, summary=summary, description=description, tags=tags
    )(route)
    return router
