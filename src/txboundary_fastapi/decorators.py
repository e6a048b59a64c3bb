from __future__ import annotations

from typing import Any, Callable, Optional

from fastapi import APIRouter

from txboundary.config import InterceptorConfig
from txboundary.ports import LoggerPort, ProviderLike

from .adapter import InputParser, OutputMapper, build_router, default_error_mapper


def endpoint(
    *,
    method: str,
    path: str,
    provider: ProviderLike,
    input_parser: Optional[InputParser] = None,
    output_mapper: Optional[OutputMapper] = None,
    logger: Optional[LoggerPort] = None,
    config: Optional[InterceptorConfig] = None,
) -> Callable[[Callable[[Any], Any]], APIRouter]:
    """
    Decorator turning a handler into a transactional FastAPI APIRouter.
    Usage:

        @endpoint(method="post", path="/users", provider=session_provider)
        def create_user(body: dict) -> dict: ...

        app.include_router(create_user)  # create_user is now an APIRouter
    """

    def wrapper(handler: Callable[[Any], Any]) -> APIRouter:
        return build_router(
            path=path,
            method=method,
            handler=handler,
            provider=provider,
            input_parser=input_parser,
            output_mapper=output_mapper,
            error_mapper=default_error_mapper,
            logger=logger,
            config=config,
        )

    return wrapper
