from .adapter import DEFAULT_ERROR_TABLE, ErrorMapping, build_router, default_error_mapper
from .decorators import endpoint

__all__ = [
    "endpoint",
    "build_router",
    "default_error_mapper",
    "ErrorMapping",
    "DEFAULT_ERROR_TABLE",
]
