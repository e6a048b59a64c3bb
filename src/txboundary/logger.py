from __future__ import annotations

import logging
from typing import Any, Optional

from .ports import LoggerPort


class StdlibLogger(LoggerPort):
    """
    LoggerPort backed by the standard `logging` module.

    Contextual fields are rendered after the message (`msg key=value ...`) and
    also passed through `extra` under `txboundary` so handlers can pick them up.
    An `exc_info` field is forwarded to logging as-is.
    """

    def __init__(
        self, name: str = "txboundary", logger: Optional[logging.Logger] = None
    ) -> None:
        self._logger = logger or logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = fields.pop("exc_info", None)
        if fields:
            rendered = " ".join(f"{k}={v!r}" for k, v in fields.items())
            msg = f"{msg} {rendered}"
        self._logger.log(level, msg, exc_info=exc_info, extra={"txboundary": fields})

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._log(logging.ERROR, msg, fields)
