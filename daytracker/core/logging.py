"""JSON log lines tagged with the current request id and principal."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from ..middlewares import principal_ctx_var, request_id_ctx_var


def _timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _request_context() -> dict[str, str]:
    context = {}
    request_id = request_id_ctx_var.get()
    if request_id:
        context["request_id"] = request_id
    principal = principal_ctx_var.get()
    if principal:
        context["principal"] = principal
    return context


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record. ``extra={"extra_data": {...}}`` is merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": _timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_request_context(),
        }
        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, Mapping):
            payload.update(extra_data)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def configure_logging(level: str = "INFO") -> None:
    """Route the root logger through ``JsonLogFormatter``.

    Uvicorn's own access log is silenced; ``RequestIdMiddleware`` already
    writes one line per request.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())
    logging.root.handlers = [handler]
    logging.root.setLevel(level.upper())
    logging.getLogger("uvicorn.access").disabled = True
