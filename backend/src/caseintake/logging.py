"""Logging setup for the case intake service.

One root handler on stdout. ``LOG_FORMAT=json`` (the default) emits one JSON
object per line with any ``extra`` fields merged in; ``LOG_FORMAT=text``
is meant for a developer terminal.

The ``log_*`` helpers give each domain event a stable ``event`` name so
log queries do not depend on message wording.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

from .config import get_settings

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio", "multipart", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """Render a record as a single-line JSON document."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _text_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def setup_logging() -> None:
    """Install the configured handler on the root logger.

    Safe to call more than once; the previous handlers are replaced.
    """
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JSONFormatter() if settings.log_format == "json" else _text_formatter()
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    get_logger(__name__).debug(
        "Logging configured",
        extra={"log_level": settings.log_level, "log_format": settings.log_format},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class ContextLogger(logging.LoggerAdapter):
    """Adapter that merges fixed fields into every record's ``extra``."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_context_logger(name: str, **context: Any) -> ContextLogger:
    """Logger that tags every record with ``context``.

    Usage:
        logger = get_context_logger(__name__, component="parser")
        logger.warning("CSV parsing stopped early")  # carries component="parser"
    """
    return ContextLogger(get_logger(name), context)


# =========================
# Domain events
# =========================

_ingest_log = get_logger("caseintake.ingestion")
_case_log = get_logger("caseintake.cases")
_api_log = get_logger("caseintake.api")


def log_preview_file(filename: str, records: int, error: str | None = None) -> None:
    """One uploaded file previewed, or rejected as unparseable."""
    fields = {"event": "preview_file", "upload_file": filename, "records": records}
    if error:
        _ingest_log.warning(f"Preview of {filename} failed: {error}", extra={**fields, "error": error})
    else:
        _ingest_log.info(f"Previewed {filename}: {records} records", extra=fields)


def log_commit_complete(submitted: int, user_id: str | None, duration_ms: float) -> None:
    _ingest_log.info(
        f"Committed {submitted} records",
        extra={
            "event": "commit_complete",
            "submitted": submitted,
            "user_id": user_id,
            "duration_ms": round(duration_ms, 2),
        },
    )


def log_commit_failed(submitted: int, user_id: str | None, error: str) -> None:
    _ingest_log.error(
        f"Commit of {submitted} records rolled back: {error}",
        extra={
            "event": "commit_failed",
            "submitted": submitted,
            "user_id": user_id,
            "error": error,
        },
    )


def log_case_mutation(case_id: str, action: str) -> None:
    """A single case was created, updated, deleted or recovered."""
    _case_log.info(
        f"Case {case_id} {action}",
        extra={"event": "case_mutation", "case_id": case_id, "action": action},
    )


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """One HTTP request served; 5xx responses are logged at error level."""
    level = logging.ERROR if status_code >= 500 else logging.INFO
    _api_log.log(
        level,
        f"{method} {path} {status_code}",
        extra={
            "event": "api_request",
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": duration_ms,
        },
    )
