"""Structured logging bootstrap.

Configures the root logger once at startup so every module's
``logging.getLogger(__name__)`` (resolver setup, unknown-fallback
warnings, uvicorn access lines) goes through one handler:

* **JSON lines** (``json_output=True``, default) via python-json-logger.
* **Human-readable** (``json_output=False``) via uvicorn's coloured
  formatter, for local development.

When OpenTelemetry tracing is active the current ``trace_id`` and
``span_id`` are attached to every record.
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from clientip.configs.system import LoggingConfig


class _TraceContextFilter(logging.Filter):
    """Injects OTEL trace/span IDs into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        if ctx and ctx.is_valid:
            record.trace_id = format(ctx.trace_id, "032x")  # type: ignore[attr-defined]
            record.span_id = format(ctx.span_id, "016x")  # type: ignore[attr-defined]
        else:
            record.trace_id = ""  # type: ignore[attr-defined]
            record.span_id = ""  # type: ignore[attr-defined]
        return True


_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
_RESOLVER_LOGGER = "clientip.core"

SERVICE_NAME = "clientip"


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s "
            "%(trace_id)s %(span_id)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            defaults={"trace_id": "", "span_id": ""},
            static_fields={"service": SERVICE_NAME},
        )

    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger (call once at startup)."""
    if config is None:
        config = LoggingConfig()

    root = logging.getLogger()
    root.setLevel(config.level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_TraceContextFilter())
    handler.setFormatter(_build_formatter(config))

    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvi = logging.getLogger(name)
        uvi.handlers = [handler]
        uvi.propagate = False

    # Candidate and resolver setup messages can be tuned apart from the root.
    logging.getLogger(_RESOLVER_LOGGER).setLevel(config.resolver_level.upper())
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)
