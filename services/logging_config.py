"""
Structured Logging Configuration
Version: 1.0.0

structlog on top of stdlib logging.
- JSON lines in production, colored console output otherwise
- Per-request context (trace id, method, path) bound through
  structlog.contextvars and merged into every entry
- Service name, version and environment taken from Settings
"""
import logging
import sys
from typing import Optional

import structlog

from config import Settings


class ServiceInfo:
    """Processor stamping service metadata onto JSON entries."""

    def __init__(self, settings: Settings):
        self.fields = {
            'service': settings.APP_NAME,
            'version': settings.APP_VERSION,
            'environment': settings.APP_ENV,
        }

    def __call__(self, logger, method_name, event_dict):
        for key, value in self.fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def rename_event_key(logger, method_name, event_dict):
    """Rename 'event' to 'message' for log shippers."""
    if 'event' in event_dict:
        event_dict['message'] = event_dict.pop('event')
    return event_dict


def bind_request_context(trace_id: str, **fields) -> None:
    """Start a fresh logging context for one request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id, **fields)


def build_processors(settings: Settings, json_format: bool) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.extend([
            ServiceInfo(settings),
            rename_event_key,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def configure_logging(settings: Settings, json_format: Optional[bool] = None) -> None:
    """
    Configure structured logging for the application.

    Args:
        settings: Application settings (log level, service metadata)
        json_format: Force JSON (True) or console (False) output.
                    Defaults to JSON only in production.
    """
    if json_format is None:
        json_format = settings.is_production

    structlog.configure(
        processors=build_processors(settings, json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    )

    # uvicorn access log duplicates the request middleware
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("Booking created", booking_id="...", guests=2)
    """
    return structlog.get_logger(name)
