"""
Structured JSON logging for the service and the libraries it hosts.

Records from structlog loggers and from plain stdlib loggers (httpx,
fastmcp middleware) go through one JSON formatter, so every line on the
stream has the same shape: event, level, logger, service, timestamp, plus
whatever the structlog contextvars hold (trace_id, tool).

Usage:
    from common.logging import configure_logging, get_logger

    # In main.py (once at startup)
    configure_logging("cdt-express-mcp", log_level="INFO", stream=sys.stderr)

    # In any module
    logger = get_logger(__name__)
    logger.info("pagination_page_fetched", path="/v3/assets", page=2)
"""

import logging
import sys
from typing import Any, TextIO, cast

import structlog
from structlog.types import EventDict, Processor

_configured = False

REDACTED = "***"
SENSITIVE_KEYS = frozenset({"authorization", "api_key", "apikey", "token", "bearer_token"})
QUIET_LOGGERS = ("httpx", "httpcore")


def redact_secrets(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
    """Mask values of secret-looking keys before rendering."""
    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS and event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def _service_stamp(service_name: str) -> Processor:
    def add_service_name(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["service"] = service_name
        return event_dict

    return add_service_name


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """
    Route all logging to one JSON handler on `stream`.

    Call once at startup; later calls are ignored. On the stdio MCP
    transport stdout carries the protocol, so pass sys.stderr there.

    Args:
        service_name: Stamped on every line as "service"
        log_level: Root level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream, stdout when omitted
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)

    # Shared by structlog events and foreign stdlib records
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _service_stamp(service_name),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.PositionalArgumentsFormatter(),
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.dict_tracebacks,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Request lines already come from TracedHttpClient's event hooks
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Structured logger for a module, typically get_logger(__name__)."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
