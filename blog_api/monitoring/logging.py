"""
Structured request logging.

structlog renders events through the standard library root logger, so the
same ``RichHandler`` prints both structlog events and plain ``logging``
records. Every string value is escaped and scrubbed of e-mail addresses,
card numbers and bearer tokens before rendering.

Examples
--------
>>> from blog_api.monitoring import get_logger
>>> get_logger("blog_api.requests").info("Response", status_code=200)
"""

from logging import root
from re import compile as re_compile
from typing import Any

from rich.logging import RichHandler
from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from blog_api.configs.settings import settings
from blog_api.utils.helpers import today_str

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "proxy-authorization", "x-api-key"})

# Applied in order; the JWT pattern must run before the e-mail one
PII_PATTERNS = (
    (re_compile(r"eyJ[\w-]*\.eyJ[\w-]*\.[\w-]*"), "[REDACTED_JWT]"),
    (re_compile(r"[\w.%+-]+@[\w.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
    (re_compile(r"\b(?:\d{4}[-\s]?){3}\d{4}\b"), "[REDACTED_CC]"),
)

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Escape line breaks and tabs, drop NUL bytes.

    >>> sanitize_log_message("a\nb")
    'a\\nb'
    """
    return message.translate(CONTROL_CHARS)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def redact_pii(message: str) -> str:
    """
    >>> redact_pii("mail me at jo@example.com")
    'mail me at [REDACTED_EMAIL]'
    """
    for pattern, placeholder in PII_PATTERNS:
        message = pattern.sub(placeholder, message)
    return message


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = redact_pii(sanitize_log_message(value))
        elif isinstance(value, dict) and key.lower() == "headers":
            event_dict[key] = sanitize_headers(value)
    return event_dict


def get_renderer() -> Processor:
    """Readable console lines while developing, one JSON object per line elsewhere."""
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(
            colors=False,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    return JSONRenderer()


def configure_logging() -> None:
    """
    Route structlog through the root logger and attach the console handler.

    Safe to call again (e.g. on reload): existing root handlers are replaced.
    """
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            add_timestamp,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    console = RichHandler(rich_tracebacks=True, show_path=False)
    console.setFormatter(
        ProcessorFormatter(
            processors=[
                ProcessorFormatter.remove_processors_meta,
                sanitize_event_dict,
                get_renderer(),
            ],
            # Records from plain logging loggers
            foreign_pre_chain=[merge_contextvars, add_log_level, add_timestamp, ExtraAdder()],
        ),
    )
    root.addHandler(console)


def get_logger(name: str) -> BoundLogger:
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    """Attach ``request_id`` to every event logged in the current context."""
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()
