"""
Logging setup for NoteKeep.

structlog is routed through the stdlib root logger so uvicorn and
library records share the same handlers. Settings come from
config/settings/logging.yaml; arguments to setup_logging() win over it.

A JSON record carries: timestamp, level, logger, event, func_name,
lineno, request_id (inside a request) and whatever the caller passed
in ``extra``.

Credentials never reach a handler: values under the keys in
SECRET_FIELDS are masked by redact_secrets, at top level and inside
``extra``.

Usage:
    from notekeep.backend.core.logging import get_logger, setup_logging

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note.id})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from notekeep.backend.core.config import find_project_root, get_app_config
from notekeep.backend.core.config_schema import FileHandlerSchema

SECRET_FIELDS = frozenset({
    "password",
    "new_password",
    "password_hash",
    "recovery_key",
    "recovery_key_hash",
    "encryption_key",
    "session_token",
    "token",
})
REDACTED = "***"

_QUIET_LOGGERS = ("uvicorn.access",)


def _mask(values: dict[str, Any]) -> dict[str, Any]:
    return {key: REDACTED if key in SECRET_FIELDS else value for key, value in values.items()}


def redact_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Processor that masks credential values before rendering."""
    event_dict = _mask(event_dict)
    extra = event_dict.get("extra")
    if isinstance(extra, dict):
        event_dict["extra"] = _mask(extra)
    return event_dict


def _pre_chain() -> list[Processor]:
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FUNC_NAME,
            structlog.processors.CallsiteParameter.LINENO,
        ],
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        callsite,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _file_handler(settings: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    target = find_project_root() / settings.path
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(target),
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Safe to call more than once; earlier root handlers are replaced.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: "console" for coloured dev output, "json" otherwise
        enable_console: Log to stdout
        enable_file_logging: Also write JSON lines to the rotating file
    """
    settings = get_app_config().logging
    if level is None:
        level = settings.level
    if format_type is None:
        format_type = settings.format
    if enable_console is None:
        enable_console = settings.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = settings.handlers.file.enabled

    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    as_json = _formatter(structlog.processors.JSONRenderer(), pre_chain)
    handlers: list[logging.Handler] = []
    if enable_console:
        console = logging.StreamHandler(sys.stdout)
        if format_type == "console":
            console.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=True), pre_chain))
        else:
            console.setFormatter(as_json)
        handlers.append(console)
    if enable_file_logging:
        handlers.append(_file_handler(settings.handlers.file, as_json))

    root = logging.getLogger()
    for stale in list(root.handlers):
        root.removeHandler(stale)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Bound structlog logger for ``name`` (normally ``__name__``)."""
    return structlog.get_logger(name)
