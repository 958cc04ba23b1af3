"""structlog configuration shared by the Lambda handler, the dev server and the CLI."""

import logging
import sys
from typing import Any

import structlog


__all__ = [
    "configure_logging_once",
    "get_logger",
    "resolve_json_logs",
    "setup_logging",
]


def resolve_json_logs(log_format: str) -> bool:
    """Map a configured log format to the JSON/console renderer choice.

    ``auto`` renders JSON when stderr is not a terminal, which is the case
    inside Lambda where CloudWatch ingests every line.
    """
    if log_format == "json":
        return True
    if log_format == "console":
        return False
    return not sys.stderr.isatty()


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # sys.stderr is looked up per logger so redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(
    json_logs: bool = True,
    log_level_name: str = "INFO",
    configure_stdlib: bool = True,
) -> None:
    """Configure structlog and route stdlib logging through the same level.

    Args:
        json_logs: Render one JSON object per line instead of colored console output
        log_level_name: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        configure_stdlib: Also reset the stdlib root logger to the same level
    """
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: Any
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )

    if not configure_stdlib:
        return

    # Lambda installs its own root handler; force replaces it so levels match
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )
    for logger_name in ["httpx", "httpcore", "botocore"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def configure_logging_once(log_level_name: str, log_format: str) -> bool:
    """Run ``setup_logging`` unless structlog has been configured already.

    Returns whether configuration was applied.
    """
    if structlog.is_configured():
        return False

    setup_logging(
        json_logs=resolve_json_logs(log_format),
        log_level_name=log_level_name,
    )
    return True


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
