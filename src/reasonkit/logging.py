"""Logging configuration for reasonkit with structlog.

reasonkit is a library, so it never installs handlers on import. Until the
application (or the CLI) calls :func:`setup_logging`, the first log call
applies a minimal structlog configuration that filters events below
``Settings.log_level``. An existing structlog configuration is left alone.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Any

import structlog


def setup_logging(
    level: str | None = "INFO",
    log_file: Path | None = None,
    show_timestamps: bool = True,
    json_output: bool = False,
) -> None:
    """Configure structlog for console and optional file output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR), or None to use INFO
        log_file: Optional file path to write logs
        show_timestamps: Include timestamps in console output
        json_output: Render JSON even when logging to the console
    """
    log_level = _resolve_level(level)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setLevel(log_level)

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]

    if show_timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False))

    if log_file or json_output:
        # JSON lines so log files stay machine-readable
        processors.extend(
            [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.extend(
            [
                structlog.dev.set_exc_info,
                structlog.dev.ConsoleRenderer(colors=True),
            ]
        )

    # stdlib factory: events reach the handlers installed above
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings() -> None:
    """Configure logging from the global settings."""
    from reasonkit.config import get_settings

    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        json_output=settings.log_json,
    )


def configure_default_logging() -> None:
    """Filter structlog events below ``Settings.log_level`` if nothing is configured yet."""
    if structlog.is_configured():
        return

    from reasonkit.config import get_settings

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            _resolve_level(get_settings().log_level)
        ),
    )


def _resolve_level(level: str | None) -> int:
    return getattr(logging, (level or "INFO").upper(), logging.INFO)


class _LazyLogger:
    """Logger handle that applies the default configuration on first use."""

    def __init__(self, name: str):
        self.name = name

    def __getattr__(self, attr: str) -> Any:
        configure_default_logging()
        return getattr(structlog.get_logger(self.name), attr)

    def __repr__(self) -> str:
        return f"<_LazyLogger name='{self.name}'>"


def get_logger(name: str) -> Any:
    """Get a logger for a module.

    Args:
        name: Module name (e.g., "reasonkit.react.module")

    Returns:
        Logger exposing the structlog bound-logger methods
    """
    return _LazyLogger(name)


class AsyncTimer:
    """Async context manager timing an operation and logging its duration.

    Usage:
        async with AsyncTimer("adapter call", logger) as timer:
            await adapter.run(...)
        timer.elapsed
    """

    def __init__(self, name: str, logger: Any | None = None):
        self.name = name
        self.logger = logger or get_logger("reasonkit.timer")
        self.start_time: float = 0
        self.elapsed: float = 0

    async def __aenter__(self) -> "AsyncTimer":
        self.start_time = time.perf_counter()
        self.logger.debug("Timed operation starting", operation=self.name)
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        self.logger.debug(
            "Timed operation completed", operation=self.name, elapsed_s=f"{self.elapsed:.3f}"
        )
