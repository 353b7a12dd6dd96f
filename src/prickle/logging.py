# src/prickle/logging.py
"""Logging for prickle.

prickle is a library first. Its modules log through ``get_logger``,
which wraps the stdlib logger of the same name, so a process that never
configures logging sees only warnings (via ``logging.lastResort``) and
never the check loop's debug events.

``configure_logging`` is for the CLI and for applications that want the
check loop's events: it installs one stderr handler on the root logger
whose ``ProcessorFormatter`` renders both structlog events and plain
stdlib records, as JSON or as console lines.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Bookkeeping keys ProcessorFormatter adds to every event dict
_FORMATTER_KEYS = ("_record", "_from_structlog")


def _drop_formatter_keys(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key in _FORMATTER_KEYS:
        event_dict.pop(key, None)
    return event_dict


def _parse_level(level: str) -> int:
    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LEVELS)}")
    level_no: int = logging.getLevelName(name)
    return level_no


def _renderer(json_output: bool) -> list[Any]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(*, json_output: bool = False, level: str = "WARNING") -> None:
    """Send structlog and stdlib logging to stderr through one formatter.

    Args:
        json_output: Render one JSON object per line instead of console text.
        level: Root log level, one of ``LEVELS`` (case-insensitive).

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    level_no = _parse_level(level)

    pre_chain: list[Any] = [
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure logging; cached loggers would go stale
        cache_logger_on_first_use=False,
    )

    # stdout carries rendered reports and samples
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[_drop_formatter_keys, *_renderer(json_output)],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level_no)


def get_logger(name: str) -> Any:
    """A structlog logger bound to the stdlib logger ``name``.

    Events pass through whatever processors structlog is configured with
    at call time, then reach stdlib logging, where levels and handlers
    decide whether anything is written.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
