"""Logging setup for lesiontree.

The package logs one STAGE record per pipeline step (metadata loaded, features
encoded, dataset split, tree trained, accuracy) and a DEBUG record per split
chosen while growing the tree. Nothing is shown until `enable_logging()` is
called.

Note:
    Importing this module removes loguru's default stderr handler (ID 0) to
    prevent duplicate output when ``enable_logging()`` adds its own handler.
    If your application configures loguru handlers *before* importing
    lesiontree, handler 0 may no longer be the default; in that case the
    removal is a no-op (the ``ValueError`` is suppressed).
"""

from __future__ import annotations

import contextlib
import sys
import warnings
from typing import TYPE_CHECKING, ClassVar, Final, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

# Pipeline progress level (between INFO=20 and WARNING=30)
STAGE_LEVEL: Final[str] = "STAGE"
STAGE_LEVEL_NUMBER: Final[int] = 25


def _register_stage_level() -> None:
    """Register the STAGE custom log level with loguru.

    If the level already exists with a different numeric value, emits a
    UserWarning because loguru does not permit changing the numeric value of
    an existing level.
    """
    try:
        existing_level = logger.level(STAGE_LEVEL)
    except ValueError:
        logger.level(STAGE_LEVEL, no=STAGE_LEVEL_NUMBER, icon="▶")
    else:
        if existing_level.no != STAGE_LEVEL_NUMBER:
            msg = f"STAGE level already registered with numeric value {existing_level.no}, expected {STAGE_LEVEL_NUMBER}"
            warnings.warn(msg, stacklevel=2)


_register_stage_level()

type LogLevel = Literal[
    "TRACE",
    "DEBUG",
    "INFO",
    "STAGE",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

type LogFormat = Literal["short", "full"]


class LoggingHandle:
    """Owns one stderr handler added by `enable_logging`.

    The package logger stays enabled while any handle is live. Disabling the
    last one, directly or by leaving its `with` block, turns lesiontree
    logging back off.

    Examples:
        >>> with enable_logging(level="DEBUG"):  # doctest: +SKIP
        ...     run_pipeline_from_csv("metadata.csv")
    """

    _active_ids: ClassVar[set[int]] = set()

    def __init__(self, handler_id: int) -> None:
        """Initialize the logging handle.

        Args:
            handler_id (int): The loguru handler ID from logger.add().
        """
        self.handler_id: int | None = handler_id
        LoggingHandle._active_ids.add(handler_id)

    def disable(self) -> None:
        """Remove this handle's handler; safe to call more than once."""
        if self.handler_id is None:
            return
        LoggingHandle._active_ids.discard(self.handler_id)
        with contextlib.suppress(ValueError):
            logger.remove(self.handler_id)
        self.handler_id = None
        if not LoggingHandle._active_ids:
            logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.disable()


def enable_logging(
    *,
    level: LogLevel = STAGE_LEVEL,
    log_format: LogFormat = "short",
) -> LoggingHandle:
    """Enable lesiontree logging on stderr.

    Each call returns an independent handle that manages its own handler; use
    the handle's disable() method or context manager protocol to clean up.

    Args:
        level (LogLevel): Minimum log level to display. Defaults to "STAGE",
            which surfaces one line per pipeline stage. Lower to "DEBUG" to
            trace node creation during tree construction.
        log_format (LogFormat): "short" (default) shows the function name;
            "full" shows module:function:line.

    Returns:
        LoggingHandle: Independent handle for managing the logging handler.
    """
    logger.enable(PACKAGE_NAME)

    if log_format == "short":
        format_str = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
            "<cyan>{function}</cyan> - "
            "<level>{message}</level>"
        )
    else:
        format_str = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        )

    handler_id = logger.add(
        sys.stderr,
        level=level,
        filter=_is_lesiontree_record,
        format=format_str,
    )

    return LoggingHandle(handler_id)


def _is_lesiontree_record(record: Record) -> bool:
    """Filter to pass all lesiontree module records.

    Args:
        record (Record): The loguru Record object to filter.

    Returns:
        bool: True if the record is from the lesiontree package.
    """
    name = record["name"]
    return name is not None and name.startswith(PACKAGE_NAME)
