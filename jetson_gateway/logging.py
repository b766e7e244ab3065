"""femtologging helpers shared by the gateway.

Log calls go through these helpers so every message is formatted with
percent-style interpolation before it reaches femtologging, which only
accepts pre-formatted strings.

Example:
>>> from jetson_gateway.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "subscribed to %s", "analytics/+/events")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Level names accepted by femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_DEFAULT_LEVEL = LogLevel.INFO


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return the canonical level name and whether ``level`` was rejected.

    Parameters
    ----------
    level : str | None
        Level name as supplied by the operator, in any case.

    Returns
    -------
    tuple[str, bool]
        The level to use and ``True`` when the input was missing or unknown
        and the default was substituted.

    """
    candidate = (level or "").strip().upper()
    if candidate in LogLevel.__members__:
        return (candidate, False)
    return (str(_DEFAULT_LEVEL), True)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Install the femtologging root configuration.

    Parameters
    ----------
    level : str | None
        Requested level; unknown values fall back to ``INFO``.
    force : bool, optional
        Replace handlers installed by an earlier configuration.

    Returns
    -------
    tuple[str, bool]
        The applied level and whether the requested one was rejected.

    """
    applied, rejected = normalize_log_level(level)
    basicConfig(level=applied, force=force)
    return (applied, rejected)


class _SupportsLog(typ.Protocol):
    """Subset of the femtologging logger API used by the helpers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _SupportsLog,
    level: LogLevel,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    message = template % args if args else template
    logger.log(str(level), message, exc_info=exc_info, stack_info=False)


def log_debug(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at DEBUG after interpolating ``args`` into ``template``."""
    _emit(logger, LogLevel.DEBUG, template, args, exc_info)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at INFO after interpolating ``args`` into ``template``."""
    _emit(logger, LogLevel.INFO, template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at WARNING after interpolating ``args`` into ``template``."""
    _emit(logger, LogLevel.WARNING, template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log at ERROR after interpolating ``args`` into ``template``."""
    _emit(logger, LogLevel.ERROR, template, args, exc_info)


__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
