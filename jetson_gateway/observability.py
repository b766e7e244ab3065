"""Structured log events for the ingestion loop and its supervisor.

Every event is a single femtologging record laid out as
``[<event type>] key=value ...`` so log aggregators can filter on the
bracketed type.

Usage
-----
>>> event_logger = GatewayEventLogger()
>>> event_logger.log_subscribed(topic_filter="analytics/+/events", qos=1)

"""

from __future__ import annotations

import enum

from jetson_gateway.errors import GatewayConfigError, GatewayTransportError
from jetson_gateway.events.errors import EventDecodeError, EventEncodeError
from jetson_gateway.logging import (
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
)

logger = get_logger(__name__)


class GatewayEventType(enum.StrEnum):
    """Structured log event types emitted by the gateway."""

    LOOP_CONNECTING = "ingestion.loop.connecting"
    LOOP_SUBSCRIBED = "ingestion.loop.subscribed"
    LOOP_FAILED = "ingestion.loop.failed"
    MESSAGE_UNDECODABLE = "ingestion.message.undecodable"
    MESSAGE_INVALID = "ingestion.message.invalid"
    BACKOFF_STARTED = "supervisor.backoff.started"
    LOOP_RESTARTED = "supervisor.loop.restarted"
    SUPERVISOR_STOPPED = "supervisor.stopped"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in log output."""

    TRANSPORT = "transport"
    ENCODING = "encoding"
    DECODE = "decode"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GatewayTransportError, ErrorCategory.TRANSPORT),
    (EventEncodeError, ErrorCategory.ENCODING),
    (EventDecodeError, ErrorCategory.DECODE),
    (GatewayConfigError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Return the category used when reporting ``exc``."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class GatewayEventLogger:
    """Emit structured gateway events via femtologging."""

    def log_connecting(self, *, host: str, port: int, client_id: str) -> None:
        """Log the start of a broker connection attempt."""
        log_info(
            logger,
            "[%s] host=%s port=%d client_id=%s",
            GatewayEventType.LOOP_CONNECTING,
            host,
            port,
            client_id,
        )

    def log_subscribed(self, *, topic_filter: str, qos: int) -> None:
        """Log that the subscription request was accepted."""
        log_info(
            logger,
            "[%s] topic_filter=%s qos=%d",
            GatewayEventType.LOOP_SUBSCRIBED,
            topic_filter,
            qos,
        )

    def log_message_undecodable(
        self, *, topic: str, error: EventDecodeError, report: bool
    ) -> None:
        """Log a message body that is not valid UTF-8.

        Parameters
        ----------
        topic
            Topic the message arrived on.
        error
            The decode failure.
        report
            Emit at WARNING rather than DEBUG.

        """
        emit = log_warning if report else log_debug
        emit(
            logger,
            "[%s] topic=%s reason=%s error_category=%s error_message=%s",
            GatewayEventType.MESSAGE_UNDECODABLE,
            topic,
            error.reason,
            categorize_error(error),
            str(error),
        )

    def log_message_invalid(self, *, topic: str, error: EventDecodeError) -> None:
        """Log a message whose text is not a raw analytics record."""
        log_error(
            logger,
            "[%s] topic=%s reason=%s error_category=%s error_message=%s",
            GatewayEventType.MESSAGE_INVALID,
            topic,
            error.reason,
            categorize_error(error),
            str(error),
        )

    def log_loop_failed(self, *, error: BaseException, events_emitted: int) -> None:
        """Log an ingestion loop invocation ending with ``error``."""
        log_error(
            logger,
            "[%s] error_type=%s error_category=%s events_emitted=%d error_message=%s",
            GatewayEventType.LOOP_FAILED,
            type(error).__name__,
            categorize_error(error),
            events_emitted,
            str(error),
            exc_info=error,
        )

    def log_backoff_started(self, *, delay_s: float, restarts: int) -> None:
        """Log the supervisor pausing before the next restart."""
        log_warning(
            logger,
            "[%s] delay_seconds=%.3f restarts=%d",
            GatewayEventType.BACKOFF_STARTED,
            delay_s,
            restarts,
        )

    def log_loop_restarted(self, *, restarts: int) -> None:
        """Log the supervisor starting a fresh ingestion loop."""
        log_info(
            logger,
            "[%s] restarts=%d",
            GatewayEventType.LOOP_RESTARTED,
            restarts,
        )

    def log_supervisor_stopped(self, *, restarts: int) -> None:
        """Log the supervisor returning."""
        log_info(
            logger,
            "[%s] restarts=%d",
            GatewayEventType.SUPERVISOR_STOPPED,
            restarts,
        )
