"""Errors raised while decoding inbound or encoding outbound events."""

from __future__ import annotations

import enum


class EventDecodeReason(enum.StrEnum):
    """Machine-readable reasons an inbound message body was rejected."""

    INVALID_ENCODING = "invalid_encoding"
    INVALID_RECORD = "invalid_record"


class EventDecodeError(ValueError):
    """Raised when a message body cannot be read as a raw analytics event.

    Decode errors concern a single message; the ingestion loop skips the
    message and keeps its connection.
    """

    def __init__(self, message: str, reason: EventDecodeReason) -> None:
        """Store the reason alongside the message."""
        super().__init__(message)
        self.reason = reason

    @classmethod
    def invalid_encoding(cls, exc: UnicodeDecodeError) -> EventDecodeError:
        """Return an error for a body that is not valid UTF-8."""
        return cls(
            f"message body is not valid UTF-8 at byte {exc.start}",
            EventDecodeReason.INVALID_ENCODING,
        )

    @classmethod
    def invalid_record(cls, detail: str) -> EventDecodeError:
        """Return an error for text that is not a raw analytics record."""
        return cls(
            f"message body is not a raw analytics event: {detail}",
            EventDecodeReason.INVALID_RECORD,
        )


class GatewayLoopError(RuntimeError):
    """Base class for errors that end an ingestion loop invocation."""


class EventEncodeError(GatewayLoopError):
    """Raised when a canonical event cannot be serialized for the sink."""

    @classmethod
    def for_event(cls, event_id: str, detail: str) -> EventEncodeError:
        """Return an error naming the event that failed to encode."""
        return cls(f"failed to encode event {event_id}: {detail}")
