"""Typed shapes for raw analytics events and canonical virtual object events."""

from __future__ import annotations

import typing as typ

import msgspec

from .errors import EventDecodeError, EventEncodeError


class RawAnalyticsEvent(msgspec.Struct, kw_only=True):
    """Analytics event as published by a device.

    Every field is optional on the wire and falls back to its default.
    Unknown fields are ignored.

    Attributes
    ----------
    device_id : str
        Identifier of the publishing device.
    zone_id : str
        Identifier of the zone the device reports for.
    kind : str
        Device-specific event kind; empty when the device sent none.
    payload : Any
        Opaque event body, ``None`` when absent.

    """

    device_id: str = ""
    zone_id: str = ""
    kind: str = ""
    payload: typ.Any = None


class VirtualObjectEvent(msgspec.Struct, kw_only=True, frozen=True):
    """Canonical event handed to the sink.

    Attributes
    ----------
    event_id : str
        ``voevt_``-prefixed identifier generated at normalization time.
    ts_unix_ms : int
        Normalization time in milliseconds since the Unix epoch.
    device_id : str
        Copied from the raw event.
    zone_id : str
        Copied from the raw event.
    category : str
        Raw ``kind`` or ``"analytics"`` when the raw kind was empty.
    fields : Any
        The raw ``payload``, carried through unchanged.

    """

    event_id: str
    ts_unix_ms: int
    device_id: str
    zone_id: str
    category: str
    fields: typ.Any


_raw_decoder = msgspec.json.Decoder(RawAnalyticsEvent)
_encoder = msgspec.json.Encoder()


def decode_raw_event(body: bytes | str) -> RawAnalyticsEvent:
    """Decode a message body into a :class:`RawAnalyticsEvent`.

    Raises
    ------
    EventDecodeError
        With reason ``invalid_encoding`` for bytes that are not UTF-8, or
        ``invalid_record`` for text that is not a JSON object of the raw
        shape, including documents nested too deeply to decode.

    """
    if isinstance(body, bytes | bytearray):
        try:
            text = bytes(body).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EventDecodeError.invalid_encoding(exc) from exc
    else:
        text = body

    # msgspec raises RecursionError for documents nested past its depth limit.
    try:
        return _raw_decoder.decode(text)
    except (msgspec.DecodeError, RecursionError) as exc:
        raise EventDecodeError.invalid_record(str(exc)) from exc


def encode_event(event: VirtualObjectEvent) -> str:
    """Serialize ``event`` as a single JSON document without a newline."""
    try:
        return _encoder.encode(event).decode("utf-8")
    except (msgspec.EncodeError, TypeError, OverflowError) as exc:
        raise EventEncodeError.for_event(event.event_id, str(exc)) from exc
