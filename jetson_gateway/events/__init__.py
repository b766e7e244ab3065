"""Canonical event model, identifier strategies and normalization."""

from __future__ import annotations

from .errors import (
    EventDecodeError,
    EventDecodeReason,
    EventEncodeError,
    GatewayLoopError,
)
from .identifiers import (
    EVENT_ID_PREFIX,
    CounterEventIds,
    EventIdStrategy,
    RandomEventIds,
    id_strategy_for,
    timestamp_fragment,
    timestamp_fragment_id,
)
from .models import (
    RawAnalyticsEvent,
    VirtualObjectEvent,
    decode_raw_event,
    encode_event,
)
from .normalizer import DEFAULT_CATEGORY, Normalizer, make_normalizer, normalize

__all__ = [
    "DEFAULT_CATEGORY",
    "EVENT_ID_PREFIX",
    "CounterEventIds",
    "EventDecodeError",
    "EventDecodeReason",
    "EventEncodeError",
    "EventIdStrategy",
    "GatewayLoopError",
    "Normalizer",
    "RandomEventIds",
    "RawAnalyticsEvent",
    "VirtualObjectEvent",
    "decode_raw_event",
    "encode_event",
    "id_strategy_for",
    "make_normalizer",
    "normalize",
    "timestamp_fragment",
    "timestamp_fragment_id",
]
