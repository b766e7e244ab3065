"""Raw analytics to virtual object event normalization."""

from __future__ import annotations

import typing as typ

from jetson_gateway.common.clock import now_unix_ms

from .identifiers import timestamp_fragment_id
from .models import RawAnalyticsEvent, VirtualObjectEvent

if typ.TYPE_CHECKING:
    from jetson_gateway.common.clock import Clock

    from .identifiers import EventIdStrategy

DEFAULT_CATEGORY = "analytics"

Normalizer = typ.Callable[[RawAnalyticsEvent], VirtualObjectEvent]


def normalize(
    raw: RawAnalyticsEvent,
    *,
    clock: Clock = now_unix_ms,
    id_strategy: EventIdStrategy = timestamp_fragment_id,
) -> VirtualObjectEvent:
    """Convert ``raw`` into its canonical form.

    The timestamp is read once from ``clock`` and used for both
    ``ts_unix_ms`` and the identifier. ``payload`` is carried into
    ``fields`` without inspection.
    """
    ts = clock()
    return VirtualObjectEvent(
        event_id=id_strategy(ts),
        ts_unix_ms=ts,
        device_id=raw.device_id,
        zone_id=raw.zone_id,
        category=raw.kind or DEFAULT_CATEGORY,
        fields=raw.payload,
    )


def make_normalizer(
    *,
    clock: Clock = now_unix_ms,
    id_strategy: EventIdStrategy = timestamp_fragment_id,
) -> Normalizer:
    """Bind ``clock`` and ``id_strategy`` into a single-argument normalizer."""

    def _normalize(raw: RawAnalyticsEvent) -> VirtualObjectEvent:
        return normalize(raw, clock=clock, id_strategy=id_strategy)

    return _normalize
