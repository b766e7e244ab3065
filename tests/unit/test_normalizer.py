"""Unit tests for raw to canonical event normalization."""

from __future__ import annotations

import time
import typing as typ

import msgspec
import pytest

from jetson_gateway.common.clock import now_unix_ms
from jetson_gateway.events import (
    DEFAULT_CATEGORY,
    RawAnalyticsEvent,
    make_normalizer,
    normalize,
    timestamp_fragment,
)
from tests.helpers.clock import FROZEN_TS_MS

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class TestCategory:
    """Category falls back to ``analytics`` only for an empty kind."""

    def test_empty_kind_uses_default(
        self, frozen_clock: cabc.Callable[[], int]
    ) -> None:
        """An empty kind yields the default category."""
        raw = RawAnalyticsEvent(kind="", device_id="d1")

        event = normalize(raw, clock=frozen_clock)

        assert event.category == "analytics"
        assert DEFAULT_CATEGORY == "analytics"

    @pytest.mark.parametrize("kind", ["motion", "dwell", " ", "ANALYTICS"])
    def test_non_empty_kind_is_kept(
        self, kind: str, frozen_clock: cabc.Callable[[], int]
    ) -> None:
        """Any non-empty kind is copied verbatim."""
        event = normalize(RawAnalyticsEvent(kind=kind), clock=frozen_clock)

        assert event.category == kind


class TestIdentityFields:
    """Device and zone identity and payload are carried through."""

    def test_missing_fields_take_defaults(
        self, frozen_clock: cabc.Callable[[], int]
    ) -> None:
        """A raw event decoded from ``{}`` normalizes with empty identities."""
        event = normalize(RawAnalyticsEvent(), clock=frozen_clock)

        assert event.device_id == ""
        assert event.zone_id == ""
        assert event.fields is None
        assert event.category == "analytics"

    def test_device_and_zone_are_copied(
        self, frozen_clock: cabc.Callable[[], int]
    ) -> None:
        """Device and zone identifiers are copied unchanged."""
        event = normalize(
            RawAnalyticsEvent(device_id="cam-07", zone_id="dock-2"), clock=frozen_clock
        )

        assert (event.device_id, event.zone_id) == ("cam-07", "dock-2")

    @pytest.mark.parametrize(
        "payload",
        [
            {"count": 3, "boxes": [[0.1, 0.2, 0.3, 0.4]], "meta": {"model": "yolo"}},
            [1, "two", None, {"three": [3.5, False]}],
            "plain text",
            42,
            None,
        ],
    )
    def test_payload_passes_through_byte_for_byte(
        self, payload: object, frozen_clock: cabc.Callable[[], int]
    ) -> None:
        """Re-encoding ``fields`` reproduces the encoded inbound payload."""
        body = msgspec.json.encode({"device_id": "d1", "payload": payload})
        raw = msgspec.json.decode(body, type=RawAnalyticsEvent)

        event = normalize(raw, clock=frozen_clock)

        assert msgspec.json.encode(event.fields) == msgspec.json.encode(payload)
        assert event.fields is raw.payload


class TestTimestampAndId:
    """Timestamp and identifier synthesis."""

    def test_timestamp_comes_from_clock(
        self, frozen_clock: cabc.Callable[[], int]
    ) -> None:
        """The event timestamp is the controlled clock reading."""
        event = normalize(RawAnalyticsEvent(), clock=frozen_clock)

        assert event.ts_unix_ms == FROZEN_TS_MS

    def test_wall_clock_timestamp_is_bounded(self) -> None:
        """The default clock lands between readings taken around the call."""
        before = time.time_ns() // 1_000_000
        event = normalize(RawAnalyticsEvent())
        after = time.time_ns() // 1_000_000

        assert before <= event.ts_unix_ms <= after

    def test_event_id_layout(self, frozen_clock: cabc.Callable[[], int]) -> None:
        """Identifiers are ``voevt_<ts>_<fragment>``."""
        event = normalize(RawAnalyticsEvent(), clock=frozen_clock)

        fragment = timestamp_fragment(FROZEN_TS_MS)
        assert event.event_id == f"voevt_{FROZEN_TS_MS}_{fragment}"

    def test_clock_is_read_once(self) -> None:
        """Identifier and timestamp share one clock reading."""
        readings = iter([1_000, 2_000])

        event = normalize(RawAnalyticsEvent(), clock=lambda: next(readings))

        assert event.ts_unix_ms == 1_000
        assert event.event_id.startswith("voevt_1000_")

    def test_pre_epoch_clock_falls_back_to_zero(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A wall clock before the epoch reads as 0."""
        monkeypatch.setattr(time, "time_ns", lambda: -5_000_000_000)

        assert now_unix_ms() == 0
        assert normalize(RawAnalyticsEvent()).event_id == "voevt_0_79bcd"


def test_make_normalizer_binds_strategy(frozen_clock: cabc.Callable[[], int]) -> None:
    """A bound normalizer applies its clock and id strategy."""
    normalizer = make_normalizer(clock=frozen_clock, id_strategy=lambda ts: f"id-{ts}")

    event = normalizer(RawAnalyticsEvent(kind="motion"))

    assert event.event_id == f"id-{FROZEN_TS_MS}"
    assert event.ts_unix_ms == FROZEN_TS_MS
