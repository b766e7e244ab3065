"""Event identifier strategies.

Each strategy is a callable taking the normalization timestamp in
milliseconds and returning a complete ``voevt_<ts>_<suffix>`` identifier.

``timestamp_fragment_id`` derives its suffix from the timestamp alone, so two
events normalized in the same millisecond share an identifier. Use
:class:`CounterEventIds` or :class:`RandomEventIds` where identifiers must be
distinct within a run.
"""

from __future__ import annotations

import itertools
import random
import typing as typ

EVENT_ID_PREFIX = "voevt_"

_FRAGMENT_MIX = 0x5F37_9BCD
_FRAGMENT_MASK = 0xFFFFF
_RANDOM_BITS = 64

EventIdStrategy = typ.Callable[[int], str]


def _compose(ts_unix_ms: int, suffix: str) -> str:
    return f"{EVENT_ID_PREFIX}{ts_unix_ms}_{suffix}"


def timestamp_fragment(ts_unix_ms: int) -> str:
    """Return the 20-bit hex fragment mixed from ``ts_unix_ms``.

    Not a security property; the fragment only spreads identifiers that
    share a timestamp prefix across the hex space.

    >>> timestamp_fragment(0)
    '79bcd'
    """
    return f"{(ts_unix_ms ^ _FRAGMENT_MIX) & _FRAGMENT_MASK:x}"


def timestamp_fragment_id(ts_unix_ms: int) -> str:
    """Build an identifier from the timestamp and its mixed fragment."""
    return _compose(ts_unix_ms, timestamp_fragment(ts_unix_ms))


class CounterEventIds:
    """Append a per-instance monotonically increasing counter to the timestamp."""

    def __init__(self, start: int = 0) -> None:
        """Start counting at ``start``."""
        self._counter = itertools.count(start)

    def __call__(self, ts_unix_ms: int) -> str:
        """Return the next identifier for ``ts_unix_ms``."""
        return _compose(ts_unix_ms, f"{next(self._counter):x}")


class RandomEventIds:
    """Append 64 random bits to the timestamp.

    Parameters
    ----------
    rng : random.Random | None
        Source of randomness. Defaults to :class:`random.SystemRandom`, which
        draws from the operating system entropy pool; pass a seeded
        ``random.Random`` for reproducible sequences.

    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """Keep the random source used for suffixes."""
        self._rng = rng or random.SystemRandom()

    def __call__(self, ts_unix_ms: int) -> str:
        """Return a fresh identifier for ``ts_unix_ms``."""
        return _compose(ts_unix_ms, f"{self._rng.getrandbits(_RANDOM_BITS):016x}")


_STRATEGY_NAMES: tuple[str, ...] = ("timestamp", "counter", "random")


def id_strategy_for(name: str) -> EventIdStrategy:
    """Return a fresh strategy for ``timestamp``, ``counter`` or ``random``.

    Raises
    ------
    ValueError
        If ``name`` is not one of the known strategies.

    """
    match name.strip().lower():
        case "timestamp":
            return timestamp_fragment_id
        case "counter":
            return CounterEventIds()
        case "random":
            return RandomEventIds()
        case _:
            msg = (
                f"unknown event id strategy {name!r}; "
                f"expected one of {_STRATEGY_NAMES}"
            )
            raise ValueError(msg)


def strategy_names() -> tuple[str, ...]:
    """Return the names accepted by :func:`id_strategy_for`."""
    return _STRATEGY_NAMES
