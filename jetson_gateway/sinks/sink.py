"""EventSink protocol for emitting serialized canonical events.

A sink is any append-style consumer of one serialized record per line.
Adapters write to standard output, files or in-process queues; the
ingestion loop only depends on this protocol.

The protocol is ``runtime_checkable`` so adapters can be verified with
``isinstance``:

>>> from jetson_gateway.sinks import EventSink, StreamEventSink
>>> isinstance(StreamEventSink(), EventSink)
True

"""

from __future__ import annotations

import typing as typ


@typ.runtime_checkable
class EventSink(typ.Protocol):
    """Consumer of serialized canonical events."""

    async def write_line(self, line: str) -> None:
        """Append one serialized event.

        Parameters
        ----------
        line
            A single JSON document without a trailing newline. Adapters add
            their own record separator.

        """
        ...
