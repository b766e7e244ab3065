"""In-process sink adapters: text streams and asyncio queues."""

from __future__ import annotations

import sys
import typing as typ

if typ.TYPE_CHECKING:
    import asyncio


class StreamEventSink:
    """Write each event as one line to a text stream.

    Parameters
    ----------
    stream
        Destination stream. Defaults to the process standard output as it
        is at write time, so redirections installed later are honoured.

    """

    def __init__(self, stream: typ.TextIO | None = None) -> None:
        """Keep the destination stream, if one was given."""
        self._stream = stream

    async def write_line(self, line: str) -> None:
        """Write ``line`` and a newline, then flush."""
        stream = self._stream or sys.stdout
        stream.write(f"{line}\n")
        stream.flush()


class QueueEventSink:
    """Put each event line on an :class:`asyncio.Queue`."""

    def __init__(self, queue: asyncio.Queue[str]) -> None:
        """Wrap ``queue``; bounded queues apply backpressure to the loop."""
        self.queue = queue

    async def write_line(self, line: str) -> None:
        """Enqueue ``line``."""
        await self.queue.put(line)
