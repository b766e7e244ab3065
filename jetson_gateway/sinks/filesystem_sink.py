"""Filesystem adapter for the EventSink protocol.

Appends one JSON line per event to a single file, creating the parent
directory on first use.

Usage
-----
>>> import asyncio
>>> from pathlib import Path
>>> sink = FileEventSink(Path("/var/lib/jetson-gateway/events.jsonl"))
>>> asyncio.run(sink.write_line('{"event_id": "voevt_1_79bcc"}'))

"""

from __future__ import annotations

import asyncio
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class FileEventSink:
    """Append events to a newline-delimited JSON file."""

    def __init__(self, path: Path) -> None:
        """Initialise the sink with its destination file."""
        self._path = path
        self._parent_ready = False

    @property
    def path(self) -> Path:
        """Return the destination file path."""
        return self._path

    def _append(self, line: str) -> None:
        if not self._parent_ready:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._parent_ready = True
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")

    async def write_line(self, line: str) -> None:
        """Append ``line`` off the event loop thread."""
        await asyncio.to_thread(self._append, line)
