"""Destinations for serialized canonical events."""

from __future__ import annotations

import typing as typ

from .filesystem_sink import FileEventSink
from .sink import EventSink
from .stream_sink import QueueEventSink, StreamEventSink

if typ.TYPE_CHECKING:
    from pathlib import Path


def build_sink(path: Path | None = None) -> EventSink:
    """Return a file sink for ``path`` or a standard output sink."""
    if path is None:
        return StreamEventSink()
    return FileEventSink(path)


__all__ = [
    "EventSink",
    "FileEventSink",
    "QueueEventSink",
    "StreamEventSink",
    "build_sink",
]
