"""Unit tests for event sink adapters."""

from __future__ import annotations

import asyncio
import io
import typing as typ

import pytest

from jetson_gateway.sinks import (
    EventSink,
    FileEventSink,
    QueueEventSink,
    StreamEventSink,
    build_sink,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

LINE = '{"event_id":"voevt_1_79bcc","ts_unix_ms":1}'


class TestStreamEventSink:
    """Tests for the text stream adapter."""

    @pytest.mark.asyncio
    async def test_writes_one_line_per_event(self) -> None:
        """Each write appends the line and a newline."""
        stream = io.StringIO()
        sink = StreamEventSink(stream)

        await sink.write_line(LINE)
        await sink.write_line(LINE)

        assert stream.getvalue() == f"{LINE}\n{LINE}\n"

    @pytest.mark.asyncio
    async def test_defaults_to_current_stdout(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without a stream the sink writes to standard output."""
        await StreamEventSink().write_line(LINE)

        assert capsys.readouterr().out == f"{LINE}\n"


class TestFileEventSink:
    """Tests for the filesystem adapter."""

    @pytest.mark.asyncio
    async def test_creates_parent_and_appends(self, tmp_path: Path) -> None:
        """Missing parent directories are created and lines accumulate."""
        path = tmp_path / "spool" / "events.jsonl"
        sink = FileEventSink(path)

        await sink.write_line(LINE)
        await sink.write_line("{}")

        assert sink.path == path
        assert path.read_text(encoding="utf-8").splitlines() == [LINE, "{}"]

    @pytest.mark.asyncio
    async def test_appends_to_existing_file(self, tmp_path: Path) -> None:
        """Existing content is preserved across sink instances."""
        path = tmp_path / "events.jsonl"
        path.write_text("earlier\n", encoding="utf-8")

        await FileEventSink(path).write_line(LINE)

        assert path.read_text(encoding="utf-8") == f"earlier\n{LINE}\n"


class TestQueueEventSink:
    """Tests for the asyncio queue adapter."""

    @pytest.mark.asyncio
    async def test_enqueues_lines_in_order(self) -> None:
        """Lines arrive on the queue in write order."""
        queue: asyncio.Queue[str] = asyncio.Queue()
        sink = QueueEventSink(queue)

        await sink.write_line("first")
        await sink.write_line("second")

        assert [queue.get_nowait(), queue.get_nowait()] == ["first", "second"]


class TestSinkSelection:
    """Protocol conformance and construction."""

    @pytest.mark.parametrize(
        "sink",
        [
            StreamEventSink(io.StringIO()),
            QueueEventSink(asyncio.Queue()),
        ],
    )
    def test_adapters_satisfy_protocol(self, sink: object) -> None:
        """In-process adapters are EventSinks."""
        assert isinstance(sink, EventSink)

    def test_file_adapter_satisfies_protocol(self, tmp_path: Path) -> None:
        """The file adapter is an EventSink."""
        assert isinstance(FileEventSink(tmp_path / "x.jsonl"), EventSink)

    def test_build_sink_without_path(self) -> None:
        """No path selects standard output."""
        assert isinstance(build_sink(), StreamEventSink)

    def test_build_sink_with_path(self, tmp_path: Path) -> None:
        """A path selects the file adapter."""
        sink = build_sink(tmp_path / "events.jsonl")

        assert isinstance(sink, FileEventSink)
        assert sink.path == tmp_path / "events.jsonl"
