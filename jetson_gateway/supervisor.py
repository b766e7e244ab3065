"""Restart supervisor for the ingestion loop.

The supervisor alternates between two states. In ``RUNNING`` it awaits a
fresh ingestion loop; when the loop ends with a :class:`GatewayLoopError` it
moves to ``BACKOFF``, waits a fixed delay and returns to ``RUNNING`` with a
new loop. It has no terminal state of its own: :meth:`Supervisor.run`
returns only when a loop finishes without error or :meth:`Supervisor.stop`
is called. Any other exception, including cancellation, propagates.

Usage
-----
>>> supervisor = Supervisor(lambda: IngestionLoop(config, sink), backoff_s=3.0)
>>> asyncio.run(supervisor.run())  # doctest: +SKIP

"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import typing as typ

from jetson_gateway.events.errors import GatewayLoopError
from jetson_gateway.observability import GatewayEventLogger

DEFAULT_BACKOFF_S = 3.0

Sleep = typ.Callable[[float], typ.Awaitable[None]]


class SupervisedLoop(typ.Protocol):
    """Loop the supervisor can run and restart."""

    events_emitted: int

    async def run(self) -> None:
        """Run until failure; a clean return ends supervision."""
        ...


LoopFactory = typ.Callable[[], SupervisedLoop]


class SupervisorState(enum.StrEnum):
    """Supervisor lifecycle states."""

    RUNNING = "running"
    BACKOFF = "backoff"


class Supervisor:
    """Run ingestion loops, restarting after a fixed delay on failure."""

    def __init__(
        self,
        loop_factory: LoopFactory,
        *,
        backoff_s: float = DEFAULT_BACKOFF_S,
        sleep: Sleep = asyncio.sleep,
        event_logger: GatewayEventLogger | None = None,
    ) -> None:
        """Configure the loop factory, restart delay and delay primitive."""
        self._loop_factory = loop_factory
        self._backoff_s = backoff_s
        self._sleep = sleep
        self._event_logger = event_logger or GatewayEventLogger()
        self._stop_requested = asyncio.Event()
        self._state = SupervisorState.RUNNING
        self._restarts = 0

    @property
    def state(self) -> SupervisorState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def restarts(self) -> int:
        """Return how many times a failed loop has been replaced."""
        return self._restarts

    def stop(self) -> None:
        """Ask :meth:`run` to return instead of running or restarting a loop."""
        self._stop_requested.set()

    async def run(self) -> None:
        """Supervise ingestion loops until stopped or a loop returns cleanly."""
        while not self._stop_requested.is_set():
            loop = self._loop_factory()
            self._state = SupervisorState.RUNNING
            try:
                await self._until_stopped(loop.run())
            except GatewayLoopError as exc:
                self._event_logger.log_loop_failed(
                    error=exc, events_emitted=loop.events_emitted
                )
            else:
                break

            if self._stop_requested.is_set():
                break
            self._state = SupervisorState.BACKOFF
            self._event_logger.log_backoff_started(
                delay_s=self._backoff_s, restarts=self._restarts
            )
            if not await self._until_stopped(self._sleep(self._backoff_s)):
                break
            self._restarts += 1
            self._event_logger.log_loop_restarted(restarts=self._restarts)

        self._event_logger.log_supervisor_stopped(restarts=self._restarts)

    async def _until_stopped(self, awaitable: typ.Awaitable[None]) -> bool:
        """Await ``awaitable`` unless :meth:`stop` is called first.

        Returns ``True`` when ``awaitable`` completed with no stop pending and
        ``False`` otherwise. Exceptions from ``awaitable`` propagate.
        """
        work = asyncio.ensure_future(awaitable)
        stopper = asyncio.ensure_future(self._stop_requested.wait())
        try:
            await asyncio.wait((work, stopper), return_when=asyncio.FIRST_COMPLETED)
        finally:
            stopper.cancel()
            if not work.done():
                work.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await work
        if work.cancelled():
            return False
        work.result()
        return not self._stop_requested.is_set()
