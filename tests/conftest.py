"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os
import typing as typ

import pytest

from jetson_gateway.config import GatewayConfig
from tests.helpers.broker_fakes import RecordingEventLogger, RecordingSink
from tests.helpers.clock import FROZEN_TS_MS


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Return a configuration pointing at a local test broker."""
    return GatewayConfig(
        broker_host="broker.test",
        broker_port=1883,
        client_id="gateway-under-test",
        keepalive_s=5,
        retry_backoff_s=0.25,
    )


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Return a sink that keeps emitted lines in memory."""
    return RecordingSink()


@pytest.fixture
def event_logger() -> RecordingEventLogger:
    """Return an event logger that records structured events."""
    return RecordingEventLogger()


@pytest.fixture
def frozen_clock() -> typ.Callable[[], int]:
    """Return a clock stuck at ``FROZEN_TS_MS``."""
    return lambda: FROZEN_TS_MS


@pytest.fixture(autouse=True)
def _clear_gateway_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``JETSON_GATEWAY_*`` variables from the host out of tests."""
    for name in list(os.environ):
        if name.startswith("JETSON_GATEWAY_"):
            monkeypatch.delenv(name)
