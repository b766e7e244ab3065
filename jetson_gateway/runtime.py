"""jetson-gateway process entry point.

Builds the gateway from ``JETSON_GATEWAY_*`` environment variables (see
:class:`jetson_gateway.config.GatewayConfig`), optionally overridden on the
command line, and supervises the ingestion loop until the process receives
SIGINT or SIGTERM.

Run the gateway with ``python -m jetson_gateway.runtime`` or the
``jetson-gateway`` console script.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import dataclasses as dc
import signal
import typing as typ

from jetson_gateway.config import GatewayConfig
from jetson_gateway.errors import GatewayConfigError
from jetson_gateway.events import id_strategy_for, make_normalizer
from jetson_gateway.ingestion import IngestionLoop, mqtt_client_factory
from jetson_gateway.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from jetson_gateway.observability import GatewayEventLogger, categorize_error
from jetson_gateway.sinks import build_sink
from jetson_gateway.supervisor import Supervisor

if typ.TYPE_CHECKING:
    from jetson_gateway.ingestion import ClientFactory
    from jetson_gateway.sinks import EventSink

__all__ = ["build_supervisor", "main", "parse_args", "serve"]

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line overrides for the environment configuration."""
    parser = argparse.ArgumentParser(
        prog="jetson-gateway",
        description="Normalize broker analytics events into virtual object events.",
    )
    parser.add_argument("--host", default=None, help="MQTT broker hostname")
    parser.add_argument("--port", type=int, default=None, help="MQTT broker port")
    parser.add_argument("--client-id", default=None, help="MQTT client identifier")
    parser.add_argument("--log-level", default=None, help="femtologging level name")
    return parser.parse_args(argv)


def _apply_overrides(config: GatewayConfig, args: argparse.Namespace) -> GatewayConfig:
    overrides: dict[str, object] = {
        field: value
        for field, value in (
            ("broker_host", args.host),
            ("broker_port", args.port),
            ("client_id", args.client_id),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    return dc.replace(config, **overrides) if overrides else config


def build_supervisor(
    config: GatewayConfig,
    *,
    sink: EventSink | None = None,
    client_factory: ClientFactory = mqtt_client_factory,
) -> Supervisor:
    """Wire a supervisor whose loops share one sink and normalizer.

    Sharing the normalizer keeps stateful id strategies (such as the
    counter) continuous across loop restarts.
    """
    event_sink = sink or build_sink(config.sink_path)
    normalizer = make_normalizer(id_strategy=id_strategy_for(config.event_id_strategy))
    event_logger = GatewayEventLogger()

    def _loop_factory() -> IngestionLoop:
        return IngestionLoop(
            config,
            event_sink,
            client_factory=client_factory,
            normalizer=normalizer,
            event_logger=event_logger,
        )

    return Supervisor(
        _loop_factory,
        backoff_s=config.retry_backoff_s,
        event_logger=event_logger,
    )


async def serve(supervisor: Supervisor) -> None:
    """Run ``supervisor``, stopping it on SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Windows event loops do not support signal handlers.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, supervisor.stop)
    try:
        await supervisor.run()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.remove_signal_handler(sig)


def main(argv: list[str] | None = None) -> int:
    """Start the gateway and return a process exit code.

    Returns
    -------
    int
        ``0`` after a signal-initiated shutdown, ``1`` when the
        configuration is invalid.

    """
    args = parse_args(argv)
    try:
        config = _apply_overrides(GatewayConfig.from_env(), args)
    except GatewayConfigError as exc:
        configure_logging(args.log_level)
        # No traceback: the message names the variable and the bad value.
        log_error(
            logger,
            "Invalid gateway configuration (error_category=%s): %s",
            categorize_error(exc),
            exc,
        )
        return 1

    normalized_level, invalid_level = configure_logging(config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            config.log_level,
            normalized_level,
        )

    log_info(
        logger,
        "Starting jetson-gateway for %s:%d topic=%s (log_level=%s)",
        config.broker_host,
        config.broker_port,
        config.topic_filter,
        normalized_level,
    )

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve(build_supervisor(config)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
