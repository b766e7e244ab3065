"""MQTT client seam used by the ingestion loop.

The loop talks to the broker through :class:`BrokerClient`, which
``aiomqtt.Client`` satisfies. Tests substitute in-process fakes through a
:data:`ClientFactory`.
"""

from __future__ import annotations

import typing as typ

import aiomqtt

if typ.TYPE_CHECKING:
    import types

    from jetson_gateway.config import GatewayConfig

MessagePayload = bytes | bytearray | str | int | float | None


class InboundMessage(typ.Protocol):
    """Publish message delivered by the broker."""

    @property
    def topic(self) -> object:
        """Topic the message was published to."""
        ...

    @property
    def payload(self) -> MessagePayload:
        """Message body as delivered by the client library."""
        ...


class BrokerClient(typ.Protocol):
    """Connected MQTT session, entered as an async context manager."""

    async def __aenter__(self) -> BrokerClient: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> bool | None: ...

    async def subscribe(self, topic: str, qos: int = 0) -> object:
        """Request a subscription to ``topic``."""
        ...

    @property
    def messages(self) -> typ.AsyncIterator[InboundMessage]:
        """Inbound publish messages in arrival order."""
        ...


ClientFactory = typ.Callable[["GatewayConfig"], BrokerClient]

# Errors the transport may surface from connect, subscribe or iteration.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (aiomqtt.MqttError, OSError)


def mqtt_client_factory(config: GatewayConfig) -> BrokerClient:
    """Build an ``aiomqtt`` client for the configured broker."""
    return typ.cast(
        "BrokerClient",
        aiomqtt.Client(
            config.broker_host,
            port=config.broker_port,
            identifier=config.client_id,
            keepalive=config.keepalive_s,
        ),
    )
