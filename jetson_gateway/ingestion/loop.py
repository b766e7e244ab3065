"""Broker ingestion loop: subscribe, decode, normalize, emit.

One loop invocation owns one broker connection. Messages are handled one at
a time in arrival order; the only suspension points are waiting for the next
message and writing to the sink, so the client library keeps servicing
keep-alive traffic in between.
"""

from __future__ import annotations

import typing as typ

from jetson_gateway.errors import GatewayTransportError
from jetson_gateway.events import (
    EventDecodeError,
    EventDecodeReason,
    decode_raw_event,
    encode_event,
    id_strategy_for,
    make_normalizer,
)
from jetson_gateway.observability import GatewayEventLogger

from .client import TRANSPORT_ERRORS, mqtt_client_factory

if typ.TYPE_CHECKING:
    from jetson_gateway.config import GatewayConfig
    from jetson_gateway.events import Normalizer, VirtualObjectEvent
    from jetson_gateway.sinks import EventSink

    from .client import ClientFactory, InboundMessage, MessagePayload


def _message_body(payload: MessagePayload) -> bytes | str:
    """Return a decodable body for any payload type the client may deliver."""
    match payload:
        case None:
            return b""
        case bytes() | bytearray():
            return bytes(payload)
        case str():
            return payload
        case _:
            return str(payload)


class IngestionLoop:
    """Consume broker messages and emit canonical events to a sink.

    Parameters
    ----------
    config
        Broker address, client identity, subscription and reporting options.
    sink
        Destination for serialized canonical events.
    client_factory
        Builds the broker client; defaults to ``aiomqtt``.
    normalizer
        Raw to canonical conversion. Defaults to :func:`normalize` bound to
        the configured event id strategy.
    event_logger
        Structured log emitter.

    """

    def __init__(
        self,
        config: GatewayConfig,
        sink: EventSink,
        *,
        client_factory: ClientFactory = mqtt_client_factory,
        normalizer: Normalizer | None = None,
        event_logger: GatewayEventLogger | None = None,
    ) -> None:
        """Store collaborators; no connection is made until :meth:`run`."""
        self._config = config
        self._sink = sink
        self._client_factory = client_factory
        self._normalizer = normalizer or make_normalizer(
            id_strategy=id_strategy_for(config.event_id_strategy)
        )
        self._event_logger = event_logger or GatewayEventLogger()
        self.events_emitted = 0

    async def run(self) -> None:
        """Connect, subscribe and process messages until the connection fails.

        Raises
        ------
        GatewayTransportError
            When connecting, subscribing or receiving fails, or the broker
            closes the message stream.
        EventEncodeError
            When a canonical event cannot be serialized.

        """
        config = self._config
        self._event_logger.log_connecting(
            host=config.broker_host,
            port=config.broker_port,
            client_id=config.client_id,
        )
        try:
            async with self._client_factory(config) as client:
                await client.subscribe(config.topic_filter, qos=config.qos)
                self._event_logger.log_subscribed(
                    topic_filter=config.topic_filter, qos=config.qos
                )
                async for message in client.messages:
                    await self.handle_message(message)
        except TRANSPORT_ERRORS as exc:
            raise GatewayTransportError.from_exception(exc) from exc
        raise GatewayTransportError.stream_closed()

    async def handle_message(
        self, message: InboundMessage
    ) -> VirtualObjectEvent | None:
        """Process one inbound publish message."""
        return await self.handle_payload(message.payload, topic=str(message.topic))

    async def handle_payload(
        self, payload: MessagePayload, *, topic: str = ""
    ) -> VirtualObjectEvent | None:
        """Decode, normalize and emit one message body.

        Returns the emitted event, or ``None`` when the body was skipped as
        undecodable.
        """
        try:
            raw = decode_raw_event(_message_body(payload))
        except EventDecodeError as exc:
            if exc.reason is EventDecodeReason.INVALID_ENCODING:
                self._event_logger.log_message_undecodable(
                    topic=topic,
                    error=exc,
                    report=self._config.report_encoding_errors,
                )
            else:
                self._event_logger.log_message_invalid(topic=topic, error=exc)
            return None

        event = self._normalizer(raw)
        await self._sink.write_line(encode_event(event))
        self.events_emitted += 1
        return event
