"""Broker ingestion: MQTT client seam and the ingestion loop."""

from __future__ import annotations

from .client import (
    TRANSPORT_ERRORS,
    BrokerClient,
    ClientFactory,
    InboundMessage,
    mqtt_client_factory,
)
from .loop import IngestionLoop

__all__ = [
    "TRANSPORT_ERRORS",
    "BrokerClient",
    "ClientFactory",
    "InboundMessage",
    "IngestionLoop",
    "mqtt_client_factory",
]
