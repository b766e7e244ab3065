"""Gateway startup configuration.

Usage
-----
Create a configuration with defaults:

>>> config = GatewayConfig()
>>> config.topic_filter
'analytics/+/events'

Or load it from environment variables:

>>> import os
>>> os.environ["JETSON_GATEWAY_BROKER_PORT"] = "1884"
>>> GatewayConfig.from_env().broker_port
1884

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from jetson_gateway.errors import GatewayConfigError
from jetson_gateway.events.identifiers import strategy_names

_ENV_PREFIX = "JETSON_GATEWAY_"

_DEFAULT_BROKER_HOST = "localhost"
_DEFAULT_BROKER_PORT = 1883
_DEFAULT_CLIENT_ID = "jetson-gateway"
_DEFAULT_KEEPALIVE_S = 30
_DEFAULT_TOPIC_FILTER = "analytics/+/events"
_DEFAULT_QOS = 1
_DEFAULT_RETRY_BACKOFF_S = 3.0
_DEFAULT_EVENT_ID_STRATEGY = "timestamp"
_DEFAULT_LOG_LEVEL = "INFO"

_MIN_PORT = 1
_MAX_PORT = 65535
_MAX_QOS = 2

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


@dc.dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Startup parameters for the ingestion loop and its supervisor.

    Attributes
    ----------
    broker_host
        MQTT broker hostname.
    broker_port
        MQTT broker TCP port.
    client_id
        MQTT client identifier presented on connect.
    keepalive_s
        MQTT keep-alive interval in seconds.
    topic_filter
        Subscription filter; one fixed prefix, a single-level wildcard and a
        fixed suffix by default.
    qos
        Subscription quality of service. ``1`` is at-least-once delivery.
    retry_backoff_s
        Delay before the supervisor restarts a failed ingestion loop.
    event_id_strategy
        Name of the event identifier strategy (``timestamp``, ``counter`` or
        ``random``).
    report_encoding_errors
        Log non-UTF-8 message bodies at WARNING instead of DEBUG.
    sink_path
        Append canonical events to this file instead of standard output.
    log_level
        femtologging level name.

    """

    broker_host: str = _DEFAULT_BROKER_HOST
    broker_port: int = _DEFAULT_BROKER_PORT
    client_id: str = _DEFAULT_CLIENT_ID
    keepalive_s: int = _DEFAULT_KEEPALIVE_S
    topic_filter: str = _DEFAULT_TOPIC_FILTER
    qos: int = _DEFAULT_QOS
    retry_backoff_s: float = _DEFAULT_RETRY_BACKOFF_S
    event_id_strategy: str = _DEFAULT_EVENT_ID_STRATEGY
    report_encoding_errors: bool = False
    sink_path: Path | None = None
    log_level: str = _DEFAULT_LOG_LEVEL

    @staticmethod
    def _raw(name: str) -> str:
        return os.environ.get(f"{_ENV_PREFIX}{name}", "").strip()

    @classmethod
    def _int(
        cls, name: str, default: int, lower: int, upper: int | None = None
    ) -> int:
        raw = cls._raw(name)
        if not raw:
            return default
        variable = f"{_ENV_PREFIX}{name}"
        try:
            value = int(raw)
        except ValueError as exc:
            raise GatewayConfigError.not_an_integer(variable, raw) from exc
        if value < lower or (upper is not None and value > upper):
            raise GatewayConfigError.out_of_range(variable, value, lower, upper)
        return value

    @classmethod
    def _float(cls, name: str, default: float) -> float:
        raw = cls._raw(name)
        if not raw:
            return default
        variable = f"{_ENV_PREFIX}{name}"
        try:
            value = float(raw)
        except ValueError as exc:
            raise GatewayConfigError.not_a_number(variable, raw) from exc
        if not value >= 0:
            raise GatewayConfigError.out_of_range(variable, value, 0)
        return value

    @classmethod
    def _bool(cls, name: str, *, default: bool) -> bool:
        raw = cls._raw(name).lower()
        if not raw:
            return default
        if raw in _TRUTHY:
            return True
        if raw in _FALSY:
            return False
        raise GatewayConfigError.invalid_choice(
            f"{_ENV_PREFIX}{name}", raw, tuple(sorted(_TRUTHY | _FALSY))
        )

    @classmethod
    def _text(cls, name: str, default: str) -> str:
        if f"{_ENV_PREFIX}{name}" not in os.environ:
            return default
        value = cls._raw(name)
        if not value:
            raise GatewayConfigError.empty(f"{_ENV_PREFIX}{name}")
        return value

    @classmethod
    def from_env(cls) -> GatewayConfig:
        """Build configuration from ``JETSON_GATEWAY_*`` environment variables.

        Reads ``BROKER_HOST``, ``BROKER_PORT``, ``CLIENT_ID``,
        ``KEEPALIVE_S``, ``TOPIC_FILTER``, ``QOS``, ``RETRY_BACKOFF_S``,
        ``EVENT_ID_STRATEGY``, ``REPORT_ENCODING_ERRORS``, ``SINK_PATH`` and
        ``LOG_LEVEL``, each prefixed with ``JETSON_GATEWAY_``. Unset
        variables keep their defaults.

        Raises
        ------
        GatewayConfigError
            If a variable is set to a value that cannot be used.

        """
        strategy = cls._text("EVENT_ID_STRATEGY", _DEFAULT_EVENT_ID_STRATEGY).lower()
        if strategy not in strategy_names():
            raise GatewayConfigError.invalid_choice(
                f"{_ENV_PREFIX}EVENT_ID_STRATEGY", strategy, strategy_names()
            )

        raw_sink_path = cls._raw("SINK_PATH")

        return cls(
            broker_host=cls._text("BROKER_HOST", _DEFAULT_BROKER_HOST),
            broker_port=cls._int(
                "BROKER_PORT", _DEFAULT_BROKER_PORT, _MIN_PORT, _MAX_PORT
            ),
            client_id=cls._text("CLIENT_ID", _DEFAULT_CLIENT_ID),
            keepalive_s=cls._int("KEEPALIVE_S", _DEFAULT_KEEPALIVE_S, 1),
            topic_filter=cls._text("TOPIC_FILTER", _DEFAULT_TOPIC_FILTER),
            qos=cls._int("QOS", _DEFAULT_QOS, 0, _MAX_QOS),
            retry_backoff_s=cls._float("RETRY_BACKOFF_S", _DEFAULT_RETRY_BACKOFF_S),
            event_id_strategy=strategy,
            report_encoding_errors=cls._bool("REPORT_ENCODING_ERRORS", default=False),
            sink_path=Path(raw_sink_path) if raw_sink_path else None,
            log_level=cls._raw("LOG_LEVEL") or _DEFAULT_LOG_LEVEL,
        )
