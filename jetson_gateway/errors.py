"""Gateway configuration and transport errors."""

from __future__ import annotations

from jetson_gateway.events.errors import GatewayLoopError


class GatewayConfigError(ValueError):
    """Raised when gateway configuration from the environment is invalid."""

    def __init__(self, message: str, *, variable: str | None = None) -> None:
        """Record the offending environment variable, when known."""
        super().__init__(message)
        self.variable = variable

    @classmethod
    def not_an_integer(cls, variable: str, raw: str) -> GatewayConfigError:
        """Return an error for a value that does not parse as an integer."""
        return cls(f"{variable} must be an integer, got: {raw!r}", variable=variable)

    @classmethod
    def not_a_number(cls, variable: str, raw: str) -> GatewayConfigError:
        """Return an error for a value that does not parse as a number."""
        return cls(f"{variable} must be a number, got: {raw!r}", variable=variable)

    @classmethod
    def out_of_range(
        cls, variable: str, value: float, lower: float, upper: float | None = None
    ) -> GatewayConfigError:
        """Return an error for a numeric value outside its accepted range."""
        bound = f">= {lower}" if upper is None else f"within {lower}-{upper}"
        return cls(f"{variable} must be {bound}, got: {value}", variable=variable)

    @classmethod
    def empty(cls, variable: str) -> GatewayConfigError:
        """Return an error for a value that must not be blank."""
        return cls(f"{variable} must be non-empty", variable=variable)

    @classmethod
    def invalid_choice(
        cls, variable: str, raw: str, choices: tuple[str, ...]
    ) -> GatewayConfigError:
        """Return an error for a value outside a fixed set of choices."""
        return cls(
            f"{variable} must be one of {', '.join(choices)}, got: {raw!r}",
            variable=variable,
        )


class GatewayTransportError(GatewayLoopError):
    """Raised when the broker connection fails or is closed.

    Covers connect failures, protocol violations, broker-initiated
    disconnects and keep-alive timeouts. Ends the current ingestion loop
    invocation; the supervisor decides whether to start another.
    """

    @classmethod
    def from_exception(cls, exc: BaseException) -> GatewayTransportError:
        """Wrap a client or socket error raised by the MQTT transport."""
        return cls(f"broker connection failed: {type(exc).__name__}: {exc}")

    @classmethod
    def stream_closed(cls) -> GatewayTransportError:
        """Return an error for a message stream that ended without an error."""
        return cls("broker message stream closed")
