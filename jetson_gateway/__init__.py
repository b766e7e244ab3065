"""Edge telemetry gateway normalizing broker analytics into virtual object events."""
